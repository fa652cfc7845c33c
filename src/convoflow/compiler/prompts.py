"""Instruction text written into `additional_prompt` of compiled nodes.

The downstream engine is an LLM that tends to embellish. These directives are
part of the compiled payload and pin it to the author's text.
"""

from __future__ import annotations

from typing import Sequence

from ..flow.forms import FormFieldDefinition

ENTRY_MESSAGE_PROMPT = (
    "CRITICAL: Your first message was already configured. "
    "After speaking it, wait for the user's response before proceeding."
)

PHONE_NUMBER_PRONUNCIATION = """PHONE NUMBER PRONUNCIATION: When reading back or confirming any phone number, ALWAYS speak each digit separately with brief pauses. For example:
- "9990155993" should be spoken as "nine, nine, nine, zero, one, five, five, nine, nine, three"
- Never read phone numbers as large numbers (do NOT say "nine hundred ninety-nine million...")
- Group digits in sets of 3 or 4 for natural reading rhythm"""

BOOK_APPOINTMENT_TOOL = "book_appointment"
SUBMIT_FORM_TOOL = "submit_form"


def verbatim_message_prompt(text: str) -> str:
    return (
        "CRITICAL INSTRUCTION - SAY THIS EXACT MESSAGE VERBATIM:\n"
        "---\n"
        f"{text}\n"
        "---\n"
        "Do NOT paraphrase, summarize, add to, or modify this message in ANY way. "
        "Say it EXACTLY as written above, word for word."
    )


def verbatim_question_prompt(question: str, variable_name: str) -> str:
    return (
        "CRITICAL INSTRUCTION - ASK THIS EXACT QUESTION VERBATIM:\n"
        "---\n"
        f"{question}\n"
        "---\n"
        "Do NOT rephrase or modify this question. Ask it EXACTLY as written above.\n"
        f"After asking, listen carefully to their response and remember it for variable: {variable_name}"
    )


def delay_prompt(filler: str) -> str:
    return f'Pause briefly. You can say "{filler}" while pausing.'


def appointment_prompt(intro: str, *, service_name: str, duration: int) -> str:
    return f"""Say exactly: "{intro}"

APPOINTMENT BOOKING INSTRUCTIONS:
1. After the caller responds, collect the following information:
   - Their name (if not already known)
   - Preferred date for the appointment
   - Preferred time for the appointment
   - Phone number (use the caller's number if available)
   - Email address (optional)

2. Once you have collected the date, time, and caller name, IMMEDIATELY use the {BOOK_APPOINTMENT_TOOL} tool to save the appointment.
   - Pass the caller's name as contactName
   - Pass the caller's phone number as contactPhone
   - Pass the date as appointmentDate (format: YYYY-MM-DD)
   - Pass the time as appointmentTime (format: HH:MM)
   - Pass {duration} as duration
   - Pass "{service_name}" as serviceName
   - Pass any notes as notes

3. CRITICAL: After successfully booking, you MUST say exactly: "Your appointment has been booked successfully." This exact phrase signals completion.
4. If booking fails, apologize and try again or offer to transfer to a human.

{PHONE_NUMBER_PRONUNCIATION}

Then stop speaking and wait for response."""


def _field_hint(field: FormFieldDefinition) -> str:
    t = field.field_type
    if t == "yes_no":
        return " (Accept yes/no, yeah/nah, affirmative/negative responses)"
    if t == "multiple_choice":
        return f" (Options: {', '.join(field.options)})" if field.options else ""
    if t == "number":
        return " (Collect a number)"
    if t == "email":
        return " (Collect email address, confirm spelling)"
    if t == "phone":
        return " (Accept any phone format)"
    if t == "rating":
        return " (Collect a rating, typically 1-5 or 1-10)"
    if t == "date":
        return ' (Accept natural language dates like "tomorrow", "next week")'
    return ""


def form_collection_prompt(intro: str, form_name: str, fields: Sequence[FormFieldDefinition]) -> str:
    """Ordered, one-question-at-a-time collection instructions for a form."""
    if not fields:
        return f"""Say exactly: '{intro}'

FORM COLLECTION INSTRUCTIONS for "{form_name}":
After speaking the introduction, collect the requested information from the caller.
Ask questions one at a time and wait for responses.
Once all information is collected, use the {SUBMIT_FORM_TOOL} tool to save the responses.

Then stop speaking and wait for response."""

    lines = []
    for i, f in enumerate(sorted(fields, key=lambda x: x.order), start=1):
        line = f'{i}. Ask: "{f.question}"{_field_hint(f)}'
        if f.is_required:
            line += " [REQUIRED]"
        lines.append(line)
    field_instructions = "\n".join(lines)

    return f"""Say exactly: '{intro}'

FORM COLLECTION INSTRUCTIONS for "{form_name}":
After the caller responds, collect the following information in order:

{field_instructions}

IMPORTANT RULES:
1. Ask each question one at a time, wait for the response before proceeding.
2. If the caller's response is unclear, politely ask for clarification.
3. For required fields, do not skip - gently re-ask if needed.
4. Once all required fields are collected, use the {SUBMIT_FORM_TOOL} tool to save the responses.
5. CRITICAL: After successful submission, you MUST say exactly: "Your information has been saved successfully." This exact phrase signals completion.
6. If submission fails, apologize and try again.

{PHONE_NUMBER_PRONUNCIATION}

Then stop speaking and wait for response."""
