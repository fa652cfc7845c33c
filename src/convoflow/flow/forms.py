"""Form definitions and the form-store collaborator interface."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Mapping, Optional, Protocol, Sequence

from ..logging import get_logger
from .models import FlowNode, NodeKind

logger = get_logger(__name__)


@dataclass(frozen=True)
class FormFieldDefinition:
    id: str
    question: str
    field_type: str = "text"
    options: Optional[List[str]] = None
    is_required: bool = False
    order: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "question": self.question,
            "fieldType": self.field_type,
            "options": list(self.options) if self.options is not None else None,
            "isRequired": self.is_required,
            "order": self.order,
        }


@dataclass(frozen=True)
class FormDefinition:
    name: str
    fields: List[FormFieldDefinition] = field(default_factory=list)


class FormStore(Protocol):
    def lookup_form(self, form_id: str) -> Optional[FormDefinition]: ...


class InMemoryFormStore:
    """Dict-backed `FormStore` (testing/dev)."""

    def __init__(self, forms: Optional[Mapping[str, FormDefinition]] = None):
        self._forms: Dict[str, FormDefinition] = dict(forms or {})

    def add(self, form_id: str, form: FormDefinition) -> None:
        self._forms[form_id] = form

    def lookup_form(self, form_id: str) -> Optional[FormDefinition]:
        return self._forms.get(form_id)


def parse_form_field(raw: Any, index: int = 0) -> Optional[FormFieldDefinition]:
    """Accept editor/db dicts (camelCase or snake_case) or ready definitions."""
    if isinstance(raw, FormFieldDefinition):
        return raw
    if not isinstance(raw, dict):
        return None
    fid = str(raw.get("id") or "").strip()
    question = raw.get("question")
    if not fid or not isinstance(question, str):
        return None
    options = raw.get("options")
    order = raw.get("order")
    return FormFieldDefinition(
        id=fid,
        question=question,
        field_type=str(raw.get("fieldType") or raw.get("field_type") or "text"),
        options=[str(o) for o in options] if isinstance(options, list) else None,
        is_required=bool(raw.get("isRequired", raw.get("is_required", False))),
        order=order if isinstance(order, int) and not isinstance(order, bool) else index,
    )


def parse_form_fields(raw: Any) -> List[FormFieldDefinition]:
    if not isinstance(raw, list):
        return []
    out: List[FormFieldDefinition] = []
    for i, item in enumerate(raw):
        f = parse_form_field(item, i)
        if f is not None:
            out.append(f)
    return out


def enrich_form_nodes(nodes: Sequence[FlowNode], form_store: Optional[FormStore]) -> List[FlowNode]:
    """Return `nodes` with form node configs carrying `formName` and `fields` from the store.

    Nodes whose form cannot be found keep their original config.
    """
    if form_store is None:
        return list(nodes)

    out: List[FlowNode] = []
    for node in nodes:
        form_id = node.config.get("formId") if node.kind == NodeKind.FORM else None
        if not isinstance(form_id, str) or not form_id:
            out.append(node)
            continue
        form = form_store.lookup_form(form_id)
        if form is None:
            logger.warning("Form not found for form node", node_id=node.id, form_id=form_id)
            out.append(node)
            continue
        config = dict(node.config)
        config["formName"] = form.name
        config["fields"] = [f.to_dict() for f in form.fields]
        logger.debug("Enriched form node", node_id=node.id, form=form.name, fields=len(form.fields))
        out.append(replace(node, config=config))
    return out
