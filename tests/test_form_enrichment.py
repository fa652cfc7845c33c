from __future__ import annotations

import pytest

from convoflow import FormDefinition, FormFieldDefinition, InMemoryFormStore, compile_flow
from convoflow.flow import enrich_form_nodes, load_flow_graph


pytestmark = pytest.mark.basic


def _store() -> InMemoryFormStore:
    store = InMemoryFormStore()
    store.add(
        "form_1",
        FormDefinition(
            name="Customer Intake",
            fields=[
                FormFieldDefinition(id="color", question="Favourite colour?", field_type="multiple_choice", options=["Red", "Blue"], order=2),
                FormFieldDefinition(id="name", question="What is your full name?", is_required=True, order=1),
            ],
        ),
    )
    return store


def test_form_node_prompt_uses_store_fields_in_order() -> None:
    result = compile_flow(
        [{"id": "f", "type": "form", "config": {"formId": "form_1", "message": "A few questions."}}],
        [],
        form_store=_store(),
    )

    prompt = result.workflow.nodes["f"].additional_prompt
    assert 'FORM COLLECTION INSTRUCTIONS for "Customer Intake"' in prompt
    assert '1. Ask: "What is your full name?" [REQUIRED]' in prompt
    assert '2. Ask: "Favourite colour?" (Options: Red, Blue)' in prompt
    assert result.features.form_nodes[0].form_name == "Customer Intake"
    assert [f.id for f in result.features.form_nodes[0].fields] == ["color", "name"]


def test_unknown_form_keeps_node_config() -> None:
    graph = load_flow_graph([{"id": "f", "type": "form", "config": {"formId": "missing"}}], [])

    enriched = enrich_form_nodes(graph.nodes, _store())

    assert enriched[0] is graph.nodes[0]


def test_enrichment_returns_new_nodes_and_leaves_input_alone() -> None:
    graph = load_flow_graph(
        [{"id": "f", "type": "collect_info", "config": {"formId": "form_1"}}, {"id": "m", "type": "message"}],
        [],
    )

    enriched = enrich_form_nodes(graph.nodes, _store())

    assert "fields" not in graph.nodes[0].config
    assert enriched[0].config["formName"] == "Customer Intake"
    assert len(enriched[0].config["fields"]) == 2
    assert enriched[1] is graph.nodes[1]


def test_form_without_fields_gets_generic_collection_prompt() -> None:
    result = compile_flow([{"id": "f", "type": "form", "config": {"formId": "form_2"}}], [])

    prompt = result.workflow.nodes["f"].additional_prompt
    assert 'FORM COLLECTION INSTRUCTIONS for "Data Collection"' in prompt
    assert "collect the requested information" in prompt
