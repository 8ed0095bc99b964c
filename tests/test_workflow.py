"""Tests for the JSONL conversation workflow definition."""

import json
import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from dialogue.i18n import MESSAGES
from dialogue.models.session import ConversationState, Language
from dialogue.workflows.loader import load_workflow_jsonl, save_workflow_jsonl
from dialogue.workflows.schema import DialogueWorkflowDef


@pytest.fixture
def workflow() -> DialogueWorkflowDef:
    return load_workflow_jsonl()


class TestPropertyViewingWorkflow:
    def test_loads(self, workflow):
        assert workflow.id == "property_viewing"
        assert workflow.initial_state == "language_selection"

    def test_states_match_conversation_states(self, workflow):
        assert set(workflow.states) == {s.value for s in ConversationState}

    def test_prompt_and_help_keys_exist(self, workflow):
        for state in workflow.states.values():
            assert (state.prompt_key, Language.ENGLISH) in MESSAGES
            assert (state.help_key, Language.ENGLISH) in MESSAGES

    @pytest.mark.parametrize("state,intent,target", [
        ("language_selection", "language_selected", "welcome"),
        ("welcome", "acknowledged", "interest_selection"),
        ("interest_selection", "interest_selected", "property_match"),
        ("property_match", "property_selected", "schedule_visit"),
        ("schedule_visit", "schedule", "collect_info"),
        ("schedule_visit", "back", "property_match"),
        ("collect_info", "slots_complete", "completed"),
        ("completed", "new_search", "welcome"),
    ])
    def test_happy_path(self, workflow, state, intent, target):
        assert workflow.resolve(state, intent) == target

    @pytest.mark.parametrize("state", [s.value for s in ConversationState])
    def test_global_interrupts_from_every_state(self, workflow, state):
        assert workflow.resolve(state, "restart") == "welcome"
        assert workflow.resolve(state, "change_language") == "language_selection"

    def test_unknown_intent_stays(self, workflow):
        assert workflow.resolve("property_match", "gibberish") == "property_match"


class TestLoader:
    def test_round_trip(self, workflow, tmp_path):
        path = tmp_path / "wf.jsonl"
        save_workflow_jsonl(workflow, path)
        assert load_workflow_jsonl(path) == workflow

    def test_unknown_target_rejected(self, tmp_path):
        path = tmp_path / "bad.jsonl"
        path.write_text(json.dumps({
            "id": "bad",
            "initial_state": "a",
            "states": {"a": {"transitions": {"go": "nowhere"}}},
        }) + "\n", encoding="utf-8")
        with pytest.raises(ValueError, match="nowhere"):
            load_workflow_jsonl(path)

    def test_empty_file_rejected(self, tmp_path):
        path = tmp_path / "empty.jsonl"
        path.write_text("\n", encoding="utf-8")
        with pytest.raises(ValueError):
            load_workflow_jsonl(path)
