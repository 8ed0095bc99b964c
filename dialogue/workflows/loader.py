"""Load JSONL workflow definitions into DialogueWorkflowDef objects."""

from __future__ import annotations

import json
from pathlib import Path

from dialogue.workflows.schema import DialogueStateDef, DialogueWorkflowDef

DEFAULT_WORKFLOW_PATH = Path(__file__).resolve().parent / "property_viewing.jsonl"


def load_workflow_jsonl(path: str | Path = DEFAULT_WORKFLOW_PATH) -> DialogueWorkflowDef:
    """Load a single workflow from a JSONL file.

    The JSONL file contains exactly one JSON object (the workflow).
    States are nested inside the top-level ``states`` dict.
    """
    path = Path(path)
    text = path.read_text(encoding="utf-8").strip()

    # JSONL: one JSON object per line; take the first non-empty line
    for line in text.splitlines():
        line = line.strip()
        if not line:
            continue
        data = json.loads(line)
        return _parse_workflow(data)

    raise ValueError(f"No workflow found in {path}")


def _parse_workflow(data: dict) -> DialogueWorkflowDef:
    """Parse a raw dict into a DialogueWorkflowDef."""
    raw_states = data.get("states", {})
    states: dict[str, DialogueStateDef] = {}
    for state_id, state_data in raw_states.items():
        if isinstance(state_data, dict):
            state_data.setdefault("id", state_id)
            states[state_id] = DialogueStateDef(**state_data)
        else:
            states[state_id] = state_data

    data["states"] = states
    workflow = DialogueWorkflowDef(**data)
    _check_targets(workflow)
    return workflow


def _check_targets(workflow: DialogueWorkflowDef) -> None:
    """Every transition must lead to a state the workflow defines."""
    targets = list(workflow.global_transitions.values())
    for state in workflow.states.values():
        targets.extend(state.transitions.values())
    if workflow.initial_state:
        targets.append(workflow.initial_state)
    unknown = sorted({t for t in targets if t not in workflow.states})
    if unknown:
        raise ValueError(f"Workflow {workflow.id} references unknown states: {unknown}")


def save_workflow_jsonl(workflow: DialogueWorkflowDef, path: str | Path) -> None:
    """Persist a workflow back to a JSONL file."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    data = workflow.model_dump()
    path.write_text(json.dumps(data, ensure_ascii=False) + "\n", encoding="utf-8")
