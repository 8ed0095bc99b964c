"""Pydantic models for the conversation workflow definition.

A workflow is a set of named states, each with an intent -> target state
map.  State handlers in the engine decide the intent; the table decides
where it leads.
"""

from __future__ import annotations

from pydantic import BaseModel


class DialogueStateDef(BaseModel):
    """One state in the conversation workflow."""

    id: str
    prompt_key: str = ""                   # Message shown when (re-)entering
    help_key: str = ""                     # State-specific help text
    transitions: dict[str, str] = {}       # intent -> target state ("*" = any)


class DialogueWorkflowDef(BaseModel):
    """A complete conversation workflow definition."""

    id: str
    initial_state: str = ""
    global_transitions: dict[str, str] = {}  # interrupt intent -> target state
    states: dict[str, DialogueStateDef] = {}

    def resolve(self, state_id: str, intent: str) -> str:
        """Return the target state for ``intent``, or ``state_id`` to stay."""
        if intent in self.global_transitions:
            return self.global_transitions[intent]
        state = self.states.get(state_id)
        if state is None:
            return state_id
        return state.transitions.get(intent) or state.transitions.get("*") or state_id
