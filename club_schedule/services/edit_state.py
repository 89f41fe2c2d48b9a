"""Edit lifecycle of a single form field.

A field fed from external data (a geocoding result, a reloaded activity) must
not be overwritten while the user is typing into it. Instead of toggling
suppression flags around programmatic updates, each field walks through
``idle -> user_editing -> committed -> idle`` and external values are only
applied while it is idle. Transitions that do not apply leave the state as is.
"""
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any


class EditPhase(str, Enum):
    idle = "idle"
    user_editing = "user_editing"
    committed = "committed"


@dataclass(slots=True, frozen=True)
class FieldEditState:
    phase: EditPhase = EditPhase.idle
    value: Any = None


def begin_edit(state: FieldEditState) -> FieldEditState:
    if state.phase == EditPhase.user_editing:
        return state
    return replace(state, phase=EditPhase.user_editing)


def update(state: FieldEditState, value: Any) -> FieldEditState:
    if state.phase != EditPhase.user_editing:
        return state
    return replace(state, value=value)


def commit(state: FieldEditState) -> FieldEditState:
    if state.phase != EditPhase.user_editing:
        return state
    return replace(state, phase=EditPhase.committed)


def settle(state: FieldEditState) -> FieldEditState:
    if state.phase != EditPhase.committed:
        return state
    return replace(state, phase=EditPhase.idle)


def can_recompute(state: FieldEditState) -> bool:
    return state.phase == EditPhase.idle


def apply_external(state: FieldEditState, value: Any) -> FieldEditState:
    if not can_recompute(state):
        return state
    return replace(state, value=value)
