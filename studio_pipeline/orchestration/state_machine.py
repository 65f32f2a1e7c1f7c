"""Canonical state transition helpers for quote statuses."""

from __future__ import annotations

from studio_pipeline.models.enums import QuoteStatus


class InvalidTransitionError(ValueError):
    """Raised when a disallowed state transition is attempted."""


class StateMachine:
    """Simple in-memory state machine over string states.

    A current state missing from ``transitions`` (a legacy value still stored on
    old rows) may only move to one of ``recovery_targets``.
    """

    def __init__(self, transitions: dict[str, set[str]], recovery_targets: set[str] | None = None) -> None:
        self._transitions = transitions
        self._recovery_targets = recovery_targets or set()

    def can_transition(self, current: str, target: str) -> bool:
        if current == target:
            return True
        if current not in self._transitions:
            return target in self._recovery_targets
        return target in self._transitions[current]

    def assert_transition(self, current: str, target: str) -> None:
        if target not in self._transitions:
            raise InvalidTransitionError(f"Unknown state: {target}")
        if not self.can_transition(current=current, target=target):
            raise InvalidTransitionError(f"Transition not allowed: {current} -> {target}")


_S = QuoteStatus

QUOTE_STATUS_TRANSITIONS: dict[str, set[str]] = {
    _S.PENDING.value: {_S.NEGOTIATION.value, _S.CLOSING.value, _S.APPROVED.value, _S.AUTHORIZED.value, _S.CANCELED.value},
    _S.NEGOTIATION.value: {_S.PENDING.value, _S.CLOSING.value, _S.APPROVED.value, _S.AUTHORIZED.value, _S.CANCELED.value},
    _S.CLOSING.value: {
        _S.PENDING.value,
        _S.NEGOTIATION.value,
        _S.APPROVED.value,
        _S.AUTHORIZED.value,
        _S.CONTRACT_PENDING.value,
        _S.CONTRACT_GENERATED.value,
        _S.CANCELED.value,
    },
    _S.APPROVED.value: {_S.CONTRACT_PENDING.value, _S.CONTRACT_GENERATED.value, _S.CANCELED.value},
    _S.AUTHORIZED.value: {_S.CONTRACT_PENDING.value, _S.CONTRACT_GENERATED.value, _S.CANCELED.value},
    _S.CONTRACT_PENDING.value: {_S.CONTRACT_GENERATED.value, _S.CANCELED.value},
    _S.CONTRACT_GENERATED.value: {_S.CONTRACT_SIGNED.value, _S.CONTRACT_PENDING.value, _S.CANCELED.value},
    _S.CONTRACT_SIGNED.value: {_S.CANCELED.value},
    _S.CANCELED.value: {_S.PENDING.value},
}

quote_state_machine = StateMachine(
    QUOTE_STATUS_TRANSITIONS,
    recovery_targets={_S.PENDING.value, _S.CANCELED.value},
)
