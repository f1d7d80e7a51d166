"""Amendment Transition Enforcement — pure rules for the amendment state machine.

Invariants:
    - All functions are PURE: no IO, no async, no DB, no side effects
    - Raise typed domain errors on violation, return the resolved value on success
    - PENDING -> ACCEPTED | REJECTED; both targets are terminal

Design Decisions:
    - Rules live apart from AmendmentWorkflow so they are testable without a database
    - Raise instead of returning error dicts: callers are HTTP handlers and the
      global ContractsError handler renders the REST envelope
"""

from learning_contracts.core.domain_types import AmendmentDecision, AmendmentStatus
from learning_contracts.core.errors import (
    ConcurrencyError, ErrorContext, InvalidStateError,
)

_TRANSITIONS: dict[AmendmentStatus, dict[AmendmentDecision, AmendmentStatus]] = {
    AmendmentStatus.PENDING: {
        AmendmentDecision.ACCEPT: AmendmentStatus.ACCEPTED,
        AmendmentDecision.REJECT: AmendmentStatus.REJECTED,
    },
    AmendmentStatus.ACCEPTED: {},
    AmendmentStatus.REJECTED: {},
}


def is_terminal(status: AmendmentStatus | str) -> bool:
    """True when no decision can move the amendment out of `status`."""
    return not _TRANSITIONS[AmendmentStatus(status)]


def resolve_transition(
    amendment_id: str,
    current: AmendmentStatus | str,
    decision: AmendmentDecision | str,
) -> AmendmentStatus:
    """Return the status `decision` moves the amendment to, or raise InvalidStateError."""
    current = AmendmentStatus(current)
    if is_terminal(current):
        raise InvalidStateError(
            f"Amendment '{amendment_id}' is already {current.value} and cannot be decided again",
            current.value,
            ErrorContext(resource_type="Amendment", resource_id=amendment_id),
        )
    return _TRANSITIONS[current][AmendmentDecision(decision)]


def check_expected_version(
    clause_id: str, current_version: int, expected_version: int | None,
) -> None:
    """Rule: a caller-supplied clause version must match the live one."""
    if expected_version is not None and expected_version != current_version:
        raise ConcurrencyError(
            f"Clause '{clause_id}' is at version {current_version}, "
            f"expected {expected_version}",
            ErrorContext(
                resource_type="Clause", resource_id=clause_id,
                debug_info={
                    "current_version": current_version,
                    "expected_version": expected_version,
                },
            ),
        )
