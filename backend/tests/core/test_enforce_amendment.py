"""Amendment Transition Enforcement — tests for the pure state-machine rules.

Tests cover:
    - PENDING resolves to ACCEPTED / REJECTED
    - terminal states refuse every decision with InvalidStateError
    - check_expected_version tolerates None and matching versions
"""

import pytest

from learning_contracts.core.domain_types import AmendmentDecision, AmendmentStatus
from learning_contracts.core.enforce_amendment import (
    check_expected_version, is_terminal, resolve_transition,
)
from learning_contracts.core.errors import ConcurrencyError, InvalidStateError


# ─── resolve_transition ──────────────────────────────────────────

def test_pending_accept_resolves_to_accepted():
    assert resolve_transition(
        "a1", AmendmentStatus.PENDING, AmendmentDecision.ACCEPT,
    ) is AmendmentStatus.ACCEPTED


def test_pending_reject_resolves_to_rejected():
    assert resolve_transition(
        "a1", AmendmentStatus.PENDING, AmendmentDecision.REJECT,
    ) is AmendmentStatus.REJECTED


def test_accepts_raw_string_values_from_db():
    assert resolve_transition("a1", "PENDING", "ACCEPT") is AmendmentStatus.ACCEPTED


@pytest.mark.parametrize("current", [AmendmentStatus.ACCEPTED, AmendmentStatus.REJECTED])
@pytest.mark.parametrize("decision", list(AmendmentDecision))
def test_decided_amendment_cannot_be_decided_again(current, decision):
    with pytest.raises(InvalidStateError) as exc_info:
        resolve_transition("a1", current, decision)
    assert exc_info.value.code == "INVALID_STATE"
    assert exc_info.value.http_status == 409
    assert exc_info.value.current_state == current.value


def test_unknown_decision_is_rejected():
    with pytest.raises(ValueError):
        resolve_transition("a1", AmendmentStatus.PENDING, "POSTPONE")


# ─── is_terminal ─────────────────────────────────────────────────

def test_only_pending_is_non_terminal():
    assert not is_terminal(AmendmentStatus.PENDING)
    assert is_terminal(AmendmentStatus.ACCEPTED)
    assert is_terminal("REJECTED")


# ─── check_expected_version ─────────────────────────────────────

def test_no_expected_version_always_passes():
    assert check_expected_version("c1", 7, None) is None


def test_matching_version_passes():
    assert check_expected_version("c1", 3, 3) is None


def test_stale_version_raises_concurrency_error():
    with pytest.raises(ConcurrencyError) as exc_info:
        check_expected_version("c1", 4, 3)
    assert exc_info.value.code == "CONCURRENCY_CONFLICT"
    assert exc_info.value.context.debug_info == {
        "current_version": 4, "expected_version": 3,
    }
