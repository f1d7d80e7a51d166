"""Request Schemas — boundary validation before anything reaches storage."""

from uuid import uuid4

import pytest
from pydantic import ValidationError

from learning_contracts.core.domain_types import AmendmentDecision, UserRole
from learning_contracts.schemas.amendment import AmendmentDecide, AmendmentPropose
from learning_contracts.schemas.cohort import CohortUpdate
from learning_contracts.schemas.contract import ContractCreate
from learning_contracts.schemas.recording import (
    FailureUpdate, JournalCreate, JournalUpdate, TensionCreate,
)
from learning_contracts.schemas.user import UserCreate, UserUpdate


# ─── ContractCreate ──────────────────────────────────────────────

def test_contract_title_is_stripped():
    body = ContractCreate(title="  Sprint pact  ", cohort_id=uuid4())
    assert body.title == "Sprint pact"
    assert body.clauses == []


def test_contract_whitespace_title_rejected():
    with pytest.raises(ValidationError):
        ContractCreate(title="   ", cohort_id=uuid4())


def test_nested_clause_requires_author():
    with pytest.raises(ValidationError):
        ContractCreate(
            title="Pact", cohort_id=uuid4(),
            clauses=[{"title": "Respect", "content": "Listen first"}],
        )


def test_contract_requires_cohort():
    with pytest.raises(ValidationError):
        ContractCreate(title="Pact")


# ─── Amendments ──────────────────────────────────────────────────

def test_amendment_content_cannot_be_blank():
    with pytest.raises(ValidationError):
        AmendmentPropose(user_id=uuid4(), content=" \n ")


def test_decision_must_be_accept_or_reject():
    with pytest.raises(ValidationError):
        AmendmentDecide(decision="MAYBE", decider_id=uuid4())


def test_decision_parses_enum_and_optional_version():
    body = AmendmentDecide(decision="ACCEPT", decider_id=uuid4())
    assert body.decision is AmendmentDecision.ACCEPT
    assert body.expected_version is None


def test_negative_expected_version_rejected():
    with pytest.raises(ValidationError):
        AmendmentDecide(decision="REJECT", decider_id=uuid4(), expected_version=-1)


# ─── Users ───────────────────────────────────────────────────────

def test_user_email_normalized_and_role_defaulted():
    body = UserCreate(email="Ada@Example.COM")
    assert body.email == "ada@example.com"
    assert body.role is UserRole.PARTICIPANT


def test_user_email_pattern_enforced():
    with pytest.raises(ValidationError):
        UserCreate(email="not-an-email")


# ─── Recordings ──────────────────────────────────────────────────

@pytest.mark.parametrize("value", [0, 11, -3])
def test_tension_value_out_of_range(value):
    with pytest.raises(ValidationError):
        TensionCreate(contract_id=uuid4(), user_id=uuid4(), value=value)


def test_journal_tags_deduplicated_in_order():
    body = JournalCreate(
        contract_id=uuid4(), user_id=uuid4(), title="Week 1", content="Notes",
        tags=[" conflict", "trust", "conflict", ""],
    )
    assert body.tags == ["conflict", "trust"]


def test_partial_update_needs_a_field():
    with pytest.raises(ValidationError):
        JournalUpdate()


def test_partial_update_rejects_explicit_null():
    with pytest.raises(ValidationError):
        FailureUpdate(title=None)


@pytest.mark.parametrize("field", ["title", "content"])
def test_journal_update_rejects_blank_text(field):
    with pytest.raises(ValidationError):
        JournalUpdate(**{field: "   "})


@pytest.mark.parametrize("field", ["title", "description", "lessons"])
def test_failure_update_rejects_blank_text(field):
    with pytest.raises(ValidationError):
        FailureUpdate(**{field: " \t "})


def test_update_text_is_stripped():
    assert JournalUpdate(title="  Week 2 ").title == "Week 2"
    assert FailureUpdate(lessons=" Pair earlier\n").lessons == "Pair earlier"


# ─── Directory updates ───────────────────────────────────────────

@pytest.mark.parametrize("schema", [UserUpdate, CohortUpdate])
def test_directory_update_needs_a_field(schema):
    with pytest.raises(ValidationError):
        schema()


def test_user_role_cannot_be_nulled():
    with pytest.raises(ValidationError):
        UserUpdate(role=None)


def test_user_name_can_be_cleared():
    body = UserUpdate(name=None)
    assert body.model_fields_set == {"name"}
    assert body.name is None


def test_cohort_name_cannot_be_nulled():
    with pytest.raises(ValidationError):
        CohortUpdate(name=None)


def test_cohort_description_can_be_cleared():
    assert CohortUpdate(description=None).description is None
