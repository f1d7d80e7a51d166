"""Amendment Workflow — service-level tests against SQLite (in-memory, and a file for races).

Invariants checked:
    - propose never touches the clause
    - accept overwrites content, bumps version and updated_at; reject changes nothing
    - a decided amendment cannot be decided again, whatever the decision
    - a lost version race rolls back the claim and leaves content intact
    - two sessions accepting rival proposals at once leave exactly one applied
    - history is ordered oldest first and can be iterated repeatedly
"""

import asyncio
from datetime import datetime
from uuid import uuid4

import pytest
from sqlalchemy import select, update
from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import (
    AsyncSession, async_sessionmaker, create_async_engine,
)

from learning_contracts.core.domain_types import AmendmentDecision, AmendmentStatus
from learning_contracts.core.errors import (
    ConcurrencyError, ContractsError, InvalidStateError, ResourceNotFoundError,
)
from learning_contracts.db.base import Base
from learning_contracts.models import Amendment, Clause, Cohort, Contract, User
from learning_contracts.services.amendment_workflow import AmendmentWorkflow
from learning_contracts.services.contract_service import ContractService


def _naive(dt: datetime) -> datetime:
    """SQLite drops tzinfo on reload; compare wall-clock UTC values."""
    return dt.replace(tzinfo=None)


async def _history(workflow: AmendmentWorkflow, clause_id) -> list:
    return [a async for a in workflow.history(clause_id)]


# ─── propose ─────────────────────────────────────────────────────

async def test_propose_creates_pending_amendment(test_db, seed):
    workflow = AmendmentWorkflow(test_db)
    amendment = await workflow.propose(seed.clause.id, seed.author.id, "v2")

    assert amendment.status == AmendmentStatus.PENDING.value
    assert amendment.clause_id == seed.clause.id
    assert amendment.proposed_by.id == seed.author.id
    assert amendment.decided_by is None
    assert amendment.decided_at is None


async def test_propose_does_not_mutate_clause(test_db, seed):
    before = _naive(seed.clause.updated_at)
    await AmendmentWorkflow(test_db).propose(seed.clause.id, seed.author.id, "v2")

    clause = await ContractService(test_db).get_clause(seed.clause.id)
    assert clause.content == "v1"
    assert clause.version == 0
    assert _naive(clause.updated_at) == before


async def test_propose_unknown_clause_raises_not_found(test_db, seed):
    with pytest.raises(ResourceNotFoundError) as exc_info:
        await AmendmentWorkflow(test_db).propose(uuid4(), seed.author.id, "v2")
    assert exc_info.value.resource_type == "Clause"


async def test_propose_unknown_user_raises_not_found(test_db, seed):
    with pytest.raises(ResourceNotFoundError) as exc_info:
        await AmendmentWorkflow(test_db).propose(seed.clause.id, uuid4(), "v2")
    assert exc_info.value.resource_type == "User"


async def test_propose_for_other_contract_raises_not_found(test_db, seed):
    with pytest.raises(ResourceNotFoundError):
        await AmendmentWorkflow(test_db).propose_for_contract(
            uuid4(), seed.clause.id, seed.author.id, "v2",
        )


# ─── decide ──────────────────────────────────────────────────────

async def test_accept_overwrites_clause_content(test_db, seed):
    before = _naive(seed.clause.updated_at)
    workflow = AmendmentWorkflow(test_db)
    proposed = await workflow.propose(seed.clause.id, seed.author.id, "v2")

    decided = await workflow.decide(
        proposed.id, AmendmentDecision.ACCEPT, seed.reviewer.id,
    )

    assert decided.status == AmendmentStatus.ACCEPTED.value
    assert decided.decided_by.id == seed.reviewer.id
    assert decided.decided_at is not None
    clause = await ContractService(test_db).get_clause(seed.clause.id)
    assert clause.content == "v2"
    assert clause.version == 1
    assert _naive(clause.updated_at) > before


async def test_reject_leaves_clause_untouched(test_db, seed):
    before = _naive(seed.clause.updated_at)
    workflow = AmendmentWorkflow(test_db)
    proposed = await workflow.propose(seed.clause.id, seed.author.id, "v2")

    decided = await workflow.decide(
        proposed.id, AmendmentDecision.REJECT, seed.reviewer.id,
    )

    assert decided.status == AmendmentStatus.REJECTED.value
    clause = await ContractService(test_db).get_clause(seed.clause.id)
    assert clause.content == "v1"
    assert clause.version == 0
    assert _naive(clause.updated_at) == before


@pytest.mark.parametrize("first", list(AmendmentDecision))
@pytest.mark.parametrize("second", list(AmendmentDecision))
async def test_second_decision_raises_invalid_state(test_db, seed, first, second):
    workflow = AmendmentWorkflow(test_db)
    proposed = await workflow.propose(seed.clause.id, seed.author.id, "v2")
    await workflow.decide(proposed.id, first, seed.reviewer.id)

    with pytest.raises(InvalidStateError):
        await workflow.decide(proposed.id, second, seed.reviewer.id)


async def test_decide_unknown_decider_raises_not_found(test_db, seed):
    workflow = AmendmentWorkflow(test_db)
    proposed = await workflow.propose(seed.clause.id, seed.author.id, "v2")

    with pytest.raises(ResourceNotFoundError):
        await workflow.decide(proposed.id, AmendmentDecision.ACCEPT, uuid4())

    still = await workflow.get(proposed.id)
    assert still.status == AmendmentStatus.PENDING.value


async def test_sibling_pending_amendment_stays_pending(test_db, seed):
    workflow = AmendmentWorkflow(test_db)
    first = await workflow.propose(seed.clause.id, seed.author.id, "v2")
    second = await workflow.propose(seed.clause.id, seed.reviewer.id, "v3")

    await workflow.decide(first.id, AmendmentDecision.ACCEPT, seed.reviewer.id)

    sibling = await workflow.get(second.id)
    assert sibling.status == AmendmentStatus.PENDING.value


async def test_stale_expected_version_loses(test_db, seed):
    workflow = AmendmentWorkflow(test_db)
    first = await workflow.propose(seed.clause.id, seed.author.id, "from first")
    second = await workflow.propose(seed.clause.id, seed.reviewer.id, "from second")

    await workflow.decide(
        first.id, AmendmentDecision.ACCEPT, seed.reviewer.id, expected_version=0,
    )
    with pytest.raises(ConcurrencyError):
        await workflow.decide(
            second.id, AmendmentDecision.ACCEPT, seed.author.id, expected_version=0,
        )

    clause = await ContractService(test_db).get_clause(seed.clause.id)
    assert clause.content == "from first"
    assert clause.version == 1
    loser = await workflow.get(second.id)
    assert loser.status == AmendmentStatus.PENDING.value


async def test_lost_version_race_rolls_back_claim(test_db, seed):
    workflow = AmendmentWorkflow(test_db)
    proposed = await workflow.propose(seed.clause.id, seed.author.id, "v2")
    # the failed decide rolls back and expires every loaded instance
    amendment_id, clause_id, reviewer_id = proposed.id, seed.clause.id, seed.reviewer.id
    lock_clause = workflow._lock_clause

    async def lock_then_concurrent_write(locked_id):
        clause = await lock_clause(locked_id)
        # Another writer bumps the version after our read
        await test_db.execute(
            update(Clause)
            .where(Clause.id == locked_id)
            .values(version=Clause.version + 1, content="racer")
            .execution_options(synchronize_session=False),
        )
        return clause

    workflow._lock_clause = lock_then_concurrent_write

    with pytest.raises(ConcurrencyError):
        await workflow.decide(amendment_id, AmendmentDecision.ACCEPT, reviewer_id)

    amendment = await workflow.get(amendment_id)
    assert amendment.status == AmendmentStatus.PENDING.value
    assert amendment.decided_by is None
    clause = await ContractService(test_db).get_clause(clause_id)
    assert clause.content == "v1"
    assert clause.version == 0


# ─── concurrent decide ───────────────────────────────────────────

@pytest.fixture
async def file_factory(tmp_path):
    """Separate connections per session; in-memory SQLite shares one."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'race.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    await engine.dispose()


async def _seed_rival_proposals(factory):
    async with factory() as db:
        author = User(email="author@example.com", name="Ada Author")
        reviewer = User(email="reviewer@example.com", role="FACILITATOR")
        cohort = Cohort(name="Race Cohort", members=[author, reviewer])
        contract = Contract(title="Race Agreement", cohort=cohort)
        clause = Clause(
            title="Punctuality", content="v1", contract=contract, created_by=author,
        )
        db.add_all([author, reviewer, cohort, contract, clause])
        await db.commit()
        workflow = AmendmentWorkflow(db)
        first = await workflow.propose(clause.id, author.id, "from author")
        second = await workflow.propose(clause.id, reviewer.id, "from reviewer")
        return clause.id, reviewer.id, {first.id: first.content, second.id: second.content}


async def _accept_in_own_session(factory, amendment_id, decider_id):
    async with factory() as db:
        decided = await AmendmentWorkflow(db).decide(
            amendment_id, AmendmentDecision.ACCEPT, decider_id, expected_version=0,
        )
        return decided.id


async def test_concurrent_accepts_apply_exactly_one(file_factory):
    """Both callers read version 0; only one proposal may reach the clause."""
    clause_id, decider_id, proposals = await _seed_rival_proposals(file_factory)

    results = await asyncio.gather(
        *(_accept_in_own_session(file_factory, a_id, decider_id) for a_id in proposals),
        return_exceptions=True,
    )

    winners = [r for r in results if not isinstance(r, BaseException)]
    losers = [r for r in results if isinstance(r, BaseException)]
    assert len(winners) == 1
    assert len(losers) == 1
    assert isinstance(losers[0], (ContractsError, DBAPIError))

    async with file_factory() as db:
        clause = await db.get(Clause, clause_id)
        assert clause.content == proposals[winners[0]]
        assert clause.version == 1
        result = await db.execute(
            select(Amendment.id, Amendment.status).where(Amendment.clause_id == clause_id),
        )
        statuses = dict(result.all())
    assert statuses[winners[0]] == AmendmentStatus.ACCEPTED.value
    [loser_id] = set(proposals) - {winners[0]}
    assert statuses[loser_id] == AmendmentStatus.PENDING.value


# ─── history ─────────────────────────────────────────────────────

async def test_history_is_ordered_and_restartable(test_db, seed):
    workflow = AmendmentWorkflow(test_db)
    contents = ["v2", "v3", "v4"]
    for content in contents:
        await workflow.propose(seed.clause.id, seed.author.id, content)

    first_pass = await _history(workflow, seed.clause.id)
    second_pass = await _history(workflow, seed.clause.id)

    assert [a.content for a in first_pass] == contents
    assert [a.id for a in second_pass] == [a.id for a in first_pass]


async def test_history_of_unknown_clause_raises_not_found(test_db, seed):
    with pytest.raises(ResourceNotFoundError):
        await _history(AmendmentWorkflow(test_db), uuid4())


async def test_history_of_untouched_clause_is_empty(test_db, seed):
    assert await _history(AmendmentWorkflow(test_db), seed.clause.id) == []
