"""Recording Routes — tension, journal, failure and iteration endpoints.

Invariants:
    - Tension value outside 1..10 → 400; unknown contract or user → 404
    - Journal tags come back stripped and de-duplicated
    - A failure entry with iterations cannot be edited (409) or deleted (409)
    - Recordings block deletion of their contract
"""

from uuid import uuid4

import pytest


def _owner(seed) -> dict:
    return {"contract_id": str(seed.contract.id), "user_id": str(seed.author.id)}


async def _create_failure(client, seed) -> dict:
    res = await client.post("/api/v1/failure-entries", json={
        **_owner(seed),
        "title": "Missed the demo",
        "description": "Build broke an hour before",
        "lessons": "Freeze main the day before",
    })
    assert res.status_code == 201, res.text
    return res.json()


# ─── tension ─────────────────────────────────────────────────────

async def test_record_tension(client, seed):
    res = await client.post("/api/v1/tension-measurements", json={
        **_owner(seed), "value": 7, "context": "deadline week",
    })
    assert res.status_code == 201
    assert res.json()["value"] == 7


@pytest.mark.parametrize("value", [0, 11])
async def test_tension_out_of_range_returns_400(client, seed, value):
    res = await client.post("/api/v1/tension-measurements", json={
        **_owner(seed), "value": value,
    })
    assert res.status_code == 400


async def test_tension_for_unknown_contract_returns_404(client, seed):
    res = await client.post("/api/v1/tension-measurements", json={
        "contract_id": str(uuid4()), "user_id": str(seed.author.id), "value": 5,
    })
    assert res.status_code == 404
    assert res.json()["error"]["context"]["resource_type"] == "Contract"


async def test_list_tension_filters_by_user(client, seed):
    for user, value in ((seed.author, 3), (seed.reviewer, 8)):
        await client.post("/api/v1/tension-measurements", json={
            "contract_id": str(seed.contract.id), "user_id": str(user.id),
            "value": value,
        })

    res = await client.get(
        "/api/v1/tension-measurements", params={"user_id": str(seed.reviewer.id)},
    )
    assert [m["value"] for m in res.json()] == [8]


async def test_recordings_block_contract_delete(client, seed):
    await client.post("/api/v1/tension-measurements", json={
        **_owner(seed), "value": 4,
    })
    await client.delete(f"/api/v1/clauses/{seed.clause.id}")

    res = await client.delete(f"/api/v1/contracts/{seed.contract.id}")
    assert res.status_code == 409
    assert res.json()["error"]["dependents"] == {"tension_measurements": 1}


# ─── journal ─────────────────────────────────────────────────────

async def test_journal_crud(client, seed):
    res = await client.post("/api/v1/journal-entries", json={
        **_owner(seed),
        "title": "Week one",
        "content": "We kept the standup short.",
        "tags": [" retro", "retro", "standup "],
    })
    assert res.status_code == 201
    entry = res.json()
    assert entry["tags"] == ["retro", "standup"]

    res = await client.patch(
        f"/api/v1/journal-entries/{entry['id']}", json={"title": "Week 1"},
    )
    assert res.status_code == 200
    assert res.json()["title"] == "Week 1"
    assert res.json()["content"] == "We kept the standup short."

    res = await client.get(
        "/api/v1/journal-entries", params={"contract_id": str(seed.contract.id)},
    )
    assert [e["id"] for e in res.json()] == [entry["id"]]

    res = await client.delete(f"/api/v1/journal-entries/{entry['id']}")
    assert res.status_code == 204
    res = await client.get(f"/api/v1/journal-entries/{entry['id']}")
    assert res.status_code == 404


async def test_empty_journal_patch_returns_400(client, seed):
    res = await client.post("/api/v1/journal-entries", json={
        **_owner(seed), "title": "t", "content": "c",
    })
    res = await client.patch(f"/api/v1/journal-entries/{res.json()['id']}", json={})
    assert res.status_code == 400


# ─── failures / iterations ───────────────────────────────────────

async def test_failure_editable_until_iterated(client, seed):
    failure = await _create_failure(client, seed)

    res = await client.patch(
        f"/api/v1/failure-entries/{failure['id']}", json={"lessons": "Tag releases"},
    )
    assert res.status_code == 200
    assert res.json()["lessons"] == "Tag releases"

    res = await client.post(
        f"/api/v1/failure-entries/{failure['id']}/iterations",
        json={"description": "Froze main", "outcome": "Demo went fine"},
    )
    assert res.status_code == 201

    res = await client.patch(
        f"/api/v1/failure-entries/{failure['id']}", json={"title": "Rewritten"},
    )
    assert res.status_code == 409
    assert res.json()["error"]["code"] == "INVALID_STATE"


async def test_failure_with_iterations_cannot_be_deleted(client, seed):
    failure = await _create_failure(client, seed)
    iteration = (await client.post(
        f"/api/v1/failure-entries/{failure['id']}/iterations",
        json={"description": "Froze main", "outcome": "Better"},
    )).json()

    res = await client.delete(f"/api/v1/failure-entries/{failure['id']}")
    assert res.status_code == 409
    assert res.json()["error"]["dependents"] == {"iterations": 1}

    res = await client.delete(f"/api/v1/iterations/{iteration['id']}")
    assert res.status_code == 204
    res = await client.delete(f"/api/v1/failure-entries/{failure['id']}")
    assert res.status_code == 204


async def test_failure_detail_lists_iterations(client, seed):
    failure = await _create_failure(client, seed)
    for outcome in ("Worse", "Better"):
        await client.post(
            f"/api/v1/failure-entries/{failure['id']}/iterations",
            json={"description": "Tried again", "outcome": outcome},
        )

    res = await client.get(f"/api/v1/failure-entries/{failure['id']}/iterations")
    assert [i["outcome"] for i in res.json()] == ["Worse", "Better"]
    res = await client.get(f"/api/v1/failure-entries/{failure['id']}")
    assert len(res.json()["iterations"]) == 2


async def test_iteration_on_unknown_failure_returns_404(client):
    res = await client.post(
        f"/api/v1/failure-entries/{uuid4()}/iterations",
        json={"description": "x", "outcome": "y"},
    )
    assert res.status_code == 404


async def test_blank_failure_title_patch_returns_400(client, seed):
    failure = await _create_failure(client, seed)

    res = await client.patch(
        f"/api/v1/failure-entries/{failure['id']}", json={"title": "   "},
    )
    assert res.status_code == 400
    res = await client.get(f"/api/v1/failure-entries/{failure['id']}")
    assert res.json()["title"] == "Missed the demo"


async def test_blank_journal_content_patch_returns_400(client, seed):
    entry = (await client.post("/api/v1/journal-entries", json={
        **_owner(seed), "title": "Week one", "content": "Short standups",
    })).json()

    res = await client.patch(
        f"/api/v1/journal-entries/{entry['id']}", json={"content": "   "},
    )
    assert res.status_code == 400
    assert res.json()["error"]["details"][0]["field"] == "body.content"
    res = await client.get(f"/api/v1/journal-entries/{entry['id']}")
    assert res.json()["content"] == "Short standups"
