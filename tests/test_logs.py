import pytest

BASE = "/api/course-file-log"
TASKS = "/api/course-file-submission"


async def _complete_two(client, world, headers):
    for task_id in world.task_ids[:2]:
        res = await client.patch(f"{TASKS}/complete/{task_id}", headers=headers.faculty)
        assert res.status_code == 200


@pytest.mark.asyncio
async def test_assignment_log_newest_first(client, world, headers):
    await _complete_two(client, world, headers)
    await client.patch(f"{TASKS}/review/{world.task_ids[0]}", json={"status": "NO", "remarks": "fix"}, headers=headers.cc)

    res = await client.get(f"{BASE}/assignment/{world.assignment_id}", headers=headers.cc)
    assert res.status_code == 200

    entries = res.json()
    assert [e["action"] for e in entries] == ["CC_REJECTED", "TASK_COMPLETED", "TASK_COMPLETED"]
    assert entries[0]["actorName"] == "Cc Rao"
    assert entries[0]["actorRole"] == "CC"
    assert entries[0]["remarks"] == "fix"
    assert entries[0]["taskId"] == str(world.task_ids[0])
    assert entries[0]["details"]["to"]["cc_status"] == "NO"
    assert entries[0]["taskTitle"] == "Checklist item 1"
    assert entries[0]["subjectName"] == "Operating Systems"
    assert entries[0]["className"] == "CSE 3A"
    assert entries[0]["message"] == "Cc Rao returned 'Checklist item 1' as CC for Operating Systems (CSE 3A)"


@pytest.mark.asyncio
async def test_outsider_cannot_read_log(client, world, headers):
    res = await client.get(f"{BASE}/assignment/{world.assignment_id}", headers=headers.other_faculty)
    assert res.status_code == 403


@pytest.mark.asyncio
async def test_clear_log_is_hod_only(client, world, headers):
    await _complete_two(client, world, headers)

    res = await client.delete(f"{BASE}/assignment/{world.assignment_id}", headers=headers.cc)
    assert res.status_code == 403

    res = await client.delete(f"{BASE}/assignment/{world.assignment_id}", headers=headers.hod)
    assert res.status_code == 200
    assert res.json()["count"] == 2

    res = await client.get(f"{BASE}/assignment/{world.assignment_id}", headers=headers.hod)
    assert res.json() == []


@pytest.mark.asyncio
async def test_department_activity_feed(client, world, headers):
    await _complete_two(client, world, headers)

    res = await client.get(f"{BASE}/list", params={"limit": 1}, headers=headers.hod)
    assert res.status_code == 200
    assert len(res.json()) == 1
    assert res.json()[0]["message"].startswith("Faculty Iyer marked")
    assert res.json()[0]["subjectName"] == "Operating Systems"

    res = await client.get(f"{BASE}/list", headers=headers.faculty)
    assert res.status_code == 403
