import pytest

BASE = "/api/academic"


@pytest.mark.asyncio
async def test_admin_builds_academic_structure(client, world, headers):
    res = await client.post(f"{BASE}/departments", json={"name": "Mechanical"}, headers=headers.admin)
    assert res.status_code == 201
    dept_id = res.json()["id"]
    assert res.json()["hod_id"] is None

    res = await client.put(
        f"{BASE}/departments/{dept_id}/hod", json={"hod_id": str(world.hod_id)}, headers=headers.admin
    )
    assert res.json()["hod_id"] == str(world.hod_id)

    res = await client.post(
        f"{BASE}/classes", json={"name": "ME 2B", "department_id": dept_id, "cc_id": str(world.cc_id)},
        headers=headers.admin,
    )
    assert res.status_code == 201
    class_id = res.json()["id"]

    res = await client.post(f"{BASE}/classes/{class_id}/subjects", json={"name": "Thermodynamics"}, headers=headers.admin)
    assert res.status_code == 201

    res = await client.get(f"{BASE}/classes/{class_id}/subjects", headers=headers.faculty)
    assert [s["name"] for s in res.json()] == ["Thermodynamics"]

    res = await client.get(f"{BASE}/classes", params={"department_id": dept_id}, headers=headers.cc)
    assert [c["name"] for c in res.json()] == ["ME 2B"]


@pytest.mark.asyncio
async def test_only_admin_creates_departments(client, world, headers):
    res = await client.post(f"{BASE}/departments", json={"name": "Civil"}, headers=headers.hod)
    assert res.status_code == 403
