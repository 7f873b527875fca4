import pytest

from coursefile.core.security import hash_password
from coursefile.models.user import UserRole
from tests.conftest import make_user


@pytest.mark.asyncio
async def test_login_and_me(client, session_factory):
    async with session_factory() as s:
        user = make_user("Faculty Login", UserRole.FACULTY)
        user.password_hash = hash_password("s3cret-pass")
        s.add(user)
        await s.commit()

    res = await client.post("/api/auth/login", json={"email": "faculty.login@college.edu", "password": "wrong"})
    assert res.status_code == 401
    assert res.json()["message"] == "Invalid credentials"

    res = await client.post("/api/auth/login", json={"email": "faculty.login@college.edu", "password": "s3cret-pass"})
    assert res.status_code == 200
    body = res.json()
    assert body["token_type"] == "bearer"
    assert body["user"]["role"] == "FACULTY"

    res = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {body['access_token']}"})
    assert res.status_code == 200
    assert res.json()["email"] == "faculty.login@college.edu"


@pytest.mark.asyncio
async def test_garbage_token_rejected(client, world):
    res = await client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert res.status_code == 401


@pytest.mark.asyncio
async def test_admin_manages_users(client, world, headers):
    payload = {
        "name": "New Faculty",
        "email": "new.faculty@college.edu",
        "password": "password123",
        "role": "FACULTY",
        "department_id": world.department_id,
    }
    res = await client.post("/api/users/", json=payload, headers=headers.admin)
    assert res.status_code == 201
    user_id = res.json()["id"]

    res = await client.post("/api/users/", json=payload, headers=headers.admin)
    assert res.status_code == 409

    res = await client.get("/api/users/", params={"role": "FACULTY"}, headers=headers.admin)
    assert "new.faculty@college.edu" in [u["email"] for u in res.json()]

    res = await client.delete(f"/api/users/{user_id}", headers=headers.admin)
    assert res.status_code == 200


@pytest.mark.asyncio
async def test_non_admin_cannot_list_users(client, world, headers):
    res = await client.get("/api/users/", headers=headers.hod)
    assert res.status_code == 403
    assert "Access denied" in res.json()["message"]
