import os
from datetime import date, timedelta
from types import SimpleNamespace

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

# ------------------------------------------------------------------
# FORCE TESTING MODE
# Must be set BEFORE importing coursefile.main so the settings and the
# database module pick up the SQLite URL.
# ------------------------------------------------------------------
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["SECRET_KEY"] = "test-secret-key-for-testing-only"

from coursefile.main import app
from coursefile.api.deps import get_db_session
from coursefile.core.security import create_access_token
from coursefile.models import academic, audit, course_file, user  # noqa: F401
from coursefile.models.academic import ClassSection, Department, Subject
from coursefile.models.course_file import CourseFileAssignment, CourseFileTask, CourseFileTemplate
from coursefile.models.user import User, UserRole

TEMPLATE_COUNT = 5


@pytest_asyncio.fixture
async def session_factory():
    """Fresh in-memory database per test."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory):
    """
    One session per request, like production.
    Uses ASGITransport (httpx >= 0.27).
    """
    async def override_get_db_session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db_session] = override_get_db_session
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as ac:
        yield ac
    app.dependency_overrides.clear()


def auth_headers(user_id) -> dict:
    return {"Authorization": f"Bearer {create_access_token(subject=str(user_id))}"}


def make_user(name: str, role: UserRole, department_id=None) -> User:
    return User(
        name=name,
        email=f"{name.lower().replace(' ', '.')}@college.edu",
        password_hash="not-a-real-hash",
        role=role,
        department_id=department_id,
    )


@pytest_asyncio.fixture
async def world(session_factory):
    """
    Department (HOD) -> class (CC) -> subject, one faculty assignment with
    one task per template. Only ids leave this fixture.
    """
    async with session_factory() as s:
        admin = make_user("Admin", UserRole.ADMIN)
        hod = make_user("Hod Sharma", UserRole.HOD)
        cc = make_user("Cc Rao", UserRole.CC)
        faculty = make_user("Faculty Iyer", UserRole.FACULTY)
        other_faculty = make_user("Faculty Other", UserRole.FACULTY)
        s.add_all([admin, hod, cc, faculty, other_faculty])
        await s.flush()

        dept = Department(name="Computer Science", hod_id=hod.id)
        s.add(dept)
        await s.flush()

        cls = ClassSection(name="CSE 3A", department_id=dept.id, cc_id=cc.id)
        s.add(cls)
        await s.flush()

        subject = Subject(name="Operating Systems", class_id=cls.id)
        second_subject = Subject(name="Compilers", class_id=cls.id)
        s.add_all([subject, second_subject])

        templates = [
            CourseFileTemplate(title=f"Checklist item {i}", description=f"Item {i}", order=i)
            for i in range(1, TEMPLATE_COUNT + 1)
        ]
        s.add_all(templates)
        await s.flush()

        assignment = CourseFileAssignment(faculty_id=faculty.id, subject_id=subject.id, class_id=cls.id)
        s.add(assignment)
        await s.flush()

        tasks = [
            CourseFileTask(
                assignment_id=assignment.id,
                template_id=t.id,
                deadline=date.today() + timedelta(days=t.order),
            )
            for t in templates
        ]
        s.add_all(tasks)
        await s.commit()

        return SimpleNamespace(
            admin_id=admin.id,
            hod_id=hod.id,
            cc_id=cc.id,
            faculty_id=faculty.id,
            other_faculty_id=other_faculty.id,
            department_id=dept.id,
            class_id=cls.id,
            subject_id=subject.id,
            second_subject_id=second_subject.id,
            template_ids=[t.id for t in templates],
            assignment_id=assignment.id,
            task_ids=[t.id for t in tasks],
        )


@pytest.fixture
def headers(world):
    return SimpleNamespace(
        admin=auth_headers(world.admin_id),
        hod=auth_headers(world.hod_id),
        cc=auth_headers(world.cc_id),
        faculty=auth_headers(world.faculty_id),
        other_faculty=auth_headers(world.other_faculty_id),
    )


@pytest_asyncio.fixture
async def fetch_task(session_factory):
    """Reads a task through a fresh session so no identity map hides changes."""
    async def _fetch(task_id) -> CourseFileTask:
        async with session_factory() as s:
            return await s.get(CourseFileTask, task_id)
    return _fetch
