import os

os.environ["APP_SECRET_KEY"] = "test-secret-key"
os.environ["APP_DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["APP_SQL_LOG_FILE"] = ""
os.environ["APP_AUTH_JWT_SECRET"] = "test-jwt-secret"
os.environ["APP_DISCORD_ERROR_WEBHOOK"] = ""

from datetime import timedelta
import uuid

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from asgi import application
from app.api.categories.models import EventCategories
from app.api.events.models import (
    ApprovalStatus,
    EventParticipation,
    EventStatus,
    Events,
    ParticipationStatus,
)
from app.api.roles.models import RoleDefinitions, UserRoles
from app.api.roles.service import DEFAULT_ROLES
from app.api.volunteers.models import Branches, StudyYears, Volunteers
from app.core.auth.dependencies import Caller
from app.core.auth.jwt import create_access_token
from app.core.utils.reporting import utc_today
from app.db.base import AbstractSQLModel
from app.db.core import get_session


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(AbstractSQLModel.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(
        engine, autoflush=False, expire_on_commit=False
    )


@pytest.fixture
async def session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory):
    async def override_get_session():
        async with session_factory() as session:
            yield session

    application.dependency_overrides[get_session] = override_get_session
    async with AsyncClient(
        transport=ASGITransport(app=application), base_url="http://test"
    ) as client:
        yield client
    application.dependency_overrides.clear()


@pytest.fixture
async def roles(session):
    definitions = {
        role["role_name"]: RoleDefinitions(**role, permissions={})
        for role in DEFAULT_ROLES
    }
    session.add_all(definitions.values())
    await session.commit()
    return definitions


async def make_volunteer(session, roll_number, first_name="Asha", **kwargs):
    volunteer = Volunteers(
        auth_user_id=uuid.uuid4(),
        first_name=first_name,
        last_name=kwargs.pop("last_name", "Patil"),
        roll_number=roll_number,
        email=kwargs.pop("email", f"{roll_number.lower()}@college.edu"),
        branch=kwargs.pop("branch", Branches.CMPN),
        year=kwargs.pop("year", StudyYears.SE),
        **kwargs,
    )
    session.add(volunteer)
    await session.commit()
    return volunteer


async def grant(session, volunteer, role):
    session.add(UserRoles(volunteer_id=volunteer.id, role_definition_id=role.id))
    await session.commit()


def token_for(volunteer):
    return create_access_token({"sub": str(volunteer.auth_user_id)})


def auth_headers(volunteer):
    return {"Authorization": f"Bearer {token_for(volunteer)}"}


@pytest.fixture
async def admin(session, roles):
    volunteer = await make_volunteer(session, "NSS001", first_name="Meera")
    await grant(session, volunteer, roles["admin"])
    return volunteer


@pytest.fixture
async def event_lead(session, roles):
    volunteer = await make_volunteer(session, "NSS002", first_name="Rohan")
    await grant(session, volunteer, roles["event_lead"])
    return volunteer


@pytest.fixture
async def volunteer(session, roles):
    volunteer = await make_volunteer(session, "NSS003", first_name="Kiran")
    await grant(session, volunteer, roles["volunteer"])
    return volunteer


@pytest.fixture
def admin_caller(admin):
    return Caller(
        auth_user_id=admin.auth_user_id,
        volunteer=admin,
        role_names=frozenset({"admin"}),
    )


@pytest.fixture
def admin_headers(admin):
    return auth_headers(admin)


@pytest.fixture
def lead_headers(event_lead):
    return auth_headers(event_lead)


@pytest.fixture
def volunteer_headers(volunteer):
    return auth_headers(volunteer)


@pytest.fixture
async def category(session):
    category = EventCategories(
        category_name="Tree Plantation", code="tree-plantation", color_hex="#22C55E"
    )
    session.add(category)
    await session.commit()
    return category


async def make_event(session, category, creator, **kwargs):
    start_date = kwargs.pop("start_date", utc_today() + timedelta(days=3))
    event = Events(
        event_name=kwargs.pop("event_name", "Beach Cleanup"),
        start_date=start_date,
        end_date=kwargs.pop("end_date", start_date),
        declared_hours=kwargs.pop("declared_hours", 4),
        category_id=category.id,
        created_by_volunteer_id=creator.id,
        event_status=kwargs.pop("event_status", EventStatus.registration_open),
        **kwargs,
    )
    session.add(event)
    await session.commit()
    return event


@pytest.fixture
async def event(session, category, event_lead):
    return await make_event(session, category, event_lead)


async def make_participation(session, event, volunteer, hours_attended=3, **kwargs):
    participation = EventParticipation(
        event_id=event.id,
        volunteer_id=volunteer.id,
        hours_attended=hours_attended,
        participation_status=kwargs.pop(
            "participation_status", ParticipationStatus.present
        ),
        approval_status=kwargs.pop("approval_status", ApprovalStatus.pending),
        **kwargs,
    )
    session.add(participation)
    await session.commit()
    return participation


@pytest.fixture
async def participation(session, event, volunteer):
    return await make_participation(session, event, volunteer, hours_attended=3)

