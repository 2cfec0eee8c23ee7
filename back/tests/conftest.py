# Standard library imports
import asyncio
from collections.abc import Callable, Iterator
from datetime import UTC, datetime, timedelta
import os
from pathlib import Path
import tempfile
from typing import Any
import uuid

# Settings are read once at import, so the environment must be in place first
_TMP_DIR = Path(tempfile.mkdtemp(prefix="samadhan-tests-"))
os.environ["ENVIRONMENT"] = "dev"
os.environ["JWT_SECRET_KEY"] = "test-secret"
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TMP_DIR / 'default.db'}"
os.environ["CACHE_ENABLED"] = "false"

# Third-party imports
from fastapi.testclient import TestClient
from jose import jwt
import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

# Local application imports
from samadhan.core.db import get_async_session
from samadhan.main import app
from samadhan.models import Base
from samadhan.models.auth.permissions import UserRole
from samadhan.models.auth.user import User
from samadhan.models.complaints.complaint import Complaint
from samadhan.models.complaints.enums import (
    ComplaintCategory,
    ComplaintPriority,
    ComplaintSeverity,
    ComplaintStatus,
)
from samadhan.models.complaints.location import GeoLocation

NOW = datetime(2025, 6, 1, 12, 0, tzinfo=UTC)


# -------------------------------------------------------
# In-memory factories
# -------------------------------------------------------
def build_user(role: UserRole = UserRole.CITIZEN, **overrides: Any) -> User:
    fields: dict[str, Any] = {
        "id": uuid.uuid4(),
        "email": f"{uuid.uuid4().hex[:8]}@example.com",
        "name": f"{role.value.title()} User",
        "role": role,
        "department": None,
        "is_active": True,
        "is_email_verified": True,
        "complaints_count": 0,
        "resolved_count": 0,
        "created_at": NOW,
        "updated_at": NOW,
    }
    fields.update(overrides)
    return User(**fields)


def build_complaint(**overrides: Any) -> Complaint:
    fields: dict[str, Any] = {
        "id": uuid.uuid4(),
        "user_id": uuid.uuid4(),
        "title": "Pothole on main road",
        "description": "A deep pothole near the bus stop damages vehicles.",
        "category": ComplaintCategory.ROAD_DAMAGE,
        "location": GeoLocation(latitude=28.6139, longitude=77.2090, address="Connaught Place, New Delhi"),
        "image_urls": [],
        "tags": [],
        "status": ComplaintStatus.PENDING,
        "priority": ComplaintPriority.MEDIUM,
        "severity": ComplaintSeverity.MODERATE,
        "assigned_department": None,
        "assigned_officer_id": None,
        "official_notes": None,
        "resolution_description": None,
        "resolved_at": None,
        "is_flagged": False,
        "flag_reason": None,
        "upvotes": 0,
        "created_at": NOW,
        "updated_at": NOW,
    }
    fields.update(overrides)
    return Complaint(**fields)


@pytest.fixture
def citizen() -> User:
    return build_user(UserRole.CITIZEN)


@pytest.fixture
def volunteer() -> User:
    return build_user(UserRole.VOLUNTEER)


@pytest.fixture
def officer() -> User:
    return build_user(UserRole.OFFICER)


@pytest.fixture
def admin() -> User:
    return build_user(UserRole.ADMIN)


# -------------------------------------------------------
# Database and API client
# -------------------------------------------------------
@pytest.fixture
def session_factory(tmp_path: Path) -> Iterator[async_sessionmaker[AsyncSession]]:
    """A fresh SQLite file per test; NullPool so every event loop opens its own connection."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", poolclass=NullPool)

    async def create_all() -> None:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    asyncio.run(create_all())
    yield async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)
    asyncio.run(engine.dispose())


@pytest.fixture
def client(session_factory: async_sessionmaker[AsyncSession]) -> Iterator[TestClient]:
    async def override_get_async_session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_async_session] = override_get_async_session
    yield TestClient(app)
    del app.dependency_overrides[get_async_session]


@pytest.fixture
def create_user(session_factory: async_sessionmaker[AsyncSession]) -> Callable[..., User]:
    """Persist a user and return it."""

    def _create(role: UserRole = UserRole.CITIZEN, **overrides: Any) -> User:
        user = build_user(role, **overrides)

        async def save() -> None:
            async with session_factory() as session:
                session.add(user)
                await session.commit()

        asyncio.run(save())
        return user

    return _create


def auth_headers(user: User | uuid.UUID, **claims: Any) -> dict[str, str]:
    """Bearer header for a stored user, or for a bare subject that has no profile yet."""
    subject = user if isinstance(user, uuid.UUID) else user.id
    token = jwt.encode(
        {"sub": str(subject), "exp": datetime.now(UTC) + timedelta(hours=1), **claims},
        "test-secret",
        algorithm="HS256",
    )
    return {"Authorization": f"Bearer {token}"}
