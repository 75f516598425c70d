import os

# Settings are read at import time; pick the test profile before the app loads
os.environ.setdefault("MODE", "test")

import pytest
from dataclasses import dataclass
from sqlalchemy import create_engine
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import NullPool
from httpx import AsyncClient, ASGITransport

from config import settings
from config.database import get_sync_url
from main import app as fastapi_app
import db as project_db
import db_models  # ensure models are imported
from db_base import Base
from db_models.asset import Asset
from db_models.person import Person
from db_models.reference import AssetCategory, Location, Vendor
from db_models.tenant import Tenant

TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL") or settings.DATABASE_URL


sync_url = get_sync_url(TEST_DATABASE_URL)

# Use an async engine for app interactions
engine = create_async_engine(
    TEST_DATABASE_URL,
    future=True,
    echo=False,
    poolclass=NullPool  # Disable connection pooling for tests
)
AsyncSessionTest = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
    autocommit=False
)


@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"


@pytest.fixture(scope="session", autouse=True)
def prepare_db():
    # Create/drop tables for tests (Destructive - use a dedicated test DB)
    sync_engine = create_engine(sync_url)
    Base.metadata.drop_all(bind=sync_engine)
    Base.metadata.create_all(bind=sync_engine)
    yield
    Base.metadata.drop_all(bind=sync_engine)
    sync_engine.dispose()


@pytest.fixture
def session_factory():
    """For tests that need to look at committed state from a fresh session."""
    return AsyncSessionTest


@pytest.fixture
async def db_session():
    async with AsyncSessionTest() as session:
        yield session
        await session.rollback()


@dataclass
class Seed:
    """One freshly created tenant with the rows most tests need."""

    tenant: Tenant
    requester: Person
    approver: Person
    assignee: Person
    assigner: Person
    other: Person
    category: AssetCategory
    location: Location
    vendor: Vendor
    asset: Asset

    @property
    def headers(self) -> dict[str, str]:
        return {"X-Tenant-ID": str(self.tenant.id)}


async def create_seed(name: str) -> Seed:
    """
    Every test gets its own tenant, so tests never see each other's rows
    even though they share one database.
    """
    async with AsyncSessionTest() as session:
        tenant = Tenant(name=name)
        session.add(tenant)
        await session.flush()

        def person(label: str, role: str) -> Person:
            return Person(
                tenant_id=tenant.id,
                name=label.title(),
                email=f"{label}@{name.lower()}.example.com",
                role=role,
            )

        requester = person("requester", "employee")
        approver = person("approver", "manager")
        assignee = person("assignee", "employee")
        assigner = person("assigner", "it")
        other = person("other", "employee")
        category = AssetCategory(tenant_id=tenant.id, name="Laptops")
        location = Location(tenant_id=tenant.id, name="HQ", type="office")
        vendor = Vendor(tenant_id=tenant.id, name="Acme Supplies")
        session.add_all([requester, approver, assignee, assigner, other, category, location, vendor])
        await session.flush()

        asset = Asset(
            tenant_id=tenant.id,
            name="Dell Latitude 7440",
            category_id=category.id,
            location_id=location.id,
            status="in_stock",
        )
        session.add(asset)
        await session.commit()

        return Seed(
            tenant=tenant,
            requester=requester,
            approver=approver,
            assignee=assignee,
            assigner=assigner,
            other=other,
            category=category,
            location=location,
            vendor=vendor,
            asset=asset,
        )


@pytest.fixture
async def seed(request):
    return await create_seed(f"T{request.node.name[:40]}")


@pytest.fixture
async def other_seed(request):
    """A second, unrelated tenant for isolation checks."""
    return await create_seed(f"O{request.node.name[:40]}")


@pytest.fixture
async def async_client():
    # Override the get_session dependency to create a fresh session for each request
    async def override_get_session():
        async with AsyncSessionTest() as session:
            yield session

    fastapi_app.dependency_overrides[project_db.get_session] = override_get_session

    async with AsyncClient(transport=ASGITransport(app=fastapi_app), base_url="http://testserver") as ac:
        yield ac

    # Clean up
    fastapi_app.dependency_overrides.clear()
