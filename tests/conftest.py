# (c) Copyright Datacraft, 2026
"""
Shared test fixtures: an in-memory entity store, local blob storage,
actors and factories.
"""
import pytest
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from onboard.core.db.engine import init_db
from onboard.core.features.documents.schema import IncomingFile
from onboard.core.features.projects import service as projects_service
from onboard.core.features.projects.schema import ProjectCreate
from onboard.core.identity import Actor, ActorRole
from onboard.core.storage.local import LocalBlobStore
from onboard.core.store.sql import SqlEntityStore


@pytest.fixture
async def engine():
	engine = create_async_engine(
		"sqlite+aiosqlite://",
		poolclass=StaticPool,
		connect_args={"check_same_thread": False},
	)
	await init_db(engine)
	yield engine
	await engine.dispose()


@pytest.fixture
def store(engine):
	return SqlEntityStore(async_sessionmaker(engine, expire_on_commit=False))


@pytest.fixture
def storage(tmp_path):
	return LocalBlobStore(tmp_path / "blobs")


@pytest.fixture
def staff() -> Actor:
	return Actor(id="staff-1", role=ActorRole.STAFF)


@pytest.fixture
def customer() -> Actor:
	return Actor(id="cust-1", role=ActorRole.CUSTOMER)


@pytest.fixture
def make_project(store, customer):
	"""Factory fixture for creating projects through the project service."""
	async def _make_project(
		customer_name: str = "Ada Lovelace",
		required_documents: list[str] | None = None,
		required_forms: list[str] | None = None,
		**kwargs,
	):
		data = ProjectCreate(
			customer_id=kwargs.pop("customer_id", customer.id),
			customer_name=customer_name,
			company_name=kwargs.pop("company_name", "Analytical Engines Ltd"),
			required_documents=required_documents or [],
			required_forms=required_forms or [],
			**kwargs,
		)
		return await projects_service.create_project(store, data)

	return _make_project


@pytest.fixture
def make_file():
	def _make_file(
		filename: str = "passport.pdf",
		data: bytes = b"%PDF-1.4 test document",
		content_type: str | None = "application/pdf",
	) -> IncomingFile:
		return IncomingFile(filename=filename, content_type=content_type, data=data)

	return _make_file
