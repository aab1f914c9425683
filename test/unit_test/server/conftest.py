import secrets
from datetime import timedelta
from typing import Any, AsyncGenerator, Dict

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlmodel.pool import StaticPool
from werkzeug.security import generate_password_hash

from cleanstation.core.database import create_all, create_sessionmaker, utc_now
from cleanstation.core.database.entities.catalog import Assembly, AssemblyComponent, Part
from cleanstation.core.database.entities.qc import QcFormTemplate, QcFormTemplateItem
from cleanstation.core.database.entities.users import User, UserSession
from cleanstation.core.database.repositories import RepoBundle, build_repos_from_session
from cleanstation.core.models.domain.enums import AssemblyType, PartStatus, QcItemType, UserRole
from cleanstation.core.rules import load_rules

from .payloads import DL27_LEG_PART, order_payload

# Use in-memory SQLite for testing
# Note: We use check_same_thread=False for SQLite with async
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture
async def test_engine():
    """Create a fresh in-memory database for each test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await create_all(engine)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_maker(test_engine) -> async_sessionmaker[AsyncSession]:
    return create_sessionmaker(test_engine)


@pytest_asyncio.fixture(name="session")
async def session_fixture(session_maker) -> AsyncGenerator[AsyncSession, None]:
    """Create a new session for each test."""
    async with session_maker() as session:
        yield session


@pytest.fixture
def repos(session: AsyncSession) -> RepoBundle:
    return build_repos_from_session(session)


@pytest_asyncio.fixture(name="client")
async def client_fixture(session_maker) -> AsyncGenerator[AsyncClient, None]:
    """Create an async HTTP client whose requests each get their own test session."""
    from cleanstation.server.core.database import get_session
    from cleanstation.server.main import app

    async def get_session_override() -> AsyncGenerator[AsyncSession, None]:
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_session] = get_session_override

    # ASGITransport does not run the lifespan, so init_db is never called
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://localhost") as client:
        yield client

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def users(session_maker, test_config) -> Dict[UserRole, User]:
    """One active user per role; the username is the lower-cased role."""
    password_hash = generate_password_hash(test_config.users.password, method="pbkdf2:sha256:1000")
    created: Dict[UserRole, User] = {}
    async with session_maker() as session:
        for role in UserRole:
            name = role.value.lower()
            user = User(
                username=name,
                email=f"{name}@cleanstation.test",
                full_name=role.value.replace("_", " ").title(),
                initials="".join(word[0] for word in role.value.split("_")),
                role=role,
                password_hash=password_hash,
            )
            session.add(user)
            created[role] = user
        await session.commit()
    return created


@pytest_asyncio.fixture
async def auth_headers(session_maker, users) -> Dict[UserRole, Dict[str, str]]:
    """Bearer headers of a valid login session per role."""
    headers: Dict[UserRole, Dict[str, str]] = {}
    async with session_maker() as session:
        for role, user in users.items():
            token = secrets.token_urlsafe(24)
            session.add(UserSession(token=token, user_id=user.id, expires_at=utc_now() + timedelta(hours=1)))
            headers[role] = {"Authorization": f"Bearer {token}"}
        await session.commit()
    return headers


@pytest_asyncio.fixture
async def catalog(session_maker) -> None:
    """Seed every kit the rule data references, the control box parts and a few service parts."""
    rules = load_rules()
    assembly_ids = set(rules.manual_kits.values())
    assembly_ids.update(kit.id for kit in list(rules.legs) + list(rules.feet))
    assembly_ids.update(kit.id for kit in list(rules.faucets) + list(rules.sprayers))
    assembly_ids.update(basin.kit_id for basin in rules.basin_types)
    assembly_ids.update(addon.id for addon in rules.basin_addons)
    assembly_ids.update({rules.pegboard.mandatory_kit, rules.pegboard.color_component, "T2-ACC-SHELF-KIT"})
    for size in rules.pegboard.sizes:
        for pegboard_type in rules.pegboard.types:
            assembly_ids.add(f"{rules.pegboard.kit_prefix}{size.size}-{pegboard_type.code}-KIT")

    recipe = rules.control_box_recipe
    part_ids = set(recipe.base + recipe.per_e_drain + recipe.per_e_sink + recipe.per_board + [recipe.bracket])

    async with session_maker() as session:
        for assembly_id in sorted(assembly_ids):
            session.add(Assembly(assembly_id=assembly_id, name=assembly_id, type=AssemblyType.KIT, is_kit=True))
        for body in rules.sink_bodies:
            session.add(Assembly(assembly_id=body.id, name=f"Sink body {body.id}", type=AssemblyType.COMPLEX))
        for size_id in rules.basin_sizes:
            session.add(Assembly(assembly_id=size_id, name=size_id, type=AssemblyType.SIMPLE))
        for box in rules.control_boxes:
            session.add(Assembly(assembly_id=box.id, name=box.name, type=AssemblyType.COMPLEX))
        for part_id in sorted(part_ids):
            session.add(Part(part_id=part_id, name=part_id))
        session.add(Part(part_id=DL27_LEG_PART, name="DL27 lifting column"))
        session.add(Part(part_id="SVC-FILTER-01", name="Water filter cartridge"))
        session.add(Part(part_id="SVC-VALVE-02", name="Solenoid valve"))
        session.add(Part(part_id="SVC-OLD-03", name="Discontinued drain gasket", status=PartStatus.INACTIVE))
        await session.flush()
        session.add(AssemblyComponent(parent_assembly_id="T2-DL27-KIT", child_part_id=DL27_LEG_PART, quantity=4))
        await session.commit()


@pytest_asyncio.fixture
async def qc_templates(session_maker) -> Dict[str, QcFormTemplate]:
    """Final QC template for the default product family plus a generic fallback."""
    final = QcFormTemplate(
        name="Final Quality Check",
        form_type="Final QC",
        version="1.0",
        applies_to_product_family="MDRD_T2_SINK",
    )
    generic = QcFormTemplate(name="Generic Inspection", version="1.0")
    async with session_maker() as session:
        session.add_all([final, generic])
        await session.flush()
        session.add_all(
            [
                QcFormTemplateItem(
                    template_id=final.id,
                    section="Final Inspection",
                    checklist_item="Surfaces free of scratches",
                    item_type=QcItemType.PASS_FAIL,
                    order=1,
                ),
                QcFormTemplateItem(
                    template_id=final.id,
                    section="Final Inspection",
                    checklist_item="Serial number recorded",
                    item_type=QcItemType.TEXT_INPUT,
                    order=2,
                ),
                QcFormTemplateItem(
                    template_id=generic.id,
                    section="General",
                    checklist_item="Visual check",
                    order=1,
                ),
            ]
        )
        await session.commit()
    return {"final": final, "generic": generic}


@pytest_asyncio.fixture
async def create_order(client: AsyncClient, auth_headers):
    """Factory creating orders through the API as the production coordinator."""

    async def _create(po_number: str = "PO-1001", **overrides: Any) -> Dict[str, Any]:
        response = await client.post(
            "/api/orders",
            json=order_payload(po_number, **overrides),
            headers=auth_headers[UserRole.PRODUCTION_COORDINATOR],
        )
        assert response.status_code == 201, response.text
        return response.json()["data"]

    return _create


@pytest_asyncio.fixture
async def set_order_status(session_maker):
    """Force an order into a status without going through the workflow."""
    from cleanstation.core.database.entities.orders import Order

    async def _set(order_id: str, status) -> None:
        async with session_maker() as session:
            order = await session.get(Order, order_id)
            order.order_status = status
            session.add(order)
            await session.commit()

    return _set
