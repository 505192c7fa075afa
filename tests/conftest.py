# Shared pytest configuration and fixtures
import json

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.core.config import settings
from app.core.db import get_db
from app.main import app
from app.models import Base, Category, Discount, Paper, PaymentMethod, Plan
from app.models.subscription_enums import DiscountType, PaymentMethodType
from app.services.user_service import UserService
from tests.fixtures import FREE_FEATURES, SCHOLAR_FEATURES

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture(scope="function")
async def test_engine():
    """Create test database engine and initialize schema."""
    engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def test_db(test_engine):
    """Create a test database session."""
    factory = async_sessionmaker(bind=test_engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session


@pytest_asyncio.fixture(scope="function")
async def client(test_db: AsyncSession):
    """Create a test client bound to the test session."""

    async def override_get_db():
        yield test_db

    app.dependency_overrides[get_db] = override_get_db
    try:
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
            yield ac
    finally:
        app.dependency_overrides.clear()


@pytest_asyncio.fixture(scope="function")
async def free_plan(test_db: AsyncSession):
    """The default plan new profiles are put on."""
    plan = Plan(
        name=settings.DEFAULT_PLAN_NAME,
        description="Free tier",
        pricing_options=json.dumps([{"label": "Lifetime", "price": 0, "months": 0}]),
        features=json.dumps(FREE_FEATURES),
        published=True,
    )
    test_db.add(plan)
    await test_db.commit()
    return plan


@pytest_asyncio.fixture(scope="function")
async def scholar_plan(test_db: AsyncSession):
    plan = Plan(
        name="Scholar",
        description="Paid tier",
        pricing_options=json.dumps(
            [
                {"label": "1 Month", "price": 1200, "months": 1},
                {"label": "6 Months", "price": 6000, "months": 6},
            ]
        ),
        features=json.dumps(SCHOLAR_FEATURES),
        published=True,
    )
    test_db.add(plan)
    await test_db.commit()
    return plan


@pytest_asyncio.fixture(scope="function")
async def bank_method(test_db: AsyncSession):
    method = PaymentMethod(
        name="Bank Transfer",
        type=PaymentMethodType.BANK,
        enabled=True,
        details=json.dumps({"bank_name": "Test Bank", "account_number": "0001"}),
    )
    test_db.add(method)
    await test_db.commit()
    return method


@pytest_asyncio.fixture(scope="function")
async def save200(test_db: AsyncSession):
    """Flat 200 off anything."""
    discount = Discount(
        name="Launch offer",
        code="SAVE200",
        type=DiscountType.FLAT,
        value=200,
        is_active=True,
        applies_to_all_plans=True,
        applies_to_all_durations=True,
    )
    test_db.add(discount)
    await test_db.commit()
    return discount


@pytest_asyncio.fixture(scope="function")
async def student(test_db: AsyncSession, free_plan):
    """A provisioned profile on the free plan."""
    return await UserService.ensure_user_profile(
        test_db, "student-1", email="student@example.com", name="Student One", email_verified=True
    )


@pytest_asyncio.fixture(scope="function")
async def admin(test_db: AsyncSession, free_plan):
    user = await UserService.ensure_user_profile(test_db, "admin-1", email="admin@example.com", name="Admin")
    await UserService.set_role(test_db, user.id, settings.ADMIN_ROLE)
    return user


@pytest_asyncio.fixture(scope="function")
async def paper(test_db: AsyncSession):
    category = Category(name="Matric", slug="matric")
    test_db.add(category)
    await test_db.flush()
    paper = Paper(
        title="Physics 2023",
        slug="physics-2023",
        description="",
        category_id=category.id,
        published=True,
    )
    test_db.add(paper)
    await test_db.commit()
    return paper
