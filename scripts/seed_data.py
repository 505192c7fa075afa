"""Seed database with initial data (plans, payment methods, a discount, an admin user)."""

import argparse
import asyncio
import json

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.db import dispose_engine, get_session_factory
from app.core.security import create_access_token
from app.models.models import User
from app.models.plan import Discount, PaymentMethod, Plan
from app.models.subscription_enums import DiscountType, PaymentMethodType
from app.services.user_service import UserService

PLANS = [
    {
        "name": settings.DEFAULT_PLAN_NAME,
        "description": "Get started with past papers at no cost.",
        "pricing_options": [{"label": "Lifetime", "price": 0, "months": 0}],
        "features": [
            {"text": "Browse all published papers", "is_quota": False},
            {"text": "5 bookmarks", "is_quota": True, "key": "bookmarks", "limit": 5, "period": "lifetime"},
            {"text": "3 downloads per day", "is_quota": True, "key": "downloads", "limit": 3, "period": "daily"},
        ],
        "published": True,
        "popular": False,
        "is_ad_supported": True,
    },
    {
        "name": "Scholar",
        "description": "For students preparing for their next exam.",
        "pricing_options": [
            {"label": "1 Month", "price": 1200, "months": 1},
            {"label": "6 Months", "price": 6000, "months": 6, "badge": "Save 17%"},
        ],
        "features": [
            {"text": "Unlimited bookmarks", "is_quota": True, "key": "bookmarks", "limit": -1, "period": "lifetime"},
            {"text": "50 downloads per month", "is_quota": True, "key": "downloads", "limit": 50, "period": "monthly"},
            {
                "text": "2 priority support requests per month",
                "is_quota": True,
                "key": "priority_support",
                "limit": 2,
                "period": "monthly",
            },
        ],
        "published": True,
        "popular": True,
        "is_ad_supported": False,
    },
    {
        "name": "Achiever",
        "description": "Everything, with no limits.",
        "pricing_options": [
            {"label": "1 Year", "price": 9000, "months": 12},
            {"label": "Lifetime", "price": 20000, "months": 0, "badge": "Best value"},
        ],
        "features": [
            {"text": "Unlimited bookmarks", "is_quota": True, "key": "bookmarks", "limit": -1, "period": "lifetime"},
            {"text": "Unlimited downloads", "is_quota": True, "key": "downloads", "limit": -1, "period": "monthly"},
            {
                "text": "Unlimited priority support",
                "is_quota": True,
                "key": "priority_support",
                "limit": -1,
                "period": "monthly",
            },
        ],
        "published": True,
        "popular": False,
        "is_ad_supported": False,
    },
]

PAYMENT_METHODS = [
    {
        "name": "Bank Transfer",
        "type": PaymentMethodType.BANK,
        "details": {
            "bank_name": "Meezan Bank",
            "account_title": "Prepify",
            "account_number": "0123456789",
            "iban": "PK00MEZN0000000123456789",
        },
    },
    {
        "name": "Easypaisa",
        "type": PaymentMethodType.EASYPAISA,
        "details": {"account_title": "Prepify", "account_number": "03001234567"},
    },
]


async def seed_plans(session: AsyncSession) -> None:
    """Create or update plans by name."""
    for plan_data in PLANS:
        values = {
            **plan_data,
            "pricing_options": json.dumps(plan_data["pricing_options"]),
            "features": json.dumps(plan_data["features"]),
        }
        result = await session.execute(select(Plan).where(Plan.name == plan_data["name"]))
        existing_plan = result.scalars().first()

        if existing_plan:
            for field, value in values.items():
                setattr(existing_plan, field, value)
            print(f"✓ Updated plan: {plan_data['name']}")
        else:
            session.add(Plan(**values, created_by="seed"))
            print(f"✓ Created plan: {plan_data['name']}")

    await session.commit()


async def seed_payment_methods(session: AsyncSession) -> None:
    for method_data in PAYMENT_METHODS:
        result = await session.execute(select(PaymentMethod).where(PaymentMethod.name == method_data["name"]))
        if result.scalars().first():
            print(f"✓ Payment method already exists: {method_data['name']}")
            continue
        session.add(
            PaymentMethod(
                name=method_data["name"],
                type=method_data["type"],
                enabled=True,
                details=json.dumps(method_data["details"]),
                created_by="seed",
            )
        )
        print(f"✓ Created payment method: {method_data['name']}")

    await session.commit()


async def seed_discount(session: AsyncSession) -> None:
    """Flat 200 off any plan and duration."""
    result = await session.execute(select(Discount).where(Discount.code == "SAVE200"))
    if result.scalars().first():
        print("✓ Discount already exists: SAVE200")
        return
    session.add(
        Discount(
            name="Launch offer",
            code="SAVE200",
            type=DiscountType.FLAT,
            value=200,
            is_active=True,
            applies_to_all_plans=True,
            applies_to_all_durations=True,
            created_by="seed",
        )
    )
    await session.commit()
    print("✓ Created discount: SAVE200")


async def seed_admin(session: AsyncSession, uid: str, email: str) -> None:
    """Provision the admin profile the way a first sign-in would, then grant the admin role."""
    user = await UserService.ensure_user_profile(session, uid, email=email, name="Admin", email_verified=True)
    if user.role != settings.ADMIN_ROLE:
        await UserService.set_role(session, uid, settings.ADMIN_ROLE)
    result = await session.execute(select(User).where(User.id == uid))
    admin = result.scalar_one()
    token = create_access_token({"sub": admin.id, "email": admin.email, "name": admin.name, "email_verified": True})
    print(f"✓ Admin user ready: {admin.email} (uid: {admin.id})")
    print(f"  Development token: {token}")


async def main(admin_uid: str, admin_email: str) -> None:
    """Run all seed operations."""
    print("🌱 Seeding database...")

    async with get_session_factory()() as session:
        await seed_plans(session)
        await seed_payment_methods(session)
        await seed_discount(session)
        await seed_admin(session, admin_uid, admin_email)

    await dispose_engine()

    print("✅ Database seeding completed!")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--admin-uid", default="admin-local")
    parser.add_argument("--admin-email", default="admin@prepify.app")
    args = parser.parse_args()
    asyncio.run(main(args.admin_uid, args.admin_email))
