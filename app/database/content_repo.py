"""Repository layer for settings, static pages and email templates."""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.models import EmailTemplate, Page, SiteSetting


class ContentRepository:
    """Repository for content documents keyed by a string id."""

    @staticmethod
    async def get_setting(db: AsyncSession, key: str) -> Optional[SiteSetting]:
        return await db.get(SiteSetting, key)

    @staticmethod
    async def save_setting(db: AsyncSession, key: str, value: str) -> SiteSetting:
        row = await db.get(SiteSetting, key)
        if row is None:
            row = SiteSetting(key=key, value=value)
            db.add(row)
        else:
            row.value = value
        await db.commit()
        return row

    @staticmethod
    async def get_page(db: AsyncSession, slug: str) -> Optional[Page]:
        return await db.get(Page, slug)

    @staticmethod
    async def save_page(db: AsyncSession, page: Page) -> Page:
        """Insert or update a page and commit the transaction."""
        merged = await db.merge(page)
        await db.commit()
        return merged

    @staticmethod
    async def get_template(db: AsyncSession, template_id: str) -> Optional[EmailTemplate]:
        return await db.get(EmailTemplate, template_id)

    @staticmethod
    async def list_templates(db: AsyncSession) -> list[EmailTemplate]:
        result = await db.execute(select(EmailTemplate).order_by(EmailTemplate.id))
        return list(result.scalars().all())

    @staticmethod
    async def save_template(db: AsyncSession, template: EmailTemplate) -> EmailTemplate:
        merged = await db.merge(template)
        await db.commit()
        return merged
