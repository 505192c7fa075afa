"""Service layer for site settings and static pages."""

import json
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from app.database.content_repo import ContentRepository
from app.models.models import Page
from app.schemas.content import PageResponse, PageUpdate, SiteSettings, SiteSettingsUpdate, TeamMember
from app.services.content_defaults import (
    DEFAULT_PAGES,
    DEFAULT_SETTINGS,
    GLOBAL_SETTINGS_KEY,
    PAGE_NOT_FOUND_TITLE,
)

logger = logging.getLogger(__name__)


class ContentService:
    """Service for settings and page content."""

    @staticmethod
    async def _stored_settings(db: AsyncSession) -> dict:
        row = await ContentRepository.get_setting(db, GLOBAL_SETTINGS_KEY)
        if row is None or not row.value:
            return {}
        try:
            return json.loads(row.value)
        except json.JSONDecodeError:
            logger.error("Stored settings document is not valid JSON; using defaults", exc_info=True)
            return {}

    @staticmethod
    async def get_settings(db: AsyncSession) -> SiteSettings:
        """Global settings; every key missing or blank in the store falls back to its default."""
        stored = await ContentService._stored_settings(db)
        merged = dict(DEFAULT_SETTINGS)
        for key, value in stored.items():
            if key in merged and value not in (None, ""):
                merged[key] = value
        return SiteSettings.model_validate(merged)

    @staticmethod
    async def update_settings(db: AsyncSession, data: SiteSettingsUpdate) -> SiteSettings:
        """Merge the supplied keys into the stored settings document."""
        stored = await ContentService._stored_settings(db)
        stored.update(data.model_dump(mode="json", exclude_unset=True))
        await ContentRepository.save_setting(db, GLOBAL_SETTINGS_KEY, json.dumps(stored))
        return await ContentService.get_settings(db)

    @staticmethod
    async def update_team_members(db: AsyncSession, members: list[TeamMember]) -> SiteSettings:
        return await ContentService.update_settings(db, SiteSettingsUpdate(team_members=members))

    @staticmethod
    async def get_page(db: AsyncSession, slug: str) -> PageResponse:
        """
        Get a static page by slug.

        A page with default content that has never been saved is created
        from the default. Unknown slugs yield a "Page Not Found" page.

        Args:
            db: Database session
            slug: Page slug, e.g. terms-of-service

        Returns:
            PageResponse
        """
        page = await ContentRepository.get_page(db, slug)
        if page is not None:
            return PageResponse.model_validate(page)

        default = DEFAULT_PAGES.get(slug)
        if default is None:
            return PageResponse(slug=slug, title=PAGE_NOT_FOUND_TITLE, content="")

        page = await ContentRepository.save_page(db, Page(slug=slug, **default))
        logger.info(f"Page '{slug}' created from defaults")
        return PageResponse.model_validate(page)

    @staticmethod
    async def update_page(db: AsyncSession, slug: str, data: PageUpdate) -> PageResponse:
        current = await ContentService.get_page(db, slug)
        values = current.model_dump()
        values.update(data.model_dump(exclude_unset=True, exclude_none=True))
        if values["title"] == PAGE_NOT_FOUND_TITLE and data.title is None:
            values["title"] = slug.replace("-", " ").title()
        page = await ContentRepository.save_page(db, Page(**values))
        return PageResponse.model_validate(page)
