"""Site settings, static pages and email template routes."""

from fastapi import APIRouter

from app.api.deps import DB, AdminSession
from app.schemas.content import EmailTemplateUpdate, PageUpdate, SiteSettingsUpdate, TeamMember
from app.services.content_service import ContentService
from app.services.email_service import EmailService
from app.utils.envelopes import api_success

router = APIRouter(tags=["content"])


@router.get("/content/settings", response_model=dict)
async def get_site_settings(db: DB):
    """Global site settings merged over the defaults."""
    return api_success(await ContentService.get_settings(db))


@router.patch("/admin/content/settings", response_model=dict)
async def update_site_settings(payload: SiteSettingsUpdate, session: AdminSession, db: DB):
    return api_success(await ContentService.update_settings(db, payload))


@router.put("/admin/content/team", response_model=dict)
async def update_team_members(payload: list[TeamMember], session: AdminSession, db: DB):
    return api_success(await ContentService.update_team_members(db, payload))


@router.get("/content/pages/{slug}", response_model=dict)
async def get_page(slug: str, db: DB):
    return api_success(await ContentService.get_page(db, slug))


@router.put("/admin/content/pages/{slug}", response_model=dict)
async def update_page(slug: str, payload: PageUpdate, session: AdminSession, db: DB):
    return api_success(await ContentService.update_page(db, slug, payload))


@router.get("/admin/email-templates", response_model=dict)
async def list_email_templates(session: AdminSession, db: DB):
    return api_success(await EmailService.list_templates(db))


@router.get("/admin/email-templates/{template_id}", response_model=dict)
async def get_email_template(template_id: str, session: AdminSession, db: DB):
    return api_success(await EmailService.get_template_response(db, template_id))


@router.put("/admin/email-templates/{template_id}", response_model=dict)
async def update_email_template(template_id: str, payload: EmailTemplateUpdate, session: AdminSession, db: DB):
    return api_success(await EmailService.update_template(db, template_id, payload))
