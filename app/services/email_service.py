"""Transactional email: template storage, placeholder rendering and delivery.

Delivery goes through the Resend HTTP API. Sending never raises: an
unconfigured provider, a disabled template or a provider failure is
logged and reported as False so callers can treat email as best effort.
"""

import html
import logging
import re
from typing import Any, Optional

import httpx
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.database.content_repo import ContentRepository
from app.models.models import EmailTemplate
from app.schemas.content import EmailTemplateResponse, EmailTemplateUpdate
from app.services.content_defaults import DEFAULT_EMAIL_TEMPLATES
from app.services.content_service import ContentService
from app.utils.exceptions import NotFoundException

logger = logging.getLogger(__name__)

_PLACEHOLDER = re.compile(r"\{\{\s*(\w+)\s*\}\}")


def render_template(text: str, props: dict[str, Any], escape_html: bool = False) -> str:
    """Replace {{key}} placeholders with props values; unknown keys are left as they are.

    With escape_html the values are HTML-escaped, for bodies that embed user input.
    """

    def _replace(match: re.Match) -> str:
        key = match.group(1)
        if key not in props or props[key] is None:
            return match.group(0)
        value = str(props[key])
        return html.escape(value) if escape_html else value

    return _PLACEHOLDER.sub(_replace, text)


class EmailService:
    """Service for email templates and delivery."""

    @staticmethod
    async def get_template(db: AsyncSession, template_id: str) -> Optional[EmailTemplate]:
        """Stored template, created from its default on first read. None for unknown ids."""
        template = await ContentRepository.get_template(db, template_id)
        if template is not None:
            return template
        default = DEFAULT_EMAIL_TEMPLATES.get(template_id)
        if default is None:
            return None
        template = await ContentRepository.save_template(db, EmailTemplate(id=template_id, **default))
        logger.info(f"Email template '{template_id}' created from defaults")
        return template

    @staticmethod
    async def list_templates(db: AsyncSession) -> list[EmailTemplateResponse]:
        for template_id in DEFAULT_EMAIL_TEMPLATES:
            await EmailService.get_template(db, template_id)
        return [EmailTemplateResponse.model_validate(t) for t in await ContentRepository.list_templates(db)]

    @staticmethod
    async def get_template_response(db: AsyncSession, template_id: str) -> EmailTemplateResponse:
        template = await EmailService.get_template(db, template_id)
        if template is None:
            raise NotFoundException(f"Email template '{template_id}' not found")
        return EmailTemplateResponse.model_validate(template)

    @staticmethod
    async def update_template(
        db: AsyncSession, template_id: str, data: EmailTemplateUpdate
    ) -> EmailTemplateResponse:
        template = await EmailService.get_template(db, template_id)
        if template is None:
            raise NotFoundException(f"Email template '{template_id}' not found")
        for field, value in data.model_dump(exclude_unset=True, exclude_none=True).items():
            setattr(template, field, value)
        template = await ContentRepository.save_template(db, template)
        return EmailTemplateResponse.model_validate(template)

    @staticmethod
    async def _deliver(sender: str, to: str, subject: str, html: str) -> bool:
        payload = {"from": sender, "to": [to], "subject": subject, "html": html}
        headers = {"Authorization": f"Bearer {settings.EMAIL_API_KEY}", "Content-Type": "application/json"}
        try:
            async with httpx.AsyncClient(timeout=settings.EMAIL_TIMEOUT_SECONDS) as client:
                response = await client.post(settings.EMAIL_API_URL, json=payload, headers=headers)
        except httpx.HTTPError:
            logger.exception("Error calling email provider")
            return False

        if response.status_code >= 300:
            logger.error(
                "Email provider returned %s: %s",
                response.status_code,
                response.text[:200],
            )
            return False
        return True

    @staticmethod
    async def send_email(db: AsyncSession, template_id: str, to: Optional[str], props: dict[str, Any]) -> bool:
        """
        Render a stored template and send it.

        Args:
            db: Database session
            template_id: Template slug, e.g. order-confirmation
            to: Recipient address
            props: Placeholder values; siteName and contactEmail are added

        Returns:
            True when the provider accepted the message, False otherwise
        """
        if not settings.EMAIL_API_KEY:
            logger.warning(f"Email provider is not configured; skipping '{template_id}'")
            return False
        if not to:
            logger.warning(f"No recipient for '{template_id}'; skipping")
            return False

        try:
            template = await EmailService.get_template(db, template_id)
            if template is None or not template.is_enabled:
                logger.info(f"Email template '{template_id}' is disabled or not found. Skipping send.")
                return False

            site = await ContentService.get_settings(db)
            all_props = {**props, "siteName": site.site_name, "contactEmail": site.contact_email}
            from_name = site.email_from_name or settings.EMAIL_FROM_NAME or site.site_name
            from_address = site.email_from_address or settings.EMAIL_FROM_ADDRESS

            subject = render_template(template.subject, all_props)
            body = render_template(template.body, all_props, escape_html=True)
        except Exception:
            logger.error(f"A system failure occurred @send_email: {template_id}", exc_info=True)
            return False

        sent = await EmailService._deliver(f"{from_name} <{from_address}>", to, subject, body)
        if sent:
            logger.info(f"Email '{template_id}' sent to {to}")
        return sent
