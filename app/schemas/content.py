"""Site settings, static page and email template schemas."""

from typing import Optional

from pydantic import BaseModel, EmailStr, Field, HttpUrl, TypeAdapter, ValidationError, field_validator

_url_adapter = TypeAdapter(HttpUrl)
_email_adapter = TypeAdapter(EmailStr)


class TeamMember(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    role: str = Field("", max_length=255)
    avatar: str = Field("", max_length=2048, description="Image URL or empty")
    hint: str = Field("", max_length=255)

    @field_validator("avatar")
    @classmethod
    def _avatar_is_url(cls, value: str) -> str:
        if value:
            try:
                _url_adapter.validate_python(value)
            except ValidationError:
                raise ValueError("Avatar must be a valid URL or empty")
        return value


class SiteSettings(BaseModel):
    """Global site settings as served to clients (stored values over defaults)."""

    site_name: str
    site_description: str
    hero_title: str
    hero_subtitle: str
    facebook_url: str = ""
    twitter_url: str = ""
    instagram_url: str = ""
    linkedin_url: str = ""
    about_title: str
    about_subtitle: str
    about_mission: str
    about_vision: str
    about_team_title: str
    team_members: list[TeamMember] = Field(default_factory=list)
    contact_title: str
    contact_subtitle: str
    contact_email: str = ""
    contact_phone: str = ""
    contact_address: str = ""
    email_from_name: str = ""
    email_from_address: str = ""


class SiteSettingsUpdate(BaseModel):
    """Partial settings update; only supplied keys are merged."""

    site_name: Optional[str] = Field(None, max_length=255)
    site_description: Optional[str] = Field(None, max_length=2000)
    hero_title: Optional[str] = Field(None, max_length=255)
    hero_subtitle: Optional[str] = Field(None, max_length=2000)
    facebook_url: Optional[str] = None
    twitter_url: Optional[str] = None
    instagram_url: Optional[str] = None
    linkedin_url: Optional[str] = None
    about_title: Optional[str] = None
    about_subtitle: Optional[str] = None
    about_mission: Optional[str] = None
    about_vision: Optional[str] = None
    about_team_title: Optional[str] = None
    team_members: Optional[list[TeamMember]] = None
    contact_title: Optional[str] = None
    contact_subtitle: Optional[str] = None
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None
    contact_address: Optional[str] = None
    email_from_name: Optional[str] = None
    email_from_address: Optional[EmailStr] = None

    @field_validator("contact_email")
    @classmethod
    def _email_or_empty(cls, value: Optional[str]) -> Optional[str]:
        if value:
            try:
                _email_adapter.validate_python(value)
            except ValidationError:
                raise ValueError("Contact email must be a valid email or empty")
        return value


class PageResponse(BaseModel):
    slug: str
    title: str
    content: str = ""
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None

    class Config:
        from_attributes = True


class PageUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    content: Optional[str] = None
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None


class EmailTemplateResponse(BaseModel):
    id: str
    subject: str
    body: str
    is_enabled: bool

    class Config:
        from_attributes = True


class EmailTemplateUpdate(BaseModel):
    subject: Optional[str] = Field(None, min_length=1, max_length=500)
    body: Optional[str] = Field(None, min_length=1)
    is_enabled: Optional[bool] = None
