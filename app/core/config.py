from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
	model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

	APP_NAME: str = Field(default="Prepify API")
	DEBUG: bool = Field(default=False)
	API_PREFIX: str = Field(default="")

	# Database
	DATABASE_URL: str = Field(default="")

	# Tokens issued by the auth provider
	JWT_SECRET: str = Field(default="dev-change-me")
	JWT_ALGORITHM: str = Field(default="HS256")
	JWT_AUDIENCE: str = Field(default="")
	ADMIN_ROLE: str = Field(default="admin")

	# Plan assigned to new profiles
	DEFAULT_PLAN_NAME: str = Field(default="Free Explorer")

	# Front-end locations used in redirect hints
	SITE_NAME: str = Field(default="Prepify")
	SITE_URL: str = Field(default="http://localhost:3000")
	PRICING_PATH: str = Field(default="/pricing")
	SUBSCRIPTION_PATH: str = Field(default="/account/subscription")

	# Transactional email provider (HTTP API)
	EMAIL_API_URL: str = Field(default="https://api.resend.com/emails")
	EMAIL_API_KEY: str = Field(default="")
	EMAIL_FROM_NAME: str = Field(default="")
	EMAIL_FROM_ADDRESS: str = Field(default="noreply@prepify.app")
	EMAIL_TIMEOUT_SECONDS: float = Field(default=10.0)

	# Azure Monitor / Application Insights
	AZURE_MONITOR_CONN_STR: str = Field(default="")
	ENABLE_APP_INSIGHTS: bool = Field(default=True)
	SAMPLING_RATIO: float = Field(default=1.0)


settings = Settings()
