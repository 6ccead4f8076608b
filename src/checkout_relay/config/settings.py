"""Application configuration schema and validation."""

from typing import Any, Literal

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppConfig(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    env: Literal["dev", "staging", "prod"] = Field(
        default="dev",
        description="Application environment",
    )
    stripe_secret_key: SecretStr = Field(
        ...,
        description="Stripe secret API key",
    )
    stripe_webhook_secret: SecretStr = Field(
        ...,
        description="Signing secret of the Stripe webhook endpoint",
    )
    success_url: str = Field(
        ...,
        description="Redirect URL after a successful checkout",
    )
    cancel_url: str = Field(
        ...,
        description="Redirect URL after a cancelled checkout",
    )
    currency: str = Field(
        default="usd",
        min_length=3,
        max_length=3,
        description="ISO currency code for checkout line items",
    )
    host: str = Field(
        default="0.0.0.0",
        description="Bind address for the HTTP server",
    )
    port: int = Field(
        default=3000,
        ge=1,
        le=65535,
        description="Listen port for the HTTP server",
    )
    orders_collection: str = Field(
        default="orders",
        min_length=1,
        description="Firestore collection receiving paid orders",
    )
    cors_allow_origin: str = Field(
        default="*",
        description="Value of the Access-Control-Allow-Origin header",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    firebase_project_id: str = Field(default="", description="Firebase project ID")
    firebase_private_key_id: str = Field(default="", description="Service account key ID")
    firebase_private_key: SecretStr = Field(
        default=SecretStr(""),
        description="Service account private key (PEM, '\\n' escapes allowed)",
    )
    firebase_client_email: str = Field(default="", description="Service account email")
    firebase_client_id: str = Field(default="", description="Service account client ID")
    firebase_auth_uri: str = Field(
        default="https://accounts.google.com/o/oauth2/auth",
        description="OAuth2 auth URI",
    )
    firebase_token_uri: str = Field(
        default="https://oauth2.googleapis.com/token",
        description="OAuth2 token URI",
    )
    firebase_auth_provider_cert_url: str = Field(
        default="https://www.googleapis.com/oauth2/v1/certs",
        description="OAuth2 provider certificate URL",
    )
    firebase_client_cert_url: str = Field(
        default="",
        description="Service account certificate URL",
    )

    @field_validator("currency")
    @classmethod
    def normalize_currency(cls, v: str) -> str:
        """Stripe expects lowercase currency codes."""
        return v.lower()

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.upper()

    @field_validator("firebase_private_key")
    @classmethod
    def unescape_private_key(cls, v: SecretStr) -> SecretStr:
        """Turn literal '\\n' sequences from single-line env values into newlines."""
        return SecretStr(v.get_secret_value().replace("\\n", "\n"))

    def firebase_service_account(self) -> dict[str, Any]:
        """Build the service account mapping for firebase_admin.credentials."""
        return {
            "type": "service_account",
            "project_id": self.firebase_project_id,
            "private_key_id": self.firebase_private_key_id,
            "private_key": self.firebase_private_key.get_secret_value(),
            "client_email": self.firebase_client_email,
            "client_id": self.firebase_client_id,
            "auth_uri": self.firebase_auth_uri,
            "token_uri": self.firebase_token_uri,
            "auth_provider_x509_cert_url": self.firebase_auth_provider_cert_url,
            "client_x509_cert_url": self.firebase_client_cert_url,
        }


_config: AppConfig | None = None


def get_config() -> AppConfig:
    """Get or create the singleton AppConfig instance."""
    global _config
    if _config is None:
        _config = AppConfig()
    return _config
