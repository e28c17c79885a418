"""Application configuration with structured settings groups."""
from pydantic import BaseModel
from pydantic_settings import BaseSettings, SettingsConfigDict


# =============================================================================
# Nested Settings Models
# =============================================================================


class PaginationSettings(BaseModel):
    """Client listing page size defaults and bounds."""

    default_page_size: int = 10
    max_page_size: int = 100


class RecentSearchSettings(BaseModel):
    """
    Admin search history settings.

    limit: How many of the most recent searches the last-searches endpoint returns.
    """

    limit: int = 3


class AuthSettings(BaseModel):
    """
    Identity headers asserted by the upstream identity provider.

    The gateway in front of the API authenticates the caller and forwards the
    principal ID and role in these headers.
    """

    admin_id_header: str = "X-Admin-Id"
    role_header: str = "X-User-Role"
    admin_role: str = "Admin"


# =============================================================================
# Main Settings Class
# =============================================================================


class Settings(BaseSettings):
    """
    Application settings with nested configuration groups.

    Environment variables use double underscore as delimiter for nested values.
    Example: PAGINATION__MAX_PAGE_SIZE=50, RECENT_SEARCHES__LIMIT=5
    """

    # Application metadata
    app_name: str = "Banking Control Panel API"
    app_version: str = "1.0.0"

    # Database
    database_url: str = "postgresql+asyncpg://localhost/banking_control_panel"
    database_echo: bool = False

    # Nested settings groups
    pagination: PaginationSettings = PaginationSettings()
    recent_searches: RecentSearchSettings = RecentSearchSettings()
    auth: AuthSettings = AuthSettings()

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )
