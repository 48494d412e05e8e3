"""Application configuration and settings.

Objective:
    Provide a single source of truth for runtime configuration used across the
    library (OAuth client secrets, scopes, token cache location, and the Gmail
    user/label identifiers the service operates on).

Responsibilities:
    - Load environment-driven settings via :class:`Settings` (Pydantic
      BaseSettings).
    - Derive the token cache path from the configured directory and filename.

High-level call tree:
    - :func:`get_settings` -> returns :class:`Settings`
    - :class:`Settings`
        - :attr:`Settings.token_cache_path`

Operational notes:
    - ``Settings`` loads from ``.env`` by default via ``pydantic-settings``.
      Environment variables use the ``INBOXER_`` prefix.
    - Every component accepts a ``Settings`` object explicitly; the token cache
      location is therefore a value passed into the service, never a global.
"""

from pathlib import Path
from typing import Optional
from urllib.parse import quote_plus
import logging

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

# Full read/write/delete access to the mailbox
MAIL_GOOGLE_COM_SCOPE = "https://mail.google.com/"
GMAIL_READONLY_SCOPE = "https://www.googleapis.com/auth/gmail.readonly"
GMAIL_MODIFY_SCOPE = "https://www.googleapis.com/auth/gmail.modify"

DEFAULT_TOKEN_FILE = "gmail-token.json"


def _default_token_dir() -> Path:
    return Path.home() / ".credentials"


class Settings(BaseSettings):
    """
    Library settings loaded from environment variables.

    Attributes:
        credentials_path: Path to the OAuth client secrets JSON downloaded
            from the Google Cloud console.
        scopes: OAuth scopes requested during authorization.
        token_dir: Directory holding the cached token.
        token_file: Token cache filename (URL-encoded on disk).
        user_id: Gmail user id the API calls act on.
        unread_label: Label id marking unread mail.
        redirect_uri: Optional override for the OAuth redirect URI.
        log_level: Logging level.
    """

    model_config = SettingsConfigDict(
        env_prefix="INBOXER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    credentials_path: Optional[Path] = Field(
        default=None, description="OAuth client secrets JSON file"
    )
    scopes: list[str] = Field(
        default_factory=lambda: [MAIL_GOOGLE_COM_SCOPE],
        description="OAuth scopes requested for the Gmail API",
    )

    # Token cache
    token_dir: Path = Field(
        default_factory=_default_token_dir,
        description="Directory where the OAuth token is cached",
    )
    token_file: str = Field(
        default=DEFAULT_TOKEN_FILE, description="Token cache filename"
    )

    # Gmail API
    user_id: str = Field(default="me", description="Gmail user id ('me' is the authorized user)")
    unread_label: str = Field(default="UNREAD", description="Label id for unread mail")
    redirect_uri: Optional[str] = Field(
        default=None,
        description=(
            "Redirect URI used when building the authorization URL. "
            "Defaults to the first redirect URI in the client secrets file."
        ),
    )

    log_level: str = Field(default="INFO", description="Logging level")

    @property
    def token_cache_path(self) -> Path:
        """
        Full path of the cached token file.

        The filename is URL-encoded so that an arbitrary token name always maps
        to a single file inside :attr:`token_dir`.

        Returns:
            Path: Token cache file path.
        """
        return Path(self.token_dir).expanduser() / quote_plus(self.token_file)


def get_settings() -> Settings:
    """
    Load and return library settings.

    For tests, construct a :class:`Settings` instance directly instead.

    Returns:
        Settings: Settings instance.

    Raises:
        ValidationError: If an environment variable holds an invalid value.
    """
    return Settings()
