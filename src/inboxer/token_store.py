"""Filesystem-backed OAuth token cache.

Objective:
    Persist the Google OAuth credentials obtained during setup so that later
    service construction can run without user interaction.

Key points:
    - The token is stored as the JSON produced by
      ``google.oauth2.credentials.Credentials.to_json``.
    - The cache directory is created with ``0o700`` and the file written with
      ``0o600`` because it contains a refresh token.
    - There is no locking; concurrent writers race and the last one wins.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Optional, Sequence

from google.oauth2.credentials import Credentials

logger = logging.getLogger(__name__)


class TokenNotFoundError(FileNotFoundError):
    """Raised when no cached token exists yet.

    The setup entrypoint (``inboxer-setup``) must be run first.
    """


class TokenStore:
    """Read and write the cached OAuth token at a fixed path.

    Args:
        path: Token cache file path.
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path).expanduser()

    def exists(self) -> bool:
        """Return True if a cached token file is present."""
        return self.path.is_file()

    def load(self, scopes: Optional[Sequence[str]] = None) -> Credentials:
        """Load cached credentials.

        Args:
            scopes: Scopes to attach to the credentials. When None, the scopes
                stored in the token file are used.

        Returns:
            Credentials: Deserialized credentials.

        Raises:
            TokenNotFoundError: If the token file does not exist.
            ValueError: If the token file is not a valid authorized-user record.
        """
        if not self.exists():
            raise TokenNotFoundError(
                f"No cached token at {self.path}; run inboxer-setup first"
            )

        info = json.loads(self.path.read_text(encoding="utf-8"))
        creds = Credentials.from_authorized_user_info(
            info, list(scopes) if scopes else None
        )
        logger.debug(f"Loaded token from {self.path}")
        return creds

    def save(self, credentials: Credentials) -> None:
        """Write credentials to the cache file, replacing any previous token.

        Args:
            credentials: Credentials to persist.
        """
        self.path.parent.mkdir(mode=0o700, parents=True, exist_ok=True)

        fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(credentials.to_json())
        logger.debug(f"Saved token to {self.path}")

    def delete(self) -> None:
        """Remove the cached token, if any."""
        if self.exists():
            self.path.unlink()
            logger.debug("Cleared token cache")
