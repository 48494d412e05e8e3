"""Gmail OAuth2 authentication.

Objective:
    Provide a small, reusable authentication layer for the Gmail API. This
    module is responsible for acquiring, caching and refreshing the OAuth2
    token that :mod:`inboxer.service` hands to the Google API client.

Responsibilities:
    - Read and validate the OAuth client secrets file.
    - Perform the interactive authorization-code exchange when no cached token
      is available (first-time setup).
    - Reload the cached token for service construction and refresh it when it
      has expired.

High-level call tree:
    - :class:`GmailAuthenticator`
        - :meth:`GmailAuthenticator.setup`
            - :func:`load_client_config`
            - :meth:`GmailAuthenticator._build_flow`
            - :meth:`GmailAuthenticator._get_token_from_web`
            - :meth:`TokenStore.save`
        - :meth:`GmailAuthenticator.load_credentials`
            - :func:`load_client_config`
            - :meth:`TokenStore.load`
            - :meth:`GmailAuthenticator._refresh`

Operational notes:
    - Setup requires user interaction (open URL in browser, paste code back).
      Run ``inboxer-setup`` once before using the library.
    - Failures in the interactive flow raise :class:`AuthorizationError` instead
      of terminating the process, so setup can be driven headlessly.
"""

import json
import logging
from pathlib import Path
from typing import Any, Callable, Optional

from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow

from .config import Settings
from .token_store import TokenNotFoundError, TokenStore

logger = logging.getLogger(__name__)

# Out-of-band redirect used when the client secrets carry no redirect URI
OOB_REDIRECT_URI = "urn:ietf:wg:oauth:2.0:oob"
AUTH_STATE = "state-token"


class AuthorizationError(RuntimeError):
    """Raised when the interactive authorization flow cannot complete."""


def load_client_config(path: Path | str) -> dict[str, Any]:
    """Read an OAuth client secrets file.

    Args:
        path: Path to the JSON file downloaded from the Google Cloud console.

    Returns:
        dict[str, Any]: Parsed client configuration.

    Raises:
        OSError: If the file cannot be read.
        ValueError: If the file is not JSON or is not a web/installed client.
    """
    with open(path, encoding="utf-8") as f:
        config = json.load(f)

    if not isinstance(config, dict) or not ({"installed", "web"} & config.keys()):
        raise ValueError(
            f"Client secrets at {path} must contain an 'installed' or 'web' section"
        )
    return config


class GmailAuthenticator:
    """
    Handles Gmail OAuth2 authentication using google-auth.

    Attributes:
        settings: Library settings (scopes, credentials path, token location).
        token_store: Token cache the authenticator reads and writes.
    """

    def __init__(self, settings: Settings, token_store: Optional[TokenStore] = None) -> None:
        """
        Initialize the authenticator with settings.

        Args:
            settings: Library settings.
            token_store: Token cache; defaults to one at
                ``settings.token_cache_path``.
        """
        self.settings = settings
        self.token_store = token_store or TokenStore(settings.token_cache_path)

    def _credentials_path(self, credentials_path: Optional[Path | str]) -> Path:
        path = credentials_path or self.settings.credentials_path
        if not path:
            raise ValueError(
                "No credentials file given; pass a path or set INBOXER_CREDENTIALS_PATH"
            )
        return Path(path).expanduser()

    def _redirect_uri(self, client_config: dict[str, Any]) -> str:
        if self.settings.redirect_uri:
            return self.settings.redirect_uri
        section = client_config.get("installed") or client_config.get("web") or {}
        redirect_uris = section.get("redirect_uris") or []
        return redirect_uris[0] if redirect_uris else OOB_REDIRECT_URI

    def _build_flow(self, client_config: dict[str, Any]) -> InstalledAppFlow:
        return InstalledAppFlow.from_client_config(
            client_config,
            scopes=self.settings.scopes,
            redirect_uri=self._redirect_uri(client_config),
        )

    def _get_token_from_web(
        self, flow: InstalledAppFlow, prompt: Callable[[str], str]
    ) -> Credentials:
        """
        Run the console authorization-code exchange.

        Args:
            flow: OAuth flow built from the client secrets.
            prompt: Callable used to read the pasted code (``input`` by default).

        Returns:
            Credentials: Credentials returned by the token endpoint.

        Raises:
            AuthorizationError: If the code cannot be read or exchanged.
        """
        auth_url, _ = flow.authorization_url(access_type="offline", state=AUTH_STATE)
        print(
            "Go to the following link in your browser then type the authorization code: \n"
            f"{auth_url}"
        )

        try:
            code = prompt("Type the code you got on the URL: ")
        except (EOFError, KeyboardInterrupt, OSError) as e:
            raise AuthorizationError(f"unable to read authorization code: {e}") from e

        code = (code or "").strip()
        if not code:
            raise AuthorizationError("unable to read authorization code: empty input")

        try:
            flow.fetch_token(code=code)
        except Exception as e:
            logger.error(f"Token exchange failed: {e}")
            raise AuthorizationError(f"unable to retrieve token from web: {e}") from e

        return flow.credentials

    def setup(
        self,
        credentials_path: Optional[Path | str] = None,
        prompt: Callable[[str], str] = input,
    ) -> Optional[Credentials]:
        """
        Create the token cache unless a readable one is already present.

        An empty or corrupt cache file does not count as present and is
        replaced by a fresh authorization.

        This needs human intervention, so it is normally invoked through the
        ``inboxer-setup`` entrypoint before the library is used.

        Args:
            credentials_path: Client secrets file (defaults to settings).
            prompt: Callable used to read the authorization code.

        Returns:
            Optional[Credentials]: New credentials, or None if a token was
            already cached.

        Raises:
            OSError: If the client secrets file cannot be read.
            ValueError: If the client secrets file is malformed.
            AuthorizationError: If the interactive exchange fails.
        """
        if self._has_usable_token():
            logger.info("gmail service credentials already set")
            return None

        client_config = load_client_config(self._credentials_path(credentials_path))
        flow = self._build_flow(client_config)

        creds = self._get_token_from_web(flow, prompt)
        print(f"saving credential file to: {self.token_store.path}")
        self.token_store.save(creds)
        logger.info("gmail service credentials set")
        return creds

    def _has_usable_token(self) -> bool:
        try:
            self.token_store.load()
        except TokenNotFoundError:
            return False
        except ValueError as e:
            logger.warning(f"Ignoring unreadable token cache {self.token_store.path}: {e}")
            return False
        return True

    def _refresh(self, creds: Credentials) -> Credentials:
        logger.debug("Cached token expired; refreshing")
        creds.refresh(Request())
        self.token_store.save(creds)
        logger.info(f"Refreshed token saved to {self.token_store.path}")
        return creds

    def load_credentials(self, credentials_path: Optional[Path | str] = None) -> Credentials:
        """
        Load cached credentials for service construction.

        The client secrets file is read and validated first, then the cached
        token is loaded. An expired token with a refresh token is refreshed and
        written back to the cache.

        Args:
            credentials_path: Client secrets file (defaults to settings).

        Returns:
            Credentials: Credentials ready for the Gmail API client.

        Raises:
            OSError: If the client secrets file cannot be read.
            ValueError: If the client secrets or token file is malformed.
            TokenNotFoundError: If setup has not been run yet.
        """
        load_client_config(self._credentials_path(credentials_path))

        creds = self.token_store.load(self.settings.scopes)
        if creds.expired and creds.refresh_token:
            creds = self._refresh(creds)
        return creds

    def logout(self) -> None:
        """Remove the cached token so the next setup re-authorizes."""
        self.token_store.delete()
