"""Gmail inbox client package.

Objective:
    Provide a small Python library for checking and managing a Gmail inbox
    through the Gmail REST API:
    - Authorize once (OAuth2 code exchange) and cache the token on disk.
    - Query and fetch messages, extract header metadata, decode bodies.
    - Count unread mail and mark mail as read.

Key modules:
    - :mod:`inboxer.config`:
        Environment-driven settings (token location, scopes, user id).
    - :mod:`inboxer.token_store`:
        Filesystem token cache.
    - :mod:`inboxer.auth`:
        OAuth2 setup flow and cached credential loading.
    - :mod:`inboxer.service`:
        :class:`GmailService` handle for query/fetch/label/mark operations.
    - :mod:`inboxer.metadata` / :mod:`inboxer.body`:
        Header metadata extraction and body decoding.
    - :mod:`inboxer.cli`:
        ``inboxer-setup`` entrypoint.
"""

from .auth import AuthorizationError, GmailAuthenticator
from .body import BodyNotFoundError, from_base64, get_body, received_time
from .config import Settings, get_settings
from .metadata import get_partial_metadata
from .models import Label, Message, ModifyMessageRequest, PartialMetadata
from .service import GmailService, MessageFetchError
from .token_store import TokenNotFoundError, TokenStore

__version__ = "0.1.0"

__all__ = [
    "AuthorizationError",
    "BodyNotFoundError",
    "GmailAuthenticator",
    "GmailService",
    "Label",
    "Message",
    "MessageFetchError",
    "ModifyMessageRequest",
    "PartialMetadata",
    "Settings",
    "TokenNotFoundError",
    "TokenStore",
    "from_base64",
    "get_body",
    "get_partial_metadata",
    "get_settings",
    "received_time",
]
