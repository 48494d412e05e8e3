"""Message body decoding.

Objective:
    Turn the base64url-encoded MIME parts of a Gmail message into text.

Responsibilities:
    - Decode base64url payload data (:func:`from_base64`).
    - Locate the first non-empty part of a requested MIME type
      (:func:`get_body`).
    - Convert the API's epoch-millisecond timestamps (:func:`received_time`).

Known limitations:
    - Only one level of ``multipart/alternative`` nesting is searched.
    - Single-part messages whose payload has no ``parts`` are not matched.
"""

import base64
import logging
from datetime import datetime, timezone
from typing import Optional

from .models import Message, MessagePart

logger = logging.getLogger(__name__)

MULTIPART_ALTERNATIVE = "multipart/alternative"


class BodyNotFoundError(LookupError):
    """Raised when a message has no non-empty part of the requested type."""


def from_base64(data: str) -> str:
    """Decode an email body from URL-safe base64 to a string.

    Args:
        data: base64url data, padded or not.

    Returns:
        str: Decoded text (invalid UTF-8 sequences are replaced).

    Raises:
        binascii.Error: If ``data`` is not valid base64.
    """
    padded = data + "=" * (-len(data) % 4)
    raw = base64.b64decode(padded, altchars=b"-_", validate=True)
    return raw.decode("utf-8", errors="replace")


def _matches(part: MessagePart, mime_type: str) -> bool:
    return part.mime_type == mime_type and part.body.size >= 1


def get_body(message: Message, mime_type: str) -> str:
    """Get, decode, and return the body of the email.

    ``mime_type`` selects the encoding ("text/plain" or "text/html"). Top-level
    parts are scanned in order; a ``multipart/alternative`` part has its
    children checked before the part itself.

    Args:
        message: Fully fetched message.
        mime_type: MIME type to look for.

    Returns:
        str: Decoded body.

    Raises:
        BodyNotFoundError: If no matching, non-empty part exists.
        binascii.Error: If the matching part's data is not valid base64.
    """
    for part in message.payload.parts:
        if part.mime_type == MULTIPART_ALTERNATIVE:
            for child in part.parts:
                if _matches(child, mime_type):
                    return from_base64(child.body.data)
        if _matches(part, mime_type):
            return from_base64(part.body.data)

    logger.debug(f"No {mime_type} body in message {message.id}")
    raise BodyNotFoundError("couldn't read body")


def received_time(internal_date: Optional[int]) -> datetime:
    """Convert an epoch-millisecond timestamp to a UTC datetime.

    Sub-second precision is dropped. Messages returned by a list call carry
    only ids, so pass ``internal_date`` from a fully fetched message.

    Args:
        internal_date: Milliseconds since the epoch (``internalDate``).

    Returns:
        datetime: Timezone-aware UTC datetime.

    Raises:
        ValueError: If ``internal_date`` is None.
    """
    if internal_date is None:
        raise ValueError("message has no internalDate; fetch the full message first")
    return datetime.fromtimestamp(int(internal_date) // 1000, tz=timezone.utc)
