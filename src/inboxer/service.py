"""Gmail API service handle.

Objective:
    Provide a thin wrapper around the Gmail API endpoints used by this library.
    All high-level operations are methods on :class:`GmailService`, which holds
    one authenticated ``googleapiclient`` resource.

Responsibilities:
    - Query the mailbox and hydrate each listed message with a full fetch.
    - Read label summaries and unread counts.
    - Modify message labels (mark as read).

High-level call tree:
    - Construction:
        - :meth:`GmailService.from_settings`
            - :meth:`GmailAuthenticator.load_credentials`
            - ``googleapiclient.discovery.build``
    - Public API:
        - :meth:`GmailService.query` -> :meth:`GmailService.messages_by_id`
        - :meth:`GmailService.get_messages` -> :meth:`GmailService.messages_by_id`
        - :meth:`GmailService.get_message`
        - :meth:`GmailService.check_for_unread` / :meth:`check_for_unread_by_label`
        - :meth:`GmailService.get_labels`
        - :meth:`GmailService.mark_as`
        - :meth:`GmailService.mark_all_as_read`
    - Internal helpers:
        - :meth:`GmailService._execute` (error logging)

Gmail endpoints used:
    - ``users.messages.list``
    - ``users.messages.get``
    - ``users.messages.modify``
    - ``users.labels.get``
    - ``users.labels.list``

Error handling:
    - ``HttpError`` is logged and re-raised from :meth:`_execute`; there is no
      retry or backoff.
    - A failed per-message fetch raises :class:`MessageFetchError`, which keeps
      the messages fetched before the failure.
"""

import logging
from typing import Any, Optional

from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from .auth import GmailAuthenticator
from .config import Settings, get_settings
from .models import Label, Message, ModifyMessageRequest

logger = logging.getLogger(__name__)


class MessageFetchError(RuntimeError):
    """Raised when fetching one of the listed messages fails.

    Args:
        message_id: Id of the message whose fetch failed.
        messages: Messages fetched before the failure, in provider order.
    """

    def __init__(self, message_id: str, messages: list[Message]) -> None:
        super().__init__(f"Failed to fetch message {message_id}")
        self.message_id = message_id
        self.messages = messages


class GmailService:
    """
    Client for Gmail mailbox operations.

    The handle is safe to reuse across sequential calls but is not designed for
    concurrent use.

    Attributes:
        resource: Authenticated Gmail API resource (``build("gmail", "v1")``).
        user_id: Gmail user id the calls act on.
        unread_label: Label id marking unread mail.
    """

    def __init__(self, resource: Any, user_id: str = "me", unread_label: str = "UNREAD") -> None:
        self.resource = resource
        self.user_id = user_id
        self.unread_label = unread_label

    @classmethod
    def from_settings(
        cls,
        settings: Optional[Settings] = None,
        authenticator: Optional[GmailAuthenticator] = None,
    ) -> "GmailService":
        """
        Build a service from the client secrets and the cached token.

        The cached token must already exist; run ``inboxer-setup`` first.

        Args:
            settings: Library settings (loads from env if None).
            authenticator: Authenticator to use (built from settings if None).

        Returns:
            GmailService: Ready-to-use service handle.

        Raises:
            TokenNotFoundError: If no token has been cached yet.
        """
        settings = settings or get_settings()
        authenticator = authenticator or GmailAuthenticator(settings)

        creds = authenticator.load_credentials()
        resource = build("gmail", "v1", credentials=creds, cache_discovery=False)
        logger.debug("Built Gmail API resource")
        return cls(resource, user_id=settings.user_id, unread_label=settings.unread_label)

    def _execute(self, request: Any) -> dict:
        """Execute a prepared API request.

        Args:
            request: ``HttpRequest`` returned by a resource method.

        Returns:
            dict: Decoded response body.

        Raises:
            HttpError: If the request fails.
        """
        try:
            return request.execute()
        except HttpError as e:
            logger.error(f"Gmail API error: {e.status_code} - {e.reason}")
            raise

    def _messages(self) -> Any:
        return self.resource.users().messages()

    def get_message(self, message_id: str) -> Message:
        """Fetch a single message in full.

        Args:
            message_id: Message id.

        Returns:
            Message: Fully populated message.
        """
        response = self._execute(self._messages().get(userId=self.user_id, id=message_id))
        return Message.model_validate(response)

    def messages_by_id(self, list_response: dict) -> list[Message]:
        """Fetch every message of a list response individually.

        ``messages.list`` only returns ids, so each message payload needs its
        own ``messages.get`` call.

        Args:
            list_response: Raw ``messages.list`` response.

        Returns:
            list[Message]: Messages in provider order.

        Raises:
            MessageFetchError: On the first failed fetch; carries the messages
                fetched so far.
        """
        messages: list[Message] = []
        for ref in list_response.get("messages", []):
            try:
                messages.append(self.get_message(ref["id"]))
            except HttpError as e:
                raise MessageFetchError(ref["id"], messages) from e
        return messages

    def query(self, query: str) -> list[Message]:
        """Query the mailbox using Gmail search syntax.

        Example: ``"in:sent after:2017/01/01 before:2017/01/30"``.

        Args:
            query: Gmail search expression.

        Returns:
            list[Message]: Matching messages, fully fetched.
        """
        logger.debug(f"Querying messages: {query!r}")
        response = self._execute(self._messages().list(userId=self.user_id, q=query))
        messages = self.messages_by_id(response)
        logger.debug(f"Fetched {len(messages)} messages")
        return messages

    def get_messages(self, count: int) -> list[Message]:
        """Fetch the most recent messages.

        Args:
            count: Maximum number of messages to fetch.

        Returns:
            list[Message]: Messages, fully fetched.

        Raises:
            ValueError: If ``count`` is negative.
        """
        if count < 0:
            raise ValueError(f"count must be non-negative, got {count}")

        logger.debug(f"Fetching up to {count} messages")
        response = self._execute(self._messages().list(userId=self.user_id, maxResults=count))
        return self.messages_by_id(response)

    def check_for_unread_by_label(self, label_id: str) -> int:
        """Count unread mail under a label.

        The count is the sum of unread messages and unread threads. Zero is a
        valid result.

        Note:
            It is common for a mailbox to hold thousands of unread messages the
            user is unaware of (query ``label:unread`` in Gmail to see them).
            Mark everything read first (:meth:`mark_all_as_read`) for the count
            to be meaningful.

        Args:
            label_id: Label id (e.g. ``"UNREAD"``, ``"INBOX"``).

        Returns:
            int: Unread messages plus unread threads.
        """
        response = self._execute(
            self.resource.users().labels().get(userId=self.user_id, id=label_id)
        )
        label = Label.model_validate(response)
        if label.messages_unread == 0 and label.threads_unread == 0:
            return 0
        return label.messages_unread + label.threads_unread

    def check_for_unread(self) -> int:
        """Count mail labeled with :attr:`unread_label`."""
        return self.check_for_unread_by_label(self.unread_label)

    def get_labels(self) -> list[Label]:
        """List the labels in the user's mailbox.

        Returns:
            list[Label]: Labels (counts are not populated by this endpoint).
        """
        response = self._execute(self.resource.users().labels().list(userId=self.user_id))
        return [Label.model_validate(item) for item in response.get("labels", [])]

    def mark_as(self, message: Message, request: ModifyMessageRequest) -> Message:
        """Apply label changes to a message.

        Args:
            message: Message to modify.
            request: Labels to add and remove.

        Returns:
            Message: Message as returned by the API after modification.
        """
        response = self._execute(
            self._messages().modify(
                userId=self.user_id, id=message.id, body=request.to_body()
            )
        )
        logger.debug(f"Modified labels on message {message.id}")
        return Message.model_validate(response)

    def mark_all_as_read(self) -> int:
        """Remove the unread label from every unread message.

        Stops at the first failed modification; messages already modified stay
        modified.

        Returns:
            int: Number of messages marked as read.
        """
        request = ModifyMessageRequest(remove_label_ids=[self.unread_label])

        messages = self.query(f"label:{self.unread_label}")
        for message in messages:
            self.mark_as(message, request)

        logger.info(f"Marked {len(messages)} messages as read")
        return len(messages)
