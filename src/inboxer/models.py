"""Pydantic data models used across the library.

Objective:
    Centralize the typed views of Gmail API resources and the metadata record
    extracted from message headers:
    - Message resources returned by ``users.messages.get``
    - Label resources returned by ``users.labels.get``/``list``
    - Modify requests sent to ``users.messages.modify``
    - Header metadata produced by :mod:`inboxer.metadata`

Design notes:
    - These models use Pydantic aliases to match Gmail API field names
      (e.g. ``mimeType`` -> :attr:`MessagePart.mime_type`).
    - ``model_config = ConfigDict(populate_by_name=True)`` allows constructing
      models with either alias names or pythonic field names.
    - Messages are transient, read-only copies of provider data.

High-level structure:
    - Message primitives:
        - :class:`MessagePartHeader`
        - :class:`MessagePartBody`
        - :class:`MessagePart`
        - :class:`Message`
    - Label primitives:
        - :class:`Label`
        - :class:`ModifyMessageRequest`
    - Extraction output:
        - :class:`PartialMetadata`
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class MessagePartHeader(BaseModel):
    """A single ``{"name": ..., "value": ...}`` header entry."""

    name: str = ""
    value: str = ""


class MessagePartBody(BaseModel):
    """Body of a MIME part.

    ``data`` is base64url-encoded. Attachments carry an ``attachmentId``
    instead of inline data.
    """

    size: int = 0
    data: str = ""
    attachment_id: Optional[str] = Field(default=None, alias="attachmentId")

    model_config = ConfigDict(populate_by_name=True)


class MessagePart(BaseModel):
    """
    A MIME part of a message payload.

    The top-level payload is itself a part; ``multipart/*`` parts carry child
    parts in :attr:`parts`.

    Attributes:
        part_id: Immutable id of the part.
        mime_type: MIME type (e.g. ``text/plain``, ``multipart/alternative``).
        filename: Filename for attachment parts.
        headers: Headers in the order the provider returned them.
        body: Part body.
        parts: Child MIME parts.
    """

    part_id: str = Field(default="", alias="partId")
    mime_type: str = Field(default="", alias="mimeType")
    filename: str = ""
    headers: list[MessagePartHeader] = Field(default_factory=list)
    body: MessagePartBody = Field(default_factory=MessagePartBody)
    parts: list["MessagePart"] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True)


class Message(BaseModel):
    """
    Gmail message resource.

    List results only carry ``id``/``threadId``; a full fetch populates the
    payload.

    Attributes:
        id: Immutable message id.
        thread_id: Id of the thread the message belongs to.
        label_ids: Labels applied to the message.
        snippet: Short part of the message text.
        history_id: Id of the last history record that modified the message.
        internal_date: Internal creation timestamp in epoch milliseconds.
        size_estimate: Estimated size in bytes.
        payload: Parsed MIME structure.
    """

    id: str
    thread_id: str = Field(default="", alias="threadId")
    label_ids: list[str] = Field(default_factory=list, alias="labelIds")
    snippet: str = ""
    history_id: Optional[str] = Field(default=None, alias="historyId")
    internal_date: Optional[int] = Field(default=None, alias="internalDate")
    size_estimate: int = Field(default=0, alias="sizeEstimate")
    payload: MessagePart = Field(default_factory=MessagePart)

    model_config = ConfigDict(populate_by_name=True)

    @property
    def headers(self) -> list[MessagePartHeader]:
        """Top-level payload headers."""
        return self.payload.headers


class Label(BaseModel):
    """
    Gmail label with aggregate counts.

    Counts are only present on ``labels.get`` responses; ``labels.list``
    returns names and ids only, so they default to 0.
    """

    id: str
    name: str = ""
    type: str = ""
    messages_total: int = Field(default=0, alias="messagesTotal")
    messages_unread: int = Field(default=0, alias="messagesUnread")
    threads_total: int = Field(default=0, alias="threadsTotal")
    threads_unread: int = Field(default=0, alias="threadsUnread")

    model_config = ConfigDict(populate_by_name=True)


class ModifyMessageRequest(BaseModel):
    """Label changes applied by ``users.messages.modify``."""

    add_label_ids: list[str] = Field(default_factory=list, alias="addLabelIds")
    remove_label_ids: list[str] = Field(default_factory=list, alias="removeLabelIds")

    model_config = ConfigDict(populate_by_name=True)

    def to_body(self) -> dict[str, list[str]]:
        """Serialize to the camelCase request body expected by the API."""
        return self.model_dump(by_alias=True)


class PartialMetadata(BaseModel):
    """
    Useful metadata pulled from message headers.

    Some fields may sound redundant but have different contexts. Headers that
    can legitimately repeat are kept as lists in encounter order.

    Attributes:
        sender: Entity that originally created and sent the message.
        from_address: Entity that sent the message to you (e.g. a mailing
            list relay). Often only differs from ``sender`` for lists.
        subject: Message subject.
        mailing_list: Name of the mailing list the message was posted to.
        cc: "Carbon copy" address lists.
        to: Recipient address lists.
        thread_topic: Thread topics (e.g. Google Groups threads).
        delivered_to: Delivery addresses; several when the mail was forwarded.
    """

    sender: str = ""
    from_address: str = ""
    subject: str = ""
    mailing_list: str = ""
    cc: list[str] = Field(default_factory=list)
    to: list[str] = Field(default_factory=list)
    thread_topic: list[str] = Field(default_factory=list)
    delivered_to: list[str] = Field(default_factory=list)
