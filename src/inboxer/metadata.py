"""Header metadata extraction.

Maps a fixed set of header names onto :class:`inboxer.models.PartialMetadata`.
Matching is exact and case-sensitive. Repeatable headers accumulate every
value in order; the rest keep the last value seen.
"""

from .models import Message, PartialMetadata

# header name -> (field, repeatable)
_HEADER_FIELDS = {
    "Sender": ("sender", False),
    "From": ("from_address", False),
    "Subject": ("subject", False),
    "Mailing-list": ("mailing_list", False),
    "CC": ("cc", True),
    "To": ("to", True),
    "Thread-Topic": ("thread_topic", True),
    "Delivered-To": ("delivered_to", True),
}


def get_partial_metadata(message: Message) -> PartialMetadata:
    """Get useful metadata from the message headers.

    Args:
        message: Fully fetched message.

    Returns:
        PartialMetadata: Extracted fields; absent headers leave defaults.
    """
    info = PartialMetadata()
    for header in message.payload.headers:
        target = _HEADER_FIELDS.get(header.name)
        if target is None:
            continue
        field, repeatable = target
        if repeatable:
            getattr(info, field).append(header.value)
        else:
            setattr(info, field, header.value)
    return info
