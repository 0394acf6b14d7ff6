"""WhatsApp message organizer.

Paste raw WhatsApp messages, send them to Gemini with the organizing prompt
and get back formatted agency cards.
"""

from .counter import count_message_blocks, split_message_blocks
from .errors import MissingInputError, OrganizerError, ProcessingError
from .prompts import ProcessingOptions, build_request_text
from .session import Notice, OrganizeRequest, ProcessingSession
from .settings import Settings, SettingsStore

__all__ = [
    "count_message_blocks",
    "split_message_blocks",
    "MissingInputError",
    "OrganizerError",
    "ProcessingError",
    "ProcessingOptions",
    "build_request_text",
    "Notice",
    "OrganizeRequest",
    "ProcessingSession",
    "Settings",
    "SettingsStore",
]
