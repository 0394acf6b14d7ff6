"""Exceptions raised by the organizer."""


class OrganizerError(Exception):
    pass


class MissingInputError(OrganizerError):
    """A required value (text, API key or endpoint) is empty."""

    def __init__(self, field):
        super().__init__(f"missing required input: {field}")
        self.field = field


class ProcessingError(OrganizerError):
    """The Gemini request failed or returned something unusable."""

    def __init__(self, reason):
        super().__init__(reason)
        self.reason = reason
