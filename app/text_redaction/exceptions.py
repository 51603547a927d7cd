class TextRedactionError(Exception):
    """Raised when text redaction fails."""


class TextRedactionResponseError(TextRedactionError):
    """Raised when the AI response cannot be turned into a redaction result."""


class TextRedactionNetworkError(TextRedactionError):
    """Raised when the AI provider call fails due to network/infrastructure issues."""
