"""Exceptions raised by the summary pipeline."""


class DocumentValidationError(ValueError):
    """Raised when a document cannot be summarized at all."""
