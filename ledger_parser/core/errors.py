"""
Extraction failures reported to callers.

Noise lines, incomplete transactions and malformed numbers are not errors;
they are skipped, salvaged or zeroed inside the engine.
"""


class ExtractionError(ValueError):
    """Base class for failures that abort a whole extraction request."""


class InputMissingError(ExtractionError):
    """No document content was supplied."""


class NoExtractableContentError(ExtractionError):
    """The document yielded no usable text lines or table rows."""


class InvalidRateError(ExtractionError):
    """A currency conversion rate that is not a finite positive number."""
