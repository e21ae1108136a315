"""Exception hierarchy for recipe conversions."""


class ConversionError(Exception):
    """Base error for a failed conversion."""


class MalformedRootError(ConversionError):
    """Raised when the document root is neither an object nor an array."""


class ParseError(ConversionError):
    """Raised when the input stops being well-formed JSON mid-stream."""


class OutputIOError(ConversionError):
    """Raised when the converted output cannot be written to its destination."""
