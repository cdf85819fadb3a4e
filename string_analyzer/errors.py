class StringAnalyzerError(Exception):
    """Base class for errors raised by the string analyzer core"""


class ValidationError(StringAnalyzerError):
    """Input is missing, empty or all-whitespace"""


class InvalidTypeError(ValidationError):
    """Input is present but is not a string"""


class ConflictError(StringAnalyzerError):
    """A record with the same value already exists"""


class NotFoundError(StringAnalyzerError):
    """No record with the requested value exists"""


class InvalidQueryError(StringAnalyzerError):
    """Natural language query is missing or not text"""


class PersistenceWarning(RuntimeWarning):
    """Durable read or write failed; the in-memory collection is still usable"""
