"""Custom exceptions for the Kundli API."""


class KundliAPIException(Exception):
    """Base exception for all API errors."""
    pass


class InvalidInputError(KundliAPIException):
    """Raised when ascendant or longitude data is missing or malformed."""
    pass


class InvalidCoordinatesError(InvalidInputError):
    """Raised when coordinates are invalid."""
    pass


class InvalidTimezoneError(InvalidInputError):
    """Raised when timezone is invalid."""
    pass


class EphemerisUnavailableError(KundliAPIException):
    """Raised when the ephemeris collaborator fails to return a snapshot."""
    pass


class ChartCalculationError(KundliAPIException):
    """Raised when chart calculation fails."""
    pass
