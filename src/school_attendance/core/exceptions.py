class DomainError(Exception):
    """Base class for errors the HTTP layer turns into a 4xx response."""


class ValidationError(DomainError):
    """Missing fields, malformed dates, unknown statuses and duplicate keys."""


class NotFoundError(DomainError):
    """A referenced student, class, admin or attendance row does not exist."""


class AuthenticationError(DomainError):
    """Wrong email, student code or password."""
