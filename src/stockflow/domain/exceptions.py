"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the application and CLI layers can catch them uniformly and map them to
user-facing messages and status codes.
"""


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class RecipeNotFound(EntityNotFoundError):
    """No recipe exists with the requested ID."""


class RecordNotFound(EntityNotFoundError):
    """No conversion record exists with the requested ID."""


class InsufficientStock(ValidationError):
    """Available stock at a location cannot cover the requested quantity."""


class ConversionRejected(ValidationError):
    """A conversion failed pre-flight validation.

    Carries the same error list that ``validate`` reports so callers can
    show every reason at once.
    """

    def __init__(self, errors: list[str]) -> None:
        self.errors = list(errors)
        super().__init__("; ".join(self.errors) or "Conversion rejected")


class InvalidStateTransition(DomainException):
    """A conversion was asked to move to a state it cannot reach."""


class NoActiveLocations(DomainException):
    """The location directory returned no active locations."""


class UpstreamUnavailable(DomainException):
    """The upstream inventory API could not be reached or refused the call."""


class MalformedResponse(DomainException):
    """The upstream API returned a payload that could not be parsed."""
