class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class NotFoundError(DomainError):
    """Raised when a referenced record does not exist."""


class StateTransitionError(DomainError):
    """Raised when a leave request or claim is moved along an edge its workflow does not allow."""


class AggregationError(DomainError):
    """A batched fetch failed; the whole report run is discarded.

    Callers show a retry-able notice, never a partial dashboard.
    """

    retryable = True


class RelationNotFoundError(Exception):
    """Raised by an adapter when an optional backing table is missing in this deployment."""

    def __init__(self, relation: str):
        super().__init__(f"relation {relation!r} does not exist")
        self.relation = relation
