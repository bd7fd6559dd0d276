"""
Domain exceptions - Semantic error types for seller registration.

This module defines domain-specific exceptions that communicate
business rule violations without leaking infrastructure details.
Adapters translate library errors into these types.
"""


class RegistrationError(Exception):
    """Base class for registration domain errors."""

    pass


class FlowValidationError(RegistrationError):
    """User input outside the allowed domain, or an action out of step order."""

    pass


class StepOutOfOrder(FlowValidationError):
    """No session, or the session is not in the step this action belongs to."""

    def __init__(self, user_id: str, action: str, step: str | None = None) -> None:
        self.user_id = user_id
        self.action = action
        self.step = step
        super().__init__(f"{action} not allowed for user {user_id} in step {step or 'NONE'}")


class CountryRequired(FlowValidationError):
    """Consent given before a country was selected."""

    pass


class InvalidSelection(FlowValidationError):
    """Selected value is not in the option registry."""

    pass


class DuplicateFound(RegistrationError):
    """A registration record already exists for this user. Control flow, not a failure."""

    def __init__(self, match) -> None:
        self.match = match
        super().__init__(f"Seller already registered: {match.seller_id}")


class StoreError(RegistrationError):
    """Record store query or create failed."""

    pass


class NotificationError(RegistrationError):
    """Direct message could not be delivered."""

    pass


class ForwardingError(RegistrationError):
    """Automation webhook rejected or did not receive the record."""

    pass
