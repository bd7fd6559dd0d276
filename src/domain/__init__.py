"""
Domain layer - Pure business logic with zero framework imports.

This package contains the seller registration flow: the session state
machine, the per-user session store and duplicate resolution. It defines
its own port interfaces for infrastructure abstraction, ensuring true
hexagonal architecture decoupling.
"""

from .exceptions import (
    CountryRequired,
    DuplicateFound,
    FlowValidationError,
    ForwardingError,
    InvalidSelection,
    NotificationError,
    RegistrationError,
    StepOutOfOrder,
    StoreError,
)
from .ports import (
    AddressInfo,
    ContactInfo,
    DuplicateMatch,
    FlowOutcome,
    FlowResult,
    Notifier,
    RecordForwarder,
    RecordStore,
    SellerRecord,
    SessionStep,
    UserIdentity,
)
from .registration import RegistrationService
from .sessions import RegistrationSession, SessionStore

__all__ = [
    "AddressInfo",
    "ContactInfo",
    "CountryRequired",
    "DuplicateFound",
    "DuplicateMatch",
    "FlowOutcome",
    "FlowResult",
    "FlowValidationError",
    "ForwardingError",
    "InvalidSelection",
    "Notifier",
    "NotificationError",
    "RecordForwarder",
    "RecordStore",
    "RegistrationError",
    "RegistrationService",
    "RegistrationSession",
    "SellerRecord",
    "SessionStep",
    "SessionStore",
    "StepOutOfOrder",
    "StoreError",
    "UserIdentity",
]
