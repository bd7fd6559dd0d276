"""
Port interfaces - Protocol definitions for infrastructure abstraction.

This module defines the value types shared across the registration flow
and the interfaces (ports) that the domain requires from infrastructure.
Adapters implement these protocols.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Protocol

from .filters import Filter


class SessionStep(str, Enum):
    """
    Registration session steps.

    Transitions:
    - AWAITING_COUNTRY -> AWAITING_CONSENT (first country selected)
    - AWAITING_CONSENT -> AWAITING_CONSENT (country re-selected)
    - AWAITING_CONSENT -> AWAITING_CONTACT_INFO (terms accepted)
    - AWAITING_CONTACT_INFO -> AWAITING_ADDRESS_INFO (step 1 form submitted)
    - AWAITING_ADDRESS_INFO -> COMMITTING (step 2 form submitted)
    - COMMITTING -> COMPLETED (record created, or duplicate found at commit)
    - COMMITTING -> AWAITING_ADDRESS_INFO (record store failure, retryable)
    - any non-terminal -> CANCELLED

    Terminal States:
    - COMPLETED and CANCELLED sessions are removed from the store.
    """

    AWAITING_COUNTRY = "AWAITING_COUNTRY"
    AWAITING_CONSENT = "AWAITING_CONSENT"
    AWAITING_CONTACT_INFO = "AWAITING_CONTACT_INFO"
    AWAITING_ADDRESS_INFO = "AWAITING_ADDRESS_INFO"
    COMMITTING = "COMMITTING"
    CANCELLED = "CANCELLED"
    COMPLETED = "COMPLETED"


class FlowResult(Enum):
    """
    Result of a registration action.

    Tells the UI layer which prompt or acknowledgment to render next.
    """

    PROMPT_COUNTRY = "prompt_country"
    COUNTRY_SELECTED = "country_selected"
    PROMPT_CONTACT = "prompt_contact"
    PROMPT_ADDRESS = "prompt_address"
    COMPLETED = "completed"
    ALREADY_REGISTERED = "already_registered"
    CANCELLED = "cancelled"


class SellerField:
    """Column names of the sellers table."""

    DISCORD_ID = "Discord ID"
    DISCORD_USERNAME = "Discord Username"
    FULL_NAME = "Full Name"
    COMPANY = "Company"
    TAX_ID = "Tax ID"
    EMAIL = "Email"
    COUNTRY = "Country"
    ADDRESS_LINE_1 = "Address Line 1"
    ADDRESS_LINE_2 = "Address Line 2"
    POSTAL_CODE = "Postal Code"
    CITY = "City"
    PAYOUT_DETAILS = "Payout Details"
    CONSENT_VERSION = "Consent Version"
    CONSENT_METHOD = "Consent Method"
    CONSENT_TIMESTAMP = "Consent Timestamp"
    SELLER_ID = "Seller ID"


@dataclass(frozen=True)
class UserIdentity:
    """Platform user acting on the flow. Used as session key and duplicate-lookup key."""

    user_id: str
    username: str
    tag: str | None = None
    display_name: str | None = None
    nickname: str | None = None

    def name_candidates(self) -> list[str]:
        """Distinct non-empty names this user may have been recorded under, in priority order."""
        candidates: list[str] = []
        for name in (self.username, self.tag, self.nickname, self.display_name):
            if name and name.strip() and name.strip() not in candidates:
                candidates.append(name.strip())
        return candidates


@dataclass(frozen=True)
class ContactInfo:
    """Step 1 form data."""

    full_name: str
    company: str
    tax_id: str
    email: str


@dataclass(frozen=True)
class AddressInfo:
    """Step 2 form data."""

    address_line_1: str
    postal_code: str
    city: str
    payout_details: str
    address_line_2: str = ""


@dataclass(frozen=True)
class SellerRecord:
    """Record returned by the record store."""

    record_id: str
    fields: dict[str, Any] = field(default_factory=dict)
    created_time: datetime | None = None

    @property
    def seller_id(self) -> str:
        """Human-facing seller identifier, falling back to the store id."""
        value = self.fields.get(SellerField.SELLER_ID)
        return str(value) if value not in (None, "") else self.record_id

    @property
    def email(self) -> str | None:
        return self.fields.get(SellerField.EMAIL) or None


@dataclass(frozen=True)
class DuplicateMatch:
    """
    Result of duplicate resolution.

    Either not found, or found with the existing seller identifier.
    """

    found: bool
    seller_id: str | None = None
    email: str | None = None

    @classmethod
    def not_found(cls) -> "DuplicateMatch":
        return cls(found=False)

    @classmethod
    def from_record(cls, record: SellerRecord) -> "DuplicateMatch":
        return cls(found=True, seller_id=record.seller_id, email=record.email)


@dataclass(frozen=True)
class FlowOutcome:
    """What a registration action produced."""

    result: FlowResult
    seller_id: str | None = None
    email: str | None = None
    country: str | None = None
    notified: bool | None = None


class RecordStore(Protocol):
    """Port interface for the external sellers table."""

    async def find(self, where: Filter, max_records: int | None = None) -> list[SellerRecord]:
        """
        Query records matching a filter expression.

        Args:
            where: Filter expression; values are escaped by the adapter
            max_records: Optional upper bound on returned records

        Returns:
            Records in store order (finite)

        Raises:
            StoreError: On network or query failure
        """
        ...

    async def create(self, fields: dict[str, Any]) -> SellerRecord:
        """
        Create a record.

        Args:
            fields: Column name to value mapping

        Returns:
            Created record, including store-computed fields

        Raises:
            StoreError: On network or validation failure
        """
        ...


class Notifier(Protocol):
    """Port interface for private side-channel delivery (direct messages)."""

    async def send_direct_message(self, user_id: str, content: str) -> None:
        """
        Deliver a text message to a user.

        Raises:
            NotificationError: If the user cannot be reached
        """
        ...


class RecordForwarder(Protocol):
    """Port interface for forwarding a created record to automation."""

    async def forward(self, payload: dict[str, Any]) -> None:
        """
        Post the registration payload.

        Raises:
            ForwardingError: If delivery failed
        """
        ...
