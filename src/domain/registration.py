"""
Registration domain service - seller onboarding state machine.

This module contains the core business logic for seller registration.
Each user action (button, select menu, form) arrives as an independent
event; the service validates it against the user's session step, mutates
the session, and on the final form commits a record to the store.

Session State Machine
=====================

    (begin)                -> AWAITING_COUNTRY      duplicate pre-check first
    AWAITING_COUNTRY       -> AWAITING_CONSENT      country selected
    AWAITING_CONSENT       -> AWAITING_CONSENT      country re-selected
    AWAITING_CONSENT       -> AWAITING_CONTACT_INFO terms accepted
    AWAITING_CONTACT_INFO  -> AWAITING_ADDRESS_INFO step 1 form
    AWAITING_ADDRESS_INFO  -> COMMITTING            step 2 form
    COMMITTING             -> COMPLETED             record created / duplicate found
    COMMITTING             -> AWAITING_ADDRESS_INFO store failure, data preserved
    any non-terminal       -> CANCELLED             cancel

COMPLETED and CANCELLED sessions are deleted rather than stored.

Every transition runs inside the session store's per-user lock, so
double clicks and repeated form submissions serialize. The commit holds
the lock across the commit-time duplicate check and the record create:
two commits for one user cannot both create a record.

Direct messages and the webhook forward run after the lock is released.
Their failures are logged and never change the outcome, because the
record already exists.

Duplicate checks
================

- Entry gate (begin): exact id, then name heuristics. A store failure
  fails open; the commit gate still protects the store.
- Commit gate (submit_address): exact id only. A store failure fails closed.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from .countries import get_country
from .duplicates import DuplicateResolver
from .exceptions import (
    CountryRequired,
    DuplicateFound,
    ForwardingError,
    NotificationError,
    StepOutOfOrder,
    StoreError,
)
from .messages import existing_seller_message, seller_created_message
from .ports import (
    AddressInfo,
    ContactInfo,
    DuplicateMatch,
    FlowOutcome,
    FlowResult,
    Notifier,
    RecordForwarder,
    RecordStore,
    SellerField,
    SellerRecord,
    SessionStep,
    UserIdentity,
)
from .sessions import RegistrationSession, SessionStore

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class RegistrationService:
    """
    Domain service for seller registration.

    Orchestrates the step sequence over the session store, the duplicate
    resolver and the record store, and fans out notifications on commit.
    """

    store: RecordStore
    notifier: Notifier
    forwarder: RecordForwarder
    sessions: SessionStore = field(default_factory=SessionStore)
    consent_version: str = "v1"
    consent_method: str = "Discord button"
    invite_url: str | None = None
    resolver: DuplicateResolver = field(init=False)

    def __post_init__(self) -> None:
        self.resolver = DuplicateResolver(self.store)

    async def begin(self, identity: UserIdentity) -> FlowOutcome:
        """
        Start (or restart) a registration.

        Any in-flight session for the user is discarded first. Users with an
        existing record get their seller id back and no session is created.

        Returns:
            PROMPT_COUNTRY, or ALREADY_REGISTERED with seller_id and email
        """
        user_id = identity.user_id
        async with self.sessions.locked(user_id):
            previous = self.sessions.delete(user_id)
            if previous is not None:
                logger.info(
                    "User %s restarted registration, discarding session in step %s",
                    user_id,
                    previous.step.value,
                )

            try:
                match = await self.resolver.resolve(identity)
            except StoreError as e:
                # Fail open: the commit gate re-checks before creating anything
                logger.warning("Duplicate pre-check failed for user %s: %s", user_id, e)
                match = DuplicateMatch.not_found()

            if match.found:
                logger.info("User %s already registered as seller %s", user_id, match.seller_id)
                return FlowOutcome(
                    FlowResult.ALREADY_REGISTERED, seller_id=match.seller_id, email=match.email
                )

            self.sessions.put(RegistrationSession(user_id=user_id))
        logger.info("Registration started for user %s", user_id)
        return FlowOutcome(FlowResult.PROMPT_COUNTRY)

    async def select_country(self, identity: UserIdentity, value: str) -> FlowOutcome:
        """
        Store the selected country. Can be repeated until terms are accepted.

        Raises:
            InvalidSelection: If value is not a registered country
            StepOutOfOrder: If no session is waiting for a country
        """
        country = get_country(value)
        async with self.sessions.locked(identity.user_id):
            session = self._require(
                identity,
                "select_country",
                SessionStep.AWAITING_COUNTRY,
                SessionStep.AWAITING_CONSENT,
            )
            session.country = country.name
            session.step = SessionStep.AWAITING_CONSENT
            self.sessions.put(session)
        return FlowOutcome(FlowResult.COUNTRY_SELECTED, country=country.name)

    async def accept_terms(self, identity: UserIdentity) -> FlowOutcome:
        """
        Record consent and open the contact step.

        Accepting again while the contact form is pending only re-opens the
        form, so a dismissed form can be brought back.

        Raises:
            CountryRequired: If no country has been selected yet
            StepOutOfOrder: If the session is missing or past this step
        """
        async with self.sessions.locked(identity.user_id):
            session = self._require(
                identity,
                "accept_terms",
                SessionStep.AWAITING_COUNTRY,
                SessionStep.AWAITING_CONSENT,
                SessionStep.AWAITING_CONTACT_INFO,
            )
            if session.country is None:
                raise CountryRequired("Select a country before accepting the terms")
            if session.step is SessionStep.AWAITING_CONSENT:
                session.consented_at = _utcnow()
                session.step = SessionStep.AWAITING_CONTACT_INFO
            self.sessions.put(session)
        return FlowOutcome(FlowResult.PROMPT_CONTACT, country=session.country)

    async def submit_contact(self, identity: UserIdentity, contact: ContactInfo) -> FlowOutcome:
        """
        Store step 1 form data.

        Raises:
            StepOutOfOrder: If the session is not waiting for contact info
        """
        async with self.sessions.locked(identity.user_id):
            session = self._require(identity, "submit_contact", SessionStep.AWAITING_CONTACT_INFO)
            if session.country is None:
                raise StepOutOfOrder(identity.user_id, "submit_contact", session.step.value)
            session.contact = contact
            session.step = SessionStep.AWAITING_ADDRESS_INFO
            self.sessions.put(session)
        return FlowOutcome(FlowResult.PROMPT_ADDRESS, country=session.country)

    async def resume_address(self, identity: UserIdentity) -> FlowOutcome:
        """
        Check that the step 2 form may be shown.

        Raises:
            StepOutOfOrder: If the session is not waiting for address info
        """
        async with self.sessions.locked(identity.user_id):
            session = self._require(identity, "resume_address", SessionStep.AWAITING_ADDRESS_INFO)
            self.sessions.put(session)
        return FlowOutcome(FlowResult.PROMPT_ADDRESS, country=session.country)

    async def submit_address(self, identity: UserIdentity, address: AddressInfo) -> FlowOutcome:
        """
        Commit the registration.

        Returns:
            COMPLETED with the new seller id, or ALREADY_REGISTERED when a
            record for this user exists by now (including a repeated submit
            of an already committed form)

        Raises:
            StepOutOfOrder: If there is nothing to commit
            StoreError: If the store failed; the session is kept at
                AWAITING_ADDRESS_INFO so the user can retry
        """
        user_id = identity.user_id
        duplicate: DuplicateMatch | None = None
        async with self.sessions.locked(user_id):
            session = self.sessions.get(user_id)
            if session is None:
                return await self._resolve_repeated_commit(identity)
            if session.step is not SessionStep.AWAITING_ADDRESS_INFO or session.contact is None:
                raise StepOutOfOrder(user_id, "submit_address", session.step.value)

            session.step = SessionStep.COMMITTING
            try:
                record = await self._commit(identity, session, address)
            except DuplicateFound as e:
                duplicate = e.match
            except BaseException as e:
                # Includes task cancellation
                session.step = SessionStep.AWAITING_ADDRESS_INFO
                self.sessions.put(session)
                logger.error("Commit failed for user %s: %r", user_id, e)
                raise
            session.step = SessionStep.COMPLETED
            self.sessions.delete(user_id)

        if duplicate is not None:
            logger.info(
                "User %s registered concurrently as seller %s, skipping create",
                user_id,
                duplicate.seller_id,
            )
            notified = await self._notify(
                user_id,
                existing_seller_message(
                    user_id, duplicate.seller_id, email=duplicate.email, invite_url=self.invite_url
                ),
            )
            return FlowOutcome(
                FlowResult.ALREADY_REGISTERED,
                seller_id=duplicate.seller_id,
                email=duplicate.email,
                notified=notified,
            )

        notified = await self._notify(
            user_id, seller_created_message(session.contact.full_name, record.seller_id)
        )
        await self._forward(self._webhook_payload(identity, session, address, record))
        return FlowOutcome(
            FlowResult.COMPLETED,
            seller_id=record.seller_id,
            email=session.contact.email,
            country=session.country,
            notified=notified,
        )

    async def cancel(self, identity: UserIdentity) -> FlowOutcome:
        """Drop the user's session, whatever step it is in."""
        async with self.sessions.locked(identity.user_id):
            session = self.sessions.delete(identity.user_id)
        if session is not None:
            logger.info(
                "User %s cancelled registration in step %s", identity.user_id, session.step.value
            )
        return FlowOutcome(FlowResult.CANCELLED)

    async def notify_existing_seller(
        self,
        user_id: str,
        seller_id: str,
        email: str | None = None,
        order_id: str | None = None,
    ) -> None:
        """
        DM a user who filled in the full agreement despite having a profile.

        Raises:
            NotificationError: If the message could not be delivered
        """
        content = existing_seller_message(
            user_id, seller_id, email=email, order_id=order_id, invite_url=self.invite_url
        )
        await self.notifier.send_direct_message(user_id, content)
        logger.info("Sent existing-seller notice for %s to user %s", seller_id, user_id)

    def evict_idle_sessions(self) -> int:
        return self.sessions.evict_expired()

    def _require(
        self, identity: UserIdentity, action: str, *steps: SessionStep
    ) -> RegistrationSession:
        """Return the session if it is in one of the allowed steps."""
        session = self.sessions.get(identity.user_id)
        if session is None:
            raise StepOutOfOrder(identity.user_id, action)
        if session.step not in steps:
            raise StepOutOfOrder(identity.user_id, action, session.step.value)
        return session

    async def _resolve_repeated_commit(self, identity: UserIdentity) -> FlowOutcome:
        # No session: either a second submit of a committed form or a stale one
        try:
            match = await self.resolver.resolve(identity, use_name_heuristics=False)
        except StoreError as e:
            logger.warning("Lookup for sessionless commit of user %s failed: %s", identity.user_id, e)
            raise StepOutOfOrder(identity.user_id, "submit_address") from e
        if match.found:
            return FlowOutcome(
                FlowResult.ALREADY_REGISTERED, seller_id=match.seller_id, email=match.email
            )
        raise StepOutOfOrder(identity.user_id, "submit_address")

    async def _commit(
        self, identity: UserIdentity, session: RegistrationSession, address: AddressInfo
    ) -> SellerRecord:
        match = await self.resolver.resolve(identity, use_name_heuristics=False)
        if match.found:
            raise DuplicateFound(match)
        record = await self.store.create(self._record_fields(identity, session, address))
        logger.info("Created seller %s for user %s", record.seller_id, identity.user_id)
        return record

    async def _notify(self, user_id: str, content: str) -> bool:
        try:
            await self.notifier.send_direct_message(user_id, content)
        except NotificationError as e:
            logger.warning("Could not DM user %s: %s", user_id, e)
            return False
        except Exception:
            logger.exception("Unexpected error sending DM to user %s", user_id)
            return False
        return True

    async def _forward(self, payload: dict[str, Any]) -> None:
        try:
            await self.forwarder.forward(payload)
        except ForwardingError as e:
            logger.error("Webhook forward failed for record %s: %s", payload["recordId"], e)
        except Exception:
            logger.exception("Unexpected error forwarding record %s", payload["recordId"])

    def _record_fields(
        self, identity: UserIdentity, session: RegistrationSession, address: AddressInfo
    ) -> dict[str, Any]:
        contact = session.contact
        consented_at = session.consented_at or _utcnow()
        return {
            SellerField.DISCORD_ID: identity.user_id,
            SellerField.DISCORD_USERNAME: identity.username,
            SellerField.FULL_NAME: contact.full_name,
            SellerField.COMPANY: contact.company,
            SellerField.TAX_ID: contact.tax_id,
            SellerField.EMAIL: contact.email,
            SellerField.COUNTRY: session.country,
            SellerField.ADDRESS_LINE_1: address.address_line_1,
            SellerField.ADDRESS_LINE_2: address.address_line_2,
            SellerField.POSTAL_CODE: address.postal_code,
            SellerField.CITY: address.city,
            SellerField.PAYOUT_DETAILS: address.payout_details,
            SellerField.CONSENT_VERSION: self.consent_version,
            SellerField.CONSENT_METHOD: self.consent_method,
            SellerField.CONSENT_TIMESTAMP: consented_at.isoformat(),
        }

    def _webhook_payload(
        self,
        identity: UserIdentity,
        session: RegistrationSession,
        address: AddressInfo,
        record: SellerRecord,
    ) -> dict[str, Any]:
        contact = session.contact
        return {
            "recordId": record.record_id,
            "sellerId": record.seller_id,
            "timestamp": _utcnow().isoformat(),
            "discordId": identity.user_id,
            "discordUsername": identity.username,
            "discordTag": identity.tag,
            "fullName": contact.full_name,
            "company": contact.company,
            "taxId": contact.tax_id,
            "email": contact.email,
            "country": session.country,
            "addressLine1": address.address_line_1,
            "addressLine2": address.address_line_2,
            "postalCode": address.postal_code,
            "city": address.city,
            "payoutDetails": address.payout_details,
            "consentVersion": self.consent_version,
            "consentMethod": self.consent_method,
            "consentTimestamp": (session.consented_at or _utcnow()).isoformat(),
        }
