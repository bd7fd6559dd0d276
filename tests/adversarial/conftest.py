"""
Shared fixtures for adversarial tests.

Provides a record store that yields to the event loop on every call, so
concurrent interaction handlers interleave the way they do against the
real store.
"""

from unittest.mock import AsyncMock

import pytest

from src.domain.ports import ContactInfo, SessionStep, UserIdentity
from src.domain.registration import RegistrationService
from src.domain.sessions import SessionStore
from tests.conftest import InMemoryRecordStore

# Module-level marker for all adversarial tests
pytestmark = pytest.mark.adversarial


@pytest.fixture
def store() -> InMemoryRecordStore:
    """Store with network-like latency."""
    return InMemoryRecordStore(delay=0.01)


@pytest.fixture
def service(store: InMemoryRecordStore) -> RegistrationService:
    return RegistrationService(
        store=store,
        notifier=AsyncMock(),
        forwarder=AsyncMock(),
        sessions=SessionStore(ttl_seconds=900),
    )


async def fill_in_until_address(service: RegistrationService, user: UserIdentity) -> None:
    """Helper to bring a user to the step 2 form."""
    await service.begin(user)
    await service.select_country(user, "Netherlands")
    await service.accept_terms(user)
    await service.submit_contact(
        user, ContactInfo(full_name="A", company="Private", tax_id="NL0001", email="a@x.com")
    )
    assert service.sessions.get(user.user_id).step is SessionStep.AWAITING_ADDRESS_INFO
