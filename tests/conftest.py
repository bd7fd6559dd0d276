"""
Shared test fixtures and configuration.

This module provides pytest fixtures for:
- An in-memory record store evaluating domain filters
- A manual clock for session expiry
- Registration service wiring with mocked notifier and forwarder
"""

import asyncio
import itertools
from typing import Any
from unittest.mock import AsyncMock

import pytest

from src.domain.exceptions import StoreError
from src.domain.filters import Filter
from src.domain.ports import AddressInfo, ContactInfo, SellerField, SellerRecord, UserIdentity
from src.domain.registration import RegistrationService
from src.domain.sessions import SessionStore


class InMemoryRecordStore:
    """
    RecordStore fake backed by a list.

    Mimics the remote store: Seller ID is assigned on create, and an
    optional delay yields to the event loop inside every call so that
    concurrent tasks interleave.
    """

    def __init__(self, delay: float = 0.0) -> None:
        self.records: list[SellerRecord] = []
        self.queries: list[Filter] = []
        self.delay = delay
        self.fail_find = False
        self.fail_create = False
        self._ids = itertools.count(1)

    def add(self, **fields: Any) -> SellerRecord:
        number = next(self._ids)
        fields.setdefault(SellerField.SELLER_ID, f"S-{number:03d}")
        record = SellerRecord(record_id=f"rec{number:05d}", fields=fields)
        self.records.append(record)
        return record

    async def find(self, where: Filter, max_records: int | None = None) -> list[SellerRecord]:
        self.queries.append(where)
        await asyncio.sleep(self.delay)
        if self.fail_find:
            raise StoreError("store unavailable")
        found = [r for r in self.records if where.matches(r.fields)]
        return found[:max_records] if max_records is not None else found

    async def create(self, fields: dict[str, Any]) -> SellerRecord:
        await asyncio.sleep(self.delay)
        if self.fail_create:
            raise StoreError("create rejected")
        return self.add(**fields)


class ManualClock:
    """Monotonic clock advanced by hand."""

    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def store() -> InMemoryRecordStore:
    return InMemoryRecordStore()


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def sessions(clock: ManualClock) -> SessionStore:
    return SessionStore(ttl_seconds=900, clock=clock)


@pytest.fixture
def notifier() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def forwarder() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def service(
    store: InMemoryRecordStore,
    notifier: AsyncMock,
    forwarder: AsyncMock,
    sessions: SessionStore,
) -> RegistrationService:
    return RegistrationService(
        store=store,
        notifier=notifier,
        forwarder=forwarder,
        sessions=sessions,
        consent_version="v1",
        consent_method="Discord button",
    )


@pytest.fixture
def user() -> UserIdentity:
    return UserIdentity(user_id="111111111111111111", username="sneakerhead", display_name="Sneaker Head")


@pytest.fixture
def contact() -> ContactInfo:
    return ContactInfo(full_name="A", company="Private", tax_id="NL0001", email="a@x.com")


@pytest.fixture
def address() -> AddressInfo:
    return AddressInfo(
        address_line_1="Damrak 1",
        postal_code="1012 LG",
        city="Amsterdam",
        payout_details="NL91ABNA0417164300",
    )
