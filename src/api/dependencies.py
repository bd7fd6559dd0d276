"""
FastAPI dependencies - Dependency injection factories.

This module wires the domain service to its infrastructure adapters and
provides Depends() factories for injecting it into routes.

The service owns the in-memory session store, so it is built once in the
application lifespan and shared by the bot and the HTTP routes.
"""

import httpx
from fastapi import Request

from src.adapters.airtable.store import AirtableRecordStore
from src.adapters.webhook.forwarder import WebhookRecordForwarder
from src.config.settings import Settings
from src.domain.ports import Notifier
from src.domain.registration import RegistrationService
from src.domain.sessions import SessionStore


def build_registration_service(
    settings: Settings, client: httpx.AsyncClient, notifier: Notifier
) -> RegistrationService:
    """
    Create the registration service with injected dependencies.

    Wires together the Airtable store, the webhook forwarder and the
    notifier for the domain service.
    """
    store = AirtableRecordStore(
        client,
        api_key=settings.airtable_api_key,
        base_id=settings.airtable_base_id,
        table=settings.airtable_sellers_table,
        api_url=settings.airtable_api_url,
    )
    return RegistrationService(
        store=store,
        notifier=notifier,
        forwarder=WebhookRecordForwarder(client, settings.make_webhook_url),
        sessions=SessionStore(ttl_seconds=settings.session_ttl_seconds),
        consent_version=settings.consent_version,
        consent_method=settings.consent_method,
        invite_url=settings.discord_invite_url,
    )


def get_registration_service(request: Request) -> RegistrationService:
    """
    Get the registration service from app state.

    The service is created during app lifespan startup and stored in app.state.
    """
    return request.app.state.service
