"""
Unit tests for user-facing texts and the persistent component views.
"""

from unittest.mock import MagicMock

from src.adapters.discord.views import (
    RegistrationContext,
    already_registered_text,
    completed_text,
    persistent_views,
)
from src.domain.messages import existing_seller_message, seller_created_message
from src.domain.ports import FlowOutcome, FlowResult


class TestDirectMessages:
    def test_created_message_has_name_and_id(self) -> None:
        text = seller_created_message("Anna", "S-100")
        assert "**Anna**" in text
        assert "`S-100`" in text

    def test_existing_seller_message_mentions_user(self) -> None:
        text = existing_seller_message("42", "S-100", email="a@x.com", order_id="ORD-9")
        assert text.startswith("Hey <@42>!")
        assert "`S-100`" in text
        assert "`a@x.com`" in text
        assert "ORD-9" in text

    def test_existing_seller_message_optional_parts(self) -> None:
        text = existing_seller_message("42", "S-100")
        assert "registered on" not in text
        assert "order" not in text

    def test_invite_link_included_when_configured(self) -> None:
        text = existing_seller_message("42", "S-100", invite_url="https://discord.gg/abc")
        assert "(https://discord.gg/abc)" in text


class TestInteractionTexts:
    def test_already_registered(self) -> None:
        outcome = FlowOutcome(FlowResult.ALREADY_REGISTERED, seller_id="S-1", email="a@x.com")
        text = already_registered_text(outcome)
        assert "`S-1`" in text
        assert "`a@x.com`" in text

    def test_completed_warns_when_dm_failed(self) -> None:
        outcome = FlowOutcome(FlowResult.COMPLETED, seller_id="S-1", notified=False)
        assert "could not DM" in completed_text(outcome)

    def test_completed_confirms_dm(self) -> None:
        outcome = FlowOutcome(FlowResult.COMPLETED, seller_id="S-1", notified=True)
        assert "by DM" in completed_text(outcome)


class TestPersistentViews:
    async def test_views_survive_restarts(self) -> None:
        """Every registered view has no timeout and only custom_id items."""
        views = persistent_views(RegistrationContext(MagicMock()))

        assert len(views) == 3
        assert all(view.is_persistent() for view in views)

    async def test_custom_ids_unique(self) -> None:
        views = persistent_views(RegistrationContext(MagicMock()))
        ids = [item.custom_id for view in views for item in view.children]
        assert len(ids) == len(set(ids))
