"""
Discord components for the seller registration flow.

Every view is persistent (no timeout, fixed custom ids) and registered on
startup, so buttons on old messages keep routing to the service after a
restart. Whether such a click is still valid is decided by the session
state machine, never by the component.

Flow:
1. SIGN UP button (public message)                -> begin
2. Country select + I Agree / Cancel buttons      -> select_country, accept_terms, cancel
3. Step 1 modal (contact)                         -> submit_contact
4. Continue button                                -> resume_address
5. Step 2 modal (address, payout)                 -> submit_address
"""

import logging
from typing import Any

import discord
from pydantic import ValidationError

from src.domain.countries import COUNTRIES
from src.domain.exceptions import (
    CountryRequired,
    FlowValidationError,
    InvalidSelection,
    StepOutOfOrder,
    StoreError,
)
from src.domain.ports import FlowOutcome, FlowResult
from src.domain.registration import RegistrationService

from .forms import AddressForm, ContactForm, invalid_field_titles
from .identity import identity_from_user

logger = logging.getLogger(__name__)

BRAND_COLOR = 0x00AE86

SIGNUP_ID = "seller_signup"
COUNTRY_SELECT_ID = "seller_country"
AGREE_ID = "seller_agree"
CANCEL_ID = "seller_cancel"
CONTINUE_ID = "seller_continue"

RESTART_MESSAGE = "⚠️ This registration is no longer active. Please click **SIGN UP** again to restart."
FAILURE_MESSAGE = "❌ Something went wrong. Please try again in a moment."


def signup_embed() -> discord.Embed:
    return discord.Embed(
        title="🖊️ Seller Registration",
        description="\n".join(
            [
                "Welcome to the **Kickz Caviar** seller onboarding.",
                "",
                "Click **SIGN UP** below to create your seller profile and agree to the T&C.",
            ]
        ),
        color=BRAND_COLOR,
    )


def terms_embed(consent_version: str) -> discord.Embed:
    return discord.Embed(
        title="📜 Terms & Conditions",
        description="\n".join(
            [
                "1. Select the country you are selling from.",
                "2. Click **I Agree** to accept the seller Terms & Conditions "
                f"(version `{consent_version}`) and continue.",
                "",
                "Your details are only used to create your seller profile and sales agreement.",
            ]
        ),
        color=BRAND_COLOR,
    )


class RegistrationContext:
    """What every component needs: the service and the response visibility policy."""

    def __init__(self, service: RegistrationService, private_in_guilds: bool = True) -> None:
        self.service = service
        self.private_in_guilds = private_in_guilds

    def ephemeral(self, interaction: discord.Interaction) -> bool:
        # Ephemeral only exists in guild channels; DMs are already private
        return self.private_in_guilds and interaction.guild is not None


async def reply(
    interaction: discord.Interaction,
    content: str,
    *,
    ephemeral: bool,
    view: discord.ui.View | None = None,
    embed: discord.Embed | None = None,
) -> None:
    """Send a response or, once the interaction is acknowledged, a followup."""
    kwargs: dict[str, Any] = {"ephemeral": ephemeral}
    if view is not None:
        kwargs["view"] = view
    if embed is not None:
        kwargs["embed"] = embed
    if interaction.response.is_done():
        await interaction.followup.send(content, **kwargs)
    else:
        await interaction.response.send_message(content, **kwargs)


async def reply_flow_error(
    interaction: discord.Interaction, error: FlowValidationError, *, ephemeral: bool
) -> None:
    if isinstance(error, CountryRequired):
        content = "🌍 Please select your country first, then click **I Agree**."
    elif isinstance(error, InvalidSelection):
        content = "🌍 That country is not available. Please pick one from the list."
    else:
        content = RESTART_MESSAGE
    logger.info("Rejected action from user %s: %s", interaction.user.id, error)
    await reply(interaction, content, ephemeral=ephemeral)


async def report_unexpected(interaction: discord.Interaction, error: Exception) -> None:
    logger.exception("Unhandled error in registration interaction for user %s", interaction.user.id, exc_info=error)
    try:
        await reply(interaction, FAILURE_MESSAGE, ephemeral=interaction.guild is not None)
    except discord.HTTPException:
        logger.warning("Could not report failure to user %s", interaction.user.id)


class _RegistrationView(discord.ui.View):
    def __init__(self, context: RegistrationContext) -> None:
        super().__init__(timeout=None)
        self.context = context

    async def on_error(
        self, interaction: discord.Interaction, error: Exception, item: discord.ui.Item
    ) -> None:
        await report_unexpected(interaction, error)


class SignupView(_RegistrationView):
    """Public entry point posted by the setup command."""

    @discord.ui.button(label="SIGN UP", style=discord.ButtonStyle.primary, custom_id=SIGNUP_ID)
    async def sign_up(self, interaction: discord.Interaction, button: discord.ui.Button) -> None:
        ephemeral = self.context.ephemeral(interaction)
        await interaction.response.defer(ephemeral=ephemeral, thinking=True)
        outcome = await self.context.service.begin(identity_from_user(interaction.user))

        if outcome.result is FlowResult.ALREADY_REGISTERED:
            await reply(interaction, already_registered_text(outcome), ephemeral=ephemeral)
            return

        await reply(
            interaction,
            "Let's get you set up as a seller.",
            ephemeral=ephemeral,
            embed=terms_embed(self.context.service.consent_version),
            view=CountryConsentView(self.context),
        )


class CountryConsentView(_RegistrationView):
    """Country select plus consent and cancel buttons."""

    @discord.ui.select(
        custom_id=COUNTRY_SELECT_ID,
        placeholder="Select your country",
        min_values=1,
        max_values=1,
        options=[
            discord.SelectOption(label=country.name, value=country.name, emoji=country.flag)
            for country in COUNTRIES
        ],
    )
    async def choose_country(self, interaction: discord.Interaction, select: discord.ui.Select) -> None:
        ephemeral = self.context.ephemeral(interaction)
        try:
            outcome = await self.context.service.select_country(
                identity_from_user(interaction.user), select.values[0]
            )
        except FlowValidationError as e:
            await reply_flow_error(interaction, e, ephemeral=ephemeral)
            return
        await reply(
            interaction,
            f"🌍 Country set to **{outcome.country}**. Click **I Agree** to continue.",
            ephemeral=ephemeral,
        )

    @discord.ui.button(label="I Agree", style=discord.ButtonStyle.success, custom_id=AGREE_ID)
    async def agree(self, interaction: discord.Interaction, button: discord.ui.Button) -> None:
        try:
            await self.context.service.accept_terms(identity_from_user(interaction.user))
        except FlowValidationError as e:
            await reply_flow_error(interaction, e, ephemeral=self.context.ephemeral(interaction))
            return
        await interaction.response.send_modal(ContactModal(self.context))

    @discord.ui.button(label="Cancel", style=discord.ButtonStyle.secondary, custom_id=CANCEL_ID)
    async def cancel(self, interaction: discord.Interaction, button: discord.ui.Button) -> None:
        await self.context.service.cancel(identity_from_user(interaction.user))
        await reply(
            interaction,
            "Registration cancelled. Click **SIGN UP** whenever you want to start again.",
            ephemeral=self.context.ephemeral(interaction),
        )


class ContinueView(_RegistrationView):
    """Bridge between the two forms: a modal cannot open another modal."""

    @discord.ui.button(label="Continue to step 2", style=discord.ButtonStyle.primary, custom_id=CONTINUE_ID)
    async def resume(self, interaction: discord.Interaction, button: discord.ui.Button) -> None:
        try:
            await self.context.service.resume_address(identity_from_user(interaction.user))
        except FlowValidationError as e:
            await reply_flow_error(interaction, e, ephemeral=self.context.ephemeral(interaction))
            return
        await interaction.response.send_modal(AddressModal(self.context))

    @discord.ui.button(label="Cancel", style=discord.ButtonStyle.secondary, custom_id=f"{CANCEL_ID}_step2")
    async def cancel(self, interaction: discord.Interaction, button: discord.ui.Button) -> None:
        await self.context.service.cancel(identity_from_user(interaction.user))
        await reply(
            interaction,
            "Registration cancelled. Click **SIGN UP** whenever you want to start again.",
            ephemeral=self.context.ephemeral(interaction),
        )


class _RegistrationModal(discord.ui.Modal):
    def __init__(self, context: RegistrationContext) -> None:
        super().__init__(timeout=None)
        self.context = context

    async def on_error(self, interaction: discord.Interaction, error: Exception) -> None:
        await report_unexpected(interaction, error)


class ContactModal(_RegistrationModal, title="Seller Registration (1/2)"):
    full_name = discord.ui.TextInput(label="Full name", max_length=100)
    company = discord.ui.TextInput(label="Company (or \"Private\")", max_length=100)
    tax_id = discord.ui.TextInput(label="Tax / VAT ID", max_length=50)
    email = discord.ui.TextInput(label="E-mail", placeholder="you@example.com", max_length=254)

    async def on_submit(self, interaction: discord.Interaction) -> None:
        ephemeral = self.context.ephemeral(interaction)
        try:
            form = ContactForm(
                full_name=self.full_name.value,
                company=self.company.value,
                tax_id=self.tax_id.value,
                email=self.email.value,
            )
        except ValidationError as e:
            fields = ", ".join(invalid_field_titles(ContactForm, e))
            await reply(
                interaction,
                f"✏️ Please check: **{fields}**. Click **I Agree** to open the form again.",
                ephemeral=ephemeral,
            )
            return

        try:
            await self.context.service.submit_contact(identity_from_user(interaction.user), form.to_contact())
        except FlowValidationError as e:
            await reply_flow_error(interaction, e, ephemeral=ephemeral)
            return
        await reply(
            interaction,
            "✅ Step 1 saved. Click **Continue to step 2** for your address and payout details.",
            ephemeral=ephemeral,
            view=ContinueView(self.context),
        )


class AddressModal(_RegistrationModal, title="Seller Registration (2/2)"):
    address_line_1 = discord.ui.TextInput(label="Address line 1", max_length=150)
    address_line_2 = discord.ui.TextInput(label="Address line 2", required=False, max_length=150)
    postal_code = discord.ui.TextInput(label="Postal code", max_length=12)
    city = discord.ui.TextInput(label="City", max_length=100)
    payout_details = discord.ui.TextInput(
        label="Payout details (IBAN / PayPal)",
        style=discord.TextStyle.paragraph,
        max_length=200,
    )

    async def on_submit(self, interaction: discord.Interaction) -> None:
        ephemeral = self.context.ephemeral(interaction)
        try:
            form = AddressForm(
                address_line_1=self.address_line_1.value,
                address_line_2=self.address_line_2.value or "",
                postal_code=self.postal_code.value,
                city=self.city.value,
                payout_details=self.payout_details.value,
            )
        except ValidationError as e:
            fields = ", ".join(invalid_field_titles(AddressForm, e))
            await reply(
                interaction,
                f"✏️ Please check: **{fields}**. Click **Continue to step 2** to open the form again.",
                ephemeral=ephemeral,
            )
            return

        await interaction.response.defer(ephemeral=ephemeral, thinking=True)
        try:
            outcome = await self.context.service.submit_address(
                identity_from_user(interaction.user), form.to_address()
            )
        except StepOutOfOrder as e:
            await reply_flow_error(interaction, e, ephemeral=ephemeral)
            return
        except StoreError:
            await reply(
                interaction,
                "❌ We could not save your registration right now. Your details are kept: "
                "click **Continue to step 2** to try again.",
                ephemeral=ephemeral,
            )
            return

        if outcome.result is FlowResult.ALREADY_REGISTERED:
            await reply(interaction, already_registered_text(outcome), ephemeral=ephemeral)
            return
        await reply(interaction, completed_text(outcome), ephemeral=ephemeral)


def already_registered_text(outcome: FlowOutcome) -> str:
    lines = [f"ℹ️ You are already registered. Your **Seller ID** is `{outcome.seller_id}`."]
    if outcome.email:
        lines.append(f"This seller profile is registered on `{outcome.email}`.")
    return "\n".join(lines)


def completed_text(outcome: FlowOutcome) -> str:
    lines = [
        "🎉 Registration complete!",
        f"Your **Seller ID** is `{outcome.seller_id}`.",
    ]
    if outcome.notified is False:
        lines.append("We could not DM you a copy: please note your Seller ID down.")
    else:
        lines.append("We also sent it to you by DM.")
    return "\n".join(lines)


def persistent_views(context: RegistrationContext) -> list[discord.ui.View]:
    """Views to register on startup so existing messages keep working."""
    return [SignupView(context), CountryConsentView(context), ContinueView(context)]
