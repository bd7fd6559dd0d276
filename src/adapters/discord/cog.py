"""Slash command and background tasks for seller registration."""

import logging

import discord
from discord import app_commands
from discord.ext import commands, tasks

from .views import RegistrationContext, SignupView, signup_embed

logger = logging.getLogger(__name__)


class RegistrationCog(commands.Cog):
    """Posts the registration entry point and sweeps idle sessions."""

    def __init__(self, context: RegistrationContext, sweep_interval_seconds: float = 60) -> None:
        self.context = context
        self.sweep_sessions.change_interval(seconds=sweep_interval_seconds)

    async def cog_load(self) -> None:
        self.sweep_sessions.start()

    async def cog_unload(self) -> None:
        self.sweep_sessions.cancel()

    @app_commands.command(
        name="setup-seller-registration",
        description="Post the seller registration embed in this channel.",
    )
    @app_commands.default_permissions(manage_guild=True)
    @app_commands.guild_only()
    async def setup_seller_registration(self, interaction: discord.Interaction) -> None:
        await interaction.response.send_message(embed=signup_embed(), view=SignupView(self.context))
        logger.info(
            "Registration embed posted in channel %s by user %s",
            interaction.channel_id,
            interaction.user.id,
        )

    @tasks.loop(seconds=60)
    async def sweep_sessions(self) -> None:
        self.context.service.evict_idle_sessions()
