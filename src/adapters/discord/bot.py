"""
Discord bot - gateway client wiring for seller registration.

Registers the persistent views, loads the registration cog and syncs the
slash command on startup.

The bot is created before the registration service because the service's
notifier sends through this client; assign ``service`` before ``start()``.
"""

import logging

import discord
from discord.ext import commands

from src.config.settings import Settings
from src.domain.registration import RegistrationService

from .cog import RegistrationCog
from .views import RegistrationContext, persistent_views

logger = logging.getLogger(__name__)


class SellerBot(commands.Bot):
    """Bot hosting the registration flow."""

    def __init__(self, settings: Settings) -> None:
        super().__init__(command_prefix=commands.when_mentioned, intents=discord.Intents.default())
        self.settings = settings
        self.service: RegistrationService | None = None

    async def setup_hook(self) -> None:
        if self.service is None:
            raise RuntimeError("SellerBot.service must be set before the bot starts")
        context = RegistrationContext(self.service, self.settings.private_responses_in_guilds)

        for view in persistent_views(context):
            self.add_view(view)

        await self.add_cog(
            RegistrationCog(context, sweep_interval_seconds=self.settings.session_sweep_interval_seconds)
        )

        if self.settings.discord_guild_id:
            guild = discord.Object(id=self.settings.discord_guild_id)
            self.tree.copy_global_to(guild=guild)
            synced = await self.tree.sync(guild=guild)
        else:
            synced = await self.tree.sync()
        logger.info("Synced %d application command(s)", len(synced))

    async def on_ready(self) -> None:
        logger.info("Logged in as %s (%s)", self.user, self.user.id if self.user else "?")
