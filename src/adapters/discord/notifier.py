"""
Discord notifier adapter - Implements Notifier protocol.

Delivers direct messages through the bot's gateway client.
"""

import logging

import discord

from src.domain.exceptions import NotificationError

logger = logging.getLogger(__name__)


class DiscordNotifier:
    """
    Implements Notifier protocol via Discord direct messages.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(self, client: discord.Client) -> None:
        self._client = client

    async def send_direct_message(self, user_id: str, content: str) -> None:
        """
        DM a user by id.

        Raises:
            NotificationError: If the id is invalid, the user is unknown,
                the user does not accept DMs from the bot, or the client is
                not connected yet
        """
        try:
            snowflake = int(user_id)
        except ValueError:
            raise NotificationError(f"Invalid Discord user id: {user_id!r}") from None
        if not self._client.is_ready():
            raise NotificationError("Discord client is not connected")

        try:
            user = self._client.get_user(snowflake) or await self._client.fetch_user(snowflake)
            await user.send(content)
        except discord.Forbidden as e:
            raise NotificationError(f"User {user_id} does not accept direct messages") from e
        except discord.DiscordException as e:
            raise NotificationError(f"Direct message to {user_id} failed: {e}") from e
        logger.debug("Sent direct message to user %s", user_id)
