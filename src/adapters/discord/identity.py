"""Map Discord users onto the domain's UserIdentity."""

import discord

from src.domain.ports import UserIdentity


def identity_from_user(user: discord.User | discord.Member) -> UserIdentity:
    """
    Build the identity for the user behind an interaction.

    The legacy name#1234 tag is only set for accounts that still have a
    discriminator; the nickname only exists for guild members.
    """
    discriminator = getattr(user, "discriminator", "0")
    return UserIdentity(
        user_id=str(user.id),
        username=user.name,
        tag=f"{user.name}#{discriminator}" if discriminator not in ("0", "0000", None) else None,
        display_name=getattr(user, "global_name", None),
        nickname=getattr(user, "nick", None),
    )
