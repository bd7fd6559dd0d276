"""Discord adapters - Bot, components and direct-message notifier."""

from .bot import SellerBot
from .notifier import DiscordNotifier

__all__ = ["DiscordNotifier", "SellerBot"]
