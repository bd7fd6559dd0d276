"""
Duplicate resolver - does this user already have a seller record?

Resolution order:
1. Exact match on the Discord user id.
2. Optional name heuristics: any stored Discord username containing one of
   the user's names (username, tag, nickname, display name). Catches
   records created outside the bot, e.g. through the web sales agreement.

Both lookups are read-only. The first record returned wins; the store
decides the order. Store failures propagate as StoreError so the caller
can choose to fail open or closed.
"""

import logging
from dataclasses import dataclass

from .filters import AnyOf, FieldContains, FieldEquals
from .ports import DuplicateMatch, RecordStore, SellerField, UserIdentity

logger = logging.getLogger(__name__)


@dataclass
class DuplicateResolver:
    """Looks up existing seller records for a user."""

    store: RecordStore

    async def resolve(self, identity: UserIdentity, use_name_heuristics: bool = True) -> DuplicateMatch:
        """
        Determine whether a record already exists for this user.

        Args:
            identity: Acting user
            use_name_heuristics: Fall back to substring matching on names

        Returns:
            DuplicateMatch, found or not found

        Raises:
            StoreError: If the record store cannot be queried
        """
        records = await self.store.find(
            FieldEquals(SellerField.DISCORD_ID, identity.user_id), max_records=1
        )
        if records:
            return DuplicateMatch.from_record(records[0])

        if not use_name_heuristics:
            return DuplicateMatch.not_found()

        candidates = identity.name_candidates()
        if not candidates:
            return DuplicateMatch.not_found()

        records = await self.store.find(
            AnyOf(*(FieldContains(SellerField.DISCORD_USERNAME, name) for name in candidates)),
            max_records=1,
        )
        if records:
            logger.info(
                "User %s matched existing seller %s by name", identity.user_id, records[0].seller_id
            )
            return DuplicateMatch.from_record(records[0])
        return DuplicateMatch.not_found()
