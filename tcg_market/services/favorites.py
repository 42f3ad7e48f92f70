"""
tcg_market/services/favorites.py – per-user favorite cards, kept in memory.

At most one favorite exists per (user_id, card_id) pair.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

from tcg_market.models import Favorite

logger = logging.getLogger(__name__)


class FavoritesStore:
    def __init__(self) -> None:
        self._items: list[Favorite] = []

    def list(self, user_id: Optional[str]) -> list[Favorite]:
        return [f for f in self._items if f.user_id == user_id]

    def get(self, user_id: Optional[str], card_id: str) -> Optional[Favorite]:
        for favorite in self._items:
            if favorite.user_id == user_id and favorite.card_id == card_id:
                return favorite
        return None

    def add(self, user_id: str, card_id: str, card_data: Any = None) -> Optional[Favorite]:
        """Add a favorite; returns None when the pair is already present."""
        if self.get(user_id, card_id) is not None:
            return None
        favorite = Favorite(user_id=user_id, card_id=card_id, card_data=card_data)
        self._items.append(favorite)
        logger.info("Favorite added: user=%s card=%s", user_id, card_id)
        return favorite

    def remove(self, user_id: Optional[str], card_id: str) -> bool:
        favorite = self.get(user_id, card_id)
        if favorite is None:
            return False
        self._items.remove(favorite)
        logger.info("Favorite removed: user=%s card=%s", user_id, card_id)
        return True

    def __len__(self) -> int:
        return len(self._items)
