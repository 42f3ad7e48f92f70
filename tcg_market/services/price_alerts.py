"""
tcg_market/services/price_alerts.py – per-user price alerts, kept in memory.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

from tcg_market.models import PriceAlert

logger = logging.getLogger(__name__)

# Keys the server assigns itself; caller values for them are discarded.
_SERVER_FIELDS = ("id", "createdAt", "created_at")


class PriceAlertStore:
    def __init__(self) -> None:
        self._items: list[PriceAlert] = []

    def list(self, user_id: Optional[str]) -> list[PriceAlert]:
        return [a for a in self._items if a.user_id == user_id]

    def get(self, user_id: Optional[str], alert_id: str) -> Optional[PriceAlert]:
        for alert in self._items:
            if alert.user_id == user_id and alert.id == alert_id:
                return alert
        return None

    def add(self, fields: dict[str, Any]) -> PriceAlert:
        """Create an alert from caller-supplied fields."""
        payload = {k: v for k, v in fields.items() if k not in _SERVER_FIELDS}
        alert = PriceAlert.model_validate(payload)
        self._items.append(alert)
        logger.info("Price alert added: user=%s id=%s", alert.user_id, alert.id)
        return alert

    def remove(self, user_id: Optional[str], alert_id: str) -> bool:
        alert = self.get(user_id, alert_id)
        if alert is None:
            return False
        self._items.remove(alert)
        logger.info("Price alert removed: user=%s id=%s", user_id, alert_id)
        return True

    def set_enabled(
        self, user_id: Optional[str], alert_id: str, enabled: bool
    ) -> Optional[PriceAlert]:
        alert = self.get(user_id, alert_id)
        if alert is None:
            return None
        alert.enabled = enabled
        return alert

    def __len__(self) -> int:
        return len(self._items)
