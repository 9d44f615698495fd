"""
Stock Dashboard — User Preferences
────────────────────────────────────
Favorites, saved dashboard layouts and UI settings per user.

The real system keeps these in an external document store; this is the
in-process stand-in with the same validation rules. State resets on restart.
"""

import copy
import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List

from stock_engine.errors import NotFoundError, ValidationError
from stock_engine.synth.timeframe import TIMEFRAMES

log = logging.getLogger("sd.users")

THEMES = ("light", "dark", "system")

DEFAULT_SETTINGS: Dict[str, Any] = {
    "emailNotifications": {
        "dailyReport":  False,
        "weeklyReport": True,
        "priceAlerts":  True,
        "newsAlerts":   True,
    },
    "security": {
        "twoFactorEnabled": False,
    },
    "theme": "dark",
    "chartPreferences": {
        "defaultTimeframe": "1M",
        "showVolume":       True,
    },
}


def _merge(base: dict, update: dict) -> dict:
    """Recursive merge of `update` into a copy of `base`; unknown keys rejected."""
    out = copy.deepcopy(base)
    for key, value in update.items():
        if key not in base:
            raise ValidationError(f"Unknown setting: {key}")
        if isinstance(base[key], dict):
            if not isinstance(value, dict):
                raise ValidationError(f"Setting {key} must be an object")
            out[key] = _merge(base[key], value)
        elif isinstance(base[key], bool):
            if not isinstance(value, bool):
                raise ValidationError(f"Setting {key} must be true or false")
            out[key] = value
        else:
            out[key] = value
    return out


def validate_settings(settings: dict) -> dict:
    if settings["theme"] not in THEMES:
        raise ValidationError(f"Invalid theme: {settings['theme']}")
    tf = settings["chartPreferences"]["defaultTimeframe"]
    if tf not in TIMEFRAMES:
        raise ValidationError(f"Invalid default timeframe: {tf}")
    return settings


def _string_list(value, field_name: str) -> List[str]:
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ValidationError(f"Invalid {field_name} data")
    return [v.upper().strip() for v in value]


class PreferenceStore:

    def __init__(self):
        self._favorites: Dict[str, List[str]] = {}
        self._configs:   Dict[str, List[dict]] = {}
        self._settings:  Dict[str, dict] = {}

    # ── Favorites ────────────────────────────────────────────
    async def set_favorites(self, user_id: str, favorites) -> List[str]:
        if favorites is None:
            raise ValidationError("Invalid favorite stocks data")
        self._favorites[user_id] = _string_list(favorites, "favorite stocks")
        return list(self._favorites[user_id])

    async def get_favorites(self, user_id: str) -> List[str]:
        return list(self._favorites.get(user_id, []))

    # ── Dashboard configurations ─────────────────────────────
    async def add_config(self, user_id: str, name, stocks, timeframe) -> dict:
        if not name or not isinstance(name, str) or stocks is None or not timeframe:
            raise ValidationError("Invalid dashboard configuration data")
        if timeframe not in TIMEFRAMES:
            raise ValidationError(f"Invalid timeframe: {timeframe}")
        config = {
            "_id":       uuid.uuid4().hex,
            "name":      name,
            "stocks":    _string_list(stocks, "dashboard configuration"),
            "timeframe": timeframe,
            "createdAt": datetime.now(timezone.utc).isoformat(),
        }
        self._configs.setdefault(user_id, []).append(config)
        log.info(f"Saved dashboard config {config['_id']} for {user_id}")
        return dict(config)

    async def list_configs(self, user_id: str) -> List[dict]:
        return [dict(c) for c in self._configs.get(user_id, [])]

    async def delete_config(self, user_id: str, config_id: str) -> None:
        configs = self._configs.get(user_id, [])
        for i, c in enumerate(configs):
            if c["_id"] == config_id:
                del configs[i]
                return
        raise NotFoundError("Dashboard configuration not found")

    # ── Settings ─────────────────────────────────────────────
    async def get_settings(self, user_id: str) -> dict:
        return copy.deepcopy(self._settings.get(user_id, DEFAULT_SETTINGS))

    async def update_settings(self, user_id: str, update) -> dict:
        if not update or not isinstance(update, dict):
            raise ValidationError("No settings data provided")
        current = self._settings.get(user_id, DEFAULT_SETTINGS)
        merged = validate_settings(_merge(current, update))
        self._settings[user_id] = merged
        return copy.deepcopy(merged)
