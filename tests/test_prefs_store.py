"""Tests for the user preference store."""

import asyncio

import pytest

from stock_engine.errors import NotFoundError, ValidationError
from stock_engine.users.prefs_store import DEFAULT_SETTINGS, PreferenceStore


@pytest.fixture
def store() -> PreferenceStore:
    return PreferenceStore()


class TestFavorites:

    def test_set_and_get(self, store: PreferenceStore) -> None:
        assert asyncio.run(store.set_favorites("u1", ["aapl", "MSFT"])) == ["AAPL", "MSFT"]
        assert asyncio.run(store.get_favorites("u1")) == ["AAPL", "MSFT"]
        assert asyncio.run(store.get_favorites("u2")) == []

    @pytest.mark.parametrize("bad", [None, "AAPL", [1, 2]])
    def test_rejects_non_lists(self, store: PreferenceStore, bad) -> None:
        with pytest.raises(ValidationError):
            asyncio.run(store.set_favorites("u1", bad))


class TestDashboardConfigs:

    def test_add_list_delete(self, store: PreferenceStore) -> None:
        config = asyncio.run(store.add_config("u1", "Tech", ["AAPL", "MSFT"], "3M"))
        assert config["name"] == "Tech"
        assert asyncio.run(store.list_configs("u1")) == [config]
        asyncio.run(store.delete_config("u1", config["_id"]))
        assert asyncio.run(store.list_configs("u1")) == []

    def test_configs_are_per_user(self, store: PreferenceStore) -> None:
        asyncio.run(store.add_config("u1", "Tech", ["AAPL"], "1M"))
        assert asyncio.run(store.list_configs("u2")) == []

    @pytest.mark.parametrize(
        "name,stocks,timeframe",
        [(None, ["AAPL"], "1M"), ("x", None, "1M"), ("x", "AAPL", "1M"), ("x", ["AAPL"], None), ("x", ["AAPL"], "5Y")],
    )
    def test_invalid_config(self, store: PreferenceStore, name, stocks, timeframe) -> None:
        with pytest.raises(ValidationError):
            asyncio.run(store.add_config("u1", name, stocks, timeframe))

    def test_delete_unknown(self, store: PreferenceStore) -> None:
        with pytest.raises(NotFoundError):
            asyncio.run(store.delete_config("u1", "missing"))


class TestSettings:

    def test_defaults(self, store: PreferenceStore) -> None:
        assert asyncio.run(store.get_settings("u1")) == DEFAULT_SETTINGS

    def test_partial_update_merges(self, store: PreferenceStore) -> None:
        out = asyncio.run(store.update_settings("u1", {"theme": "light", "chartPreferences": {"showVolume": False}}))
        assert out["theme"] == "light"
        assert out["chartPreferences"] == {"defaultTimeframe": "1M", "showVolume": False}
        assert out["emailNotifications"] == DEFAULT_SETTINGS["emailNotifications"]

    def test_defaults_not_mutated(self, store: PreferenceStore) -> None:
        settings = asyncio.run(store.get_settings("u1"))
        settings["theme"] = "light"
        assert DEFAULT_SETTINGS["theme"] == "dark"

    @pytest.mark.parametrize(
        "update",
        [
            None,
            {},
            {"theme": "neon"},
            {"chartPreferences": {"defaultTimeframe": "10Y"}},
            {"emailNotifications": {"dailyReport": "yes"}},
            {"unknown": 1},
            {"security": True},
        ],
    )
    def test_invalid_updates(self, store: PreferenceStore, update) -> None:
        with pytest.raises(ValidationError):
            asyncio.run(store.update_settings("u1", update))
        assert asyncio.run(store.get_settings("u1")) == DEFAULT_SETTINGS
