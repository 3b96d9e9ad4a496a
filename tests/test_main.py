"""Tests for the RentalFeed entry point and CLI."""

import asyncio
import json

import pytest

from rental_aggregator.adapters import build_adapters
from rental_aggregator.config import load_config
from rental_aggregator.main import RentalFeed, main
from rental_aggregator.services.email_sender import EmailNotifier

from conftest import FakeClient, StaticAdapter


class TestRentalFeed:
    """Tests for RentalFeed wiring."""

    def test_get_current_listings_uses_cache(self, make_record):
        adapter = StaticAdapter("A", [make_record("a1")])
        feed = RentalFeed(load_config(None), adapters=[adapter])

        async def scenario():
            first = await feed.get_current_listings()
            second = await feed.get_current_listings()
            return first, second

        first, second = asyncio.run(scenario())
        assert first is second
        assert adapter.calls == 1

    def test_watch_refreshes_each_iteration(self, make_record):
        adapter = StaticAdapter("A", [make_record("a1")])
        feed = RentalFeed(load_config(None), adapters=[adapter])

        asyncio.run(feed.watch(interval_minutes=0, iterations=3))
        assert adapter.calls == 3

    def test_all_agencies_down_returns_empty_snapshot(self):
        config = load_config(None)
        config["scraper"]["politeness_delay"] = 0
        feed = RentalFeed(config, adapters=build_adapters(config, FakeClient()), notify=False)

        snapshot = asyncio.run(feed.get_current_listings())

        assert snapshot.count == 0
        assert len(snapshot.outcomes) == 9
        assert len(snapshot.failed_outcomes) == 9
        status = feed.source_status()
        assert status["count"] == 0
        assert len(status["errors"]) == 9
        assert all("Index fetch failed" in error for error in status["errors"])

    def test_builds_registered_adapters(self):
        feed = RentalFeed(load_config(None), only_agency="rotsvast")
        assert [a.SOURCE_KEY for a in feed.adapters] == ["rotsvast"]

    def test_email_notifier_when_enabled(self):
        config = load_config(None)
        config["notifications"] = {"enabled": True, "recipients": ["a@example.nl"]}
        feed = RentalFeed(config, adapters=[])
        assert isinstance(feed.dispatcher.notifier, EmailNotifier)

    def test_no_notify_disables_notifier(self):
        config = load_config(None)
        config["notifications"] = {"enabled": True, "recipients": ["a@example.nl"]}
        feed = RentalFeed(config, adapters=[], notify=False)
        assert feed.dispatcher.notifier is None


class TestCli:
    """Tests for the command line interface."""

    @pytest.fixture(autouse=True)
    def quiet_logging(self, monkeypatch):
        monkeypatch.setattr("rental_aggregator.main.setup_logging", lambda level=None: None)

    def test_missing_explicit_config_exits(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        with pytest.raises(SystemExit) as exc:
            main(["-c", str(tmp_path / "missing.yaml")])
        assert exc.value.code == 1

    def test_unknown_agency_exits(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        with pytest.raises(SystemExit) as exc:
            main(["--agency", "funda"])
        assert exc.value.code == 1

    def test_json_output(self, tmp_path, monkeypatch, capsys, make_record):
        monkeypatch.chdir(tmp_path)
        adapter = StaticAdapter("A", [make_record("a1", title="Herestraat 3")])
        monkeypatch.setattr(
            "rental_aggregator.main.build_adapters",
            lambda config, client, only=None: [adapter],
        )

        main(["--json", "--no-notify"])

        data = json.loads(capsys.readouterr().out)
        assert data["count"] == 1
        assert data["properties"][0]["title"] == "Herestraat 3"
