"""JSON API serving the aggregated listing feed."""

import asyncio
import logging
import os
import threading
from typing import Optional

from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from ..config import load_config
from ..main import RentalFeed
from ..utils.logging import setup_logging

logger = logging.getLogger(__name__)

TRUTHY = {"1", "true", "yes"}


class LoopRunner:
    """
    Background event loop shared by all request threads.

    The feed's cache lives on this loop, so concurrent requests join the
    same in-flight refresh instead of each starting their own.
    """

    def __init__(self):
        self.loop = asyncio.new_event_loop()
        self._thread = threading.Thread(target=self.loop.run_forever, name="feed-loop", daemon=True)
        self._thread.start()

    def run(self, coro, timeout: Optional[float] = None):
        return asyncio.run_coroutine_threadsafe(coro, self.loop).result(timeout)

    def stop(self) -> None:
        self.loop.call_soon_threadsafe(self.loop.stop)
        self._thread.join(timeout=5)


def create_app(feed: Optional[RentalFeed] = None, config_path: Optional[str] = None) -> Flask:
    """
    Build the Flask app.

    Args:
        feed: Preconfigured feed (tests); built from config when omitted
        config_path: YAML config used when ``feed`` is omitted
    """
    if feed is None:
        config_path = config_path or os.getenv("RENTAL_AGGREGATOR_CONFIG")
        feed = RentalFeed(load_config(config_path))

    app = Flask(__name__)
    runner = LoopRunner()
    app.config["FEED"] = feed
    app.config["LOOP_RUNNER"] = runner

    @app.route("/api/listings")
    def listings():
        force = request.args.get("refresh", "").lower() in TRUTHY
        was_fresh = feed.cache.is_fresh()
        snapshot = runner.run(feed.get_current_listings(force_refresh=force))
        return jsonify(snapshot.to_dict(cached=was_fresh and not force))

    @app.route("/api/sources")
    def sources():
        return jsonify(feed.source_status())

    @app.route("/health")
    def health():
        return jsonify({"status": "ok"})

    @app.errorhandler(Exception)
    def handle_error(error):
        if isinstance(error, HTTPException):
            return jsonify({"error": error.name}), error.code
        logger.exception(f"Unhandled error serving {request.path}: {error}")
        return jsonify({"error": "Failed to load listings", "properties": [], "count": 0}), 500

    return app


def main():
    setup_logging()
    app = create_app()
    port = int(os.getenv("PORT", "5000"))
    app.run(host=os.getenv("HOST", "127.0.0.1"), port=port, threaded=True)


if __name__ == "__main__":
    main()
