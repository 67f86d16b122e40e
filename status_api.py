"""
Snapshot-backed status endpoint.

Serves /api/get-spotify-current from a JSON file that an external updater
keeps current, so the page has something to poll without talking to the
streaming provider itself.
"""

import json
import logging
import os
import time
from dataclasses import replace

from flask import Flask, jsonify
from flask_cors import CORS

from config import HOST, LOG_LEVEL, NOW_PLAYING_JSON, SNAPSHOT_STALE_SECONDS, STATUS_API_PORT
from models import PlaybackStatus

log = logging.getLogger(__name__)

app = Flask(__name__)
CORS(app)
app.config["NOW_PLAYING_JSON"] = NOW_PLAYING_JSON
app.config["SNAPSHOT_STALE_SECONDS"] = SNAPSHOT_STALE_SECONDS


def _file_age(path):
    """Return age of file in seconds, or infinity if missing."""
    try:
        return time.time() - os.path.getmtime(path)
    except OSError:
        return float("inf")


def _load_snapshot(path):
    """Read the snapshot, stamping a missing timestamp with the file's mtime."""
    with open(path, "r") as f:
        data = json.load(f)
    if isinstance(data, dict) and data.get("timestamp") is None:
        data["timestamp"] = int(os.path.getmtime(path) * 1000)
    return PlaybackStatus.from_json(data)


def _settle(status, age_seconds, stale_after):
    """
    An old snapshot still claiming to play is trusted only until its track
    would have ended; after that it is reported as the most recently played.
    """
    if not status.is_playing or age_seconds < stale_after:
        return status
    if status.corrected_elapsed_ms(time.time() * 1000) < status.duration_ms:
        return status
    return replace(status, is_playing=False, progress_ms=0)


# --- Endpoints ---

@app.route("/api/get-spotify-current")
def get_spotify_current():
    path = app.config["NOW_PLAYING_JSON"]
    try:
        status = _load_snapshot(path)
    except (OSError, ValueError) as e:
        log.warning("No usable snapshot at %s: %s", path, e)
        return jsonify(error="No playback snapshot available"), 503

    status = _settle(status, _file_age(path), app.config["SNAPSHOT_STALE_SECONDS"])
    return jsonify(status.to_json())


def main():
    logging.basicConfig(level=LOG_LEVEL, format="%(levelname)s: %(message)s")
    log.info("Serving status snapshot %s on %s:%d", NOW_PLAYING_JSON, HOST, STATUS_API_PORT)
    app.run(host=HOST, port=STATUS_API_PORT)


if __name__ == "__main__":
    main()
