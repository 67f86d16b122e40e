import logging
import threading

from flask import Flask, request
from flask_cors import CORS
from flask_socketio import SocketIO, emit

from analytics import init_analytics
from config import (
    GOOGLE_ANALYTICS_CODE,
    HOST,
    LOG_LEVEL,
    PORT,
    PUBLIC_BASE_URL,
    STATUS_URL,
    TICK_MS,
)
from progress import ProgressController
from status_fetcher import fetch_currently_playing, request_base_url, resolve_status_url
from view import build_view, progress_payload, render_page, render_player

log = logging.getLogger(__name__)

app = Flask(__name__)
CORS(app)
socketio = SocketIO(app, cors_allowed_origins="*")
init_analytics(app, GOOGLE_ANALYTICS_CODE)

# Connected socket clients; the ticker only runs while someone is watching
connected_clients = set()
_ticker_lock = threading.Lock()
_ticker_running = False

# Where a relative STATUS_URL points when there is no request to take it from
_last_base_url = PUBLIC_BASE_URL


def _fetch_status(base_url=None):
    return fetch_currently_playing(resolve_status_url(STATUS_URL, base_url or _last_base_url))


def _spawn(fn, *args):
    socketio.start_background_task(fn, *args)


def _current_view():
    view_state, status, progress = controller.snapshot()
    return build_view(view_state, status, progress)


def _broadcast(event):
    if event == "progress":
        _, _, progress = controller.snapshot()
        socketio.emit("progress", progress_payload(progress))
        return
    with app.app_context():
        html = render_player(_current_view())
    socketio.emit("view", html)


controller = ProgressController(fetch=_fetch_status, spawn=_spawn, listener=_broadcast)


# --- Ticker ---

def _ticker():
    global _ticker_running
    log.info("Progress ticker started")
    stopped = False
    try:
        while True:
            with _ticker_lock:
                if not connected_clients:
                    _ticker_running = False
                    stopped = True
                    break
            try:
                controller.tick()
            except Exception:
                log.exception("Progress tick failed")
            socketio.sleep(TICK_MS / 1000)
    finally:
        if not stopped:
            with _ticker_lock:
                _ticker_running = False
    log.info("Progress ticker stopped: no clients left")


def _add_client(sid):
    """Register a client; returns True when this started the ticker."""
    global _ticker_running
    with _ticker_lock:
        connected_clients.add(sid)
        if _ticker_running:
            return False
        _ticker_running = True
    socketio.start_background_task(_ticker)
    return True


def _remove_client(sid):
    with _ticker_lock:
        connected_clients.discard(sid)


# --- Endpoints ---

@app.route("/")
def index():
    global _last_base_url
    base_url = request_base_url(request.headers, request.scheme)
    if base_url:
        _last_base_url = base_url

    controller.load(lambda: _fetch_status(base_url))
    return render_page(_current_view())


@socketio.on("connect")
def handle_connect():
    _add_client(request.sid)
    emit("view", render_player(_current_view()))


@socketio.on("disconnect")
def handle_disconnect(reason=None):
    _remove_client(request.sid)


def main():
    logging.basicConfig(level=LOG_LEVEL, format="%(levelname)s: %(message)s")
    log.info("Serving now-playing page on %s:%d (status from %s)", HOST, PORT, STATUS_URL)
    socketio.run(app, host=HOST, port=PORT, allow_unsafe_werkzeug=True)


if __name__ == "__main__":
    main()
