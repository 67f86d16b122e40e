"""
Local playback progress between status polls.

The controller holds the one in-memory view of what is playing. A ticker
calls tick() every TICK_MS; while a track is counting, its position moves
forward locally, and once it reaches the track's end a single refresh is
started. Fetches run through `spawn` so the ticker never blocks on the network.

  idle        - nothing counting (error, not playing, or nothing loaded yet)
  counting    - a playing track's position is advancing
  refreshing  - a status fetch is outstanding
"""

import logging
import threading
from dataclasses import dataclass, replace

from config import (
    ERROR_RETRY_MAX_SECONDS,
    ERROR_RETRY_SECONDS,
    IDLE_POLL_SECONDS,
    MIN_REFRESH_INTERVAL_SECONDS,
    TICK_MS,
)
from status_fetcher import FetchResult

log = logging.getLogger(__name__)

IDLE = "idle"
COUNTING = "counting"
REFRESHING = "refreshing"

MAX_BACKOFF_DOUBLINGS = 32


@dataclass
class ViewState:
    is_loading: bool = False
    is_error: bool = False


@dataclass
class ClientProgress:
    progress_ms: int = 0
    progress_percent: float = 0.0


def run_inline(fn, *args):
    fn(*args)


class ProgressController:
    def __init__(
        self,
        fetch,
        spawn=run_inline,
        listener=None,
        tick_ms=TICK_MS,
        min_refresh_interval=MIN_REFRESH_INTERVAL_SECONDS,
        error_retry=ERROR_RETRY_SECONDS,
        error_retry_max=ERROR_RETRY_MAX_SECONDS,
        idle_poll=IDLE_POLL_SECONDS,
    ):
        self._fetch = fetch
        self._spawn = spawn
        self._listener = listener
        self._lock = threading.Lock()

        self.tick_ms = tick_ms
        self.min_refresh_interval_ms = min_refresh_interval * 1000
        self.error_retry_ms = error_retry * 1000
        self.error_retry_max_ms = error_retry_max * 1000
        self.idle_poll_ms = idle_poll * 1000

        self.phase = IDLE
        self.view_state = ViewState()
        self.status = None
        self.progress = ClientProgress()

        self._seq = 0             # last sequence number handed out
        self._applied_seq = 0     # highest sequence whose result was installed
        self._inflight_seq = None  # refresh guarded by is_loading
        self._error_streak = 0
        self._idle_ms = 0
        self._since_refresh_ms = float("inf")

    # --- Fetching ---

    def load(self, fetch=None):
        """Fetch synchronously (first page load) and install the result."""
        with self._lock:
            self._seq += 1
            seq = self._seq
        result = (fetch or self._fetch)()
        self.install(seq, result)
        return result

    def refresh(self):
        """Start one background fetch unless one is already outstanding."""
        with self._lock:
            if self.view_state.is_loading:
                return False
            self._seq += 1
            seq = self._seq
            self._inflight_seq = seq
            self.view_state.is_error = False
            self.view_state.is_loading = True
            self.phase = REFRESHING
            self._since_refresh_ms = 0
        log.debug("Starting status refresh #%d", seq)
        self._notify("status")
        self._spawn(self._run_refresh, seq)
        return True

    def _run_refresh(self, seq):
        try:
            result = self._fetch()
        except Exception:
            log.exception("Status refresh #%d crashed", seq)
            result = FetchResult(error=True)
        self.install(seq, result)

    def install(self, seq, result):
        """Apply a fetch result unless a newer one has already landed."""
        with self._lock:
            if seq == self._inflight_seq:
                self._inflight_seq = None
                self.view_state.is_loading = False
            if seq <= self._applied_seq:
                log.debug("Dropping stale status #%d (already have #%d)", seq, self._applied_seq)
                applied = False
            else:
                self._apply(seq, result)
                applied = True
        self._notify("status")
        return applied

    def _apply(self, seq, result):
        self._applied_seq = seq
        self._idle_ms = 0
        if result.error or result.status is None:
            self.status = None
            self.view_state.is_error = True
            self.progress = ClientProgress()
            self.phase = IDLE
            self._error_streak += 1
            return

        self.status = result.status
        self.view_state.is_error = False
        self._error_streak = 0
        self.progress = ClientProgress(progress_ms=result.progress_ms)
        self._recompute_percent()
        self.phase = COUNTING if self.status.is_playing else IDLE

    # --- Ticking ---

    def tick(self):
        with self._lock:
            moved = self._advance()
            self._since_refresh_ms += self.tick_ms
            if self.phase == IDLE and not self.view_state.is_loading:
                self._idle_ms += self.tick_ms
            due = self._refresh_due()
        if moved:
            self._notify("progress")
        if due:
            self.refresh()

    def _advance(self):
        if self.phase != COUNTING or self.status is None:
            return False
        if self.progress.progress_ms >= self.status.duration_ms:
            return False
        self.progress.progress_ms += self.tick_ms
        self._recompute_percent()
        return True

    def _recompute_percent(self):
        duration = self.status.duration_ms if self.status else 0
        if duration <= 0:
            self.progress.progress_percent = 0.0
        else:
            self.progress.progress_percent = 100 * self.progress.progress_ms / duration

    def retry_delay_ms(self):
        """Wait before retrying after the current run of consecutive errors."""
        if self.error_retry_ms <= 0 or self._error_streak == 0:
            return 0
        cap = max(self.error_retry_max_ms, self.error_retry_ms)
        delay = self.error_retry_ms * 2 ** min(self._error_streak - 1, MAX_BACKOFF_DOUBLINGS)
        return min(delay, cap)

    def _refresh_due(self):
        if self.view_state.is_loading:
            return False
        if self._since_refresh_ms < self.min_refresh_interval_ms:
            return False
        if self.phase == COUNTING:
            return self.progress.progress_percent >= 100
        if self.phase != IDLE:
            return False
        if self.view_state.is_error:
            delay = self.retry_delay_ms()
            return delay > 0 and self._idle_ms >= delay
        if self.status is None:
            # nothing loaded yet, e.g. a socket reconnected before any page load
            return True
        return self.idle_poll_ms > 0 and self._idle_ms >= self.idle_poll_ms

    # --- Reading ---

    def snapshot(self):
        with self._lock:
            return replace(self.view_state), self.status, replace(self.progress)

    def _notify(self, event):
        if not self._listener:
            return
        try:
            self._listener(event)
        except Exception:
            log.exception("Listener failed on %r", event)
