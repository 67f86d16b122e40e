import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional


def _parse_timestamp(value) -> float:
    """Epoch milliseconds from a number, a digit string or an ISO-8601 string."""
    if isinstance(value, bool):
        raise ValueError(f"Invalid timestamp: {value!r}")
    if isinstance(value, (int, float)):
        try:
            return _finite(float(value), value)
        except OverflowError:
            raise ValueError(f"Invalid timestamp: {value!r}") from None
    if isinstance(value, str) and value.strip():
        text = value.strip()
        try:
            number = float(text)
        except ValueError:
            pass
        else:
            return _finite(number, value)
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            raise ValueError(f"Invalid timestamp: {value!r}") from None
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed.timestamp() * 1000
    raise ValueError(f"Invalid timestamp: {value!r}")


def _finite(number, original):
    if not math.isfinite(number):
        raise ValueError(f"Invalid timestamp: {original!r}")
    return number


def _non_negative_int(data: dict, key: str) -> int:
    value = data.get(key, 0)
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{key} must be a number, got {value!r}")
    if isinstance(value, float) and not math.isfinite(value):
        raise ValueError(f"{key} must be finite, got {value!r}")
    if value < 0:
        raise ValueError(f"{key} must be >= 0, got {value!r}")
    return int(value)


def _text(data: dict, key: str) -> str:
    value = data.get(key)
    return "" if value is None else str(value)


@dataclass(frozen=True)
class PlaybackStatus:
    is_playing: bool
    name: str
    artist: str
    image: str
    url: str
    id: str
    duration_ms: int
    progress_ms: int
    timestamp: Optional[float] = None  # epoch ms of the upstream snapshot
    background_color: Optional[str] = None

    @classmethod
    def from_json(cls, data):
        """Build a status from the endpoint's JSON body.

        Raises ValueError when the body is not a usable status.
        """
        if not isinstance(data, dict):
            raise ValueError("status body must be a JSON object")
        is_playing = data.get("isPlaying")
        if not isinstance(is_playing, bool):
            raise ValueError(f"isPlaying must be a boolean, got {is_playing!r}")

        timestamp = data.get("timestamp")
        if timestamp is not None:
            timestamp = _parse_timestamp(timestamp)
        elif is_playing:
            raise ValueError("a playing status needs a timestamp")

        background = data.get("backgroundColor")
        return cls(
            is_playing=is_playing,
            name=_text(data, "name"),
            artist=_text(data, "artist"),
            image=_text(data, "image"),
            url=_text(data, "url"),
            id=_text(data, "id"),
            duration_ms=_non_negative_int(data, "duration_ms"),
            progress_ms=_non_negative_int(data, "progress_ms"),
            timestamp=timestamp,
            background_color=str(background) if background else None,
        )

    def to_json(self) -> dict:
        body = {
            "isPlaying": self.is_playing,
            "name": self.name,
            "artist": self.artist,
            "image": self.image,
            "url": self.url,
            "id": self.id,
            "duration_ms": self.duration_ms,
            "progress_ms": self.progress_ms,
            "timestamp": int(self.timestamp) if self.timestamp is not None else None,
        }
        if self.background_color:
            body["backgroundColor"] = self.background_color
        return body

    def corrected_elapsed_ms(self, now_ms: float) -> int:
        """Playback position now, given the snapshot was taken at `timestamp`."""
        if self.timestamp is None:
            return self.progress_ms
        return int(now_ms - self.timestamp) + self.progress_ms
