from flask import render_template

from colors import background_tint
from config import OWNER_NAME, PROFILE_URL, SOURCE_URL
from timefmt import format_duration


def _bar_width(percent):
    return max(0.0, min(percent, 100.0))


def build_view(view_state, status, progress):
    """
    Describe what the page shows for the given state.

    Returns a dict with a "kind" of "error", "loading" or "track". Progress
    fields are only present for a playing track.
    """
    if view_state.is_error:
        return {"kind": "error", "profile_url": PROFILE_URL}
    if status is None:
        return {"kind": "loading"}

    view = {
        "kind": "track",
        "name": status.name,
        "artist": status.artist,
        "image": status.image,
        "url": status.url,
        "is_playing": status.is_playing,
        "background": background_tint(status.background_color, status.id),
    }
    if status.is_playing:
        view.update(
            progress_width=_bar_width(progress.progress_percent),
            elapsed=format_duration(progress.progress_ms),
            total=format_duration(status.duration_ms),
        )
    return view


def progress_payload(progress):
    return {
        "progressMs": progress.progress_ms,
        "progressPercent": _bar_width(progress.progress_percent),
        "elapsed": format_duration(progress.progress_ms),
    }


def render_page(view):
    return render_template(
        "index.html",
        view=view,
        owner=OWNER_NAME,
        source_url=SOURCE_URL,
    )


def render_player(view):
    return render_template("_player.html", view=view)
