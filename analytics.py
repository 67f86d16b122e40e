import logging
from dataclasses import dataclass

log = logging.getLogger(__name__)

GTAG_SCRIPT_URL = "https://www.googletagmanager.com/gtag/js?id={}"


@dataclass(frozen=True)
class Analytics:
    tracking_id: str = ""

    @property
    def enabled(self) -> bool:
        return bool(self.tracking_id)

    @property
    def script_url(self) -> str:
        return GTAG_SCRIPT_URL.format(self.tracking_id)


def init_analytics(app, tracking_id):
    """
    Wire the gtag snippet into every rendered page, once per app.

    An empty tracking id leaves analytics disabled; templates then render
    no tag at all.
    """
    existing = app.extensions.get("analytics")
    if existing is not None:
        log.debug("Analytics already initialized for %s", app.name)
        return existing

    analytics = Analytics(tracking_id=(tracking_id or "").strip())
    app.extensions["analytics"] = analytics

    @app.context_processor
    def _inject_analytics():
        return {"analytics": analytics}

    if analytics.enabled:
        log.info("Analytics enabled (%s)", analytics.tracking_id)
    else:
        log.info("Analytics disabled: no tracking id configured")
    return analytics
