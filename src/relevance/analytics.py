"""
Configuration analytics.

Records index-creation and feedback events as structured log lines so they
can be shipped by the log pipeline. Events are only emitted in production.
"""

import base64
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from config.settings import Settings, get_settings
from core.logging import get_logger

logger = get_logger(__name__)

INDEX_CREATED_EVENT = "Index Created with AI Configuration"
FEEDBACK_EVENT = "AI Configuration Feedback"


def anonymous_id(client_ip: Optional[str], user_agent: Optional[str]) -> str:
    """Stable, non-reversible-enough id for a caller (ip + user agent, base64, 32 chars)."""
    raw = f"{client_ip or 'unknown'}-{user_agent or ''}"
    return base64.b64encode(raw.encode("utf-8")).decode("ascii")[:32]


class ConfigurationAnalytics:
    """
    Track configuration events.

    Failures are logged and swallowed so tracking never breaks a request.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self._settings = settings or get_settings()

    @property
    def enabled(self) -> bool:
        return self._settings.is_production

    def track_event(
        self,
        event: str,
        properties: Optional[Dict[str, Any]] = None,
        client_ip: Optional[str] = None,
        user_agent: Optional[str] = None,
        referer: Optional[str] = None,
    ) -> bool:
        """
        Emit one analytics event.

        Returns:
            True if the event was emitted.
        """
        if not self.enabled:
            logger.debug(
                "Skipping analytics event outside production",
                event_name=event,
                environment=self._settings.environment,
            )
            return False

        try:
            logger.info(
                "Analytics event",
                event_name=event,
                anonymous_id=anonymous_id(client_ip, user_agent),
                properties={
                    **(properties or {}),
                    "timestamp": datetime.now(timezone.utc).isoformat(),
                    "userAgent": user_agent,
                    "referer": referer,
                },
            )
        except Exception as e:
            logger.warning("Failed to track event", event_name=event, error=str(e))
            return False

        return True


def get_analytics() -> ConfigurationAnalytics:
    return ConfigurationAnalytics(get_settings())
