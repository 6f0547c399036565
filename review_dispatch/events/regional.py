"""
Regional authority client.

Each origin region runs its own system of record. A review only counts once
the region acknowledges it with a 2xx response.
"""

from __future__ import annotations

import time
from urllib.parse import quote

import httpx
import structlog

from review_dispatch.events.models import ReviewNotification
from review_dispatch.kernel.errors import UpstreamError
from review_dispatch.monitoring import metrics

logger = structlog.get_logger()


class RegionalAuthorityClient:
    """Posts review notifications to per-region endpoints with a bounded timeout."""

    def __init__(
        self,
        base_urls: dict[str, str],
        *,
        timeout_seconds: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_urls = {region: url.rstrip("/") for region, url in base_urls.items()}
        self._timeout_seconds = timeout_seconds
        self._transport = transport

    def endpoint_for(self, region: str, external_event_id: str) -> str | None:
        base_url = self._base_urls.get(region)
        if not base_url:
            return None
        return f"{base_url}/events/{quote(external_event_id, safe='')}/review"

    async def submit_review(
        self,
        *,
        event_id: str,
        region: str,
        external_event_id: str,
        notification: ReviewNotification,
    ) -> None:
        """Deliver a review; raises `UpstreamError` unless the region acknowledges it."""
        url = self.endpoint_for(region, external_event_id)
        if url is None:
            logger.warning("Regional API URL not configured", region=region, event_id=event_id)
            raise UpstreamError(
                code="upstream.region_not_configured",
                message=f"No regional API configured for region {region}.",
                meta={"event_id": event_id, "region": region},
            )

        logger.info("Calling regional API", event_id=event_id, region=region, url=url)
        started = time.monotonic()
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout_seconds,
                transport=self._transport,
            ) as client:
                response = await client.post(url, json=notification.to_wire())
        except httpx.TimeoutException as exc:
            logger.error("Regional API call timed out", event_id=event_id, url=url, error=str(exc))
            raise UpstreamError(
                code="upstream.regional_api_timeout",
                message=f"Regional system timed out for event {event_id}.",
                meta={"event_id": event_id, "region": region},
            ) from exc
        except httpx.HTTPError as exc:
            logger.error("Regional API call failed", event_id=event_id, url=url, error=str(exc))
            raise UpstreamError(
                code="upstream.regional_api_failed",
                message=f"Failed to reach regional system for event {event_id}.",
                meta={"event_id": event_id, "region": region},
            ) from exc
        finally:
            metrics.regional_api_duration_seconds.labels(region=region).observe(time.monotonic() - started)

        if not response.is_success:
            logger.error(
                "Regional API returned unexpected status",
                event_id=event_id,
                status_code=response.status_code,
                body=response.text[:500],
            )
            raise UpstreamError(
                code="upstream.regional_api_failed",
                message=f"Regional system rejected review for event {event_id}.",
                meta={"event_id": event_id, "region": region, "status_code": response.status_code},
            )

        logger.info("Regional API call successful", event_id=event_id, region=region)
