"""Background checks of monitored sources."""

import asyncio
import logging
import time
from datetime import datetime, timezone

from orderwatch import metrics
from orderwatch.config import settings
from orderwatch.detect.change import ChangeResult, has_changed
from orderwatch.detect.throttle import AlertThrottle
from orderwatch.ingest.base import BasePayloadFetcher
from orderwatch.ingest.snapshot import build_snapshot
from orderwatch.models import MonitoredSource
from orderwatch.notify.discord import DiscordWebhook
from orderwatch.notify.formatters import build_order_alert
from orderwatch.store import SourceStore

logger = logging.getLogger(__name__)


def now_epoch() -> int:
    return int(time.time())


class SourceChecker:
    """
    Runs fetch, detection and alerting for monitored sources.

    Each source is checked under its store lock, so a scheduled check and a
    manual one never interleave their baseline updates.
    """

    def __init__(
        self,
        store: SourceStore,
        fetcher: BasePayloadFetcher,
        notifier: DiscordWebhook,
        throttle: AlertThrottle | None = None,
        source_delay_seconds: float | None = None,
        clock=now_epoch,
    ):
        self.store = store
        self.fetcher = fetcher
        self.notifier = notifier
        self.throttle = throttle or AlertThrottle(settings.alert_cooldown_seconds)
        self.source_delay_seconds = (
            settings.source_delay_seconds
            if source_delay_seconds is None
            else source_delay_seconds
        )
        self.clock = clock

    async def close(self):
        """Clean up resources."""
        await self.fetcher.close()
        await self.notifier.close()

    async def check_source(self, source: MonitoredSource) -> ChangeResult | None:
        """
        Check one source and alert if its buy-side book changed.

        Returns:
            The change result, or None if the source is disabled
        """
        if not source.enabled:
            metrics.source_checks_total.labels(status="disabled").inc()
            return None

        async with self.store.lock_for(source.id):
            url = source.url
            payloads = await self.fetcher.capture(url)
            metrics.payloads_captured_total.inc(len(payloads))

            if source.url != url:
                # Edited mid-fetch; these payloads belong to the old page
                logger.info(f"URL of {source.name} changed during check, discarding result")
                metrics.source_checks_total.labels(status="stale").inc()
                return ChangeResult(changed=False, combined_signature="", buy_count=0)

            return await self._process(source, payloads)

    async def _process(self, source: MonitoredSource, payloads: list[str]) -> ChangeResult:
        snapshot = build_snapshot(
            payloads,
            top_n=settings.top_orders,
            max_depth=settings.extract_max_depth,
            max_nodes=settings.extract_max_nodes,
        )
        source.last_check = datetime.now(timezone.utc)

        result = has_changed(source, snapshot)
        if not result.conclusive:
            logger.info(
                f"Inconclusive check for {source.name}: "
                f"{len(payloads)} payloads, no buy orders"
            )
            metrics.source_checks_total.labels(status="inconclusive").inc()
            return result

        metrics.source_checks_total.labels(status="conclusive").inc()

        now = self.clock()
        previous_count = source.last_buy_count
        decision = self.throttle.admit(source, result.changed, result.buy_count, now)
        self.throttle.commit(source, result, decision, now)

        if result.changed:
            outcome = "emitted" if decision.emit else "suppressed"
            metrics.order_changes_total.labels(outcome=outcome).inc()

        if decision.emit:
            logger.info(
                f"Buy orders changed for {source.name}: "
                f"{previous_count} -> {result.buy_count} rows"
            )
            alert = build_order_alert(source, previous_count, result.buy_count, decision.diff)
            await self.notifier.send(alert)

        return result

    async def run_cycle(self) -> None:
        """Check every enabled source once, one after another."""
        sources = self.store.list(enabled_only=True)
        metrics.sources_monitored.set(len(sources))

        for index, source in enumerate(sources):
            if source.id not in self.store:
                # Deleted while the cycle was running
                continue
            try:
                await self.check_source(source)
            except Exception:
                logger.exception(f"Check failed for {source.name}")
                metrics.source_checks_total.labels(status="error").inc()

            if index < len(sources) - 1:
                await asyncio.sleep(self.source_delay_seconds)
