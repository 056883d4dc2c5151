"""Cooldown gate between detected changes and emitted alerts."""

import logging
from dataclasses import dataclass

from orderwatch.detect.change import ChangeResult
from orderwatch.models import MonitoredSource

logger = logging.getLogger(__name__)


@dataclass
class AdmitDecision:
    """Whether to emit an alert now, and the buy row delta it reports."""

    emit: bool
    diff: int = 0


class AlertThrottle:
    """Rate-limits alerts per source with a fixed cooldown window."""

    def __init__(self, cooldown_seconds: int):
        self.cooldown_seconds = cooldown_seconds

    def cooldown_remaining(self, source: MonitoredSource, now: int) -> int:
        """Seconds until the source may alert again, 0 if it may now."""
        return max(0, source.last_alert_at + self.cooldown_seconds - now)

    def admit(
        self,
        source: MonitoredSource,
        changed: bool,
        buy_count: int,
        now: int,
    ) -> AdmitDecision:
        """
        Decide whether a detected change should be announced.

        Args:
            source: Source the change belongs to (not modified)
            changed: Result of change detection
            buy_count: Buy rows counted in this poll cycle
            now: Current epoch seconds

        Returns:
            AdmitDecision; diff is the row delta against the previous poll
            whenever a change was detected, suppressed or not
        """
        if not changed:
            return AdmitDecision(emit=False)

        diff = buy_count - source.last_buy_count

        if now - source.last_alert_at < self.cooldown_seconds:
            logger.info(
                f"Change on {source.name} suppressed, cooldown "
                f"{self.cooldown_remaining(source, now)}s remaining"
            )
            return AdmitDecision(emit=False, diff=diff)

        return AdmitDecision(emit=True, diff=diff)

    def commit(
        self,
        source: MonitoredSource,
        result: ChangeResult,
        decision: AdmitDecision,
        now: int,
    ) -> None:
        """
        Apply the bookkeeping of one conclusive poll to the source.

        Alert counters move only on an emitted alert. The baseline and row
        count follow every conclusive poll, suppressed or not. Inconclusive
        results leave the source untouched.
        """
        if not result.conclusive:
            return

        if decision.emit:
            source.alert_count += 1
            source.last_alert_at = now

        source.baseline_signature = result.combined_signature
        source.last_buy_count = result.buy_count
