"""Decide whether a poll cycle changed a source's buy-side book."""

import logging
from dataclasses import dataclass

from orderwatch.detect.fingerprint import hash_string
from orderwatch.models import MonitoredSource, Snapshot

logger = logging.getLogger(__name__)

SIGNATURE_SEPARATOR = "|"


@dataclass
class ChangeResult:
    """Outcome of comparing one poll cycle against the stored baseline."""

    changed: bool
    combined_signature: str
    buy_count: int

    @property
    def conclusive(self) -> bool:
        """False when no payload produced a usable signature."""
        return bool(self.combined_signature)


def combine_signatures(signatures: list[str]) -> str:
    """Hash per-payload signatures, in encounter order, into one."""
    if not signatures:
        return ""
    return hash_string(SIGNATURE_SEPARATOR.join(signatures))


def has_changed(source: MonitoredSource, snapshot: Snapshot) -> ChangeResult:
    """
    Compare a poll cycle's snapshot with the source's baseline.

    An empty snapshot is inconclusive and never a change. The first
    conclusive poll of a source (no baseline yet) is not a change either;
    it only establishes the baseline. This function does not modify the
    source.
    """
    if not snapshot.signatures:
        return ChangeResult(changed=False, combined_signature="", buy_count=0)

    combined = combine_signatures(snapshot.signatures)
    changed = (
        source.baseline_signature is not None
        and combined != source.baseline_signature
    )

    if source.baseline_signature is None:
        logger.debug(f"No baseline yet for {source.name}, establishing {combined}")

    return ChangeResult(
        changed=changed,
        combined_signature=combined,
        buy_count=snapshot.buy_count,
    )
