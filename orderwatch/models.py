"""In-memory records for monitored sources and transient order data."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal


@dataclass
class MonitoredSource:
    """One monitored market page and its detection state."""

    id: str
    name: str
    url: str
    faction: str | None = None
    enabled: bool = True
    last_check: datetime | None = None
    alert_count: int = 0
    baseline_signature: str | None = None  # None until the first conclusive poll
    last_buy_count: int = 0
    last_alert_at: int = 0  # Epoch seconds, 0 = never alerted

    def reset_baseline(self) -> None:
        """Forget the stored fingerprint so the next poll re-establishes it."""
        self.baseline_signature = None
        self.last_buy_count = 0


@dataclass(frozen=True)
class BuyOrder:
    """A single buy-side row extracted from a payload."""

    price: Decimal
    quantity: Decimal


@dataclass
class Snapshot:
    """Signatures of one poll cycle, one per payload that yielded orders."""

    signatures: list[str] = field(default_factory=list)
    buy_count: int = 0
