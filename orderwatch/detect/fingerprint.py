"""Deterministic fingerprints of the top of a buy-side order book."""

from dataclasses import dataclass, field

from orderwatch.models import BuyOrder

DEFAULT_TOP_N = 15

ROW_SEPARATOR = "\n"
FIELD_SEPARATOR = "|"


def hash_string(text: str) -> str:
    """
    Cheap 32-bit rolling hash (h = h * 31 + code unit) as unsigned hex.

    Runs over UTF-16 code units so the same text hashes the same on every
    platform and in every run, unlike the builtin hash().
    """
    h = 0
    data = text.encode("utf-16-le")
    for i in range(0, len(data), 2):
        code_unit = data[i] | (data[i + 1] << 8)
        h = (h * 31 + code_unit) & 0xFFFFFFFF
    return format(h, "x")


@dataclass
class Fingerprint:
    """Top orders kept for a payload and their signature."""

    top: list[BuyOrder] = field(default_factory=list)
    signature: str = ""

    @property
    def is_empty(self) -> bool:
        return not self.signature


def serialize_orders(orders: list[BuyOrder]) -> str:
    return ROW_SEPARATOR.join(
        f"{order.price:.8f}{FIELD_SEPARATOR}{order.quantity:.8f}"
        for order in orders
    )


def build_fingerprint(orders: list[BuyOrder], top_n: int = DEFAULT_TOP_N) -> Fingerprint:
    """
    Fingerprint the highest buy prices of one payload.

    Orders are sorted by price descending (stable, so ties keep extraction
    order) and only the first top_n are kept; deeper rows are book noise.
    No orders yields an empty signature, which callers treat as "no usable
    data" rather than as a fingerprint.
    """
    top = sorted(orders, key=lambda order: order.price, reverse=True)[:top_n]
    if not top:
        return Fingerprint()
    return Fingerprint(top=top, signature=hash_string(serialize_orders(top)))
