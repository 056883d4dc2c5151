"""Extract buy orders from JSON payloads of unknown shape.

Market pages talk to vendor-specific APIs, so there is no schema to rely on.
Any object anywhere in the tree that carries something price-like and
something quantity-like (and, if it says which side it is, says buy or bid)
is taken as a buy order.
"""

import logging
from typing import Any

from orderwatch.detect.normalize import normalize_number
from orderwatch.models import BuyOrder

logger = logging.getLogger(__name__)

PRICE_ALIASES = ("price", "p", "bid", "bestbid")
QUANTITY_ALIASES = ("quantity", "qty", "q", "amount", "size")
SIDE_ALIASES = ("side", "type", "order_type")

BUY_MARKERS = ("buy", "bid")

# Aliases this short only match on equality or a "_<alias>" suffix
MIN_SUBSTRING_ALIAS_LENGTH = 3

DEFAULT_MAX_DEPTH = 64
DEFAULT_MAX_NODES = 100_000

_MISSING = object()


def _matches_exact(key: str, alias: str) -> bool:
    return key == alias


def _matches_suffix(key: str, alias: str) -> bool:
    return key.endswith("_" + alias)


def _matches_substring(key: str, alias: str) -> bool:
    return len(alias) >= MIN_SUBSTRING_ALIAS_LENGTH and alias in key


_MATCH_TIERS = (_matches_exact, _matches_suffix, _matches_substring)


def find_field(node: dict, aliases: tuple[str, ...]) -> Any:
    """
    Fuzzy, case-insensitive lookup of a field in an object.

    Keys are tried tier by tier (equality, then "_<alias>" suffix, then
    substring), in the object's own key order within a tier. Container
    values are never returned.

    Returns:
        The matched value, or _MISSING when no key matches
    """
    candidates = [
        (str(key).lower(), value)
        for key, value in node.items()
        if not isinstance(value, (dict, list))
    ]
    for matches in _MATCH_TIERS:
        for key, value in candidates:
            if any(matches(key, alias) for alias in aliases):
                return value
    return _MISSING


def is_buy_side(side: Any) -> bool:
    """Absent sides count as buy; otherwise the text must mention buy/bid."""
    if side is _MISSING or side is None:
        return True
    text = str(side).lower()
    if not text:
        return True
    return any(marker in text for marker in BUY_MARKERS)


def order_from_node(node: dict) -> BuyOrder | None:
    """Build a BuyOrder from one object, or None if it does not look like one."""
    price = normalize_number(_value_or_none(find_field(node, PRICE_ALIASES)))
    if price is None:
        return None

    quantity = normalize_number(_value_or_none(find_field(node, QUANTITY_ALIASES)))
    if quantity is None:
        return None

    if not is_buy_side(find_field(node, SIDE_ALIASES)):
        return None

    return BuyOrder(price=price, quantity=quantity)


def _value_or_none(value: Any) -> Any:
    return None if value is _MISSING else value


def extract_buy_orders(
    data: Any,
    max_depth: int = DEFAULT_MAX_DEPTH,
    max_nodes: int = DEFAULT_MAX_NODES,
) -> list[BuyOrder]:
    """
    Walk a JSON tree and collect every buy-order-shaped object.

    Objects are tested first and then descended into whether they matched
    or not, since order rows can sit at any depth. The input is never
    modified.

    Args:
        data: Parsed JSON value
        max_depth: Containers nested deeper than this are not descended
        max_nodes: Stop after visiting this many nodes

    Returns:
        Buy orders in encounter order
    """
    orders: list[BuyOrder] = []
    on_path: set[int] = set()
    visited = 0
    truncated = False

    def visit(node: Any, depth: int) -> None:
        nonlocal visited, truncated

        if truncated:
            return
        visited += 1
        if visited > max_nodes:
            truncated = True
            return

        if not isinstance(node, (dict, list)):
            return
        if depth > max_depth or id(node) in on_path:
            return

        on_path.add(id(node))
        try:
            if isinstance(node, list):
                for item in node:
                    visit(item, depth + 1)
                return

            order = order_from_node(node)
            if order is not None:
                orders.append(order)
            for value in node.values():
                visit(value, depth + 1)
        finally:
            on_path.discard(id(node))

    visit(data, 0)

    if truncated:
        logger.debug(
            f"Order extraction stopped after {max_nodes} nodes, "
            f"{len(orders)} orders collected"
        )

    return orders
