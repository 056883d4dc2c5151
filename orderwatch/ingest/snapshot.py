"""Turn captured payload texts into a poll-cycle snapshot."""

import json
import logging

from orderwatch.detect.extractor import (
    DEFAULT_MAX_DEPTH,
    DEFAULT_MAX_NODES,
    extract_buy_orders,
)
from orderwatch.detect.fingerprint import DEFAULT_TOP_N, build_fingerprint
from orderwatch.models import Snapshot

logger = logging.getLogger(__name__)


def build_snapshot(
    payloads: list[str],
    top_n: int = DEFAULT_TOP_N,
    max_depth: int = DEFAULT_MAX_DEPTH,
    max_nodes: int = DEFAULT_MAX_NODES,
) -> Snapshot:
    """
    Parse, extract and fingerprint every payload of one poll.

    Payloads that are not valid JSON or yield no buy orders contribute
    nothing. buy_count sums the kept (top_n) rows of contributing payloads.
    """
    snapshot = Snapshot()

    for text in payloads:
        try:
            data = json.loads(text)
        except (ValueError, TypeError, RecursionError) as e:
            logger.debug(f"Skipping payload that is not JSON: {e}")
            continue

        orders = extract_buy_orders(data, max_depth=max_depth, max_nodes=max_nodes)
        fingerprint = build_fingerprint(orders, top_n=top_n)
        if fingerprint.is_empty:
            continue

        snapshot.signatures.append(fingerprint.signature)
        snapshot.buy_count += len(fingerprint.top)

    return snapshot
