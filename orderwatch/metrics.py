"""Prometheus metrics for Order Watch."""

from prometheus_client import Counter, Gauge, Info

from orderwatch import __version__

# Application info
app_info = Info("orderwatch", "Order Watch application info")
app_info.info({"version": __version__, "name": "orderwatch"})

# Check metrics
source_checks_total = Counter(
    "source_checks_total",
    "Total number of source checks",
    ["status"],
)

payloads_captured_total = Counter(
    "payloads_captured_total",
    "Total number of JSON payloads captured from market pages",
)

# Change metrics
order_changes_total = Counter(
    "order_changes_total",
    "Total number of buy order changes detected",
    ["outcome"],
)

alerts_sent_total = Counter(
    "alerts_sent_total",
    "Total number of alerts delivered to Discord",
    ["status"],
)

sources_monitored = Gauge(
    "sources_monitored",
    "Number of enabled sources being monitored",
)
