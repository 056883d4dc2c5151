"""Message formatting for buy order alerts."""

from dataclasses import dataclass

from orderwatch.models import MonitoredSource

DEFAULT_COLOR = 0x95A5A6

# Faction -> (emoji, embed color)
FACTION_STYLES = {
    "oni": ("🔵", 0x3498DB),
    "mud": ("🔴", 0xE74C3C),
    "ustur": ("🟡", 0xF1C40F),
}
DEFAULT_STYLE = ("⚪", DEFAULT_COLOR)


@dataclass
class OrderAlert:
    """Transport-neutral alert content."""

    username: str
    title: str
    description: str
    url: str
    color: int = DEFAULT_COLOR


def faction_style(faction: str | None) -> tuple[str, int]:
    """Icon and color hint for a faction tag."""
    return FACTION_STYLES.get((faction or "").lower(), DEFAULT_STYLE)


def format_diff(diff: int) -> str:
    return f"+{diff}" if diff >= 0 else str(diff)


def build_order_alert(
    source: MonitoredSource,
    previous_count: int,
    buy_count: int,
    diff: int,
) -> OrderAlert:
    """
    Build the alert for a changed buy-side book.

    Args:
        source: Source that changed
        previous_count: Buy rows counted before this poll
        buy_count: Buy rows counted in this poll
        diff: Row delta reported by the throttle
    """
    emoji, color = faction_style(source.faction)
    return OrderAlert(
        username=f"{emoji} {source.name}",
        title=f"BUY orders updated: {source.name}",
        description=(
            f"Buy rows: {previous_count} → {buy_count} ({format_diff(diff)})\n"
            f"{source.url}"
        ),
        url=source.url,
        color=color,
    )


def format_discord_payload(alert: OrderAlert) -> dict:
    """Discord webhook payload with a single embed."""
    return {
        "username": alert.username,
        "embeds": [
            {
                "title": alert.title,
                "description": alert.description,
                "url": alert.url,
                "color": alert.color,
            }
        ],
    }
