"""Default faction market pages."""

import logging

from orderwatch.store import SourceStore

logger = logging.getLogger(__name__)

_EVEEYE_MARKET = "https://atlas.eveeye.com/?market&markets={market}&item={item}&currency=ATLAS&chart=area"

# (name, faction, market id, item mint)
DEFAULT_SOURCES = [
    ("Oni Infrastructure Contract", "oni", 2, "oicT4ECU7nuPBZD2HUg8sb9nG4MDXWaE8vAnzwzXqcg"),
    ("Oni Contract Vaors Order", "oni", 2, "oiC26XFt8HR1xzw3Y6WJ9wMTdtY1g9k1mthMqwRAn1X"),
    ("Oni Quantum Nodes", "oni", 2, "ic3AfsMFGKjkftEkpZLLdCGHmSQX5RwH92zhXUZVNCW"),
    ("Oni Starpath Cells", "oni", 2, "ic3BNHDBzoW8suW4q9a9qt5PkK7D38T4raGDc1gyuRh"),
    ("Mud Quantum Nodes", "mud", 1, "ic3AfsMFGKjkftEkpZLLdCGHmSQX5RwH92zhXUZVNCW"),
    ("Mud Starpath Cells", "mud", 1, "ic3BNHDBzoW8suW4q9a9qt5PkK7D38T4raGDc1gyuRh"),
    ("Mud Gotti's Favor", "mud", 1, "mic2AcEbMAjxoYGWaobvTMKzzNraSRVFaDaKEM2YrTD"),
    ("Mud Infrastructure Contract", "mud", 1, "mic9ZayXBs7x3T6qgM2VskuaWFC8egCQBkTHcy8BoPM"),
    ("Ustur Opo's Request", "ustur", 3, "uiC2QNxpUxu1VqFefrbN6eDucaW2g9YnB4EZosMQeec"),
    ("Ustur Infrastructure Contract", "ustur", 3, "uicF2zhVoZguiFbr2KWp3kFBYwezs6HZqMzQfLbXw1A"),
    ("Ustur Quantum Nodes", "ustur", 3, "ic3AfsMFGKjkftEkpZLLdCGHmSQX5RwH92zhXUZVNCW"),
    ("Ustur Starpath Cells", "ustur", 3, "ic3BNHDBzoW8suW4q9a9qt5PkK7D38T4raGDc1gyuRh"),
]


def seed_default_sources(store: SourceStore) -> int:
    """Add the default sources whose URL is not already monitored."""
    known_urls = {source.url for source in store.list()}
    added = 0

    for name, faction, market, item in DEFAULT_SOURCES:
        url = _EVEEYE_MARKET.format(market=market, item=item)
        if url in known_urls:
            continue
        store.add(name=name, url=url, faction=faction)
        added += 1

    logger.info(f"Seeded {added} default sources")
    return added
