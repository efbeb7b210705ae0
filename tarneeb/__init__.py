"""Rules engine package for Tarneeb."""

__all__ = [
    "cards",
    "deck",
    "errors",
    "rules_schema",
    "bidding",
    "trick",
    "mechanics",
    "scoring",
    "state",
    "observable",
    "views",
    "game",
    "service",
    "records",
    "analytics",
]
