"""Statement tables, candidate attestation and inclusion timing for parachain validators."""

__version__ = "0.1.0"

__all__ = [
    "adder",
    "adder_collator",
    "candidate",
    "dynamic_inclusion",
    "groups",
    "includable",
    "messages",
    "proposal",
    "statements",
    "table",
]