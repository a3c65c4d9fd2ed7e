"""Narrative (tarot reading) generator client."""
from fatefi.providers.oracle.client import (FALLBACK_INTERPRETATIONS,
                                            OracleClient, fallback_for,
                                            parse_interpretation)

__all__ = [
    "FALLBACK_INTERPRETATIONS",
    "OracleClient",
    "fallback_for",
    "parse_interpretation",
]
