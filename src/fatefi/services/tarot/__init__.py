"""Tarot deck and deterministic daily draw."""
from fatefi.services.tarot.deck import (FULL_DECK, TarotCard,
                                        draw_card_for_date, draw_random_card,
                                        fnv1a_32, get_card)

__all__ = [
    "FULL_DECK",
    "TarotCard",
    "draw_card_for_date",
    "draw_random_card",
    "fnv1a_32",
    "get_card",
]
