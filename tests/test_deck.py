from fatefi.db import Orientation
from fatefi.services.tarot import (FULL_DECK, draw_card_for_date,
                                   draw_random_card, fnv1a_32, get_card)


def test_deck_has_78_unique_cards():
    assert len(FULL_DECK) == 78
    assert len({c.name for c in FULL_DECK}) == 78
    assert sum(1 for c in FULL_DECK if c.arcana == "major") == 22
    assert get_card("Ace of Cups").suit == "cups"
    assert get_card("King of Pentacles").number == 14
    assert get_card("The Moon") is not None
    assert get_card("The Cat") is None


def test_fnv1a_known_vectors():
    assert fnv1a_32("") == 0x811C9DC5
    assert fnv1a_32("a") == 0xE40C292C
    assert fnv1a_32("foobar") == 0xBF9CF968


def test_fnv1a_stays_in_32_bits():
    for text in ("fatefi-daily-2025-03-14", "x" * 500, "月曜日"):
        assert 0 <= fnv1a_32(text) <= 0xFFFFFFFF


def test_daily_draw_is_deterministic():
    first = draw_card_for_date("2025-03-14")
    assert draw_card_for_date("2025-03-14") == first

    seed = fnv1a_32("fatefi-daily-2025-03-14")
    card, orientation = first
    assert card == FULL_DECK[seed % 78]
    expected = Orientation.UPRIGHT if (seed >> 16) % 2 == 0 else Orientation.REVERSED
    assert orientation == expected


def test_daily_draw_varies_across_dates():
    cards = {draw_card_for_date(f"2025-01-{day:02d}")[0].name for day in range(1, 32)}
    assert len(cards) > 1


def test_random_draw_returns_deck_card():
    card, orientation = draw_random_card()
    assert card in FULL_DECK
    assert orientation in (Orientation.UPRIGHT, Orientation.REVERSED)
