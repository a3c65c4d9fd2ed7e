"""The 78-card tarot deck and the daily card draw.

The daily draw is a pure function of the date string so every process (and
every replica) agrees on the card without coordination.
"""
import secrets
from dataclasses import dataclass, field

from fatefi.db import Orientation

DAILY_SEED_PREFIX = "fatefi-daily-"

_FNV_OFFSET_BASIS = 0x811C9DC5
_FNV_PRIME = 0x01000193


@dataclass(frozen=True)
class TarotCard:
    name: str
    arcana: str  # major | minor
    number: int
    keywords: tuple[str, ...] = field(default_factory=tuple)
    suit: str | None = None


_MAJOR_ARCANA: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("The Fool", ("beginnings", "spontaneity", "leap of faith")),
    ("The Magician", ("manifestation", "power", "action")),
    ("The High Priestess", ("intuition", "mystery", "inner knowledge")),
    ("The Empress", ("abundance", "nurturing", "fertility")),
    ("The Emperor", ("authority", "structure", "control")),
    ("The Hierophant", ("tradition", "conformity", "institutions")),
    ("The Lovers", ("union", "choices", "alignment")),
    ("The Chariot", ("willpower", "victory", "determination")),
    ("Strength", ("courage", "patience", "inner strength")),
    ("The Hermit", ("introspection", "solitude", "guidance")),
    ("Wheel of Fortune", ("cycles", "destiny", "turning point")),
    ("Justice", ("fairness", "truth", "cause and effect")),
    ("The Hanged Man", ("surrender", "new perspective", "pause")),
    ("Death", ("transformation", "endings", "transition")),
    ("Temperance", ("balance", "moderation", "patience")),
    ("The Devil", ("bondage", "materialism", "shadow self")),
    ("The Tower", ("upheaval", "chaos", "sudden change")),
    ("The Star", ("hope", "inspiration", "renewal")),
    ("The Moon", ("illusion", "fear", "subconscious")),
    ("The Sun", ("joy", "success", "vitality")),
    ("Judgement", ("rebirth", "reflection", "reckoning")),
    ("The World", ("completion", "integration", "accomplishment")),
)

SUITS = ("wands", "cups", "swords", "pentacles")
COURT = ("Page", "Knight", "Queen", "King")
SUIT_KEYWORDS: dict[str, tuple[str, ...]] = {
    "wands": ("passion", "energy", "inspiration"),
    "cups": ("emotions", "intuition", "relationships"),
    "swords": ("intellect", "conflict", "truth"),
    "pentacles": ("wealth", "material", "prosperity"),
}


def _build_deck() -> tuple[TarotCard, ...]:
    cards = [
        TarotCard(name=name, arcana="major", number=i, keywords=keywords)
        for i, (name, keywords) in enumerate(_MAJOR_ARCANA)
    ]
    for suit in SUITS:
        title = suit.capitalize()
        for n in range(1, 11):
            rank = "Ace" if n == 1 else str(n)
            cards.append(
                TarotCard(
                    name=f"{rank} of {title}",
                    arcana="minor",
                    number=n,
                    keywords=SUIT_KEYWORDS[suit],
                    suit=suit,
                )
            )
        for i, court in enumerate(COURT):
            cards.append(
                TarotCard(
                    name=f"{court} of {title}",
                    arcana="minor",
                    number=11 + i,
                    keywords=SUIT_KEYWORDS[suit],
                    suit=suit,
                )
            )
    return tuple(cards)


FULL_DECK: tuple[TarotCard, ...] = _build_deck()
_BY_NAME = {card.name: card for card in FULL_DECK}


def _utf16_units(text: str):
    data = text.encode("utf-16-le")
    for i in range(0, len(data), 2):
        yield data[i] | (data[i + 1] << 8)


def fnv1a_32(text: str) -> int:
    """32-bit FNV-1a over the UTF-16 code units of text."""
    h = _FNV_OFFSET_BASIS
    for unit in _utf16_units(text):
        h ^= unit
        h = (h * _FNV_PRIME) & 0xFFFFFFFF
    return h


def draw_card_for_date(date: str) -> tuple[TarotCard, Orientation]:
    """Return the card and orientation assigned to a calendar date (YYYY-MM-DD)."""
    seed = fnv1a_32(f"{DAILY_SEED_PREFIX}{date}")
    card = FULL_DECK[seed % len(FULL_DECK)]
    orientation = Orientation.UPRIGHT if (seed >> 16) % 2 == 0 else Orientation.REVERSED
    return card, orientation


def draw_random_card() -> tuple[TarotCard, Orientation]:
    """Ad-hoc draw using the OS CSPRNG. Not for the daily card."""
    card = FULL_DECK[secrets.randbelow(len(FULL_DECK))]
    orientation = Orientation.UPRIGHT if secrets.randbelow(2) == 0 else Orientation.REVERSED
    return card, orientation


def get_card(name: str) -> TarotCard | None:
    return _BY_NAME.get(name)
