"""Tag extraction and filtering for mission cards"""

from typing import Iterable, List, Optional

from prime_officer.models.card import Card


def extract_tags_from_cards(cards: Optional[Iterable[Card]]) -> List[str]:
    """Sorted, lowercase, unique tags across the given cards"""
    tags = set()
    for card in cards or []:
        for tag in card.tags:
            if tag:
                tags.add(tag.lower())
    return sorted(tags)


def card_has_tag(card: Card, tag: str) -> bool:
    """Case-insensitive tag membership"""
    wanted = tag.lower()
    return any(t.lower() == wanted for t in card.tags)


def card_matches_filter(card: Card, filter_value: Optional[str]) -> bool:
    """
    Check if a card matches a filter chip

    "all" or empty matches everything. Otherwise the filter must equal the
    card's domain or one of its tags (case-insensitive).
    """
    if not filter_value or filter_value == "all":
        return True

    wanted = filter_value.lower()
    if (card.domain or "").lower() == wanted:
        return True
    return card_has_tag(card, wanted)


def filter_cards(cards: Optional[Iterable[Card]], filter_value: Optional[str]) -> List[Card]:
    """Cards matching a filter chip, order preserved"""
    return [card for card in cards or [] if card_matches_filter(card, filter_value)]
