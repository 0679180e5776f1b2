from enum import Enum
from typing import NamedTuple


class PhraseKind(Enum):
    LOCATION = 'location'  # "<text> <place>"
    DELIMITER = 'delimiter'  # "<place> <text> <month>"
    COMBINATION = 'combination'  # "<text> <place> <delimiter> <month>"


class Phrase(NamedTuple):
    kind: PhraseKind
    text: str
    delimiter: str = ''


def location_phrase(text: str) -> Phrase:
    return Phrase(PhraseKind.LOCATION, text)


def delimiter_phrase(text: str) -> Phrase:
    return Phrase(PhraseKind.DELIMITER, text)


def combination_phrase(text: str, delimiter: str) -> Phrase:
    return Phrase(PhraseKind.COMBINATION, text, delimiter)


def render(phrase: Phrase, place: str, month: str) -> str:
    """Fill a phrase template with a place name and month name"""
    if phrase.kind is PhraseKind.LOCATION:
        return f"{phrase.text} {place}"
    elif phrase.kind is PhraseKind.DELIMITER:
        return f"{place} {phrase.text} {month}"
    elif phrase.kind is PhraseKind.COMBINATION:
        return f"{phrase.text} {place} {phrase.delimiter} {month}"
    else:
        raise ValueError(f"Unknown phrase kind: {phrase.kind}")


ANY_PHRASES = (
    delimiter_phrase('in'),
    combination_phrase('Visiting', 'in'),
)

WEEKEND_PHRASES = (
    location_phrase('A weekend getaway to'),
    location_phrase('A weekend in'),
)

WEEK_PHRASES = (location_phrase('A trip away to'),)

DAY_PHRASES = (
    location_phrase('A day out in'),
    location_phrase('A trip to'),
)

HOLIDAY_PHRASES = (location_phrase('Holiday to'),)
