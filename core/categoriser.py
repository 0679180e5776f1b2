import logging
from config import TRIP_DAY_HOURS, TRIP_WEEKEND_MAX_HOURS, VISIT_WINDOW
from core.heap import PhotoHeap
from core.phrases import ANY_PHRASES, DAY_PHRASES, HOLIDAY_PHRASES, WEEK_PHRASES, WEEKEND_PHRASES, Phrase, render
from dataclasses import dataclass
from datetime import datetime, timedelta

logger = logging.getLogger(__name__)

ONE_DAY = timedelta(hours=TRIP_DAY_HOURS)
FOUR_DAYS = timedelta(hours=TRIP_WEEKEND_MAX_HOURS)

# Sunday-first weekday numbers
MONDAY = 1
FRIDAY = 5

MONTH_NAMES = (
    'January',
    'February',
    'March',
    'April',
    'May',
    'June',
    'July',
    'August',
    'September',
    'October',
    'November',
    'December',
)


@dataclass(frozen=True)
class Visit:
    """Time spent at a place, from the first photo to the last one kept"""

    place: str
    start: datetime
    end: datetime

    @property
    def duration(self) -> timedelta:
        return self.end - self.start


def sunday_weekday(moment: datetime) -> int:
    """Weekday with Sunday as 0 and Saturday as 6"""
    return moment.isoweekday() % 7


def classify_trip(visit: Visit) -> str:
    """Classify a visit as a day, weekend, week or holiday trip"""
    duration = visit.duration

    if duration < ONE_DAY:
        return 'day'
    elif ONE_DAY < duration <= FOUR_DAYS:
        if sunday_weekday(visit.start) >= FRIDAY and sunday_weekday(visit.end) <= MONDAY:
            return 'weekend'
        return 'week'
    # Exactly one day falls through to holiday as well.
    return 'holiday'


TRIP_PHRASES: dict[str, tuple[Phrase, ...]] = {
    'day': DAY_PHRASES,
    'weekend': WEEKEND_PHRASES,
    'week': WEEK_PHRASES,
    'holiday': HOLIDAY_PHRASES,
}


def generate_titles(visit: Visit) -> list[str]:
    """Suggest story titles for a visit.

    Trip-specific phrases come first, followed by the phrases that apply to
    every trip.
    """
    phrases = TRIP_PHRASES[classify_trip(visit)] + ANY_PHRASES
    month = MONTH_NAMES[visit.start.month - 1]
    return [render(phrase, visit.place, month) for phrase in phrases]


def group(photo_heap: PhotoHeap, window: timedelta = VISIT_WINDOW) -> dict[str, Visit]:
    """Group photos into one visit per place.

    Drains the heap, so photos arrive in timestamp order. A photo extends a
    place's visit when it was taken within ``window`` of the visit's current
    end. Photos further away than that are not grouped and do not start a new
    visit for the same place.
    """
    spans: dict[str, list[datetime]] = {}
    photos = 0

    while True:
        photo = photo_heap.pop()
        if photo is None:
            break

        photos += 1
        for place in photo.places:
            span = spans.get(place)
            if span is None:
                spans[place] = [photo.timestamp, photo.timestamp]
            elif photo.timestamp - span[1] <= window:
                span[1] = photo.timestamp
            else:
                logger.debug(f"{place}: photo at {photo.timestamp.isoformat()} is outside the visit window")

    logger.info(f"Grouped {photos} photos into {len(spans)} places")
    return {place: Visit(place=place, start=start, end=end) for place, (start, end) in spans.items()}
