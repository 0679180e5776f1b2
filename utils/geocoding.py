import logging
from config import ACCEPTED_PLACE_TYPES, GEOCODER_TIMEOUT, RATE_LIMIT, RESULT_TYPES
from dataclasses import dataclass
from functools import partial
from geopy.exc import GeopyError
from geopy.extra.rate_limiter import RateLimiter
from geopy.geocoders import GoogleV3
from geopy.geocoders.base import DEFAULT_SENTINEL
from typing import Protocol
from urllib.parse import urlencode

logger = logging.getLogger(__name__)


class GeocodingError(Exception):
    """Raised when the reverse geocoding service cannot answer a lookup"""


@dataclass(frozen=True)
class Candidate:
    """A single address component returned for a coordinate lookup"""

    name: str
    types: tuple[str, ...]


class ReverseGeocoder(Protocol):
    """Anything that can turn a coordinate pair into address components"""

    def reverse(self, latitude: float, longitude: float) -> list[Candidate]: ...


class ResultTypeGoogleV3(GoogleV3):
    """GoogleV3 with support for the ``result_type`` reverse geocoding filter"""

    def __init__(self, *args, result_types: tuple[str, ...] = RESULT_TYPES, **kwargs):
        super().__init__(*args, **kwargs)
        self.result_types = result_types

    def reverse(self, query, *, exactly_one=True, timeout=DEFAULT_SENTINEL, language=None):
        params = {'latlng': self._coerce_point_to_string(query)}
        if self.result_types:
            params['result_type'] = '|'.join(self.result_types)
        if language:
            params['language'] = language
        if self.api_key:
            params['key'] = self.api_key

        if not self.premier:
            url = '?'.join((self.api, urlencode(params)))
        else:
            url = self._get_signed_url(params)

        logger.debug(f"{self.__class__.__name__}.reverse: {params['latlng']}")
        callback = partial(self._parse_json, exactly_one=exactly_one)
        return self._call_geocoder(url, callback, timeout=timeout)


class GoogleReverseGeocoder:
    """Reverse geocoder backed by Google's Geocoding API through geopy.

    Requests are spaced out by a shared rate limiter so the pool as a whole
    stays under ``rate_limit`` requests per second. Failed requests are not
    retried.
    """

    def __init__(
        self,
        api_key: str,
        rate_limit: int = RATE_LIMIT,
        timeout: float = GEOCODER_TIMEOUT,
        result_types: tuple[str, ...] = RESULT_TYPES,
    ):
        self.geocoder = ResultTypeGoogleV3(api_key=api_key, timeout=timeout, result_types=result_types)
        self._reverse = RateLimiter(
            self.geocoder.reverse,
            min_delay_seconds=1.0 / rate_limit if rate_limit > 0 else 0.0,
            max_retries=0,
            swallow_exceptions=False,
        )

    def reverse(self, latitude: float, longitude: float) -> list[Candidate]:
        locations = self._reverse((latitude, longitude), exactly_one=False)
        if not locations:
            return []

        candidates = []
        for location in locations:
            for component in location.raw.get('address_components', []):
                candidates.append(Candidate(name=component.get('long_name', ''), types=tuple(component.get('types', []))))

        return candidates


class PlaceResolver:
    """Resolve coordinates to the set of place names worth grouping on"""

    def __init__(self, geocoder: ReverseGeocoder, accepted_types: frozenset[str] = ACCEPTED_PLACE_TYPES):
        self.geocoder = geocoder
        self.accepted_types = frozenset(accepted_types)

    def is_accepted(self, candidate: Candidate) -> bool:
        """True if any of the candidate's types is an accepted place type"""
        return not self.accepted_types.isdisjoint(candidate.types)

    def resolve(self, latitude: float, longitude: float) -> frozenset[str]:
        """Look up the accepted place names for a coordinate pair.

        Returns an empty set when the service knows no usable places. Raises
        GeocodingError if the lookup itself fails.
        """
        try:
            candidates = self.geocoder.reverse(latitude, longitude)
        except GeopyError as e:
            raise GeocodingError(f"reverse geocoding {latitude}, {longitude}: {e}") from e

        return frozenset(candidate.name for candidate in candidates if candidate.name and self.is_accepted(candidate))
