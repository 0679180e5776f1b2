"""Test data fixtures for photo trips tests"""

import threading
from core.heap import Photo
from datetime import UTC, datetime
from pathlib import Path
from utils.geocoding import Candidate

LONDON = (51.5072, 0.1276)
NEW_YORK = (40.7128, -74.0060)


class FakeGeocoder:
    """In-memory stand-in for the Google reverse geocoder.

    Returns canned candidates per coordinate pair. An optional gate makes every
    call block until it is set.
    """

    def __init__(self, results: dict | None = None, default: list[Candidate] | None = None, error: Exception | None = None):
        self.results = results or {}
        self.default = default or []
        self.error = error
        self.gate: threading.Event | None = None
        self.calls: list[tuple[float, float]] = []
        self._lock = threading.Lock()

    @property
    def call_count(self) -> int:
        with self._lock:
            return len(self.calls)

    def reverse(self, latitude: float, longitude: float) -> list[Candidate]:
        with self._lock:
            self.calls.append((latitude, longitude))
        if self.gate is not None:
            self.gate.wait()
        if self.error is not None:
            raise self.error
        return self.results.get((latitude, longitude), self.default)


class TestDataFixtures:
    """Centralized test data fixtures"""

    @staticmethod
    def get_london_candidates():
        """Address components Google returns for central London"""
        return [
            Candidate('London', ('locality', 'political')),
            Candidate('Greater London', ('administrative_area_level_2', 'political')),
            Candidate('England', ('administrative_area_level_1', 'political')),
            Candidate('United Kingdom', ('country', 'political')),
        ]

    @staticmethod
    def get_london_components():
        """Raw Google Geocoding API result for central London"""
        return {
            'address_components': [
                {'long_name': 'London', 'short_name': 'London', 'types': ['locality', 'political']},
                {'long_name': 'E1 6AN', 'short_name': 'E1 6AN', 'types': ['postal_code']},
                {'long_name': 'United Kingdom', 'short_name': 'GB', 'types': ['country', 'political']},
            ],
            'formatted_address': 'London E1 6AN, UK',
            'types': ['locality', 'political'],
        }

    @staticmethod
    def get_test_csv():
        """Three photos in Manhattan and a handful of broken rows"""
        return '\n'.join(
            [
                '2020-03-30 14:12:19,40.728808,-73.996106',
                'not_a_time,40.728808,-73.996106',
                '2020-03-30 14:20:10,40.728656,-73.998790',
                '2020-03-30 14:25:00,not_a_float,-73.996106',
                '2020-03-30 14:32:02,40.727160,-73.996044',
                'only,two',
            ]
        )

    @staticmethod
    def make_photo(hour: int, day: int = 28, month: int = 3, places=(), latitude: float = 0.0) -> Photo:
        return Photo(
            timestamp=datetime(2022, month, day, hour, 10, 10, tzinfo=UTC),
            latitude=latitude,
            longitude=0.0,
            places=frozenset(places),
        )

    @classmethod
    def create_test_csv(cls, test_dir: Path, contents: str | None = None) -> Path:
        """Write a photo CSV into the given directory"""
        test_dir.mkdir(exist_ok=True)
        csv_path = test_dir / 'photos.csv'
        csv_path.write_text(cls.get_test_csv() if contents is None else contents, encoding='utf-8')
        return csv_path
