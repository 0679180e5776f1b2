import csv
import logging
import queue
import threading
from config import (
    MAX_VALID_LATITUDE,
    MAX_VALID_LONGITUDE,
    MIN_VALID_LATITUDE,
    MIN_VALID_LONGITUDE,
    QUEUE_POLL_SECONDS,
)
from core.heap import Photo
from datetime import UTC, datetime
from dateutil.parser import parse as parse_date
from pathlib import Path
from typing import Iterator, TextIO

logger = logging.getLogger(__name__)

_END_OF_STREAM = object()


class PhotoStream:
    """Bounded hand-off between the CSV reader thread and enrichment workers.

    The producer closes the stream with a single sentinel. Each consumer that
    receives it puts it back so every other consumer sees it too.
    """

    def __init__(self, maxsize: int = 1, poll_interval: float = QUEUE_POLL_SECONDS):
        self._queue: queue.Queue = queue.Queue(maxsize=maxsize)
        self.poll_interval = poll_interval

    def put(self, photo: Photo, cancel: threading.Event) -> bool:
        """Block until the photo is queued. Returns False if cancelled first."""
        return self._put(photo, cancel)

    def close(self, cancel: threading.Event) -> bool:
        """Signal end of stream to all consumers."""
        return self._put(_END_OF_STREAM, cancel)

    def get(self, cancel: threading.Event) -> Photo | None:
        """Block for the next photo. Returns None once closed or cancelled."""
        while not cancel.is_set():
            try:
                item = self._queue.get(timeout=self.poll_interval)
            except queue.Empty:
                continue

            if item is _END_OF_STREAM:
                self._queue.put(item)
                return None
            return item

        return None

    def _put(self, item, cancel: threading.Event) -> bool:
        while not cancel.is_set():
            try:
                self._queue.put(item, timeout=self.poll_interval)
                return True
            except queue.Full:
                continue
        return False


class PhotoReader:
    """Parse photos from a CSV of ``timestamp,latitude,longitude`` rows"""

    def __init__(self, source: TextIO, name: str = '<stream>'):
        self.source = source
        self.name = name
        self.rows_read = 0
        self.rows_skipped = 0
        self.producer: threading.Thread | None = None

    @classmethod
    def open(cls, csv_path: Path) -> 'PhotoReader':
        """Open a CSV file for reading. Raises OSError if it cannot be opened."""
        source = open(csv_path, newline='', encoding='utf-8', errors='replace')
        logger.info(f"Reading photos from {csv_path}")
        return cls(source, name=str(csv_path))

    def close(self):
        """Close the source once the producer thread, if any, has stopped"""
        if self.producer is not None:
            self.producer.join()
        self.source.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def validate_coordinates(self, lat: float, lon: float) -> bool:
        """Check that coordinates are within valid ranges"""
        return MIN_VALID_LATITUDE <= lat <= MAX_VALID_LATITUDE and MIN_VALID_LONGITUDE <= lon <= MAX_VALID_LONGITUDE

    def parse_timestamp(self, value: str) -> datetime:
        """Parse a free-form timestamp, treating naive values as UTC"""
        timestamp = parse_date(value.strip())
        if timestamp.tzinfo is None:
            timestamp = timestamp.replace(tzinfo=UTC)
        return timestamp

    def parse_row(self, row: list[str]) -> Photo | None:
        """Build a Photo from one CSV row, or None if the row is unusable"""
        if len(row) != 3:
            logger.debug(f"{self.name}: skipping row with {len(row)} fields")
            return None

        try:
            timestamp = self.parse_timestamp(row[0])
        except (ValueError, OverflowError) as e:
            logger.warning(f"{self.name}: could not parse timestamp {row[0]!r}: {e}")
            return None

        try:
            latitude = float(row[1])
        except ValueError as e:
            logger.warning(f"{self.name}: could not parse latitude: {e}")
            return None

        try:
            longitude = float(row[2])
        except ValueError as e:
            logger.warning(f"{self.name}: could not parse longitude: {e}")
            return None

        if not self.validate_coordinates(latitude, longitude):
            logger.warning(f"{self.name}: coordinates out of range: {latitude}, {longitude}")
            return None

        return Photo(timestamp=timestamp, latitude=latitude, longitude=longitude)

    def iter_photos(self, cancel: threading.Event | None = None) -> Iterator[Photo]:
        """Lazily yield photos, stopping early if cancel is set"""
        reader = csv.reader(self.source)

        while cancel is None or not cancel.is_set():
            try:
                row = next(reader)
            except StopIteration:
                return
            except csv.Error as e:
                logger.warning(f"{self.name}: malformed line {reader.line_num}: {e}")
                self.rows_skipped += 1
                continue

            self.rows_read += 1
            photo = self.parse_row(row)
            if photo is None:
                self.rows_skipped += 1
                continue

            yield photo

    def read_csv(self, cancel: threading.Event, maxsize: int = 1) -> PhotoStream:
        """Start a producer thread feeding parsed photos into a new stream.

        The thread owns the stream and closes it even when reading fails.
        Consumers observe the same cancel event, so a close skipped by
        cancellation still releases them.
        """
        stream = PhotoStream(maxsize=maxsize)

        def produce():
            try:
                for photo in self.iter_photos(cancel):
                    if not stream.put(photo, cancel):
                        logger.debug(f"{self.name}: reader cancelled")
                        return
                logger.info(f"{self.name}: read {self.rows_read} rows, skipped {self.rows_skipped}")
            except Exception:
                logger.exception(f"{self.name}: reading stopped after {self.rows_read} rows")
            finally:
                stream.close(cancel)

        self.producer = threading.Thread(target=produce, name='photo-reader', daemon=True)
        self.producer.start()
        return stream
