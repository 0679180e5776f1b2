#!/usr/bin/env python

"""
Photo Trips - Story titles from geotagged photos

Reads photo timestamps and coordinates from a CSV file, reverse geocodes each
photo with Google's Geocoding API, groups photos into visits per place and
prints suggested trip titles for every visit.

Usage:
    main.py [options]

Input:
    One photo per line: timestamp,latitude,longitude
    e.g. 2020-03-30 14:12:19,40.728808,-73.996106

Options:
    --csv-path: Path to the photo CSV (default: $CSV_PATH or photos.csv)
    --api-key: Google Geocoding API key (default: $GOOGLE_API_KEY)
    --workers: Number of concurrent geocoding workers (default: 5)
    --rate-limit: Maximum geocoding requests per second (default: 50)
    --verbose: Enable verbose logging output
"""

import argparse
import logging
import signal
import sys
import threading
from config import CSV_PATH, GOOGLE_API_KEY, POOL_SIZE, RATE_LIMIT
from core.categoriser import Visit, generate_titles, group
from core.consumer import EnrichmentPool
from core.heap import PhotoHeap
from core.reader import PhotoReader
from pathlib import Path
from typing import TextIO
from utils.geocoding import GoogleReverseGeocoder, PlaceResolver, ReverseGeocoder

logger = logging.getLogger(__name__)


class PhotoGroupingPipeline:
    """Reads, geocodes and groups photos, then prints trip titles"""

    def __init__(
        self,
        csv_path: Path = CSV_PATH,
        api_key: str = GOOGLE_API_KEY,
        pool_size: int = POOL_SIZE,
        rate_limit: int = RATE_LIMIT,
        geocoder: ReverseGeocoder | None = None,
        cancel: threading.Event | None = None,
    ):
        self.csv_path = csv_path
        self.api_key = api_key
        self.pool_size = pool_size
        self.rate_limit = rate_limit
        self.geocoder = geocoder
        self.cancel = cancel or threading.Event()
        self.visits: dict[str, Visit] = {}

    def build_geocoder(self) -> ReverseGeocoder | None:
        """Use the injected geocoder or create the Google one"""
        if self.geocoder is not None:
            return self.geocoder

        if not self.api_key:
            logger.error("A Google Geocoding API key is required (--api-key or GOOGLE_API_KEY)")
            return None

        return GoogleReverseGeocoder(api_key=self.api_key, rate_limit=self.rate_limit)

    def run(self, out: TextIO | None = None) -> bool:
        """Execute the pipeline and write titles to out (stdout by default)"""
        geocoder = self.build_geocoder()
        if geocoder is None:
            return False

        try:
            reader = PhotoReader.open(self.csv_path)
        except OSError as e:
            logger.error(f"Could not open photo CSV {self.csv_path}: {e}")
            return False

        photo_heap = PhotoHeap()
        pool = EnrichmentPool(PlaceResolver(geocoder), photo_heap, pool_size=self.pool_size)

        with reader:
            stream = reader.read_csv(self.cancel, maxsize=self.pool_size)
            pool.run(stream, self.cancel)

        if self.cancel.is_set():
            logger.info("Grouping photos enriched before cancellation")

        self.visits = group(photo_heap)
        self.write_titles(out or sys.stdout)
        return True

    def sorted_visits(self) -> list[Visit]:
        return sorted(self.visits.values(), key=lambda visit: (visit.start, visit.place))

    def write_titles(self, out: TextIO):
        """Print every suggested title, one per line, grouped by place"""
        for visit in self.sorted_visits():
            logger.debug(f"{visit.place}: {visit.start.isoformat()} -> {visit.end.isoformat()}")
            for title in generate_titles(visit):
                print(title, file=out)


def install_signal_handlers(cancel: threading.Event):
    """Set cancel on SIGINT or SIGTERM"""

    def handle(signum, frame):
        logger.warning(f"Received {signal.Signals(signum).name}, stopping")
        cancel.set()

    signal.signal(signal.SIGINT, handle)
    signal.signal(signal.SIGTERM, handle)


def parse_arguments(argv: list[str] | None = None):
    """Parse command line arguments"""
    parser = argparse.ArgumentParser(
        description="Photo Trips - Story titles from geotagged photos",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )

    parser.add_argument('--csv-path', type=Path, default=CSV_PATH, help='Path to the photo CSV')
    parser.add_argument('--api-key', default=GOOGLE_API_KEY, help="API key for Google's Reverse Geocoding API")
    parser.add_argument('--workers', type=int, default=POOL_SIZE, help='Number of concurrent geocoding workers')
    parser.add_argument('--rate-limit', type=int, default=RATE_LIMIT, help='Maximum geocoding requests per second')
    parser.add_argument('--verbose', action='store_true', help='Enable verbose logging output')

    return parser.parse_args(argv)


def setup_logging(verbose: bool = False):
    """Configure logging based on verbosity level"""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format='%(asctime)s - %(levelname)s - %(message)s', force=True)


def main(argv: list[str] | None = None):
    args = parse_arguments(argv)

    setup_logging(args.verbose)

    cancel = threading.Event()
    install_signal_handlers(cancel)

    pipeline = PhotoGroupingPipeline(
        csv_path=args.csv_path,
        api_key=args.api_key,
        pool_size=args.workers,
        rate_limit=args.rate_limit,
        cancel=cancel,
    )
    success = pipeline.run()
    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
