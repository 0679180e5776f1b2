import logging
import threading
from config import POOL_SIZE
from core.heap import Photo, PhotoHeap
from core.reader import PhotoStream
from dataclasses import dataclass, replace
from utils.geocoding import GeocodingError, PlaceResolver

logger = logging.getLogger(__name__)


@dataclass
class PoolStats:
    """Per-run counters for the enrichment pool"""

    received: int = 0
    enriched: int = 0
    empty: int = 0
    failed: int = 0


class EnrichmentPool:
    """Fixed-size pool of worker threads that geocode photos onto a heap.

    Workers share one PhotoStream and one PhotoHeap. No ordering is kept between
    workers; the heap restores timestamp order when it is drained.
    """

    def __init__(self, resolver: PlaceResolver, photo_heap: PhotoHeap, pool_size: int = POOL_SIZE):
        if pool_size < 1:
            raise ValueError(f"pool_size must be at least 1, got {pool_size}")
        self.resolver = resolver
        self.photo_heap = photo_heap
        self.pool_size = pool_size
        self.stats = PoolStats()
        self._stats_lock = threading.Lock()

    def run(self, stream: PhotoStream, cancel: threading.Event) -> PoolStats:
        """Consume the stream until it closes or cancel is set.

        Blocks until every worker has exited, so the heap is complete (or, on
        cancellation, final) when this returns.
        """
        self.stats = PoolStats()
        workers = [
            threading.Thread(target=self.work, args=(stream, cancel), name=f'enrichment-{i}', daemon=True)
            for i in range(self.pool_size)
        ]

        logger.info(f"Starting {self.pool_size} enrichment workers")
        for worker in workers:
            worker.start()
        for worker in workers:
            worker.join()

        if cancel.is_set():
            logger.warning("Enrichment cancelled, unprocessed photos were abandoned")

        logger.info(
            f"Enrichment finished: {self.stats.received} received, {self.stats.enriched} enriched, "
            f"{self.stats.empty} without places, {self.stats.failed} failed"
        )
        return self.stats

    def work(self, stream: PhotoStream, cancel: threading.Event):
        """Worker loop: pull, resolve and push until the stream is done"""
        while True:
            photo = stream.get(cancel)
            if photo is None or cancel.is_set():
                return

            self._count('received')
            self.enrich(photo, cancel)

    def enrich(self, photo: Photo, cancel: threading.Event) -> bool:
        """Resolve one photo's places and push it onto the heap.

        Returns True if the photo was pushed.
        """
        try:
            places = self.resolver.resolve(photo.latitude, photo.longitude)
        except GeocodingError as e:
            logger.error(f"Getting location for photo at {photo.timestamp.isoformat()}: {e}")
            self._count('failed')
            return False
        except Exception:
            logger.exception(f"Unexpected error locating photo at {photo.timestamp.isoformat()}")
            self._count('failed')
            return False

        if cancel.is_set():
            return False

        if not places:
            logger.debug(f"No accepted places for {photo.latitude}, {photo.longitude}")
            self._count('empty')
            return False

        self.photo_heap.push(replace(photo, places=places))
        self._count('enriched')
        return True

    def _count(self, name: str):
        with self._stats_lock:
            setattr(self.stats, name, getattr(self.stats, name) + 1)
