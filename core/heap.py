import heapq
import itertools
import threading
from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class Photo:
    """A photo's timestamp, coordinates and the place names resolved for them.

    Photos come off the reader with no places; the enrichment pool fills them in
    before pushing onto the heap. The set removes duplicate place names.
    """

    timestamp: datetime
    latitude: float
    longitude: float
    places: frozenset[str] = field(default_factory=frozenset)


class PhotoHeap:
    """Thread-safe min-heap of photos ordered by timestamp.

    Photos sharing a timestamp come out in the order they were pushed.
    """

    def __init__(self):
        self._entries: list[tuple[datetime, int, Photo]] = []
        self._counter = itertools.count()
        self._lock = threading.Lock()

    def push(self, photo: Photo) -> None:
        """Push a photo onto the heap. Safe to call from many threads."""
        with self._lock:
            heapq.heappush(self._entries, (photo.timestamp, next(self._counter), photo))

    def pop(self) -> Photo | None:
        """Remove and return the earliest photo, or None if the heap is empty.

        An empty heap is not final: photos pushed later will be returned by
        later calls.
        """
        with self._lock:
            if not self._entries:
                return None
            _, _, photo = heapq.heappop(self._entries)
            return photo

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
