import random
import threading
from core.heap import Photo, PhotoHeap
from datetime import UTC, datetime, timedelta
from fixtures import TestDataFixtures


class TestPhotoHeap:
    """Test suite for the timestamp-ordered photo heap"""

    def test_push_and_pop_single(self):
        """Test a pushed photo comes back unchanged"""
        photo_heap = PhotoHeap()
        photo = TestDataFixtures.make_photo(10, places={'London', 'United Kingdom'})

        photo_heap.push(photo)

        assert len(photo_heap) == 1
        assert photo_heap.pop() == photo
        assert len(photo_heap) == 0

    def test_pop_empty_returns_none(self):
        """Test popping an empty heap signals empty instead of raising"""
        photo_heap = PhotoHeap()
        assert photo_heap.pop() is None
        assert photo_heap.pop() is None

    def test_pushed_unsorted_pops_sorted(self):
        """Test photos come out in timestamp order regardless of push order"""
        photo_heap = PhotoHeap()
        later = TestDataFixtures.make_photo(10, day=3, month=1)
        earlier = TestDataFixtures.make_photo(10, day=2, month=1)

        photo_heap.push(later)
        photo_heap.push(earlier)

        assert photo_heap.pop() == earlier
        assert photo_heap.pop() == later
        assert photo_heap.pop() is None

    def test_random_order_is_non_decreasing(self):
        """Test N random pushes give exactly N ordered pops"""
        base = datetime(2022, 1, 1, tzinfo=UTC)
        rng = random.Random(42)
        photos = [Photo(timestamp=base + timedelta(minutes=rng.randint(0, 10_000)), latitude=i, longitude=0.0) for i in range(200)]

        photo_heap = PhotoHeap()
        for photo in photos:
            photo_heap.push(photo)

        popped = []
        for _ in range(len(photos)):
            photo = photo_heap.pop()
            assert photo is not None
            popped.append(photo)

        assert photo_heap.pop() is None
        timestamps = [photo.timestamp for photo in popped]
        assert timestamps == sorted(timestamps)
        assert sorted(p.latitude for p in popped) == sorted(p.latitude for p in photos)

    def test_equal_timestamps_pop_in_push_order(self):
        """Test ties on timestamp are broken by insertion order"""
        photo_heap = PhotoHeap()
        first = TestDataFixtures.make_photo(10, latitude=1.0)
        second = TestDataFixtures.make_photo(10, latitude=2.0)
        third = TestDataFixtures.make_photo(10, latitude=3.0)

        for photo in (first, second, third):
            photo_heap.push(photo)

        assert [photo_heap.pop() for _ in range(3)] == [first, second, third]

    def test_pop_after_refill(self):
        """Test an emptied heap accepts and returns new photos"""
        photo_heap = PhotoHeap()
        assert photo_heap.pop() is None

        photo = TestDataFixtures.make_photo(12)
        photo_heap.push(photo)
        assert photo_heap.pop() == photo

    def test_concurrent_push(self):
        """Test M threads pushing K photos each lose and duplicate nothing"""
        workers, per_worker = 8, 500
        base = datetime(2022, 1, 1, tzinfo=UTC)

        for _ in range(3):
            photo_heap = PhotoHeap()
            start = threading.Barrier(workers)

            def push_all(worker_id):
                rng = random.Random(worker_id)
                start.wait()
                for i in range(per_worker):
                    photo_heap.push(
                        Photo(
                            timestamp=base + timedelta(seconds=rng.randint(0, 86_400)),
                            latitude=float(worker_id),
                            longitude=float(i),
                        )
                    )

            threads = [threading.Thread(target=push_all, args=(w,)) for w in range(workers)]
            for thread in threads:
                thread.start()
            for thread in threads:
                thread.join()

            assert len(photo_heap) == workers * per_worker

            seen = set()
            previous = None
            while True:
                photo = photo_heap.pop()
                if photo is None:
                    break
                if previous is not None:
                    assert photo.timestamp >= previous
                previous = photo.timestamp
                seen.add((photo.latitude, photo.longitude))

            assert len(seen) == workers * per_worker
