import threading
import time

import pytest

from weirkit.semaphore import Semaphore


def test_no_timeout():
    s = Semaphore(1, 0)
    s.acquire()
    released = []

    def release_later():
        time.sleep(0.01)
        released.append(True)
        s.release()

    threading.Thread(target=release_later).start()
    assert s.acquire() is True
    assert released == [True]


def test_timeout():
    s = Semaphore(1, 0.005)
    s.acquire()

    def release_later():
        time.sleep(0.05)
        s.release()

    threading.Thread(target=release_later).start()
    assert s.acquire() is False
    time.sleep(0.1)
    assert s.acquire() is True


def test_try_acquire():
    s = Semaphore(1, 0)
    assert s.try_acquire() is True
    assert s.try_acquire() is False
    s.release()
    assert s.try_acquire() is True


def test_size_tracks_slots():
    s = Semaphore(3)
    assert s.size == 3
    s.acquire()
    assert s.size == 2
    s.release()
    assert s.size == 3


def test_release_beyond_capacity_raises():
    s = Semaphore(1)
    with pytest.raises(ValueError):
        s.release()


def test_invalid_count_raises():
    with pytest.raises(ValueError):
        Semaphore(0)


def test_context_manager_releases():
    s = Semaphore(1)
    with s:
        assert s.size == 0
    assert s.size == 1


def test_context_manager_timeout():
    s = Semaphore(1, 0.005)
    s.acquire()
    entered = []
    with pytest.raises(TimeoutError):
        with s:
            entered.append(True)
    assert entered == []
    assert s.size == 0
    assert s.try_acquire() is False