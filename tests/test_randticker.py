import threading
import time

import pytest

from weirkit.randticker import RandTicker

TEST_DURATION = 0.1
TEST_VARIANCE = 0.02


def test_tick():
    tkr = RandTicker(TEST_DURATION, TEST_VARIANCE)
    tolerance = TEST_VARIANCE + 0.02
    for _ in range(5):
        start = time.monotonic()
        end = tkr.receive(timeout=1.0)
        diff = start + TEST_DURATION - end
        assert -tolerance <= diff <= tolerance
    tkr.stop()
    assert tkr.receive(timeout=1.0) is None


def test_tick_skip():
    tkr = RandTicker(0.01, 0.001)
    try:
        time.sleep(0.035)
        end = tkr.receive(timeout=1.0)
        assert time.monotonic() - end >= 0.02
        end = tkr.receive(timeout=1.0)
        assert time.monotonic() - end < 0.015
    finally:
        tkr.stop()


def test_receive_times_out():
    tkr = RandTicker(1.0, 0.1)
    try:
        with pytest.raises(TimeoutError):
            tkr.receive(timeout=0.05)
    finally:
        tkr.stop()


def test_iteration_ends_after_stop():
    tkr = RandTicker(0.01, 0.001)
    stopper = threading.Timer(0.1, tkr.stop)
    stopper.start()
    ticks = list(tkr)
    stopper.join()
    assert len(ticks) >= 1
    assert ticks == sorted(ticks)


def test_negative_variance_rejected():
    with pytest.raises(ValueError):
        RandTicker(0.1, -0.01)


def test_stop_is_idempotent():
    tkr = RandTicker(0.5, 0.0)
    tkr.stop()
    tkr.stop()
    assert tkr.receive(timeout=0.5) is None