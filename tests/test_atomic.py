import threading
from datetime import timedelta

from weirkit.atomic import AtomicBool, AtomicDuration, AtomicInt, AtomicString, BoolIndex


def test_atomic_int():
    i = AtomicInt(1)
    assert i.value == 1

    i.value = 2
    assert i.value == 2

    assert i.add(1) == 3
    assert i.value == 3

    i.compare_and_swap(3, 4)
    assert i.value == 4

    i.compare_and_swap(3, 5)
    assert i.value == 4


def test_atomic_int_concurrent_adds():
    counter = AtomicInt()

    def work():
        for _ in range(1000):
            counter.add(1)

    threads = [threading.Thread(target=work) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert counter.value == 8000


def test_atomic_duration():
    d = AtomicDuration(timedelta(seconds=1))
    assert d.value == timedelta(seconds=1)

    d.value = timedelta(seconds=2)
    assert d.value == timedelta(seconds=2)

    d.add(timedelta(seconds=1))
    assert d.value == timedelta(seconds=3)

    d.compare_and_swap(timedelta(seconds=3), timedelta(seconds=4))
    assert d.value == timedelta(seconds=4)

    d.compare_and_swap(timedelta(seconds=3), timedelta(seconds=5))
    assert d.value == timedelta(seconds=4)


def test_atomic_string():
    s = AtomicString()
    assert s.value == ""

    s.value = "a"
    assert s.value == "a"

    assert s.compare_and_swap("b", "c") is False
    assert s.value == "a"

    assert s.compare_and_swap("a", "c") is True
    assert s.value == "c"


def test_atomic_bool():
    b = AtomicBool(True)
    assert b.value is True

    b.value = False
    assert b.value is False

    b.value = True
    assert b.value is True

    assert b.compare_and_swap(False, True) is False
    assert b.compare_and_swap(True, False) is True
    assert b.compare_and_swap(False, False) is True
    assert b.compare_and_swap(False, True) is True
    assert b.compare_and_swap(True, True) is True


def test_bool_index():
    index = BoolIndex()
    assert index.get() == (0, 1, False)
    index.set(True)
    assert index.get() == (1, 0, True)
    index.set(False)
    assert index.get() == (0, 1, False)