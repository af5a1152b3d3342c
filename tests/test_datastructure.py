import pytest

from weirkit.datastructure import string_slice_to_set


@pytest.mark.parametrize(
    "items, expected",
    [
        (None, set()),
        (["db0"], {"db0"}),
        (["db0", "db1"], {"db0", "db1"}),
    ],
    ids=["nil", "one", "two"],
)
def test_string_slice_to_set(items, expected):
    assert string_slice_to_set(items) == expected


def test_duplicates_collapse():
    assert string_slice_to_set(["a", "a", "b"]) == {"a", "b"}