import pytest

from weirkit.toggle import Toggle, ToggleNotPreparedError


def test_current():
    toggle = Toggle(1)
    assert toggle.current == 1


def test_swap_other():
    toggle = Toggle(1)
    assert toggle.swap_other(2) is None
    assert toggle.current == 1

    assert toggle.swap_other(3) == 2
    assert toggle.current == 1


def test_toggle_success():
    toggle = Toggle(1)
    toggle.swap_other(2)
    toggle.toggle()
    assert toggle.current == 2


def test_toggle_not_prepared():
    toggle = Toggle(1)
    with pytest.raises(ToggleNotPreparedError) as excinfo:
        toggle.toggle()
    assert str(excinfo.value) == "not prepared"


def test_toggle_twice_needs_new_stage():
    toggle = Toggle(1)
    toggle.swap_other(2)
    toggle.toggle()
    with pytest.raises(ToggleNotPreparedError):
        toggle.toggle()
    assert toggle.swap_other(3) == 1
    toggle.toggle()
    assert toggle.current == 3