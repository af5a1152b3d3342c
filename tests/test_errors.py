from weirkit.errors import MyError, cause, check_and_get_my_error, is_error


def _wrap(err, message):
    wrapped = RuntimeError(message)
    wrapped.__cause__ = err
    return wrapped


def test_is():
    bad_conn = ConnectionError("connection was bad")
    err = _wrap(bad_conn, "same error type")
    assert is_error(err, bad_conn) is True


def test_is_unrelated():
    bad_conn = ConnectionError("connection was bad")
    other = ConnectionError("connection was bad")
    err = _wrap(other, "another error")
    assert is_error(err, bad_conn) is False


def test_is_none_target():
    assert is_error(None, None) is True
    assert is_error(ValueError("x"), None) is False


def test_is_with_matches_hook():
    target = KeyError("k")

    class Matching(Exception):
        def matches(self, other):
            return other is target

    assert is_error(_wrap(Matching(), "outer"), target) is True


def test_cause():
    inner = ValueError("inner")
    assert cause(_wrap(inner, "outer")) is inner
    assert cause(inner) is None


def test_check_and_get_my_error_true():
    my_err = MyError(1105, "unknown")
    assert check_and_get_my_error(my_err) is my_err


def test_check_and_get_my_error_false():
    assert check_and_get_my_error(Exception("not a myError")) is None


def test_check_and_get_my_error_cause_true():
    my_err = MyError(1105, "unknown")
    assert check_and_get_my_error(_wrap(my_err, "wrap error")) is my_err


def test_check_and_get_my_error_none():
    assert check_and_get_my_error(None) is None


def test_my_error_fields():
    my_err = MyError(1105, "unknown")
    assert (my_err.code, my_err.message, my_err.state) == (1105, "unknown", "HY000")
    assert "unknown" in str(my_err)