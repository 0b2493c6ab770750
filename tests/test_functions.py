from monadic.functions import as_type, curry2, curry3, identity, pair


def test_identity() -> None:
    value = object()
    assert identity(value) is value


def test_curry2() -> None:
    assert curry2(lambda a, b: a - b)(5)(3) == 2


def test_curry3() -> None:
    assert curry3(lambda a, b, c: f"{a}{b}{c}")("x")("y")("z") == "xyz"


def test_pair() -> None:
    assert pair(1)("one") == (1, "one")


def test_as_type() -> None:
    widen = as_type(object)
    value = "value"
    assert widen(value) is value
