"""Small function helpers shared by the effect types."""

from typing import Callable, Type, TypeVar

A = TypeVar("A")
B = TypeVar("B")
C = TypeVar("C")
R = TypeVar("R")


def identity(v: A) -> A:
    """
    Return `v` unchanged.

    Args:
    ----
        v: The value to return.

    Returns:
    -------
        `v`.

    """
    return v


def curry2(f: Callable[[A, B], R]) -> Callable[[A], Callable[[B], R]]:
    """
    Curry a function of two arguments.

    Used to lift two-argument mappers into `ap` chains.

    Args:
    ----
        f: The function to curry.

    Returns:
    -------
        `f` taking its arguments one at a time.

    """

    def _(a: A) -> Callable[[B], R]:
        return lambda b: f(a, b)

    return _


def curry3(
    f: Callable[[A, B, C], R],
) -> Callable[[A], Callable[[B], Callable[[C], R]]]:
    """
    Curry a function of three arguments.

    Args:
    ----
        f: The function to curry.

    Returns:
    -------
        `f` taking its arguments one at a time.

    """

    def _(a: A) -> Callable[[B], Callable[[C], R]]:
        return lambda b: lambda c: f(a, b, c)

    return _


def pair(a: A) -> Callable[[B], tuple[A, B]]:
    """Return a function that pairs `a` with its argument, used by `zip`."""
    return lambda b: (a, b)


def as_type(t: Type[R]) -> Callable[[R], R]:
    """
    Create an identity function that widens its argument to `t`.

    Useful with `map` to widen the value type, e.g. `right(1).map(as_type(object))`.

    Args:
    ----
        t: The (super)type to consider the result of the identity function.

    Returns:
    -------
        The identity function.

    """

    def _(v: R) -> R:
        return v

    return _
