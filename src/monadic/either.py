"""Contains the Either type and functions for short-circuiting typed failures."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar, final

from typing_extensions import Literal, Never, TypedDict

from monadic.functions import curry2, curry3, pair
from monadic.option import Nothing, Option, Some

log = logging.getLogger(__name__)

T = TypeVar("T", covariant=True)
E = TypeVar("E", covariant=True)
U = TypeVar("U")
E2 = TypeVar("E2")
A = TypeVar("A")
B = TypeVar("B")
C = TypeVar("C")
D = TypeVar("D")
V = TypeVar("V")


class OkResult(TypedDict, Generic[A]):
    """Serialized form of a successful result."""

    ok: Literal[True]
    value: A


class ErrResult(TypedDict, Generic[A]):
    """Serialized form of a failed `Either`."""

    ok: Literal[False]
    error: A


class Either(ABC, Generic[E, T]):
    """
    A computation that either succeeded (`Right`) or failed with an error (`Left`).

    Right-biased and short-circuiting: once a value is `Left`, every later
    `map`, `flat_map`, `ap` and `zip` returns that same error and calls none
    of the functions it is given.
    """

    __slots__ = ()

    @abstractmethod
    def map(self, f: Callable[[T], U]) -> Either[E, U]:
        """
        Apply `f` to the right value.

        Args:
        ----
            f: The function to apply.

        Returns:
        -------
            `Right(f(value))`, or the unchanged error.

        """

    @abstractmethod
    def map_left(self, f: Callable[[E], E2]) -> Either[E2, T]:
        """
        Apply `f` to the error.

        Args:
        ----
            f: The function to apply.

        Returns:
        -------
            `Left(f(error))`, or the unchanged right value.

        """

    @abstractmethod
    def flat_map(self, f: Callable[[T], Either[E2, U]]) -> Either[E | E2, U]:
        """
        Chain a computation that may fail.

        Args:
        ----
            f: The function to apply to the right value.

        Returns:
        -------
            `f(value)`, or the unchanged error without calling `f`.

        """

    @abstractmethod
    def ap(self: Either[E, Callable[[A], U]], arg: Either[E2, A]) -> Either[E | E2, U]:
        """
        Apply the function in this either to the value in `arg`.

        If both are `Left`, the error of this either wins and the error
        of `arg` is discarded.

        Args:
        ----
            arg: The either holding the argument.

        Returns:
        -------
            `Right(fn(a))` if both are `Right`, otherwise the first `Left`.

        """

    @abstractmethod
    def or_else(self, fallback: Callable[[E], Either[E2, U]]) -> Either[E2, T | U]:
        """
        Recover from an error.

        Args:
        ----
            fallback: Produces a replacement either from the error.

        Returns:
        -------
            This either if `Right`, otherwise `fallback(error)`.

        """

    @abstractmethod
    def swap(self) -> Either[T, E]:
        """Exchange the left and right sides."""

    @abstractmethod
    def match(self, on_left: Callable[[E], U], on_right: Callable[[T], U]) -> U:
        """
        Fold the either into a single value.

        Args:
        ----
            on_left: Called with the error of a `Left`.
            on_right: Called with the value of a `Right`.

        Returns:
        -------
            The result of whichever function was called.

        """

    def zip(self, other: Either[E2, A]) -> Either[E | E2, tuple[T, A]]:
        """Pair two right values, or return the first error."""
        return self.map(pair).ap(other)

    def flatten(self: Either[E, Either[E2, U]]) -> Either[E | E2, U]:
        """Remove one level of nesting."""
        return self.flat_map(lambda inner: inner)

    def filter_or_else(
        self, predicate: Callable[[T], bool], on_left: Callable[[], E2]
    ) -> Either[E | E2, T]:
        """
        Turn a right value that fails `predicate` into an error.

        Args:
        ----
            predicate: The condition the right value must satisfy.
            on_left: Produces the error when the predicate fails.

        Returns:
        -------
            This either, or `Left(on_left())` if the right value fails the predicate.

        """
        return self.flat_map(lambda v: self if predicate(v) else Left(on_left()))

    def tap(self, f: Callable[[T], object]) -> Either[E, T]:
        """Run `f` on the right value and return this either unchanged."""
        self.match(lambda _: None, f)
        return self

    def tap_left(self, f: Callable[[E], object]) -> Either[E, T]:
        """Run `f` on the error and return this either unchanged."""
        self.match(f, lambda _: None)
        return self

    def get_or_else(self, fallback: Callable[[E], U]) -> T | U:
        """Return the right value, or `fallback(error)`."""
        return self.match(fallback, lambda v: v)

    def to_result(self) -> OkResult[T] | ErrResult[E]:
        """
        Serialize into a plain dictionary.

        Returns
        -------
            `{"ok": True, "value": ...}` or `{"ok": False, "error": ...}`.

        """
        return self.match(
            lambda error: ErrResult(ok=False, error=error),
            lambda value: OkResult(ok=True, value=value),
        )

    def to_option(self) -> Option[T]:
        """Return the right value as an option, discarding any error."""
        return self.match(lambda _: Nothing(), Some)

    def is_right(self) -> bool:
        """Whether this either is a success."""
        return isinstance(self, Right)

    def is_left(self) -> bool:
        """Whether this either is a failure."""
        return isinstance(self, Left)


@final
@dataclass(frozen=True)
class Right(Either[Never, T]):
    """A successful either."""

    value: T

    def map(self, f: Callable[[T], U]) -> Either[Never, U]:
        return Right(f(self.value))

    def map_left(self, f: Callable[[Any], E2]) -> Either[E2, T]:
        return Right(self.value)

    def flat_map(self, f: Callable[[T], Either[E2, U]]) -> Either[E2, U]:
        return f(self.value)

    def ap(self: Right[Callable[[A], U]], arg: Either[E2, A]) -> Either[E2, U]:  # type: ignore[override]
        match arg:
            case Right(a):
                return Right(self.value(a))
            case Left(error):
                return Left(error)
        raise TypeError(f"Expected an Either, got {arg!r}")  # pragma: no cover

    def or_else(self, fallback: Callable[[Any], Either[E2, U]]) -> Either[E2, T]:
        return self

    def swap(self) -> Either[T, Never]:
        return Left(self.value)

    def match(self, on_left: Callable[[Any], U], on_right: Callable[[T], U]) -> U:
        return on_right(self.value)


@final
@dataclass(frozen=True)
class Left(Either[E, Never]):
    """A failed either."""

    error: E

    def map(self, f: Callable[[Any], U]) -> Either[E, U]:
        return Left(self.error)

    def map_left(self, f: Callable[[E], E2]) -> Either[E2, Never]:
        return Left(f(self.error))

    def flat_map(self, f: Callable[[Any], Either[E2, U]]) -> Either[E, U]:
        return Left(self.error)

    def ap(self, arg: Either[E2, A]) -> Either[E, U]:  # type: ignore[override]
        return Left(self.error)

    def or_else(self, fallback: Callable[[E], Either[E2, U]]) -> Either[E2, U]:
        return fallback(self.error)

    def swap(self) -> Either[Never, E]:
        return Right(self.error)

    def match(self, on_left: Callable[[E], U], on_right: Callable[[Any], U]) -> U:
        return on_left(self.error)


def right(value: A) -> Either[Never, A]:
    """
    Create a successful either.

    Args:
    ----
        value: The right value.

    Returns:
    -------
        `Right(value)`.

    """
    return Right(value)


def left(error: A) -> Either[A, Never]:
    """
    Create a failed either.

    Args:
    ----
        error: The error.

    Returns:
    -------
        `Left(error)`.

    """
    return Left(error)


def from_optional(value: A | None, on_none: Callable[[], B]) -> Either[B, A]:
    """
    Create an either from a value that may be `None`.

    Args:
    ----
        value: The value, or `None`.
        on_none: Produces the error when `value` is `None`.

    Returns:
    -------
        `Right(value)`, or `Left(on_none())` if `value` is `None`.

    """
    return Left(on_none()) if value is None else Right(value)


def from_option(option: Option[A], on_nothing: Callable[[], B]) -> Either[B, A]:
    """
    Create an either from an option.

    Args:
    ----
        option: The option to convert.
        on_nothing: Produces the error when the option is empty.

    Returns:
    -------
        `Right(value)`, or `Left(on_nothing())` if the option is empty.

    """
    return option.match(lambda: Left(on_nothing()), Right)


def try_catch(f: Callable[[], A], on_throw: Callable[[Exception], B]) -> Either[B, A]:
    """
    Call `f` and capture any exception it raises as a `Left`.

    This is the only place the synchronous families catch exceptions.
    `BaseException`s such as `KeyboardInterrupt` are not caught.

    Args:
    ----
        f: The function to call.
        on_throw: Converts a raised exception into the error value.

    Returns:
    -------
        `Right(f())`, or `Left(on_throw(exception))` if `f` raised.

    """
    try:
        return Right(f())
    except Exception as e:
        log.debug("try_catch captured %s as Left", type(e).__name__)
        return Left(on_throw(e))


def map2(a: Either[A, B], b: Either[A, C], f: Callable[[B, C], D]) -> Either[A, D]:
    """
    Combine the right values of two eithers with `f`.

    Short-circuits on the first `Left`, in argument order.

    Args:
    ----
        a: The first either.
        b: The second either.
        f: Combines both right values.

    Returns:
    -------
        `Right(f(a, b))`, or the first error without calling `f`.

    """
    return a.map(curry2(f)).ap(b)


def map3(
    a: Either[A, B], b: Either[A, C], c: Either[A, D], f: Callable[[B, C, D], V]
) -> Either[A, V]:
    """
    Combine the right values of three eithers with `f`.

    Args:
    ----
        a: The first either.
        b: The second either.
        c: The third either.
        f: Combines all three right values.

    Returns:
    -------
        `Right(f(a, b, c))`, or the first error without calling `f`.

    """
    return a.map(curry3(f)).ap(b).ap(c)


def sequence(eithers: Iterable[Either[A, B]]) -> Either[A, list[B]]:
    """
    Turn eithers of values into an either of a list of values.

    Args:
    ----
        eithers: The eithers to collect, in order.

    Returns:
    -------
        `Right` with every value in order, or the first `Left` encountered.

    """
    values: list[B] = []
    for either in eithers:
        match either:
            case Right(value):
                values.append(value)
            case Left(error):
                return Left(error)
    return Right(values)


def traverse(items: Sequence[V], f: Callable[[V], Either[A, B]]) -> Either[A, list[B]]:
    """Apply `f` to each item and collect the results with `sequence`; stops at the first `Left`."""
    return sequence(f(item) for item in items)
