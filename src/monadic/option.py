"""Contains the Option type and functions for working with optional values."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Generic, TypeVar, final

from typing_extensions import Never

from monadic.functions import curry2, curry3, pair

if TYPE_CHECKING:
    from monadic.either import Either  # pragma: no cover

T = TypeVar("T", covariant=True)
U = TypeVar("U")
A = TypeVar("A")
B = TypeVar("B")
C = TypeVar("C")
D = TypeVar("D")
E = TypeVar("E")
V = TypeVar("V")


class Option(ABC, Generic[T]):
    """
    A value that is either present (`Some`) or absent (`Nothing`).

    Every combinator on `Nothing` returns `Nothing` (or the fallback)
    without calling the function it was given.
    """

    __slots__ = ()

    @abstractmethod
    def map(self, f: Callable[[T], U]) -> Option[U]:
        """
        Apply `f` to the value if present.

        Args:
        ----
            f: The function to apply.

        Returns:
        -------
            `Some(f(value))`, or `Nothing` if there is no value.

        """

    @abstractmethod
    def flat_map(self, f: Callable[[T], Option[U]]) -> Option[U]:
        """
        Apply an option-returning `f` to the value if present.

        Args:
        ----
            f: The function to apply. Decides the resulting variant.

        Returns:
        -------
            `f(value)`, or `Nothing` if there is no value.

        """

    @abstractmethod
    def filter(self, predicate: Callable[[T], bool]) -> Option[T]:
        """
        Keep the value only if it satisfies `predicate`.

        Args:
        ----
            predicate: The condition the value must satisfy.

        Returns:
        -------
            This option if the predicate holds, otherwise `Nothing`.

        """

    @abstractmethod
    def ap(self: Option[Callable[[A], U]], arg: Option[A]) -> Option[U]:
        """
        Apply the function in this option to the value in `arg`.

        Args:
        ----
            arg: The option holding the argument.

        Returns:
        -------
            `Some(fn(a))` if both options hold values, otherwise `Nothing`.

        """

    @abstractmethod
    def or_else(self, fallback: Callable[[], Option[U]]) -> Option[T | U]:
        """
        Recover from absence.

        Args:
        ----
            fallback: Produces the option to use when there is no value.

        Returns:
        -------
            This option if present, otherwise `fallback()`.

        """

    @abstractmethod
    def match(self, on_nothing: Callable[[], U], on_some: Callable[[T], U]) -> U:
        """
        Fold the option into a single value.

        Args:
        ----
            on_nothing: Called when there is no value.
            on_some: Called with the value when present.

        Returns:
        -------
            The result of whichever function was called.

        """

    def zip(self, other: Option[A]) -> Option[tuple[T, A]]:
        """Pair the values of two options, or `Nothing` if either is absent."""
        return self.map(pair).ap(other)

    def flatten(self: Option[Option[U]]) -> Option[U]:
        """Remove one level of nesting."""
        return self.flat_map(lambda inner: inner)

    def tap(self, f: Callable[[T], object]) -> Option[T]:
        """Run `f` on the value if present and return this option unchanged."""
        self.match(lambda: None, f)
        return self

    def tap_nothing(self, f: Callable[[], object]) -> Option[T]:
        """Run `f` if there is no value and return this option unchanged."""
        self.match(f, lambda _: None)
        return self

    def get_or_else(self, fallback: Callable[[], U]) -> T | U:
        """Return the value, or `fallback()` if absent."""
        return self.match(fallback, lambda v: v)

    def to_optional(self) -> T | None:
        """Return the value, or `None` if absent."""
        return self.match(lambda: None, lambda v: v)

    def to_list(self) -> list[T]:
        """Return a one-element list with the value, or an empty list."""
        return self.match(lambda: [], lambda v: [v])

    def to_either(self, on_nothing: Callable[[], E]) -> Either[E, T]:
        """
        Convert to an `Either`.

        Args:
        ----
            on_nothing: Produces the error when there is no value.

        Returns:
        -------
            `Right(value)`, or `Left(on_nothing())` if absent.

        """
        from monadic.either import Left, Right

        return self.match(lambda: Left(on_nothing()), Right)

    def is_some(self) -> bool:
        """Whether this option holds a value."""
        return isinstance(self, Some)

    def is_nothing(self) -> bool:
        """Whether this option is empty."""
        return isinstance(self, Nothing)


@final
@dataclass(frozen=True)
class Some(Option[T]):
    """An option holding a value."""

    value: T

    def map(self, f: Callable[[T], U]) -> Option[U]:
        return Some(f(self.value))

    def flat_map(self, f: Callable[[T], Option[U]]) -> Option[U]:
        return f(self.value)

    def filter(self, predicate: Callable[[T], bool]) -> Option[T]:
        return self if predicate(self.value) else Nothing()

    def ap(self: Some[Callable[[A], U]], arg: Option[A]) -> Option[U]:  # type: ignore[override]
        match arg:
            case Some(a):
                return Some(self.value(a))
            case _:
                return Nothing()

    def or_else(self, fallback: Callable[[], Option[U]]) -> Option[T | U]:
        return self

    def match(self, on_nothing: Callable[[], U], on_some: Callable[[T], U]) -> U:
        return on_some(self.value)


@final
@dataclass(frozen=True)
class Nothing(Option[Never]):
    """An empty option."""

    def map(self, f: Callable[[Any], U]) -> Option[U]:
        return Nothing()

    def flat_map(self, f: Callable[[Any], Option[U]]) -> Option[U]:
        return Nothing()

    def filter(self, predicate: Callable[[Any], bool]) -> Option[Never]:
        return Nothing()

    def ap(self, arg: Option[A]) -> Option[U]:  # type: ignore[override]
        return Nothing()

    def or_else(self, fallback: Callable[[], Option[U]]) -> Option[U]:
        return fallback()

    def match(self, on_nothing: Callable[[], U], on_some: Callable[[Any], U]) -> U:
        return on_nothing()


def some(value: A) -> Option[A]:
    """
    Create an option holding `value`.

    Args:
    ----
        value: The value to hold.

    Returns:
    -------
        `Some(value)`.

    """
    return Some(value)


def nothing() -> Option[Never]:
    """
    Create an empty option.

    Returns
    -------
        `Nothing()`.

    """
    return Nothing()


def from_optional(value: A | None) -> Option[A]:
    """
    Create an option from a value that may be `None`.

    Only `None` counts as absent; falsy values such as `0` or `""` are kept.

    Args:
    ----
        value: The value, or `None`.

    Returns:
    -------
        `Nothing()` if `value` is `None`, otherwise `Some(value)`.

    """
    return Nothing() if value is None else Some(value)


def from_either(either: Either[Any, A]) -> Option[A]:
    """
    Create an option from the right side of an `Either`, discarding any error.

    Args:
    ----
        either: The either to convert.

    Returns:
    -------
        `Some(value)` for a `Right`, `Nothing()` for a `Left`.

    """
    return either.match(lambda _: Nothing(), Some)


def map2(a: Option[A], b: Option[B], f: Callable[[A, B], C]) -> Option[C]:
    """
    Combine the values of two options with `f`.

    `f` is only called if both options hold values.

    Args:
    ----
        a: The first option.
        b: The second option.
        f: Combines both values.

    Returns:
    -------
        `Some(f(a, b))`, or `Nothing` if either option is empty.

    """
    return a.map(curry2(f)).ap(b)


def map3(
    a: Option[A], b: Option[B], c: Option[C], f: Callable[[A, B, C], D]
) -> Option[D]:
    """
    Combine the values of three options with `f`.

    `f` is only called if all three options hold values.

    Args:
    ----
        a: The first option.
        b: The second option.
        c: The third option.
        f: Combines all three values.

    Returns:
    -------
        `Some(f(a, b, c))`, or `Nothing` if any option is empty.

    """
    return a.map(curry3(f)).ap(b).ap(c)


def sequence(options: Iterable[Option[A]]) -> Option[list[A]]:
    """
    Turn options of values into an option of a list of values.

    Args:
    ----
        options: The options to collect, in order.

    Returns:
    -------
        `Some` with every value in order, or `Nothing` as soon as one option is empty.

    """
    values: list[A] = []
    for option in options:
        match option:
            case Some(value):
                values.append(value)
            case _:
                return Nothing()
    return Some(values)


def traverse(items: Sequence[V], f: Callable[[V], Option[A]]) -> Option[list[A]]:
    """Apply `f` to each item and collect the results with `sequence`."""
    return sequence(f(item) for item in items)
