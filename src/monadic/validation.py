"""Contains the Validation type and functions for accumulating typed failures."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar, final

from typing_extensions import Literal, Never, TypedDict

from monadic.either import Either, Left, OkResult, Right
from monadic.errors import EmptyErrorsError
from monadic.functions import curry2, curry3, pair
from monadic.option import Option

T = TypeVar("T", covariant=True)
E = TypeVar("E", covariant=True)
U = TypeVar("U")
E2 = TypeVar("E2")
A = TypeVar("A")
B = TypeVar("B")
C = TypeVar("C")
D = TypeVar("D")
V = TypeVar("V")


class ErrorsResult(TypedDict, Generic[A]):
    """Serialized form of a failed `Validation`, with every error in order."""

    ok: Literal[False]
    errors: list[A]


class Validation(ABC, Generic[E, T]):
    """
    A value that is either valid or carries every error found while checking it.

    Shares its surface with `Either`, but `ap` (and `zip`, `map2`, `map3`,
    `sequence`, `traverse`, which are built on it) keeps going after a
    failure: when both sides are `Invalid`, their errors are concatenated,
    left operand first.
    """

    __slots__ = ()

    @abstractmethod
    def map(self, f: Callable[[T], U]) -> Validation[E, U]:
        """Apply `f` to the valid value."""

    @abstractmethod
    def map_errors(self, f: Callable[[E], E2]) -> Validation[E2, T]:
        """Apply `f` to each error, keeping their order."""

    @abstractmethod
    def flat_map(self, f: Callable[[T], Validation[E2, U]]) -> Validation[E | E2, U]:
        """
        Chain a check that depends on the valid value.

        The second check cannot run without the first value, so this does not
        accumulate. Combine independent checks with `ap` or `map2` instead.

        Args:
        ----
            f: The check to run on the valid value.

        Returns:
        -------
            `f(value)`, or this validation's errors without calling `f`.

        """

    @abstractmethod
    def ap(
        self: Validation[E, Callable[[A], U]], arg: Validation[E2, A]
    ) -> Validation[E | E2, U]:
        """
        Apply the function in this validation to the value in `arg`.

        Args:
        ----
            arg: The validation holding the argument.

        Returns:
        -------
            `Valid(fn(a))` if both are valid. Otherwise an `Invalid` holding
            the errors of this validation followed by the errors of `arg`.
            The function is not called.

        """

    @abstractmethod
    def or_else(
        self, fallback: Callable[[tuple[E, ...]], Validation[E2, U]]
    ) -> Validation[E2, T | U]:
        """Return this validation if valid, otherwise `fallback(errors)`."""

    @abstractmethod
    def match(
        self, on_invalid: Callable[[tuple[E, ...]], U], on_valid: Callable[[T], U]
    ) -> U:
        """
        Fold the validation into a single value.

        Args:
        ----
            on_invalid: Called with all errors, in the order they were found.
            on_valid: Called with the valid value.

        Returns:
        -------
            The result of whichever function was called.

        """

    def zip(self, other: Validation[E2, A]) -> Validation[E | E2, tuple[T, A]]:
        """Pair two valid values, or collect the errors of both."""
        return self.map(pair).ap(other)

    def filter_or_else(
        self, predicate: Callable[[T], bool], on_invalid: Callable[[], E2]
    ) -> Validation[E | E2, T]:
        """
        Turn a valid value that fails `predicate` into a single error.

        Args:
        ----
            predicate: The condition the valid value must satisfy.
            on_invalid: Produces the error when the predicate fails.

        Returns:
        -------
            This validation, or `Invalid((on_invalid(),))`.

        """
        return self.flat_map(
            lambda v: self if predicate(v) else Invalid((on_invalid(),))
        )

    def tap(self, f: Callable[[T], object]) -> Validation[E, T]:
        """Run `f` on the valid value and return this validation unchanged."""
        self.match(lambda _: None, f)
        return self

    def tap_invalid(self, f: Callable[[tuple[E, ...]], object]) -> Validation[E, T]:
        """Run `f` on the errors and return this validation unchanged."""
        self.match(f, lambda _: None)
        return self

    def get_or_else(self, fallback: Callable[[tuple[E, ...]], U]) -> T | U:
        """Return the valid value, or `fallback(errors)`."""
        return self.match(fallback, lambda v: v)

    def to_result(self) -> OkResult[T] | ErrorsResult[E]:
        """
        Serialize into a plain dictionary.

        Returns
        -------
            `{"ok": True, "value": ...}` or `{"ok": False, "errors": [...]}`.

        """
        return self.match(
            lambda errors: ErrorsResult(ok=False, errors=list(errors)),
            lambda value: OkResult(ok=True, value=value),
        )

    def to_either(self) -> Either[tuple[E, ...], T]:
        """Convert to an `Either` whose error is the tuple of all errors."""
        return self.match(Left, Right)

    def is_valid(self) -> bool:
        """Whether this validation holds a value."""
        return isinstance(self, Valid)

    def is_invalid(self) -> bool:
        """Whether this validation holds errors."""
        return isinstance(self, Invalid)


@final
@dataclass(frozen=True)
class Valid(Validation[Never, T]):
    """A validation that passed."""

    value: T

    def map(self, f: Callable[[T], U]) -> Validation[Never, U]:
        return Valid(f(self.value))

    def map_errors(self, f: Callable[[Any], E2]) -> Validation[E2, T]:
        return Valid(self.value)

    def flat_map(self, f: Callable[[T], Validation[E2, U]]) -> Validation[E2, U]:
        return f(self.value)

    def ap(  # type: ignore[override]
        self: Valid[Callable[[A], U]], arg: Validation[E2, A]
    ) -> Validation[E2, U]:
        match arg:
            case Valid(a):
                return Valid(self.value(a))
            case Invalid(errors):
                return Invalid(errors)
        raise TypeError(f"Expected a Validation, got {arg!r}")  # pragma: no cover

    def or_else(
        self, fallback: Callable[[Any], Validation[E2, U]]
    ) -> Validation[E2, T]:
        return self

    def match(
        self, on_invalid: Callable[[Any], U], on_valid: Callable[[T], U]
    ) -> U:
        return on_valid(self.value)


@final
@dataclass(frozen=True)
class Invalid(Validation[E, Never]):
    """
    A validation that failed.

    `errors` is never empty and keeps the order in which errors were found.
    """

    errors: tuple[E, ...]

    def __post_init__(self) -> None:
        """Freeze `errors` into a tuple and reject an empty one."""
        object.__setattr__(self, "errors", tuple(self.errors))
        if not self.errors:
            raise EmptyErrorsError("Invalid requires at least one error")

    def map(self, f: Callable[[Any], U]) -> Validation[E, U]:
        return Invalid(self.errors)

    def map_errors(self, f: Callable[[E], E2]) -> Validation[E2, Never]:
        return Invalid(tuple(f(error) for error in self.errors))

    def flat_map(self, f: Callable[[Any], Validation[E2, U]]) -> Validation[E, U]:
        return Invalid(self.errors)

    def ap(self, arg: Validation[E2, A]) -> Validation[E | E2, U]:  # type: ignore[override]
        match arg:
            case Invalid(errors):
                return Invalid((*self.errors, *errors))
            case _:
                return Invalid(self.errors)

    def or_else(
        self, fallback: Callable[[tuple[E, ...]], Validation[E2, U]]
    ) -> Validation[E2, U]:
        return fallback(self.errors)

    def match(
        self, on_invalid: Callable[[tuple[E, ...]], U], on_valid: Callable[[Any], U]
    ) -> U:
        return on_invalid(self.errors)


def valid(value: A) -> Validation[Never, A]:
    """
    Create a passing validation.

    Args:
    ----
        value: The valid value.

    Returns:
    -------
        `Valid(value)`.

    """
    return Valid(value)


def invalid(error: A) -> Validation[A, Never]:
    """
    Create a failing validation with a single error.

    Args:
    ----
        error: The error.

    Returns:
    -------
        `Invalid((error,))`.

    """
    return Invalid((error,))


def from_either(either: Either[A, B]) -> Validation[A, B]:
    """Create a validation from an either; a `Left` becomes a single error."""
    return either.match(invalid, Valid)


def from_option(option: Option[A], on_nothing: Callable[[], B]) -> Validation[B, A]:
    """Create a validation from an option, using `on_nothing()` as the error when empty."""
    return option.match(lambda: invalid(on_nothing()), Valid)


def map2(
    a: Validation[A, B], b: Validation[A, C], f: Callable[[B, C], D]
) -> Validation[A, D]:
    """
    Combine two validations with `f`, accumulating errors from both.

    Args:
    ----
        a: The first validation.
        b: The second validation.
        f: Combines both valid values.

    Returns:
    -------
        `Valid(f(a, b))`, or an `Invalid` with the errors of `a` then `b`;
        `f` is only called if both are valid.

    """
    return a.map(curry2(f)).ap(b)


def map3(
    a: Validation[A, B],
    b: Validation[A, C],
    c: Validation[A, D],
    f: Callable[[B, C, D], V],
) -> Validation[A, V]:
    """
    Combine three validations with `f`, accumulating errors from all of them.

    Args:
    ----
        a: The first validation.
        b: The second validation.
        c: The third validation.
        f: Combines all three valid values.

    Returns:
    -------
        `Valid(f(a, b, c))`, or an `Invalid` with the errors of `a`, `b` and
        `c` in that order.

    """
    return a.map(curry3(f)).ap(b).ap(c)


def sequence(validations: Iterable[Validation[A, B]]) -> Validation[A, list[B]]:
    """
    Turn validations of values into a validation of a list of values.

    Every element is inspected, whatever the outcome of the ones before it.

    Args:
    ----
        validations: The validations to collect, in order.

    Returns:
    -------
        `Valid` with every value in order if all passed, otherwise one
        `Invalid` with the errors of every failed element, in list order.

    """
    errors: list[A] = []
    values: list[B] = []
    for validation in validations:
        match validation:
            case Valid(value):
                values.append(value)
            case Invalid(errs):
                errors.extend(errs)
    if errors:
        return Invalid(tuple(errors))
    return Valid(values)


def traverse(
    items: Sequence[V], f: Callable[[V], Validation[A, B]]
) -> Validation[A, list[B]]:
    """Apply `f` to every item and collect the results with `sequence`."""
    return sequence([f(item) for item in items])
