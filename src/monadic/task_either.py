"""Contains the TaskEither type: a lazy asynchronous computation that may fail with a typed error."""

import asyncio
import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Awaitable, Callable, Generic, TypeVar

from typing_extensions import Never

from monadic import either
from monadic.either import Either, Left, Right
from monadic.functions import curry2, curry3, pair
from monadic.option import Option
from monadic.task import Task

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


@dataclass(frozen=True)
class TaskEither(Generic[E, T]):
    """
    A deferred asynchronous computation producing an `Either`.

    Combines the laziness and concurrency of `Task` with the short-circuit
    semantics of `Either`. Each combinator runs the underlying producer and
    applies the corresponding `Either` combinator to its result.
    """

    producer: Callable[[], Awaitable[Either[E, T]]]

    def run(self) -> Awaitable[Either[E, T]]:
        """
        Run the computation.

        Returns
        -------
            An awaitable of the resulting `Either`.

        """
        return self.producer()

    def map(self, f: Callable[[T], U]) -> "TaskEither[E, U]":
        """Apply `f` to the right value once the computation has run."""

        async def producer() -> Either[E, U]:
            return (await self.run()).map(f)

        return TaskEither(producer)

    def map_left(self, f: Callable[[E], E2]) -> "TaskEither[E2, T]":
        """Apply `f` to the error once the computation has run."""

        async def producer() -> Either[E2, T]:
            return (await self.run()).map_left(f)

        return TaskEither(producer)

    def flat_map(
        self, f: Callable[[T], "TaskEither[E2, U]"]
    ) -> "TaskEither[E | E2, U]":
        """
        Chain a computation that depends on the right value.

        The second computation is only built once the first has produced a
        `Right`. On a `Left`, `f` is never called.

        Args:
        ----
            f: Builds the next computation from the right value.

        Returns:
        -------
            A computation producing the result of the one returned by `f`, or
            the first error.

        """

        async def producer() -> Either[E | E2, U]:
            match await self.run():
                case Right(value):
                    return await f(value).run()
                case Left(error):
                    return Left(error)
            raise TypeError("TaskEither producer did not return an Either")  # pragma: no cover

        return TaskEither(producer)

    def ap(
        self: "TaskEither[E, Callable[[A], U]]", arg: "TaskEither[E2, A]"
    ) -> "TaskEither[E | E2, U]":
        """
        Apply the function produced by this computation to the value produced by `arg`.

        Both computations are started before either is awaited. Once both
        have settled, `Either.ap` decides the result, so if both fail the
        error of this computation wins.

        Args:
        ----
            arg: The computation producing the argument.

        Returns:
        -------
            A computation producing `Right(fn(a))` or the first error.

        """

        async def producer() -> Either[E | E2, U]:
            fn, a = await asyncio.gather(self.run(), arg.run())
            return fn.ap(a)

        return TaskEither(producer)

    def zip(self, other: "TaskEither[E2, A]") -> "TaskEither[E | E2, tuple[T, A]]":
        """Run both computations concurrently and pair their right values."""
        return self.map(pair).ap(other)

    def flatten(self: "TaskEither[E, TaskEither[E2, U]]") -> "TaskEither[E | E2, U]":
        """Remove one level of nesting."""
        return self.flat_map(lambda inner: inner)

    def or_else(
        self, fallback: Callable[[E], "TaskEither[E2, U]"]
    ) -> "TaskEither[E2, T | U]":
        """
        Recover from an error with another computation.

        Args:
        ----
            fallback: Builds the replacement computation from the error.
                Not called on a `Right`.

        Returns:
        -------
            A computation producing this result if `Right`, otherwise the result
            of `fallback(error)`.

        """

        async def producer() -> Either[E2, T | U]:
            match await self.run():
                case Left(error):
                    return await fallback(error).run()
                case Right(value):
                    return Right(value)
            raise TypeError("TaskEither producer did not return an Either")  # pragma: no cover

        return TaskEither(producer)

    def tap(self, f: Callable[[T], object]) -> "TaskEither[E, T]":
        """Run `f` on the right value and pass the result through unchanged."""

        async def producer() -> Either[E, T]:
            return (await self.run()).tap(f)

        return TaskEither(producer)

    def tap_left(self, f: Callable[[E], object]) -> "TaskEither[E, T]":
        """Run `f` on the error and pass the result through unchanged."""

        async def producer() -> Either[E, T]:
            return (await self.run()).tap_left(f)

        return TaskEither(producer)

    def match(self, on_left: Callable[[E], U], on_right: Callable[[T], U]) -> Task[U]:
        """
        Fold the result into a single value.

        Folding needs the result, so this returns a `Task` rather than a value.

        Args:
        ----
            on_left: Called with the error.
            on_right: Called with the right value.

        Returns:
        -------
            A task producing the result of whichever function was called.

        """

        async def producer() -> U:
            return (await self.run()).match(on_left, on_right)

        return Task(producer)

    def get_or_else(self, fallback: Callable[[E], U]) -> Task[T | U]:
        """Return a task producing the right value, or `fallback(error)`."""

        async def producer() -> T | U:
            return (await self.run()).get_or_else(fallback)

        return Task(producer)


def task_either(value: A) -> TaskEither[Never, A]:
    """
    Create a computation that produces `Right(value)`.

    Args:
    ----
        value: The right value.

    Returns:
    -------
        A computation producing `Right(value)`.

    """
    return from_either(Right(value))


def task_left(error: A) -> TaskEither[A, Never]:
    """
    Create a computation that produces `Left(error)`.

    Args:
    ----
        error: The error.

    Returns:
    -------
        A computation producing `Left(error)`.

    """
    return from_either(Left(error))


def from_either(result: Either[A, B]) -> TaskEither[A, B]:
    """Create a computation that produces an already known `Either`."""

    async def producer() -> Either[A, B]:
        return result

    return TaskEither(producer)


def from_task(t: Task[A]) -> TaskEither[Never, A]:
    """Create a computation that runs `t` and wraps its value in `Right`."""

    async def producer() -> Either[Never, A]:
        return Right(await t.run())

    return TaskEither(producer)


def from_option(option: Option[A], on_nothing: Callable[[], B]) -> TaskEither[B, A]:
    """Create a computation from an option, using `on_nothing()` as the error when empty."""
    return from_either(either.from_option(option, on_nothing))


def try_catch(
    thunk: Callable[[], Awaitable[A]], on_throw: Callable[[Exception], B]
) -> TaskEither[B, A]:
    """
    Create a computation from an awaitable that may raise.

    `thunk` is only called when the computation is run. An exception raised
    by `thunk()` itself and an exception raised while awaiting its result are
    both converted with `on_throw` into a `Left`. Exceptions that are not
    `Exception` subclasses, such as `asyncio.CancelledError`, propagate.

    Args:
    ----
        thunk: Produces the awaitable to wait for.
        on_throw: Converts a raised exception into the error value.

    Returns:
    -------
        A computation producing `Right(value)` or `Left(on_throw(exception))`.

    """

    async def producer() -> Either[B, A]:
        try:
            value = await thunk()
        except Exception as e:
            log.debug("try_catch captured %s as Left", type(e).__name__)
            return Left(on_throw(e))
        return Right(value)

    return TaskEither(producer)


def all_(task_eithers: Iterable[TaskEither[A, B]]) -> TaskEither[A, list[B]]:
    """
    Run computations concurrently and collect their right values.

    Every computation is started before any is awaited, and all of them are
    allowed to settle. The first `Left` in input order (not completion order)
    is then returned, if any.

    Args:
    ----
        task_eithers: The computations to run.

    Returns:
    -------
        A computation producing `Right` with the values in input order, or
        the first `Left`. Produces `Right([])` for no computations.

    """
    captured = tuple(task_eithers)

    async def producer() -> Either[A, list[B]]:
        if not captured:
            return Right([])
        results = await asyncio.gather(*(te.run() for te in captured))
        return either.sequence(results)

    return TaskEither(producer)


def traverse(
    items: Sequence[V], f: Callable[[V], TaskEither[A, B]]
) -> TaskEither[A, list[B]]:
    """Build a computation for every item with `f` when run, and collect them with `all_`."""

    async def producer() -> Either[A, list[B]]:
        return await all_([f(item) for item in items]).run()

    return TaskEither(producer)


def map2(
    a: TaskEither[A, B], b: TaskEither[A, C], f: Callable[[B, C], D]
) -> TaskEither[A, D]:
    """Run two computations concurrently and combine their right values with `f`."""
    return a.map(curry2(f)).ap(b)


def map3(
    a: TaskEither[A, B],
    b: TaskEither[A, C],
    c: TaskEither[A, D],
    f: Callable[[B, C, D], V],
) -> TaskEither[A, V]:
    """Run three computations concurrently and combine their right values with `f`."""
    return a.map(curry3(f)).ap(b).ap(c)
