"""Contains the Task type: a lazy, re-runnable description of an asynchronous value."""

import asyncio
import logging
from collections.abc import Iterable, Sequence
from concurrent.futures import Executor, ProcessPoolExecutor
from dataclasses import dataclass
from functools import partial
from typing import Any, Awaitable, Callable, Generic, TypeVar, cast

import cloudpickle

from monadic.functions import curry2, curry3, pair

log = logging.getLogger(__name__)

T = TypeVar("T", covariant=True)
U = TypeVar("U")
A = TypeVar("A")
B = TypeVar("B")
C = TypeVar("C")
D = TypeVar("D")
R = TypeVar("R")


@dataclass(frozen=True)
class Task(Generic[T]):
    """
    A deferred asynchronous computation that always succeeds.

    Wraps a zero-argument `producer` returning an awaitable. Building a task,
    or deriving one with a combinator, does no work. Each call to `run`
    invokes the producer again; results are never cached.

    An exception raised by the producer is a defect, not a modelled failure,
    and propagates out of `run` unchanged. Use `TaskEither` for failures.
    """

    producer: Callable[[], Awaitable[T]]

    def run(self) -> Awaitable[T]:
        """
        Run the task.

        Returns
        -------
            An awaitable of the produced value.

        """
        return self.producer()

    def map(self, f: Callable[[T], U]) -> "Task[U]":
        """
        Apply `f` to the produced value.

        Args:
        ----
            f: The function to apply. Not called until the task is run.

        Returns:
        -------
            A task producing `f(value)`.

        """

        async def producer() -> U:
            return f(await self.run())

        return Task(producer)

    def flat_map(self, f: Callable[[T], "Task[U]"]) -> "Task[U]":
        """
        Chain a task that depends on the produced value.

        The second task is only built once the first has produced its value.

        Args:
        ----
            f: Builds the next task from the produced value.

        Returns:
        -------
            A task producing the value of the task returned by `f`.

        """

        async def producer() -> U:
            value = await self.run()
            return await f(value).run()

        return Task(producer)

    def ap(self: "Task[Callable[[A], U]]", arg: "Task[A]") -> "Task[U]":
        """
        Apply the function produced by this task to the value produced by `arg`.

        Both tasks are started before either is awaited, so they run concurrently.

        Args:
        ----
            arg: The task producing the argument.

        Returns:
        -------
            A task producing `fn(a)`.

        """

        async def producer() -> U:
            fn, a = await asyncio.gather(self.run(), arg.run())
            return fn(a)

        return Task(producer)

    def zip(self, other: "Task[A]") -> "Task[tuple[T, A]]":
        """Run both tasks concurrently and pair their values, in argument order."""
        return self.map(pair).ap(other)

    def flatten(self: "Task[Task[U]]") -> "Task[U]":
        """Remove one level of nesting."""
        return self.flat_map(lambda inner: inner)

    def tap(self, f: Callable[[T], object]) -> "Task[T]":
        """Run `f` on the produced value and pass the value through unchanged."""

        def _(value: T) -> T:
            f(value)
            return value

        return self.map(_)


def task(value: A) -> Task[A]:
    """
    Create a task that produces `value`.

    Args:
    ----
        value: The value to produce.

    Returns:
    -------
        A task producing `value`.

    """

    async def producer() -> A:
        return value

    return Task(producer)


def from_awaitable(thunk: Callable[[], Awaitable[A]]) -> Task[A]:
    """
    Create a task from a function returning an awaitable, e.g. an `async def` function.

    `thunk` is called once per `run`, never at construction.

    Args:
    ----
        thunk: Produces the awaitable to wait for.

    Returns:
    -------
        A task producing the awaited value.

    """
    return Task(thunk)


def offload(
    f: Callable[..., R], *args: Any, executor: Executor | None = None
) -> Task[R]:
    """
    Create a task that calls the blocking function `f(*args)` in an executor.

    The call happens when the task is run. Without an `executor` the event
    loop's default executor is used. With a `ProcessPoolExecutor`, `f` and its
    arguments are serialized with cloudpickle, so lambdas and closures work.

    Args:
    ----
        f: The blocking function to call.
        args: Positional arguments for `f`.
        executor: The executor to call `f` in.

    Returns:
    -------
        A task producing the return value of `f`.

    """

    async def producer() -> R:
        loop = asyncio.get_running_loop()
        if isinstance(executor, ProcessPoolExecutor):
            log.debug("offloading %r to process pool", f)
            payload = cloudpickle.dumps((f, args))
            result = await loop.run_in_executor(executor, _process_target, payload)
            return cast(R, cloudpickle.loads(result))
        return await loop.run_in_executor(executor, partial(f, *args))

    return Task(producer)


def _process_target(payload: bytes) -> bytes:
    f, args = cloudpickle.loads(payload)
    return cast(bytes, cloudpickle.dumps(f(*args)))


def all_(tasks: Iterable[Task[A]]) -> Task[list[A]]:
    """
    Run tasks concurrently and collect their values.

    Every task is started before any is awaited. The values are returned in
    input order, whatever the order in which the tasks complete.

    Args:
    ----
        tasks: The tasks to run.

    Returns:
    -------
        A task producing the list of values. Produces `[]` for no tasks.

    """
    captured = tuple(tasks)

    async def producer() -> list[A]:
        if not captured:
            return []
        return list(await asyncio.gather(*(t.run() for t in captured)))

    return Task(producer)


def traverse(items: Sequence[B], f: Callable[[B], Task[A]]) -> Task[list[A]]:
    """
    Build a task for every item with `f` and run them concurrently.

    `f` is called when the resulting task is run, not before.

    Args:
    ----
        items: The items to build tasks from.
        f: Builds a task from an item.

    Returns:
    -------
        A task producing the values in item order.

    """

    async def producer() -> list[A]:
        return await all_([f(item) for item in items]).run()

    return Task(producer)


def map2(a: Task[A], b: Task[B], f: Callable[[A, B], C]) -> Task[C]:
    """Run two tasks concurrently and combine their values with `f`."""
    return a.map(curry2(f)).ap(b)


def map3(a: Task[A], b: Task[B], c: Task[C], f: Callable[[A, B, C], D]) -> Task[D]:
    """Run three tasks concurrently and combine their values with `f`."""
    return a.map(curry3(f)).ap(b).ap(c)
