import asyncio
from typing import Awaitable, Callable, TypeVar

from monadic import Task, TaskEither
from monadic.either import Either

R = TypeVar("R")
E = TypeVar("E")


def run_async(t: Task[R]) -> R:
    return asyncio.run(_run(t.run))


def run_either(te: TaskEither[E, R]) -> Either[E, R]:
    return asyncio.run(_run(te.run))


async def _run(run: Callable[[], Awaitable[R]]) -> R:
    return await asyncio.wait_for(run(), timeout=5)
