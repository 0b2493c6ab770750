# ruff: noqa: D100, D103

import asyncio
from functools import reduce
from typing import Callable

from monadic import Either, Task, Validation, right, task, valid
from monadic.task import all_
from pytest_benchmark.fixture import BenchmarkFixture


def increment_either(n: int) -> Either[str, int]:
    return right(n + 1)


def create_either_chain(chain_length: int) -> Callable[[], Either[str, int]]:
    def chain() -> Either[str, int]:
        return reduce(
            lambda acc, _: acc.flat_map(increment_either), range(chain_length), right(0)
        )

    return chain


def create_validation_chain(chain_length: int) -> Callable[[], Validation[str, int]]:
    def chain() -> Validation[str, int]:
        return reduce(
            lambda acc, _: valid(lambda a: lambda b: a + b).ap(acc).ap(valid(1)),
            range(chain_length),
            valid(0),
        )

    return chain


def create_task_chain(chain_length: int) -> Task[int]:
    return reduce(
        lambda acc, _: acc.flat_map(lambda n: task(n + 1)), range(chain_length), task(0)
    )


def test_either_flat_map_chain(benchmark: BenchmarkFixture) -> None:
    """Benchmark a long chain of flat_map calls using functools.reduce."""
    result = benchmark(create_either_chain(500))
    assert result == right(500)


def test_validation_ap_chain(benchmark: BenchmarkFixture) -> None:
    result = benchmark(create_validation_chain(500))
    assert result == valid(500)


def test_task_flat_map_chain(benchmark: BenchmarkFixture) -> None:
    # each flat_map adds a level of awaiting, keep clear of the recursion limit
    t = create_task_chain(200)

    def run() -> int:
        return asyncio.run(t.run())

    assert benchmark(run) == 200


def test_task_all(benchmark: BenchmarkFixture) -> None:
    t = all_([task(n) for n in range(500)])

    def run() -> list[int]:
        return asyncio.run(t.run())

    assert benchmark(run) == list(range(500))
