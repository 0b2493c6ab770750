import asyncio
from concurrent.futures import ProcessPoolExecutor, ThreadPoolExecutor
from unittest.mock import Mock

from pytest import raises
from monadic import Task, task
from monadic.task import all_, from_awaitable, map2, map3, offload, traverse

from tests.laws import check_applicative_laws, check_functor_laws, check_monad_laws
from tests.utils import run_async


def counting_task(calls: list[str], name: str, value: int) -> Task[int]:
    async def producer() -> int:
        calls.append(name)
        return value

    return from_awaitable(producer)


def rendezvous(events: dict[str, asyncio.Event], name: str, value: int) -> Task[int]:
    """Completes only once every task in `events` has started."""

    async def producer() -> int:
        events[name].set()
        await asyncio.gather(*(e.wait() for e in events.values()))
        return value

    return from_awaitable(producer)


def test_task() -> None:
    assert run_async(task(42)) == 42


def test_construction_does_not_run() -> None:
    calls: list[str] = []
    t = counting_task(calls, "t", 1).map(lambda n: n + 1)
    assert calls == []
    assert run_async(t) == 2
    assert calls == ["t"]


def test_run_twice_invokes_producer_twice() -> None:
    calls: list[str] = []
    t = counting_task(calls, "t", 1)
    assert run_async(t) == 1
    assert run_async(t) == 1
    assert calls == ["t", "t"]


def test_map_is_deferred() -> None:
    mapper = Mock(return_value=10)
    t = task(5).map(mapper)
    mapper.assert_not_called()
    assert run_async(t) == 10
    mapper.assert_called_once_with(5)


def test_flat_map() -> None:
    assert run_async(task(10).flat_map(lambda x: task(x * 2))) == 20


def test_flat_map_builds_second_task_after_first_resolves() -> None:
    calls: list[str] = []

    def next_task(value: int) -> Task[int]:
        calls.append("built")
        return counting_task(calls, "second", value + 1)

    t = counting_task(calls, "first", 1).flat_map(next_task)
    assert calls == []
    assert run_async(t) == 2
    assert calls == ["first", "built", "second"]


def test_ap() -> None:
    assert run_async(task(lambda n: n * 2).ap(task(3))) == 6


def test_zip() -> None:
    assert run_async(task("Alice").zip(task(30))) == ("Alice", 30)


def test_zip_runs_both_tasks_concurrently() -> None:
    async def main() -> tuple[int, int]:
        events = {"a": asyncio.Event(), "b": asyncio.Event()}
        t = rendezvous(events, "a", 1).zip(rendezvous(events, "b", 2))
        return await asyncio.wait_for(t.run(), timeout=1)

    assert asyncio.run(main()) == (1, 2)


def test_zip_keeps_argument_order() -> None:
    async def slow() -> str:
        await asyncio.sleep(0.02)
        return "slow"

    async def fast() -> str:
        return "fast"

    t = from_awaitable(slow).zip(from_awaitable(fast))
    assert run_async(t) == ("slow", "fast")


def test_flatten() -> None:
    assert run_async(task(task(42)).flatten()) == 42


def test_tap() -> None:
    side_effect = Mock()
    t = task(42).tap(side_effect)
    side_effect.assert_not_called()
    assert run_async(t) == 42
    side_effect.assert_called_once_with(42)


def test_producer_errors_propagate() -> None:
    async def fails() -> int:
        raise RuntimeError("defect")

    with raises(RuntimeError, match="defect"):
        run_async(from_awaitable(fails).map(lambda n: n + 1))


def test_all() -> None:
    assert run_async(all_([task(1), task(2), task(3)])) == [1, 2, 3]


def test_all_empty() -> None:
    assert run_async(all_([])) == []


def test_all_runs_concurrently_and_keeps_input_order() -> None:
    async def main() -> list[int]:
        events = {name: asyncio.Event() for name in "abc"}
        t = all_(
            [
                rendezvous(events, "a", 1),
                rendezvous(events, "b", 2),
                rendezvous(events, "c", 3),
            ]
        )
        return await asyncio.wait_for(t.run(), timeout=1)

    assert asyncio.run(main()) == [1, 2, 3]


def test_all_does_not_run_on_construction() -> None:
    calls: list[str] = []
    t = all_([counting_task(calls, "a", 1), counting_task(calls, "b", 2)])
    assert calls == []
    assert run_async(t) == [1, 2]
    assert sorted(calls) == ["a", "b"]


def test_traverse() -> None:
    build = Mock(side_effect=lambda n: task(n * 10))
    t = traverse([1, 2, 3], build)
    build.assert_not_called()
    assert run_async(t) == [10, 20, 30]


def test_map2() -> None:
    assert run_async(map2(task(2), task(3), lambda a, b: a * b)) == 6


def test_map3_runs_concurrently() -> None:
    async def main() -> int:
        events = {name: asyncio.Event() for name in "abc"}
        t = map3(
            rendezvous(events, "a", 1),
            rendezvous(events, "b", 2),
            rendezvous(events, "c", 3),
            lambda a, b, c: a * 100 + b * 10 + c,
        )
        return await asyncio.wait_for(t.run(), timeout=1)

    assert asyncio.run(main()) == 123


def test_offload_default_executor() -> None:
    assert run_async(offload(sum, [1, 2, 3])) == 6


def test_offload_thread_executor() -> None:
    with ThreadPoolExecutor() as executor:
        t = offload(lambda a, b: a + b, 1, 2, executor=executor)
        assert run_async(t) == 3


def test_offload_process_executor() -> None:
    with ProcessPoolExecutor(max_workers=1) as executor:
        t = offload(lambda x: x * 2, 21, executor=executor)
        assert run_async(t) == 42


def test_offload_is_deferred() -> None:
    calls: list[int] = []
    t = offload(calls.append, 1)
    assert calls == []
    run_async(t)
    run_async(t)
    assert calls == [1, 1]


def test_laws() -> None:
    check_functor_laws(task(10), run_async)
    check_applicative_laws(task, run_async)
    check_monad_laws(task, task(5), run_async)
