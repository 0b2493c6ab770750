import asyncio

from monadic import Either, TaskEither, Validation, invalid, left, right, valid
from monadic import validation
from monadic.task_either import all_, from_either, try_catch


def parse_age(raw: str) -> Either[str, int]:
    return right(int(raw)) if raw.isdigit() else left(f"not a number: {raw!r}")


def check_name(name: str) -> Validation[str, str]:
    return valid(name) if name else invalid("name is empty")


def check_age(raw: str) -> Validation[str, int]:
    return validation.from_either(parse_age(raw)).filter_or_else(
        lambda age: age < 150, lambda: "age is implausible"
    )


async def fetch_user(user_id: int) -> dict[str, str]:
    await asyncio.sleep(0.01)
    if user_id < 0:
        raise LookupError(f"no user {user_id}")
    return {"name": "Ada", "age": "36"}


def load(user_id: int) -> TaskEither[str, tuple[str, int]]:
    return try_catch(lambda: fetch_user(user_id), str).flat_map(
        lambda user: from_either(
            validation.map2(
                check_name(user["name"]), check_age(user["age"]), lambda n, a: (n, a)
            ).to_either()
        ).map_left(", ".join)
    )


async def main() -> None:
    loaded = await all_([load(1), load(2)]).run()
    # the failing lookup surfaces as a Left, not an exception
    failed = await load(-1).run()
    print(loaded.match(lambda e: f"error: {e}", lambda users: f"users: {users}"))
    print(failed.match(lambda e: f"error: {e}", lambda users: f"user: {users}"))


asyncio.run(main())
