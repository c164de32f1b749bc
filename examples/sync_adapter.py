"""Iterating an async generator from synchronous code.

Run with: uv run python examples/sync_adapter.py
"""

from coframe import SyncGeneratorAdapter, async_generator, task


@task
async def square(v: int) -> int:
    return v * v


@async_generator
async def squares(limit: int):
    for i in range(limit):
        yield await square(i)


def main() -> None:
    for v in SyncGeneratorAdapter(squares(5)):
        print(v)


if __name__ == "__main__":
    main()
