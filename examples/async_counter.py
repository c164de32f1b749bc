"""Async generator consumed from a task.

The producer awaits a task between two yields. ``begin()`` is awaited
because producing the first value may itself suspend.

Run with: uv run python examples/async_counter.py
"""

from coframe import async_generator, task


@task
async def next_value(v: int) -> int:
    return v + 1


@async_generator
async def counter(limit: int):
    v = 0
    while v < limit:
        yield v
        v = await next_value(v)


@task
async def consume() -> None:
    gen = counter(5)
    it = await gen.begin()
    while it != gen.end():
        print(it.value)
        await it.advance()

    async for v in counter(3):
        print("again", v)


def main() -> None:
    t = consume()
    t.resume()
    t.result_value()


if __name__ == "__main__":
    main()
