"""``begin()`` never rewinds, so calling it repeatedly walks the sequence.

Run with: uv run python examples/drain_with_begin.py
"""

from coframe import async_generator, generator, task


@generator
def numbers(n: int):
    yield from range(n)


@async_generator
async def async_numbers(n: int):
    for i in range(n):
        yield i


@task
async def drain_async() -> int:
    gen = async_numbers(4)
    count = 0
    while await gen.begin() != gen.end():
        count += 1
    return count


def main() -> None:
    gen = numbers(4)
    count = 0
    while gen.begin() != gen.end():
        count += 1
    print("sync values:", count)

    t = drain_async()
    t.resume()
    print("async values:", t.result_value())


if __name__ == "__main__":
    main()
