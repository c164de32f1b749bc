"""Chaining tasks.

Each ``await`` on a task hands control to it directly; when it returns,
control comes straight back to the awaiting body.

Run with: uv run python examples/task_chain.py
"""

from coframe import task


@task
async def value(n: int) -> int:
    return n


@task
async def add() -> int:
    return await value(123) + await value(456)


@task
async def print_sum() -> None:
    print(await add())


def main() -> None:
    t = print_sum()
    t.resume()
    t.result_value()


if __name__ == "__main__":
    main()
