"""Fire-and-forget computations.

``run_awaitable`` and ``@eager`` start a computation immediately; nobody
awaits it. An exception escaping such a computation aborts the process.

Run with: uv run python examples/fire_and_forget.py
"""

from coframe import eager, run_awaitable, suspend_always, task


@task
async def value(n: int) -> int:
    return n


@task
async def paused(n: int) -> int:
    await suspend_always()
    return n


@eager
async def report(n: int) -> None:
    print("value:", await value(n))


async def wait_for(t) -> None:
    print("finished with", await t)


def main() -> None:
    report(42)

    inner = paused(7)
    runner = run_awaitable(wait_for, inner)
    print("done before resume:", runner.done)
    inner.resume()
    print("done after resume:", runner.done)


if __name__ == "__main__":
    main()
