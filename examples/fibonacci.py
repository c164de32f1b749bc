"""Lazy synchronous sequence with explicit cursors and with ``for``.

Run with: uv run python examples/fibonacci.py
"""

from coframe import generator


@generator
def fibonacci():
    a, b = 0, 1
    while True:
        yield a
        a, b = b, a + b


def main() -> None:
    gen = fibonacci()
    it = gen.begin()
    for _ in range(10):
        print(it.value, end=" ")
        it.advance()
    print()

    for i, v in enumerate(fibonacci()):
        if i == 10:
            break
        print(v, end=" ")
    print()


if __name__ == "__main__":
    main()
