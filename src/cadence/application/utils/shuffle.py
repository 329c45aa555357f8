import random
from collections.abc import Sequence
from typing import TypeVar

T = TypeVar("T")


def fisher_yates_shuffle(items: Sequence[T], rng: random.Random | None = None) -> list[T]:
    """Return a shuffled copy of `items`. Pass a seeded `rng` for repeatable order."""
    rng = rng or random.Random()
    shuffled = list(items)
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randint(0, i)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def shuffle_with_answer(
    options: Sequence[T], correct_index: int, rng: random.Random | None = None
) -> tuple[list[T], int]:
    """Shuffle answer options and report where the correct one landed."""
    if not 0 <= correct_index < len(options):
        raise IndexError(f"correct_index {correct_index} out of range for {len(options)} options")

    order = fisher_yates_shuffle(range(len(options)), rng)
    return [options[i] for i in order], order.index(correct_index)
