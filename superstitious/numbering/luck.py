"""Decides which issue/PR numbers are unlucky."""

from typing import AbstractSet, Iterator


def is_unlucky(number: int, luck_set: AbstractSet[int]) -> bool:
    """Return True if the number is one of the configured unlucky numbers.

    This is plain membership: 17 is not unlucky just because 7 is.
    """
    return number in luck_set


def iter_unlucky_numbers_in_range(low: int, high: int, luck_set: AbstractSet[int]) -> Iterator[int]:
    """Yield the unlucky numbers between low and high, inclusive, in ascending order."""
    if low > high:
        return
    # Walk whichever side is smaller; horizons can be far wider than the set.
    if high - low + 1 <= len(luck_set):
        for number in range(low, high + 1):
            if is_unlucky(number, luck_set):
                yield number
    else:
        yield from sorted(n for n in luck_set if low <= n <= high)


def find_unlucky_numbers_in_range(low: int, high: int, luck_set: AbstractSet[int]) -> list[int]:
    """Return the unlucky numbers between low and high, inclusive, in ascending order."""
    return list(iter_unlucky_numbers_in_range(low, high, luck_set))


def compute_next_safe_number(next_number: int, luck_set: AbstractSet[int]) -> int:
    """Return the first number at or after next_number that is not unlucky."""
    candidate = next_number
    while is_unlucky(candidate, luck_set):
        candidate += 1
    return candidate
