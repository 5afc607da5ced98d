from typing import NamedTuple

# Seconds between countdown ticks
TICK_SEC = 1
LAST_ROUND = 3


class Tick(NamedTuple):
    remaining: int
    expired: bool


def duration(round_number: int, leftover: int) -> int:
    """Turn length in seconds for ``round_number``.

    ``leftover`` is the time left when the previous turn ended. A turn that
    runs out the clock leaves 0, so the carry-over only applies after a turn
    cut short by an empty word pool.
    """
    if round_number == 1:
        return 60
    if round_number == 2:
        return 90 if leftover == 0 else 30 + leftover
    if round_number == 3:
        return 60 if leftover == 0 else min(60, leftover)
    raise ValueError(f'unknown round {round_number}')


def tick(current: int) -> Tick:
    remaining = max(current - 1, 0)
    return Tick(remaining=remaining, expired=remaining == 0)
