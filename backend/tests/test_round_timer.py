import pytest

from associations.engine.round_timer import duration, tick


@pytest.mark.parametrize('round_number,leftover,expected', [
    (1, 0, 60),
    (1, 25, 60),
    (2, 0, 90),
    (2, 7, 37),
    (3, 0, 60),
    (3, 90, 60),
    (3, 40, 40),
])
def test_round_durations(round_number, leftover, expected):
    assert duration(round_number, leftover) == expected


def test_unknown_round_is_rejected():
    with pytest.raises(ValueError):
        duration(4, 0)


def test_tick_counts_down_and_expires_at_zero():
    assert tick(60) == (59, False)
    assert tick(2) == (1, False)
    assert tick(1) == (0, True)
    assert tick(0) == (0, True)
