import random

import pytest

from associations.engine.word_pool import WordPool


def test_draw_does_not_consume():
    pool = WordPool(['a', 'b', 'c'], rng=random.Random(3))
    for _ in range(10):
        assert pool.draw() in {'a', 'b', 'c'}
    assert len(pool) == 3


def test_seeded_pools_draw_the_same_sequence():
    words = [f'w{i}' for i in range(20)]
    first = WordPool(words, rng=random.Random(42))
    second = WordPool(words, rng=random.Random(42))
    assert [first.draw() for _ in range(8)] == [second.draw() for _ in range(8)]


def test_custom_random_source():
    class Fixed:
        def randrange(self, n):
            return n - 1

    pool = WordPool(['a', 'b', 'c'], rng=Fixed())
    assert pool.draw() == 'c'
    pool.remove('c')
    assert pool.draw() == 'b'


def test_remove_deletes_exactly_one_occurrence():
    pool = WordPool(['echo', 'echo', 'delta'])
    pool.remove('echo')
    assert sorted(pool.remaining) == ['delta', 'echo']


def test_remove_unknown_word_raises():
    pool = WordPool(['a'])
    with pytest.raises(ValueError):
        pool.remove('zzz')


def test_exhaustion_and_refill_limit():
    words = ['a', 'b', 'c', 'd']
    pool = WordPool(words, rng=random.Random(0))
    for _ in range(len(words)):
        pool.remove(pool.draw())
    assert pool.is_exhausted()
    assert pool.draw() is None
    assert pool.can_refill()

    pool.refill()
    assert pool.passes_completed == 1
    assert sorted(pool.remaining) == words

    for _ in range(len(words)):
        pool.remove(pool.draw())
    pool.refill()
    assert pool.passes_completed == 2
    assert not pool.can_refill()
