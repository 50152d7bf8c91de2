import random

import pytest

from jcontainers.id_generator import IdGenerator, IdRange


def test_range_hands_out_in_order_until_empty():
    rng = IdRange(5, 6)
    assert not rng.empty()
    assert rng.new_id() == 5
    assert rng.new_id() == 6
    assert rng.empty()
    with pytest.raises(RuntimeError):
        rng.new_id()


def test_fresh_generator_is_valid_and_all_free():
    gen = IdGenerator(1, 200)
    assert gen.is_valid()
    assert gen.ranges == ((1, 200),)
    assert gen.is_free_id(1)
    assert gen.is_free_id(200)
    assert not gen.is_free_id(0)
    assert not gen.is_free_id(201)


def test_allocated_ids_are_not_free():
    gen = IdGenerator(1, 200)
    ids = [gen.new_id() for _ in range(10)]
    assert ids == list(range(1, 11))
    assert not any(gen.is_free_id(i) for i in ids)
    assert gen.is_free_id(11)


def test_randomised_allocation_and_reuse():
    rnd = random.Random(12345)
    gen = IdGenerator(1, 200)
    ids = []
    for _ in range(100):
        for _ in range(50):
            new = gen.new_id()
            assert new not in ids
            ids.append(new)
            assert gen.is_valid()
        for _ in range(49):
            victim = ids.pop(rnd.randrange(len(ids)))
            gen.reuse_id(victim)
            assert gen.is_valid()
            assert gen.is_free_id(victim)
    assert len(ids) == 100
    assert not any(gen.is_free_id(value) for value in ids)


def test_reuse_merges_ranges_back():
    gen = IdGenerator(1, 200)
    taken = [gen.new_id() for _ in range(3)]
    assert taken == [1, 2, 3]
    gen.reuse_id(2)
    assert gen.is_free_id(2)
    assert gen.is_valid()
    gen.reuse_id(1)
    gen.reuse_id(3)
    assert gen.ranges == ((1, 200),)
    assert gen.is_valid()


def test_exhaustion_raises_and_reuse_recovers():
    gen = IdGenerator(1, 3)
    assert [gen.new_id() for _ in range(3)] == [1, 2, 3]
    assert not gen.is_valid()
    with pytest.raises(RuntimeError):
        gen.new_id()
    gen.reuse_id(2)
    assert gen.is_valid()
    assert gen.new_id() == 2


def test_reuse_of_free_or_foreign_id_raises():
    gen = IdGenerator(1, 200)
    with pytest.raises(ValueError):
        gen.reuse_id(5)
    with pytest.raises(ValueError):
        gen.reuse_id(0)
    with pytest.raises(ValueError):
        gen.reuse_id(201)


def test_clear_restores_full_range():
    gen = IdGenerator(1, 200)
    for _ in range(20):
        gen.new_id()
    gen.clear()
    assert gen.ranges == ((1, 200),)
    assert gen.new_id() == 1


def test_invalid_bounds_rejected():
    with pytest.raises(ValueError):
        IdGenerator(10, 5)