import numpy as np
import pytest

import admitsim.dist as dist


def test_uniform_validates_bounds():
    with pytest.raises(ValueError):
        dist.make_uniform(2, 1)

    delay = dist.make_uniform(0.5, 1.5)
    rng = np.random.default_rng(3)
    draws = [delay.sample(rng) for _ in range(200)]
    assert min(draws) >= 0.5
    assert max(draws) <= 1.5


def test_seeded_draws_repeat():
    first_rng, second_rng = np.random.default_rng(8), np.random.default_rng(8)
    first = [dist.uniform(0, 1).sample(first_rng) for _ in range(5)]
    second = [dist.uniform(0, 1).sample(second_rng) for _ in range(5)]

    np.testing.assert_allclose(first, second)


def test_randint_is_inclusive():
    draws = {dist.randint(2, 3).sample(np.random.default_rng(i)) for i in range(60)}

    assert draws == {2, 3}
    with pytest.raises(ValueError):
        dist.randint(3, 2)


def test_bernoulli_edges():
    rng = np.random.default_rng(0)
    assert all(dist.make_bernoulli(1.0).sample(rng) for _ in range(20))
    assert not any(dist.make_bernoulli(0.0).sample(rng) for _ in range(20))

    with pytest.raises(ValueError):
        dist.make_bernoulli(1.5)


def test_only_the_draws_the_driver_uses_are_offered():
    assert not hasattr(dist, "expon")
    assert not hasattr(dist.distribution, "var")
    assert not hasattr(dist.distribution, "std")


def test_str():
    assert str(dist.uniform(0.5, 1.5)) == "dist.uniform(0.5, 1.5)"
    assert repr(dist.bernoulli(0.2)) == "dist.bernoulli(0.2)"
