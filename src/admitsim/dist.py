"""Probability distributions used by the simulation driver.

The classes in this module wrap :mod:`scipy.stats` distributions behind a small
common API. The driver draws tick pacing delays, arrival coin flips and
arrival priorities from them. Every draw accepts an optional
:class:`numpy.random.Generator` so that seeded runs are reproducible.
"""
from typing import Optional

import numpy as np
import scipy.stats as st


def _validate_positive(value: float, name: str) -> None:
    if value <= 0:
        raise ValueError(f"{name} must be positive.")


def _validate_probability(value: float, name: str) -> None:
    if not 0 <= value <= 1:
        raise ValueError(f"{name} must be between 0 and 1.")


class distribution:
    """Lightweight wrapper around SciPy distributions.

    All concrete distribution classes inherit from this base to expose a common
    API for sampling.
    """

    def __init__(self):
        self.params = None
        self.dist_type = None
        self.dist = None

    def __str__(self):
        """Human-readable representation like 'dist.uniform(0.5, 1.5)'."""
        name = getattr(self, "dist_type", None) or self.__class__.__name__
        params = getattr(self, "params", None)

        if params is None:
            return f"dist.{name}"

        def _fmt(p):
            if isinstance(p, (int, float)):
                return f"{p:g}"
            return str(p)

        params_str = ", ".join(_fmt(p) for p in params)
        return f"dist.{name}({params_str})" if params_str else f"dist.{name}"

    __repr__ = __str__

    def sample(self, rng: Optional[np.random.Generator] = None):
        """Draw a single random variate from the distribution."""

        return self.dist.rvs(random_state=rng)


class uniform(distribution):
    """Uniform distribution defined by lower/upper bounds."""

    def __init__(self, a, b):
        """Initialize the distribution with ``a`` (min) and ``b`` (max)."""
        if a >= b:
            raise ValueError("Lower bound must be less than upper bound.")
        self.dist_type = 'uniform'
        self.params = [a, b]
        self.dist = st.uniform(loc=a, scale=b - a)


def make_uniform(a: float, b: float) -> "uniform":
    """Create a uniform distribution with validation."""
    if a >= b:
        raise ValueError("Lower bound must be less than upper bound.")
    return uniform(a, b)


class randint(distribution):
    """
    Discrete uniform distribution over the integers ``low`` to ``high`` inclusive.
    """

    def __init__(self, low, high):
        if low > high:
            raise ValueError("Lower bound must not exceed upper bound.")
        self.dist_type = 'randint'
        self.params = [low, high]
        self.dist = st.randint(low, high + 1)

    def sample(self, rng: Optional[np.random.Generator] = None):
        return int(self.dist.rvs(random_state=rng))


class bernoulli(distribution):
    """
    A coin flip that comes up ``True`` with probability ``p``.
    """

    def __init__(self, p):
        _validate_probability(p, "Probability")
        self.dist_type = 'bernoulli'
        self.params = [p]
        self.dist = st.bernoulli(p)

    def sample(self, rng: Optional[np.random.Generator] = None):
        return bool(self.dist.rvs(random_state=rng))


def make_bernoulli(p: float) -> "bernoulli":
    """Create a coin-flip distribution with validation."""
    _validate_probability(p, "Probability")
    return bernoulli(p)
