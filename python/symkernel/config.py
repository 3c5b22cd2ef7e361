# SymKernel - Configuration
# Copyright (c) 2024 SymKernel Contributors. All rights reserved.

"""Configuration settings for SymKernel."""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union


# Zippel / modular GCD bounds
MAX_EVAL_POINTS = 64
MAX_CRT_ITERATIONS = 32


class MonomialOrder(Enum):
    """Monomial orderings supported by the Groebner basis routines."""
    LEX = "lex"
    GRLEX = "grlex"
    GREVLEX = "grevlex"


@dataclass
class GcdConfig:
    """
    Bounds for the modular and sparse-interpolation GCD algorithms.

    Attributes:
        max_eval_points: Evaluation points tried per interpolated variable.
        max_crt_iterations: Primes combined by CRT before giving up.
        seed: Seed for the evaluation-point generator (reproducible runs).
        strict: Raise ConvergenceFailed instead of falling back to the
                slower exact algorithm when the bounds are exhausted.
    """
    max_eval_points: int = MAX_EVAL_POINTS
    max_crt_iterations: int = MAX_CRT_ITERATIONS
    seed: int = 0x5EED
    strict: bool = False

    @classmethod
    def fast(cls) -> GcdConfig:
        return cls(max_eval_points=24, max_crt_iterations=12)

    @classmethod
    def thorough(cls) -> GcdConfig:
        return cls(max_eval_points=256, max_crt_iterations=128)


@dataclass
class IntegrationConfig:
    """
    Integration strategy settings.

    Attributes:
        max_depth: Recursion bound shared by substitution and by-parts.
        use_by_parts: Enable the integration-by-parts layer.
        use_substitution: Enable the u-substitution layer.
        use_risch: Enable the restricted Risch layer.
    """
    max_depth: int = 10
    use_by_parts: bool = True
    use_substitution: bool = True
    use_risch: bool = True


@dataclass
class Config:
    """
    Configuration for algebraic operations.

    Attributes:
        max_iterations: Bound for iterative algorithms (Groebner bases,
                        interpolation loops). Exceeding it raises
                        MaxIterationsExceeded.
        simplify_max_passes: Fixed-point passes the simplifier may take.
        use_cache: Consult the process-wide simplification cache.
        cache_size: Capacity of the simplification cache.
        monomial_order: Default monomial order for Groebner bases.
        gcd: Modular GCD bounds.
        integration: Integration strategy settings.
    """
    max_iterations: int = 1000
    simplify_max_passes: int = 16
    use_cache: bool = True
    cache_size: int = 1024
    monomial_order: Union[MonomialOrder, str] = MonomialOrder.GREVLEX
    gcd: GcdConfig = field(default_factory=GcdConfig)
    integration: IntegrationConfig = field(default_factory=IntegrationConfig)

    def __post_init__(self):
        # Accept 'lex' / 'grlex' / 'grevlex' as plain strings
        if isinstance(self.monomial_order, str):
            self.monomial_order = MonomialOrder(self.monomial_order.lower())
        if self.max_iterations <= 0:
            raise ValueError("max_iterations must be positive")
        if self.cache_size < 0:
            raise ValueError("cache_size cannot be negative")

    @classmethod
    def fast(cls) -> Config:
        """Small bounds, for interactive use."""
        return cls(
            max_iterations=200,
            simplify_max_passes=8,
            gcd=GcdConfig.fast(),
            integration=IntegrationConfig(max_depth=5),
        )

    @classmethod
    def default(cls) -> Config:
        """Balanced bounds (the default)."""
        return cls()

    @classmethod
    def thorough(cls) -> Config:
        """Generous bounds for hard inputs."""
        return cls(
            max_iterations=10000,
            simplify_max_passes=32,
            cache_size=8192,
            gcd=GcdConfig.thorough(),
            integration=IntegrationConfig(max_depth=16),
        )

    def __repr__(self) -> str:
        return (
            f"Config(max_iterations={self.max_iterations}, "
            f"monomial_order={self.monomial_order.value}, "
            f"integration_depth={self.integration.max_depth})"
        )


DEFAULT_CONFIG = Config()


def resolve(config: Optional[Config]) -> Config:
    """Return ``config`` or the process-wide default."""
    return DEFAULT_CONFIG if config is None else config
