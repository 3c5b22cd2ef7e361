# SymKernel - Configuration Tests
# Copyright (c) 2024 SymKernel Contributors. All rights reserved.

"""
Tests for configuration presets, the error hierarchy, the function
registry and the simplification cache.
"""

import math
import pytest

from symkernel import (
    Const, Derivative, symbol, function, sin, cos, simplify, derivative, evalf,
    Config, GcdConfig, IntegrationConfig, MonomialOrder,
    FunctionProperties, Parity, REGISTRY, get_properties, register_function,
    clear_cache, cache_info,
    SymKernelError, NotAPolynomial, DivisionByZero, SingularMatrix, DomainError,
    ConvergenceFailed, MaxIterationsExceeded, DimensionMismatch, VariableCountError,
)
from symkernel.cache import SimplifyCache
from symkernel.config import DEFAULT_CONFIG, resolve


class TestConfig:
    """Presets and validation."""

    def test_defaults(self):
        cfg = Config()
        assert cfg.max_iterations == 1000
        assert cfg.monomial_order is MonomialOrder.GREVLEX
        assert cfg.use_cache
        assert cfg.gcd == GcdConfig()
        assert cfg.integration.max_depth == 10

    def test_string_order(self):
        assert Config(monomial_order='LEX').monomial_order is MonomialOrder.LEX

    def test_presets(self):
        fast, thorough = Config.fast(), Config.thorough()
        assert fast.max_iterations < Config.default().max_iterations < thorough.max_iterations
        assert fast.gcd.max_crt_iterations < thorough.gcd.max_crt_iterations
        assert fast.integration.max_depth < thorough.integration.max_depth

    def test_invalid_iterations(self):
        with pytest.raises(ValueError):
            Config(max_iterations=0)

    def test_invalid_cache_size(self):
        with pytest.raises(ValueError):
            Config(cache_size=-1)

    def test_resolve(self):
        assert resolve(None) is DEFAULT_CONFIG
        cfg = Config.fast()
        assert resolve(cfg) is cfg

    def test_repr(self):
        text = repr(Config(integration=IntegrationConfig(max_depth=3)))
        assert 'monomial_order=grevlex' in text
        assert 'integration_depth=3' in text


class TestExceptions:
    """Every error is a SymKernelError with a kind tag."""

    @pytest.mark.parametrize('error, kind', [
        (NotAPolynomial('x', ('y',)), 'not_a_polynomial'),
        (DivisionByZero('gcd'), 'division_by_zero'),
        (SingularMatrix(), 'singular_matrix'),
        (DomainError('ln', 0, 'not positive'), 'domain_error'),
        (ConvergenceFailed('no progress'), 'convergence_failed'),
        (MaxIterationsExceeded('groebner', 5), 'max_iterations_exceeded'),
        (DimensionMismatch('add', (2, 2), (3, 3)), 'dimension_mismatch'),
        (VariableCountError('solve', 2, 1), 'variable_count'),
    ])
    def test_kind(self, error, kind):
        assert isinstance(error, SymKernelError)
        assert error.kind == kind

    def test_not_a_polynomial_message(self):
        err = NotAPolynomial('x**-1', ('x',), 'negative exponent')
        assert "is not a polynomial in (x): negative exponent" in str(err)
        assert "Suggestion:" in str(err)
        assert err.reason == 'negative exponent'

    def test_division_by_zero_message(self):
        assert str(DivisionByZero('mod_inverse')) == "Division by zero in mod_inverse"

    def test_max_iterations_limit(self):
        err = MaxIterationsExceeded('groebner', 7)
        assert err.limit == 7
        assert 'max_iterations' in str(err)


class TestRegistry:
    """Function properties consulted by the kernels."""

    def test_builtin_entry(self):
        props = get_properties('sin')
        assert props.parity is Parity.ODD
        assert props.derivative(symbol('u')) == cos(symbol('u'))
        assert 'sin' in REGISTRY

    def test_unknown_function(self):
        assert get_properties('no_such_function') is None
        x = symbol('x')
        assert isinstance(derivative(function('no_such_function', x), x), Derivative)

    def test_register_custom_function(self):
        x = symbol('x')
        register_function(FunctionProperties(
            'cubed_sin',
            derivative=lambda u: 3 * sin(u) ** 2 * cos(u),
            parity=Parity.ODD,
            evaluator=lambda v: math.sin(v) ** 3,
        ), 'csin3')
        assert get_properties('csin3') is get_properties('cubed_sin')
        assert derivative(function('cubed_sin', x), x) == simplify(3 * sin(x) ** 2 * cos(x))
        assert simplify(function('cubed_sin', -x)) == simplify(-function('cubed_sin', x))
        assert evalf(function('cubed_sin', x), {x: 0.5}) == pytest.approx(0.479425538604203 ** 3)


class TestCache:
    """The process-wide simplification cache."""

    def test_hit_after_repeat(self):
        x = symbol('x')
        clear_cache()
        e = x + x + 3 * x
        first = simplify(e)
        before = cache_info().hits
        assert simplify(e) == first
        assert cache_info().hits == before + 1

    def test_disabled_cache_not_consulted(self):
        x = symbol('x')
        clear_cache()
        e = x * x + 1
        simplify(e)
        before = cache_info()
        simplify(e, Config(use_cache=False))
        assert cache_info().hits == before.hits
        assert cache_info().misses == before.misses

    def test_clear(self):
        simplify(symbol('x') + 1)
        clear_cache()
        info = cache_info()
        assert info.size == 0
        assert info.hits == 0

    def test_exactness_in_key(self):
        """Const(2) and Const(2.0) compare equal but simplify differently."""
        clear_cache()
        exact = simplify(Const(2) / 3)
        inexact = simplify(Const(2.0) / 3)
        assert exact.number.is_exact()
        assert inexact.number.is_float()

    def test_pass_limit_in_key(self):
        """A result cut short by a low pass limit is not reused at the default limit."""
        x = symbol('x')
        clear_cache()
        e = sin(x) ** 2 + cos(x) ** 2 + x
        simplify(e, Config(simplify_max_passes=1))
        before = cache_info().hits
        simplify(e)
        assert cache_info().hits == before


class TestSimplifyCache:
    """The LRU map on its own."""

    def test_least_recently_used_is_evicted(self):
        cache = SimplifyCache(maxsize=2)
        cache.put('a', Const(1))
        cache.put('b', Const(2))
        assert cache.get('a') == Const(1)
        cache.put('c', Const(3))
        assert cache.evictions == 1
        assert len(cache) == 2
        assert cache.get('b') is None
        assert cache.get('a') == Const(1)
        assert cache.get('c') == Const(3)

    def test_process_cache_evicts_past_size(self):
        x = symbol('x')
        clear_cache()
        cfg = Config(cache_size=4)
        for k in range(10):
            simplify(x + k + 1, cfg)
        info = cache_info()
        assert info.size <= 4
        assert info.evictions > 0

    def test_busy_lock_is_bypassed(self):
        cache = SimplifyCache(maxsize=2)
        cache.put('a', Const(1))
        cache._lock.acquire()
        try:
            assert cache.get('a') is None
            cache.put('b', Const(2))
        finally:
            cache._lock.release()
        assert cache.bypasses == 2
        assert cache.misses == 0
        assert len(cache) == 1
        assert cache.get('a') == Const(1)
