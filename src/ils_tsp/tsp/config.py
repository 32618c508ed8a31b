from __future__ import annotations

import numbers
from dataclasses import dataclass, replace
from typing import Dict, Optional

MIN_CITIES_TWO_OPT = 4
MIN_CITIES_DOUBLE_BRIDGE = 8

PERTURBATIONS = ('double_bridge', 'restart')


class ConfigurationError(ValueError):
    """Raised before a search starts when its inputs cannot be honoured."""


@dataclass(frozen=True)
class SearchConfig:
    method: str = 'ils'
    max_iterations: int = 100
    max_no_improv: int = 50
    perturbation: str = 'double_bridge'
    target_cost: Optional[float] = None

    def validate(self, n_cities: int) -> None:
        """Fail fast on budgets or instance sizes the chosen method cannot use."""
        if self.method not in DEFAULT_METHODS:
            raise ConfigurationError(f"unknown method {self.method!r}; known: {sorted(DEFAULT_METHODS)}")
        _require_positive_int('max_iterations', self.max_iterations)
        if self.method != 'random_search':
            _require_positive_int('max_no_improv', self.max_no_improv)
        if self.perturbation not in PERTURBATIONS:
            raise ConfigurationError(f"unknown perturbation {self.perturbation!r}; known: {list(PERTURBATIONS)}")
        if self.method == 'random_search':
            minimum = 1
        elif self.method in ('ils', 'ils_restart') and self.perturbation == 'double_bridge':
            minimum = MIN_CITIES_DOUBLE_BRIDGE
        else:
            minimum = MIN_CITIES_TWO_OPT
        if n_cities < minimum:
            raise ConfigurationError(
                f"method {self.method!r} (perturbation={self.perturbation}) needs at least {minimum} cities, got {n_cities}"
            )


def _require_positive_int(name: str, value) -> None:
    # bool is an int subclass; True is not a budget
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise ConfigurationError(f"{name} must be an integer, got {value!r}")
    if value <= 0:
        raise ConfigurationError(f"{name} must be positive, got {value}")


DEFAULT_METHODS: Dict[str, Dict[str, object]] = {
    # Two-level search (perturbation + local search)
    'ils': {'perturbation': 'double_bridge'},
    'ils_restart': {'perturbation': 'restart'},
    # Single-level degenerate cases
    'hill_climbing': {},
    'random_search': {},
}


def config_for(method: str, **overrides) -> SearchConfig:
    """Build a SearchConfig from a named preset plus explicit overrides."""
    if method not in DEFAULT_METHODS:
        raise ConfigurationError(f"unknown method {method!r}; known: {sorted(DEFAULT_METHODS)}")
    preset = dict(DEFAULT_METHODS[method])
    preset.update({k: v for k, v in overrides.items() if v is not None})
    return replace(SearchConfig(method=method), **preset)
