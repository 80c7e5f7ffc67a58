# src/propofolpk/normalize.py
from __future__ import annotations

import logging
import math
from dataclasses import asdict, dataclass
from numbers import Real
from typing import Any, Mapping

from .types import SimulationParameters

logger = logging.getLogger(__name__)

# Upper bound on integration steps per run; dt is enlarged to respect it.
MAX_STEPS = 20000


@dataclass(frozen=True)
class FieldPolicy:
    """
    How one input field is repaired.

    name       : SimulationParameters field
    default    : value used when the input is missing or invalid
    allow_zero : whether 0 is a valid value (otherwise strictly > 0)
    """
    name: str
    default: float
    allow_zero: bool


DEFAULT_POLICY: tuple[FieldPolicy, ...] = (
    FieldPolicy("weight_kg", 70.0, allow_zero=False),
    FieldPolicy("bolus_mg", 0.0, allow_zero=True),
    FieldPolicy("infusion_mg_per_min", 0.0, allow_zero=True),
    FieldPolicy("infusion_duration_min", 0.0, allow_zero=True),
    FieldPolicy("t_end_min", 240.0, allow_zero=False),
    FieldPolicy("dt_min", 0.2, allow_zero=False),
)

# Form-field ids and short names accepted in place of the field names.
ALIASES: dict[str, tuple[str, ...]] = {
    "weight_kg": ("weight",),
    "bolus_mg": ("bolus", "bolus_dose"),
    "infusion_mg_per_min": ("infusion_mg_min", "infusion_rate"),
    "infusion_duration_min": ("infusion_duration",),
    "t_end_min": ("t_end", "horizon"),
    "dt_min": ("dt", "step_size"),
}

_MISSING = object()


@dataclass(frozen=True)
class Normalization:
    """
    Result of normalizing a raw parameter set.

    params           : simulation-ready parameters (params.dt_min is the effective step)
    requested_dt_min : step size before the step-count cap was applied
    replaced         : names of fields that fell back to their defaults
    """
    params: SimulationParameters
    requested_dt_min: float
    replaced: tuple[str, ...] = ()

    @property
    def dt_adjusted(self) -> bool:
        """True when dt was enlarged to stay within MAX_STEPS."""
        return self.params.dt_min != self.requested_dt_min


def normalize_parameters(raw: Mapping[str, Any] | SimulationParameters | None,
                         *, strict: bool = False) -> Normalization:
    """
    Turn a raw parameter set into SimulationParameters.

    Missing fields take their default. Present but invalid fields (non-numeric,
    non-finite, negative, or zero where zero is not allowed) are replaced by the
    default, or raise ValueError when strict=True. The step-count cap is applied
    in both modes.
    """
    if raw is None:
        raw = {}
    elif isinstance(raw, SimulationParameters):
        raw = asdict(raw)

    values: dict[str, float] = {}
    replaced: list[str] = []
    for policy in DEFAULT_POLICY:
        raw_value = _lookup(raw, policy.name)
        if raw_value is _MISSING:
            values[policy.name] = policy.default
            replaced.append(policy.name)
            continue

        x = _coerce(raw_value)
        if x is None or not _admissible(x, policy.allow_zero):
            if strict:
                bound = ">= 0" if policy.allow_zero else "> 0"
                raise ValueError(f"{policy.name} must be a finite number {bound} (got {raw_value!r}).")
            logger.debug("%s=%r is invalid; using default %g", policy.name, raw_value, policy.default)
            x = policy.default
            replaced.append(policy.name)
        values[policy.name] = x

    requested_dt = values["dt_min"]
    values["dt_min"] = cap_step_size(values["t_end_min"], requested_dt)
    if values["dt_min"] != requested_dt:
        logger.info("dt_min enlarged from %g to %g to stay within %d steps",
                    requested_dt, values["dt_min"], MAX_STEPS)

    return Normalization(
        params=SimulationParameters(**values),
        requested_dt_min=requested_dt,
        replaced=tuple(replaced),
    )


def cap_step_size(t_end_min: float, dt_min: float, max_steps: int = MAX_STEPS) -> float:
    """
    Return dt_min, or t_end_min / max_steps when the run would take more than
    max_steps steps. The enlarged step is nudged up until
    ceil(t_end_min / dt) <= max_steps holds in floating point.
    """
    if t_end_min / dt_min <= max_steps:
        return dt_min
    dt = t_end_min / max_steps
    while math.ceil(t_end_min / dt) > max_steps:
        dt = math.nextafter(dt, math.inf)
    return dt


def _lookup(raw: Mapping[str, Any], name: str) -> Any:
    if name in raw:
        return raw[name]
    for alias in ALIASES.get(name, ()):
        if alias in raw:
            return raw[alias]
    return _MISSING


def _coerce(value: Any) -> float | None:
    """Parse a form-style value to a finite float, or None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, Real):
        try:
            x = float(value)
        except (OverflowError, ValueError):
            return None
    elif isinstance(value, str):
        try:
            x = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return x if math.isfinite(x) else None


def _admissible(x: float, allow_zero: bool) -> bool:
    return x > 0 or (allow_zero and x == 0)
