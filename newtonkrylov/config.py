"""Typed configuration for Newton-Krylov steps.

All options are validated once, when the configuration object is built.
String names (as used in parameter lists) are converted to enums here, so
the rest of the package only ever sees enum members.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Mapping, Optional


class InvalidConfigurationError(ValueError):
    """Raised when an option has an unsupported value."""


class _NamedEnum(Enum):
    """Enum whose members are looked up by their display name."""

    @classmethod
    def parse(cls, value: Any):
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().lower()
            for member in cls:
                if member.value.lower() == key or member.name.lower() == key:
                    return member
        supported = [member.value for member in cls]
        raise InvalidConfigurationError(
            f"Unsupported {cls.__name__} '{value}'. Supported names: {supported}"
        )

    def __str__(self) -> str:
        return self.value


class KrylovType(_NamedEnum):
    CONJUGATE_GRADIENTS = "Conjugate Gradients"
    CONJUGATE_RESIDUALS = "Conjugate Residuals"
    USER_DEFINED = "User Defined"


class SecantType(_NamedEnum):
    LBFGS = "Limited-Memory BFGS"
    LDFP = "Limited-Memory DFP"
    LSR1 = "Limited-Memory SR1"
    BARZILAI_BORWEIN = "Barzilai-Borwein"
    USER_DEFINED = "User Defined"


@dataclass(frozen=True)
class KrylovConfig:
    """
    Stopping parameters shared by all Krylov solvers.

    Args:
        absolute_tolerance: Residual norm below which the solve stops.
        relative_tolerance: Residual reduction, relative to the right-hand
            side norm, below which the solve stops. The effective tolerance is
            the smaller of the two.
        iteration_limit: Maximum number of inner iterations.
    """

    absolute_tolerance: float = 1e-4
    relative_tolerance: float = 1e-2
    iteration_limit: int = 100

    def __post_init__(self) -> None:
        _normalise(self, absolute_tolerance=_as_float, relative_tolerance=_as_float)
        _normalise(self, iteration_limit=_as_int)
        if self.absolute_tolerance <= 0.0:
            raise InvalidConfigurationError("Krylov absolute tolerance must be positive.")
        if self.relative_tolerance <= 0.0:
            raise InvalidConfigurationError("Krylov relative tolerance must be positive.")
        if self.iteration_limit <= 0:
            raise InvalidConfigurationError("Krylov iteration limit must be a positive integer.")


@dataclass(frozen=True)
class SecantConfig:
    """
    Parameters of limited-memory secant approximations.

    Args:
        maximum_storage: Number of curvature pairs kept in the history.
        barzilai_borwein_type: 1 or 2, selecting the Barzilai-Borwein scalar.
        use_default_scaling: Scale the initial approximation with the newest
            curvature pair instead of ``initial_hessian_scale``.
        initial_hessian_scale: Diagonal of the initial Hessian approximation
            when default scaling is off or no pair is stored yet.
    """

    maximum_storage: int = 10
    barzilai_borwein_type: int = 1
    use_default_scaling: bool = True
    initial_hessian_scale: float = 1.0

    def __post_init__(self) -> None:
        _normalise(self, maximum_storage=_as_int, barzilai_borwein_type=_as_int)
        _normalise(self, use_default_scaling=_as_bool, initial_hessian_scale=_as_float)
        if self.maximum_storage <= 0:
            raise InvalidConfigurationError("Secant maximum storage must be a positive integer.")
        if self.barzilai_borwein_type not in (1, 2):
            raise InvalidConfigurationError("Barzilai-Borwein type must be 1 or 2.")
        if self.initial_hessian_scale <= 0.0:
            raise InvalidConfigurationError("Initial Hessian scale must be positive.")


@dataclass(frozen=True)
class NewtonKrylovConfig:
    """
    Configuration for :class:`~newtonkrylov.step.NewtonKrylovStep`.

    Args:
        use_secant_preconditioner: Precondition the Krylov solve with a secant
            approximation instead of the objective's own preconditioner.
        print_verbosity: 0 prints the compact status line only; larger values
            add a block describing each column.
        krylov_type: Krylov method, as a :class:`KrylovType` or its name.
        secant_type: Secant update, as a :class:`SecantType` or its name.
        krylov: Krylov stopping parameters.
        secant: Secant history parameters.

    Raises:
        InvalidConfigurationError: If any option is out of range or names an
            unknown method.
    """

    use_secant_preconditioner: bool = False
    print_verbosity: int = 0
    krylov_type: KrylovType = KrylovType.CONJUGATE_GRADIENTS
    secant_type: SecantType = SecantType.LBFGS
    krylov: KrylovConfig = field(default_factory=KrylovConfig)
    secant: SecantConfig = field(default_factory=SecantConfig)

    def __post_init__(self) -> None:
        # frozen dataclass: normalise through object.__setattr__
        object.__setattr__(self, "krylov_type", KrylovType.parse(self.krylov_type))
        object.__setattr__(self, "secant_type", SecantType.parse(self.secant_type))
        _normalise(self, use_secant_preconditioner=_as_bool, print_verbosity=_as_int)
        if self.print_verbosity < 0:
            raise InvalidConfigurationError("Print verbosity must be a non-negative integer.")

    @classmethod
    def from_parameters(cls, params: Optional[Mapping[str, Any]] = None) -> "NewtonKrylovConfig":
        """Build a configuration from a parameter list.

        ``params`` may be nested (``{"General": {"Secant": {"Type": ...}}}``,
        the ``"General"`` level being optional) or flat with dotted keys
        (``{"Secant.Type": ...}``). Missing options take their defaults.
        """
        params = dict(params or {})
        general = params.get("General")
        if isinstance(general, Mapping):
            params = {**params, **general}

        krylov = KrylovConfig(
            absolute_tolerance=_lookup(params, "Krylov.Absolute Tolerance", 1e-4),
            relative_tolerance=_lookup(params, "Krylov.Relative Tolerance", 1e-2),
            iteration_limit=_lookup(params, "Krylov.Iteration Limit", 100),
        )
        secant = SecantConfig(
            maximum_storage=_lookup(params, "Secant.Maximum Storage", 10),
            barzilai_borwein_type=_lookup(params, "Secant.Barzilai-Borwein Type", 1),
            use_default_scaling=_lookup(params, "Secant.Use Default Scaling", True),
            initial_hessian_scale=_lookup(params, "Secant.Initial Hessian Scale", 1.0),
        )
        return cls(
            use_secant_preconditioner=_lookup(params, "Secant.Use as Preconditioner", False),
            print_verbosity=_lookup(params, "Print Verbosity", 0),
            krylov_type=_lookup(params, "Krylov.Type", KrylovType.CONJUGATE_GRADIENTS.value),
            secant_type=_lookup(params, "Secant.Type", SecantType.LBFGS.value),
            krylov=krylov,
            secant=secant,
        )


def _as_float(name: str, value: Any) -> float:
    if isinstance(value, bool):
        raise InvalidConfigurationError(f"{name} must be a number, got {value!r}.")
    try:
        return float(value)
    except (TypeError, ValueError):
        raise InvalidConfigurationError(f"{name} must be a number, got {value!r}.") from None


def _as_int(name: str, value: Any) -> int:
    number = _as_float(name, value)
    if not number.is_integer():
        raise InvalidConfigurationError(f"{name} must be an integer, got {value!r}.")
    return int(number)


def _as_bool(name: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "false"):
        return value.strip().lower() == "true"
    raise InvalidConfigurationError(
        f"{name} must be a boolean or 'true'/'false', got {value!r}."
    )


def _normalise(config: Any, **converters: Callable[[str, Any], Any]) -> None:
    # frozen dataclasses: write the coerced values through object.__setattr__
    for name, convert in converters.items():
        object.__setattr__(config, name, convert(name, getattr(config, name)))


def _lookup(params: Mapping[str, Any], path: str, default: Any) -> Any:
    if path in params:
        return params[path]
    node: Any = params
    for key in path.split("."):
        if not isinstance(node, Mapping) or key not in node:
            return default
        node = node[key]
    return node


__all__ = [
    "InvalidConfigurationError",
    "KrylovType",
    "SecantType",
    "KrylovConfig",
    "SecantConfig",
    "NewtonKrylovConfig",
]
