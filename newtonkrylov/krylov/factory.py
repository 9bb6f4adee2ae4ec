"""Construct Krylov solvers from configuration."""

from __future__ import annotations

from ..config import InvalidConfigurationError, KrylovConfig, KrylovType
from .base import Krylov
from .cg import ConjugateGradients
from .cr import ConjugateResiduals

_SOLVERS: dict[KrylovType, type[Krylov]] = {
    KrylovType.CONJUGATE_GRADIENTS: ConjugateGradients,
    KrylovType.CONJUGATE_RESIDUALS: ConjugateResiduals,
}


def krylov_factory(
    krylov_type: KrylovType | str, config: KrylovConfig | None = None
) -> Krylov:
    """
    Create a Krylov solver of the requested type.

    Args:
        krylov_type: Solver type, as an enum member or its display name.
        config: Stopping parameters passed to the solver.

    Returns:
        A new solver instance.

    Raises:
        InvalidConfigurationError: If the type is unknown or ``User Defined``
            (user-defined solvers must be passed in as objects).
    """
    kind = KrylovType.parse(krylov_type)
    try:
        solver_cls = _SOLVERS[kind]
    except KeyError:
        raise InvalidConfigurationError(
            f"Cannot build a Krylov solver of type '{kind}'. "
            f"Supported types: {[str(k) for k in _SOLVERS]}"
        ) from None
    return solver_cls(config)


__all__ = ["krylov_factory"]
