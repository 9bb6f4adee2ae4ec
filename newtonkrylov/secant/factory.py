"""Construct secant approximations from configuration."""

from __future__ import annotations

from ..config import InvalidConfigurationError, SecantConfig, SecantType
from .barzilai_borwein import BarzilaiBorwein
from .base import Secant
from .ldfp import LDFP
from .lbfgs import LBFGS
from .lsr1 import LSR1

_SECANTS: dict[SecantType, type[Secant]] = {
    SecantType.LBFGS: LBFGS,
    SecantType.LDFP: LDFP,
    SecantType.LSR1: LSR1,
    SecantType.BARZILAI_BORWEIN: BarzilaiBorwein,
}


def secant_factory(
    secant_type: SecantType | str, config: SecantConfig | None = None
) -> Secant:
    """
    Create a secant approximation of the requested type.

    Args:
        secant_type: Secant type, as an enum member or its display name.
        config: History parameters passed to the secant.

    Returns:
        A new secant with an empty history.

    Raises:
        InvalidConfigurationError: If the type is unknown or ``User Defined``.
    """
    kind = SecantType.parse(secant_type)
    try:
        secant_cls = _SECANTS[kind]
    except KeyError:
        raise InvalidConfigurationError(
            f"Cannot build a secant of type '{kind}'. "
            f"Supported types: {[str(k) for k in _SECANTS]}"
        ) from None
    return secant_cls(config)


__all__ = ["secant_factory"]
