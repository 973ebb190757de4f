"""Secant-method root finder over ``Decimal`` values.

The solver is independent of loans: it takes any single-argument callable
and two seed points.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Callable, Optional

from .errors import DegenerateSecantStepError

logger = logging.getLogger(__name__)


def secant_method(
    f: Callable[[Decimal], Decimal],
    x0: Decimal,
    x1: Decimal,
    epsilon: Decimal,
    max_iterations: int,
) -> Optional[Decimal]:
    """Return a root of ``f`` near the seeds ``x0`` and ``x1``.

    Each iteration computes

        x2 = x1 - f(x1) * (x1 - x0) / (f(x1) - f(x0))

    and stops successfully when ``|f(x1)| < epsilon`` (returning ``x1``) or
    ``|x2 - x1| < epsilon`` (returning ``x2``).

    Returns
    -------
    Decimal or None
        The root, or ``None`` if ``max_iterations`` steps did not converge.

    Raises
    ------
    DegenerateSecantStepError
        If ``f(x1) == f(x0)`` while ``f(x1)`` is not yet within tolerance,
        which would make the secant step a division by zero.
    """
    f0 = f(x0)
    for iteration in range(max_iterations):
        f1 = f(x1)
        logger.debug("secant iteration %d: f(%s) = %s", iteration, x1, f1)

        if abs(f1) < epsilon:
            return x1

        if f1 == f0:
            raise DegenerateSecantStepError(x0, x1, f1)

        x2 = x1 - f1 * (x1 - x0) / (f1 - f0)

        if abs(x2 - x1) < epsilon:
            return x2

        x0, f0 = x1, f1
        x1 = x2

    return None
