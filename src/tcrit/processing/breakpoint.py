"""Single-breakpoint segmented regression for Tcrit estimation.

The breakpoint is located with Muggeo's iterative linearisation: for a current guess psi the
broken-line term (x - psi)+ is linearised around psi, which turns the problem into an
ordinary least-squares fit of

    y ~ 1 + x + (x - psi)+ + -I(x > psi)

whose last two coefficients (beta, gamma) give the update psi <- psi + gamma / beta. The
update is halved while it does not lower the residual deviance. Iteration stops once the
relative deviance change or |gamma / beta| falls below the tolerance. The standard error
of psi is taken from one more least-squares fit in which the indicator column is
multiplied by beta, so its coefficient is the psi increment itself.

References:
    Muggeo 2003, Statistics in Medicine 22(19), 3055-3071. doi:10.1002/sim.1545
    Arnold et al. 2021, Conservation Physiology 9(1). doi:10.1093/conphys/coab034
"""

import logging
from dataclasses import dataclass

import numpy as np
import pandas as pd
from scipy import linalg

from tcrit.exceptions import ConvergenceError
from tcrit.utils.validation import validate_temperature_range

logger = logging.getLogger(__name__)

# Minimum number of window points on each side of the breakpoint.
MIN_POINTS_PER_SEGMENT = 2

# Number of times a psi update may be halved before the current psi is accepted.
MAX_STEP_HALVINGS = 10

# Slope differences below this are treated as "no breakpoint".
MIN_SLOPE_DIFFERENCE = 1e-12


@dataclass(frozen=True)
class BreakpointFit:
    """Result of a segmented regression with one breakpoint.

    Attributes:
        tcrit: Breakpoint temperature, rounded to 2 decimals.
        tcrit_se: Standard error of the breakpoint, rounded to 2 decimals.
        psi: Unrounded breakpoint estimate.
        temperature: Temperatures of the fit window, ascending.
        fluor_scale: Scaled fluorescence of the fit window, same order.
        fitted: Fitted broken-line values at ``temperature``.
        intercept: Intercept of the left segment.
        slope_left: Slope below the breakpoint.
        slope_right: Slope above the breakpoint.
        n_iterations: Number of linearised fits performed.
    """

    tcrit: float
    tcrit_se: float
    psi: float
    temperature: np.ndarray
    fluor_scale: np.ndarray
    fitted: np.ndarray
    intercept: float
    slope_left: float
    slope_right: float
    n_iterations: int


def get_fit_window(
    temperature: np.ndarray | pd.Series,
    fluor_scale: np.ndarray | pd.Series,
    t50: float,
    prebuffer: float = 12.0,
    postbuffer: float = 1.0,
) -> tuple[np.ndarray, np.ndarray]:
    """Select the points with t50 - prebuffer < temperature < t50 + postbuffer"""
    temperature = np.asarray(temperature, dtype=float)
    fluor_scale = np.asarray(fluor_scale, dtype=float)

    validate_temperature_range(t50 - prebuffer, t50 + postbuffer)
    mask = (temperature > t50 - prebuffer) & (temperature < t50 + postbuffer)

    return temperature[mask], fluor_scale[mask]


def _least_squares(design: np.ndarray, y: np.ndarray) -> tuple[np.ndarray, float]:
    """OLS coefficients and residual sum of squares. Rank-deficient designs are rejected."""
    coef, _, rank, _ = linalg.lstsq(design, y)
    if rank < design.shape[1]:
        raise ConvergenceError("Design matrix is singular, breakpoint is not identifiable")
    residuals = y - design @ coef
    return coef, float(residuals @ residuals)


def _is_valid_psi(x: np.ndarray, psi: float) -> bool:
    n_left = int(np.sum(x <= psi))
    n_right = int(np.sum(x > psi))
    return bool(np.isfinite(psi)) and min(n_left, n_right) >= MIN_POINTS_PER_SEGMENT


def _broken_line_design(x: np.ndarray, psi: float) -> np.ndarray:
    return np.column_stack([np.ones_like(x), x, np.maximum(x - psi, 0.0)])


def _broken_line_deviance(x: np.ndarray, y: np.ndarray, psi: float) -> float:
    _, rss = _least_squares(_broken_line_design(x, psi), y)
    return rss


def _get_psi_standard_error(x: np.ndarray, y: np.ndarray, psi: float, beta: float) -> float:
    n = x.size
    design = np.column_stack([_broken_line_design(x, psi), -beta * (x > psi).astype(float)])
    _, rss = _least_squares(design, y)

    dof = n - design.shape[1]
    sigma2 = rss / dof
    try:
        cov = sigma2 * linalg.inv(design.T @ design)
    except linalg.LinAlgError as e:
        raise ConvergenceError("Cannot estimate breakpoint standard error") from e

    return float(np.sqrt(max(cov[-1, -1], 0.0)))


def fit_breakpoint(
    temperature: np.ndarray | pd.Series,
    fluor_scale: np.ndarray | pd.Series,
    psi0: float | None = None,
    max_iter: int = 30,
    tol: float = 1e-5,
    min_points: int = 4,
) -> BreakpointFit:
    """Fit a two-segment broken line and return its breakpoint.

    Args:
        temperature: Temperatures of the fit window
        fluor_scale: Scaled fluorescence of the fit window
        psi0: Starting breakpoint. Defaults to the median window temperature.
        max_iter: Maximum number of psi updates
        tol: Stop when the relative change in deviance, or the breakpoint update
            itself, falls below this value
        min_points: Windows with fewer points are not fitted

    Returns:
        BreakpointFit: Breakpoint, its standard error and the fitted broken line

    Raises:
        ConvergenceError: If the window is too small, there is no slope change, the
            breakpoint leaves the data, or the iteration does not converge
    """
    x = np.asarray(temperature, dtype=float)
    y = np.asarray(fluor_scale, dtype=float)
    order = np.argsort(x, kind="stable")
    x, y = x[order], y[order]

    n = x.size
    if n < min_points:
        raise ConvergenceError(f"Fit window has {n} points, need at least {min_points}")
    if n <= 4:
        raise ConvergenceError(f"Fit window has {n} points, no residual degrees of freedom")

    psi = float(np.median(x)) if psi0 is None else float(psi0)
    if not _is_valid_psi(x, psi):
        raise ConvergenceError(f"Starting breakpoint {psi:.2f} leaves too few points on one side")

    _, deviance = _least_squares(np.column_stack([np.ones_like(x), x]), y)

    converged = False
    n_iterations = 0
    for n_iterations in range(1, max_iter + 1):
        design = np.column_stack(
            [_broken_line_design(x, psi), -(x > psi).astype(float)]
        )
        coef, _ = _least_squares(design, y)
        beta, gamma = float(coef[2]), float(coef[3])
        if abs(beta) < MIN_SLOPE_DIFFERENCE:
            raise ConvergenceError("No change in slope, the window has no breakpoint")

        step = gamma / beta
        if abs(step) < tol:
            converged = True
            break

        new_deviance = None
        for _ in range(MAX_STEP_HALVINGS + 1):
            candidate = psi + step
            if _is_valid_psi(x, candidate):
                candidate_deviance = _broken_line_deviance(x, y, candidate)
                if candidate_deviance <= deviance:
                    new_deviance = candidate_deviance
                    break
            step /= 2

        if new_deviance is None:
            # no step improves the fit, psi is at the optimum reachable from here
            if _is_valid_psi(x, psi):
                converged = True
                break
            raise ConvergenceError(f"Breakpoint moved outside the data range ({psi:.2f})")

        psi += step
        epsilon = (deviance - new_deviance) / (abs(deviance) + 0.1)
        deviance = new_deviance
        if epsilon < tol:
            converged = True
            break

    if not converged:
        raise ConvergenceError(f"Segmented regression did not converge in {max_iter} iterations")

    coef, _ = _least_squares(_broken_line_design(x, psi), y)
    intercept, slope_left, beta = (float(c) for c in coef)
    if abs(beta) < MIN_SLOPE_DIFFERENCE:
        raise ConvergenceError("No change in slope, the window has no breakpoint")

    psi_se = _get_psi_standard_error(x, y, psi, beta)
    fitted = _broken_line_design(x, psi) @ coef

    logger.debug("Breakpoint %.3f (se %.3f) after %d iterations", psi, psi_se, n_iterations)

    return BreakpointFit(
        tcrit=round(psi, 2),
        tcrit_se=round(psi_se, 2),
        psi=psi,
        temperature=x,
        fluor_scale=y,
        fitted=fitted,
        intercept=intercept,
        slope_left=slope_left,
        slope_right=slope_left + beta,
        n_iterations=n_iterations,
    )
