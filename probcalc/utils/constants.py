"""
Numerical constants and tolerances for distribution calculations.

This module defines the iteration caps, convergence tolerances and
approximation thresholds used by the special functions, the per-distribution
formulas and the quantile solvers. All values are calibrated for double
precision.
"""

import math

# Mathematical constants
SQRT_2 = math.sqrt(2.0)
SQRT_2PI = math.sqrt(2.0 * math.pi)
LOG_SQRT_2PI = math.log(SQRT_2PI)
LN_2 = math.log(2.0)

# Overflow / underflow guards for exp and log
EXP_OVERFLOW_LIMIT = 700.0  # exp(x) saturates to +inf above this
EXP_UNDERFLOW_LIMIT = -700.0  # exp(x) flushes to 0 below this
MIN_NORMAL_FLOAT = 2.2250738585072014e-308  # smallest positive normal double

# Lanczos approximation (g=7, 9 coefficients)
LANCZOS_G = 7.0
LANCZOS_COEFFICIENTS = (
    0.99999999999980993,
    676.5203681218851,
    -1259.1392167224028,
    771.32342877765313,
    -176.61502916214059,
    12.507343278686905,
    -0.13857109526572012,
    9.9843695780195716e-6,
    1.5056327351493116e-7,
)

# Factorials
SMALL_FACTORIALS = (
    1.0,
    1.0,
    2.0,
    6.0,
    24.0,
    120.0,
    720.0,
    5040.0,
    40320.0,
    362880.0,
    3628800.0,
    39916800.0,
    479001600.0,
)
MAX_FACTORIAL_ARGUMENT = 170  # 171! overflows a double
STIRLING_THRESHOLD = 20  # log-factorial switches to Stirling at n >= 20

# Series / continued fraction convergence
MAX_SERIES_ITERATIONS = 200
SERIES_TOLERANCE = 1e-12
LENTZ_FLOOR = 1e-30  # Denominators below this are floored in modified Lentz
INCOMPLETE_GAMMA_SATURATION = 50.0  # P(a, x) = 1 once x > a + 50

# Inverse normal CDF region split
INVERSE_NORMAL_CENTRAL_LIMIT = 0.92
INVERSE_NORMAL_TAIL_SPLIT = 5.0

# Discrete CDF summation
DISCRETE_TERM_TOLERANCE = 1e-15  # Stop once a term past the mode drops below this
MAX_SUMMATION_TERMS = 100_000  # Hard ceiling on open-ended summations

# Normal approximation thresholds
BINOMIAL_NORMAL_MIN_TRIALS = 30
BINOMIAL_NORMAL_MIN_VARIANCE = 9.0
BINOMIAL_NORMAL_MIN_EXPECTATION = 5.0
POISSON_NORMAL_MIN_LAMBDA = 30.0
T_NORMAL_MIN_DF = 100.0
CONTINUITY_CORRECTION = 0.5

# Quantile solver parameters
QUANTILE_PROB_TOLERANCE = 1e-10  # |cdf(x) - p| accuracy
QUANTILE_STEP_TOLERANCE = 1e-12  # Relative step convergence
QUANTILE_MAX_ITERATIONS = 50  # Maximum Newton-Raphson iterations
QUANTILE_MIN_DENSITY = 1e-12  # Below this, switch to Brent method
QUANTILE_BRENT_MAX_ITERATIONS = 200
QUANTILE_BRACKET_EXPANSIONS = 60  # Doublings allowed when bracketing a root
QUANTILE_DISCRETE_MAX_STEPS = 200  # Doubling + bisection steps for discrete search

# Consistency diagnostics tolerances
CDF_LIMIT_TOLERANCE = 1e-9
NORMALIZATION_TOLERANCE = 1e-3
MONOTONICITY_TOLERANCE = 1e-12
