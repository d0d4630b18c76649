"""
Closed-form solutions of the two-parameter critical power model.

The model ``P * T = CP * T + W'`` relates a sustained average power ``P`` held
for ``T`` seconds to CP and W'. Given any two of the three quantities the third
follows directly. Powers are truncated to whole watts before solving, which
is how head units report them.

Both functions return ``None`` when the inputs fall outside the model's valid
scope; callers keep their previous estimate in that case.
"""

from ..constants import TwoParameterConstants


def cp_from_two_parameter(
    avg_power: float, time_limit: float, w_prime: float
) -> float | None:
    """
    Estimate CP from an average power held until exhaustion.

    CP = P - W' / T, valid only while P > W' / T.

    Args:
        avg_power: Average power above CP in watts
        time_limit: Time spent above CP in seconds
        w_prime: Current W' in joules

    Returns:
        CP estimate in watts, or None for a degenerate fit
    """
    if time_limit <= 0:
        return None

    w_prime_rate = int(w_prime / time_limit)
    power = int(avg_power)

    if power > w_prime_rate:
        return float(power - w_prime_rate)
    return None


def w_prime_from_two_parameter(
    avg_power: float, time_limit: float, critical_power: float
) -> float | None:
    """
    Estimate W' from an average power held for a known duration.

    W' = (P - CP) * T, valid only while P > CP.

    Args:
        avg_power: Sustained power in watts
        time_limit: Duration in seconds
        critical_power: CP in watts

    Returns:
        W' estimate in joules, or None for a degenerate fit
    """
    power = int(avg_power)

    if power > critical_power:
        return float((power - critical_power) * int(time_limit))
    return None


def twenty_minute_w_prime(critical_power: float) -> float | None:
    """W' implied by a 20-minute test ridden 4.5% above the given CP."""
    return w_prime_from_two_parameter(
        critical_power * TwoParameterConstants.TEST_POWER_FACTOR,
        TwoParameterConstants.TEST_DURATION,
        critical_power,
    )


def constrain_initial_values(
    critical_power: float, w_prime: float
) -> tuple[float, float]:
    """
    Raise implausibly low starting values to the model's floor.

    CP is floored at 100 W; W' is raised to the 20-minute-test estimate for
    that CP when it is below it.
    """
    critical_power = max(critical_power, TwoParameterConstants.MIN_CRITICAL_POWER)

    w_prime_floor = twenty_minute_w_prime(critical_power)
    if w_prime_floor is not None and w_prime < w_prime_floor:
        w_prime = w_prime_floor

    return float(critical_power), float(w_prime)
