"""
Par-spread calculators for the plain discounting multi-curve model.

Futures are priced without convexity adjustment.
"""

from multicurve.instruments import FRA, OISSwap, Deposit, RateFuture

from .base import DispatchingCalculator, PointSensitivity, add_point


def deposit_par_spread(deposit: Deposit, provider) -> float:
    curve = provider.discounting_curve(deposit.currency)
    df_start = curve.discount_factor(deposit.start_time)
    df_end = curve.discount_factor(deposit.end_time)
    return (df_start / df_end - 1.0) / deposit.accrual_factor - deposit.rate


def deposit_sensitivity(deposit: Deposit, provider) -> PointSensitivity:
    name = provider.discounting_curve_name(deposit.currency)
    curve = provider.curve(name)
    ratio = curve.discount_factor(deposit.start_time) / curve.discount_factor(deposit.end_time)
    sensitivity: PointSensitivity = {}
    add_point(sensitivity, name, deposit.start_time, -deposit.start_time * ratio / deposit.accrual_factor)
    add_point(sensitivity, name, deposit.end_time, deposit.end_time * ratio / deposit.accrual_factor)
    return sensitivity


def _ois_legs(swap: OISSwap, provider):
    discounting = provider.discounting_curve(swap.currency)
    forward = provider.index_curve(swap.index)
    floating_rates = []
    annuity = 0.0
    floating = 0.0
    for i, (start, end, accrual) in enumerate(zip(swap.start_times, swap.end_times, swap.fixed_accruals)):
        accrued = swap.first_period_accrued if i == 0 else 1.0
        period_rate = accrued * forward.discount_factor(start) / forward.discount_factor(end) - 1.0
        df_pay = discounting.discount_factor(end)
        floating_rates.append(period_rate)
        annuity += accrual * df_pay
        floating += period_rate * df_pay
    return floating_rates, annuity, floating


def ois_par_spread(swap: OISSwap, provider) -> float:
    _, annuity, floating = _ois_legs(swap, provider)
    return floating / annuity - swap.fixed_rate


def ois_sensitivity(swap: OISSwap, provider) -> PointSensitivity:
    discounting_name = provider.discounting_curve_name(swap.currency)
    forward_name = provider.index_curve_name(swap.index)
    discounting = provider.curve(discounting_name)
    forward = provider.curve(forward_name)
    floating_rates, annuity, floating = _ois_legs(swap, provider)
    par_rate = floating / annuity
    sensitivity: PointSensitivity = {}
    for i, (start, end, accrual) in enumerate(zip(swap.start_times, swap.end_times, swap.fixed_accruals)):
        df_pay = discounting.discount_factor(end)
        add_point(
            sensitivity, discounting_name, end,
            -end * df_pay * (floating_rates[i] - par_rate * accrual) / annuity,
        )
        growth = floating_rates[i] + 1.0
        add_point(sensitivity, forward_name, start, -start * growth * df_pay / annuity)
        add_point(sensitivity, forward_name, end, end * growth * df_pay / annuity)
    return sensitivity


def forward_rate(curve, start: float, end: float, accrual: float) -> float:
    return (curve.discount_factor(start) / curve.discount_factor(end) - 1.0) / accrual


def forward_rate_sensitivity(sensitivity: PointSensitivity, name: str, curve, start: float,
                             end: float, accrual: float, scale: float = 1.0) -> None:
    ratio = curve.discount_factor(start) / curve.discount_factor(end)
    add_point(sensitivity, name, start, -scale * start * ratio / accrual)
    add_point(sensitivity, name, end, scale * end * ratio / accrual)


def fra_par_spread(fra: FRA, provider) -> float:
    if fra.fixed_rate is not None:
        return fra.fixed_rate - fra.rate
    curve = provider.index_curve(fra.index)
    return forward_rate(curve, fra.start_time, fra.end_time, fra.accrual_factor) - fra.rate


def fra_sensitivity(fra: FRA, provider) -> PointSensitivity:
    sensitivity: PointSensitivity = {}
    if fra.fixed_rate is None:
        name = provider.index_curve_name(fra.index)
        forward_rate_sensitivity(
            sensitivity, name, provider.curve(name), fra.start_time, fra.end_time, fra.accrual_factor
        )
    return sensitivity


def future_par_spread(future: RateFuture, provider) -> float:
    curve = provider.index_curve(future.index)
    return forward_rate(curve, future.start_time, future.end_time, future.accrual_factor) - future.implied_rate


def future_sensitivity(future: RateFuture, provider) -> PointSensitivity:
    name = provider.index_curve_name(future.index)
    sensitivity: PointSensitivity = {}
    forward_rate_sensitivity(
        sensitivity, name, provider.curve(name), future.start_time, future.end_time, future.accrual_factor
    )
    return sensitivity


PAR_SPREAD = DispatchingCalculator(
    "discounting par spread",
    {
        Deposit: deposit_par_spread,
        OISSwap: ois_par_spread,
        FRA: fra_par_spread,
        RateFuture: future_par_spread,
    },
)

PAR_SPREAD_SENSITIVITY = DispatchingCalculator(
    "discounting par spread sensitivity",
    {
        Deposit: deposit_sensitivity,
        OISSwap: ois_sensitivity,
        FRA: fra_sensitivity,
        RateFuture: future_sensitivity,
    },
)
