"""
Par-spread calculators for issuer curves.

Bonds are discounted on the issuer curve their issuer matches; the residual
is model dirty price minus market dirty price at settlement. Other
instruments use the discounting calculators.
"""

from multicurve.instruments import FixedCouponBond

from .base import PointSensitivity, add_point
from .discounting import PAR_SPREAD, PAR_SPREAD_SENSITIVITY


def bond_dirty_price(bond: FixedCouponBond, curve) -> float:
    present_value = sum(
        amount * curve.discount_factor(time)
        for time, amount in zip(bond.payment_times, bond.payment_amounts)
    )
    return present_value / curve.discount_factor(bond.settlement_time)


def bond_par_spread(bond: FixedCouponBond, provider) -> float:
    return bond_dirty_price(bond, provider.issuer_curve(bond.issuer)) - bond.dirty_price


def bond_sensitivity(bond: FixedCouponBond, provider) -> PointSensitivity:
    name = provider.issuer_curve_name(bond.issuer)
    curve = provider.curve(name)
    df_settlement = curve.discount_factor(bond.settlement_time)
    sensitivity: PointSensitivity = {}
    for time, amount in zip(bond.payment_times, bond.payment_amounts):
        add_point(sensitivity, name, time, -time * amount * curve.discount_factor(time) / df_settlement)
    add_point(sensitivity, name, bond.settlement_time, bond.settlement_time * bond_dirty_price(bond, curve))
    return sensitivity


ISSUER_PAR_SPREAD = PAR_SPREAD.with_handlers(
    "issuer par spread", {FixedCouponBond: bond_par_spread}
)

ISSUER_PAR_SPREAD_SENSITIVITY = PAR_SPREAD_SENSITIVITY.with_handlers(
    "issuer par spread sensitivity", {FixedCouponBond: bond_sensitivity}
)
