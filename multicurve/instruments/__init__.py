"""
Node instruments.

Definitions carry dates and market quotes; derivatives carry curve times and
are what the calculators price. Fixing series and node-time calculators are
consumed during conversion and node ordering.
"""

from .base import InstrumentDefinition, InstrumentDerivative
from .bond import FixedCouponBond, FixedCouponBondDefinition
from .deposit import Deposit, DepositDefinition
from .fixings import FixingSeries
from .fra import FRA, FRADefinition
from .futures import RateFuture, RateFutureDefinition
from .node_time import NodeTime
from .ois import OISSwap, OISSwapDefinition

__all__ = [
    # Interfaces
    'InstrumentDefinition',
    'InstrumentDerivative',

    # Instruments
    'Deposit',
    'DepositDefinition',
    'OISSwap',
    'OISSwapDefinition',
    'FRA',
    'FRADefinition',
    'RateFuture',
    'RateFutureDefinition',
    'FixedCouponBond',
    'FixedCouponBondDefinition',

    # Conversion inputs
    'FixingSeries',
    'NodeTime',
]
