"""
Curve calibration: root finding, unit bundles and building blocks.

- CalibrationRepository: solves the units of a block in order
- BuildingBlockBundle: d parameters / d quotes for every calibrated curve
- find_root: Newton and Broyden solvers with backtracking
"""

from .building_block import BuildingBlockBundle, CurveBuildingBlock
from .bundles import SingleCurveBundle, UnitBundle
from .repository import CalibrationRepository, HullWhiteCalibrationRepository
from .rootfinding import ROOT_FINDING_METHODS, RootFinderConfig, VectorRootResult, find_root

__all__ = [
    # Repositories
    'CalibrationRepository',
    'HullWhiteCalibrationRepository',

    # Bundles
    'SingleCurveBundle',
    'UnitBundle',
    'CurveBuildingBlock',
    'BuildingBlockBundle',

    # Root finding
    'RootFinderConfig',
    'VectorRootResult',
    'ROOT_FINDING_METHODS',
    'find_root',
]
