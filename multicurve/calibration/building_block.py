"""
Building-block bundle: how calibrated parameters depend on market quotes.

For each curve, the block lists the curves whose node quotes it depends on
(``unit_map``: curve name to (start, count) columns) and the matrix holds
d parameters / d quotes over those columns.
"""

from collections import OrderedDict
from typing import Dict, Iterator, List, Mapping, Optional, Tuple

import numpy as np


class CurveBuildingBlock:
    """Column layout of the quotes a set of curves was calibrated from."""

    def __init__(self, unit_map: Mapping[str, Tuple[int, int]]):
        self._unit_map: "OrderedDict[str, Tuple[int, int]]" = OrderedDict(unit_map)
        expected = 0
        for name, (start, count) in self._unit_map.items():
            if start != expected or count < 0:
                raise ValueError(f"Building block columns are not contiguous at {name}")
            expected += count

    @property
    def unit_map(self) -> "OrderedDict[str, Tuple[int, int]]":
        return OrderedDict(self._unit_map)

    @property
    def n_columns(self) -> int:
        return sum(count for _, count in self._unit_map.values())

    @property
    def curve_names(self) -> List[str]:
        return list(self._unit_map)

    def start(self, curve_name: str) -> int:
        return self._unit_map[curve_name][0]

    def count(self, curve_name: str) -> int:
        return self._unit_map[curve_name][1]

    def __eq__(self, other) -> bool:
        return isinstance(other, CurveBuildingBlock) and other._unit_map == self._unit_map

    def __repr__(self) -> str:
        return f"CurveBuildingBlock({dict(self._unit_map)})"


class BuildingBlockBundle:
    """Curve name to (building block, d parameters / d quotes matrix)."""

    def __init__(self, blocks: Optional[Mapping[str, Tuple[CurveBuildingBlock, np.ndarray]]] = None):
        self._blocks: Dict[str, Tuple[CurveBuildingBlock, np.ndarray]] = {}
        for name, (block, matrix) in (blocks or {}).items():
            self.add(name, block, matrix)

    def add(self, curve_name: str, block: CurveBuildingBlock, matrix: np.ndarray) -> "BuildingBlockBundle":
        matrix = np.array(matrix, dtype=float)
        if matrix.ndim != 2 or matrix.shape[1] != block.n_columns:
            raise ValueError(
                f"Matrix for {curve_name} has shape {matrix.shape}, block has {block.n_columns} columns"
            )
        self._blocks[curve_name] = (block, matrix)
        return self

    def add_all(self, other: "BuildingBlockBundle") -> "BuildingBlockBundle":
        for name, (block, matrix) in other._blocks.items():
            self.add(name, block, matrix)
        return self

    def get(self, curve_name: str) -> Tuple[CurveBuildingBlock, np.ndarray]:
        if curve_name not in self._blocks:
            raise KeyError(f"No building block for curve {curve_name}")
        block, matrix = self._blocks[curve_name]
        return block, matrix.copy()

    def block(self, curve_name: str) -> CurveBuildingBlock:
        return self.get(curve_name)[0]

    def matrix(self, curve_name: str) -> np.ndarray:
        return self.get(curve_name)[1]

    @property
    def curve_names(self) -> List[str]:
        return list(self._blocks)

    def copy(self) -> "BuildingBlockBundle":
        return BuildingBlockBundle(self._blocks)

    def __deepcopy__(self, memo):
        return self.copy()

    def __contains__(self, curve_name: str) -> bool:
        return curve_name in self._blocks

    def __iter__(self) -> Iterator[str]:
        return iter(self._blocks)

    def __len__(self) -> int:
        return len(self._blocks)

    def __repr__(self) -> str:
        return f"BuildingBlockBundle({self.curve_names})"
