"""
Historical index fixings consulted when converting definitions to derivatives.
"""

from datetime import date
from typing import Dict, Hashable, Iterator, Mapping, Optional, Union

import pandas as pd

from multicurve.conventions.daycount import DateLike, to_date

SeriesLike = Union[pd.Series, Mapping[date, float]]


def _to_series(data: SeriesLike) -> pd.Series:
    series = data.copy() if isinstance(data, pd.Series) else pd.Series(dict(data), dtype=float)
    series.index = pd.to_datetime(series.index).normalize()
    return series.sort_index()


class FixingSeries:
    """Observed fixings per index, each held as a date-indexed ``pandas.Series``."""

    def __init__(self, series: Optional[Mapping[Hashable, SeriesLike]] = None):
        self._series: Dict[Hashable, pd.Series] = {}
        for index, data in (series or {}).items():
            self.add(index, data)

    def add(self, index: Hashable, data: SeriesLike) -> "FixingSeries":
        """Add fixings for an index; later values win on overlapping dates."""
        incoming = _to_series(data)
        if index in self._series:
            merged = pd.concat([self._series[index], incoming])
            incoming = merged[~merged.index.duplicated(keep="last")].sort_index()
        self._series[index] = incoming
        return self

    def series(self, index: Hashable) -> pd.Series:
        if index not in self._series:
            raise KeyError(f"No fixing series for index {index}")
        return self._series[index].copy()

    def fixing(self, index: Hashable, day: DateLike) -> float:
        """The fixing published for an index on a given day."""
        if index not in self._series:
            raise ValueError(f"No fixing series for index {index}")
        value = self._series[index].get(pd.Timestamp(to_date(day)))
        if value is None or pd.isna(value):
            raise ValueError(f"No fixing for {index} on {to_date(day)}")
        return float(value)

    def has_fixing(self, index: Hashable, day: DateLike) -> bool:
        if index not in self._series:
            return False
        return pd.Timestamp(to_date(day)) in self._series[index].index

    def merged_with(self, other: Optional["FixingSeries"]) -> "FixingSeries":
        """A new series set holding these fixings overlaid with other's."""
        merged = self.copy()
        if other is not None:
            for index in other:
                merged.add(index, other._series[index])
        return merged

    def copy(self) -> "FixingSeries":
        copied = FixingSeries()
        copied._series = {index: series.copy() for index, series in self._series.items()}
        return copied

    def __deepcopy__(self, memo):
        return self.copy()

    def __contains__(self, index: Hashable) -> bool:
        return index in self._series

    def __iter__(self) -> Iterator[Hashable]:
        return iter(self._series)

    def __len__(self) -> int:
        return len(self._series)

    def __repr__(self) -> str:
        return f"FixingSeries({', '.join(str(index) for index in self._series)})"
