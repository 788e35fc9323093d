"""
Core value types shared by the ingestion, profiling and chart services.

All of these are plain dataclasses. `to_dict()` renders the camelCase
shape consumed by the visualization front end.
"""

import enum
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional, Tuple

# An ordered mapping column -> raw string value over the dataset schema.
Row = Dict[str, str]

# column -> column -> Pearson coefficient in [-1, 1]
CorrelationMatrix = Dict[str, Dict[str, float]]

EMPTY_KEY = "__EMPTY__"


@dataclass
class Dataset:
    """Capped, ordered row set produced by one ingestion."""
    columns: List[str] = field(default_factory=list)
    rows: List[Row] = field(default_factory=list)
    source_name: Optional[str] = None
    capped: bool = False  # ingestion stopped at the row cap

    def __len__(self) -> int:
        return len(self.rows)

    def column_values(self, column: str) -> List[str]:
        """All raw values of a column, missing entries as empty string."""
        return [str(row.get(column, "") or "") for row in self.rows]


@dataclass
class HistogramBin:
    bin_start: float
    bin_end: float
    count: int

    def to_dict(self) -> Dict[str, Any]:
        return {"binStart": self.bin_start, "binEnd": self.bin_end, "count": self.count}


@dataclass
class NumericProfile:
    count: int
    mean: float
    median: float
    min: Optional[float]  # None when no finite values parsed
    max: Optional[float]
    stdev: float
    sample: List[float] = field(default_factory=list)
    histogram: List[HistogramBin] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "count": self.count,
            "mean": self.mean,
            "median": self.median,
            "min": self.min,
            "max": self.max,
            "stdev": self.stdev,
            "sample": list(self.sample),
            "histogram": [b.to_dict() for b in self.histogram],
        }


@dataclass
class ValueCount:
    value: str
    count: int

    def to_dict(self) -> Dict[str, Any]:
        return {"value": self.value, "count": self.count}


@dataclass
class CategoricalProfile:
    unique_count: int
    top: List[ValueCount] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "uniqueCount": self.unique_count,
            "top": [t.to_dict() for t in self.top],
        }


@dataclass
class Profiles:
    """Per-column profiles. Both maps preserve column discovery order."""
    numeric: Dict[str, NumericProfile] = field(default_factory=dict)
    categorical: Dict[str, CategoricalProfile] = field(default_factory=dict)

    @property
    def numeric_columns(self) -> List[str]:
        return list(self.numeric.keys())

    @property
    def categorical_columns(self) -> List[str]:
        return list(self.categorical.keys())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "numeric": {name: p.to_dict() for name, p in self.numeric.items()},
            "categorical": {name: p.to_dict() for name, p in self.categorical.items()},
        }


class ChartKind(str, enum.Enum):
    """
    Chart kinds. The first five are suggested automatically; the rest are
    only reachable through a user override and render via the column
    fallback.
    """
    HISTOGRAM = "histogram"
    BAR = "bar"
    PIE = "pie"
    SCATTER = "scatter"
    CORRELATION_MATRIX = "corr"
    LINE = "line"
    AREA = "area"
    STACKED = "stacked"
    DONUT = "donut"


@dataclass(frozen=True)
class ChartSpec:
    """Declarative description of one suggested visualization."""
    id: str
    kind: ChartKind
    col_x: Optional[str] = None
    col_y: Optional[str] = None
    cols: Optional[Tuple[str, ...]] = None

    @classmethod
    def histogram(cls, col: str) -> "ChartSpec":
        return cls(id=f"hist_{col}", kind=ChartKind.HISTOGRAM, col_x=col)

    @classmethod
    def bar(cls, col: str) -> "ChartSpec":
        return cls(id=f"bar_{col}", kind=ChartKind.BAR, col_x=col)

    @classmethod
    def pie(cls, col: str) -> "ChartSpec":
        return cls(id=f"pie_{col}", kind=ChartKind.PIE, col_x=col)

    @classmethod
    def scatter(cls, col_x: str, col_y: str) -> "ChartSpec":
        return cls(id=f"scatter_{col_x}_{col_y}", kind=ChartKind.SCATTER, col_x=col_x, col_y=col_y)

    @classmethod
    def correlation_matrix(cls, cols: List[str]) -> "ChartSpec":
        return cls(id="corr_matrix", kind=ChartKind.CORRELATION_MATRIX, cols=tuple(cols))

    def with_kind(self, kind: ChartKind) -> "ChartSpec":
        return replace(self, kind=ChartKind(kind))

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"id": self.id, "type": self.kind.value}
        if self.col_x is not None:
            out["colX"] = self.col_x
        if self.col_y is not None:
            out["colY"] = self.col_y
        if self.cols is not None:
            out["cols"] = list(self.cols)
        return out


@dataclass
class PivotTable:
    """Cross-tabulated counts between two categorical columns."""
    col_a: str
    col_b: str
    counts: Dict[Tuple[str, str], int] = field(default_factory=dict)
    a_values: List[str] = field(default_factory=list)  # display labels, capped
    b_values: List[str] = field(default_factory=list)
    max_count: int = 0

    def count(self, a: str, b: str) -> int:
        return self.counts.get((a, b), 0)

    def to_dict(self) -> Dict[str, Any]:
        nested: Dict[str, Dict[str, int]] = {}
        for (a, b), n in self.counts.items():
            nested.setdefault(a, {})[b] = n
        return {
            "colA": self.col_a,
            "colB": self.col_b,
            "counts": nested,
            "aValues": list(self.a_values),
            "bValues": list(self.b_values),
            "maxCount": self.max_count,
        }


@dataclass
class DatasetAnalysis:
    """Everything derived from one Dataset; recomputed on every replacement."""
    dataset: Dataset
    profiles: Profiles
    chart_specs: List[ChartSpec] = field(default_factory=list)

    @property
    def columns(self) -> List[str]:
        return list(self.dataset.columns)

    @property
    def row_count(self) -> int:
        return len(self.dataset)

    def to_dict(self, include_rows: bool = True) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "columns": self.columns,
            "rowCount": self.row_count,
            "capped": self.dataset.capped,
            "profiles": self.profiles.to_dict(),
            "chartSpecs": [c.to_dict() for c in self.chart_specs],
        }
        if include_rows:
            out["dataset"] = [dict(r) for r in self.dataset.rows]
        return out
