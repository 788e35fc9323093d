from .dataset import (
    EMPTY_KEY,
    CategoricalProfile,
    ChartKind,
    ChartSpec,
    CorrelationMatrix,
    Dataset,
    DatasetAnalysis,
    HistogramBin,
    NumericProfile,
    PivotTable,
    Profiles,
    Row,
    ValueCount,
)

__all__ = [
    "EMPTY_KEY",
    "CategoricalProfile",
    "ChartKind",
    "ChartSpec",
    "CorrelationMatrix",
    "Dataset",
    "DatasetAnalysis",
    "HistogramBin",
    "NumericProfile",
    "PivotTable",
    "Profiles",
    "Row",
    "ValueCount",
]
