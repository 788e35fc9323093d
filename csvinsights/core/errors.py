"""
Error taxonomy for CSV Insights.

Only ingestion raises: a bad source aborts that ingestion and is reported
to the caller. Downstream computations are total over any dataset and
resolve degenerate cases by policy instead of raising.
"""


class CsvInsightsError(Exception):
    """Base class for all errors surfaced to API callers."""

    code = "csvinsights_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InputFormatError(CsvInsightsError):
    """Unrecognized source format or a malformed record reported by the parser."""

    code = "input_format_error"


class EncodingError(CsvInsightsError):
    """The byte stream could not be decoded as text."""

    code = "encoding_error"


class InvalidColumnError(CsvInsightsError):
    """A query named a column that is missing or of the wrong kind."""

    code = "invalid_column"


class UnknownChartError(CsvInsightsError):
    """A chart override referenced an id absent from the current chart list."""

    code = "unknown_chart"

