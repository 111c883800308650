"""Sources for the species-speed datasets."""

from biohub.datasets.sources import CsvFileSource, DatasetFetchError, HttpCsvSource, RowSource

__all__ = ["CsvFileSource", "DatasetFetchError", "HttpCsvSource", "RowSource"]
