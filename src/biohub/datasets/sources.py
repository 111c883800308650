"""Row sources for the species-speed datasets.

A source turns a dataset id into a list of rows. Rows are parsed from CSV with a
header line; an optional per-row transform may convert each row and returns
``None`` to drop it. Any failure to obtain the text itself (missing file, I/O
error, HTTP error) is raised as ``DatasetFetchError``; a bad row never is.
"""

import asyncio
import csv
import io
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any, Protocol

import httpx
import structlog

from biohub.analytics.records import DatasetId

logger = structlog.get_logger(__name__)

RowTransform = Callable[[dict[str, str]], Any]


class DatasetFetchError(Exception):
    """Raised when a dataset cannot be retrieved."""

    def __init__(self, resource_id: str, reason: str):
        self.resource_id = resource_id
        self.reason = reason
        super().__init__(f"{resource_id}: {reason}")


class RowSource(Protocol):
    """Anything that can fetch the rows of a dataset."""

    async def fetch(self, resource_id: str, transform: RowTransform | None = None) -> list:
        """Return the dataset's rows, transformed and filtered when requested."""
        ...


def default_filenames() -> dict[str, str]:
    """File names the datasets are published under, keyed by dataset id."""
    return {dataset.value: dataset.default_filename for dataset in DatasetId}


def parse_csv_text(text: str, transform: RowTransform | None = None) -> list:
    """Parse CSV text with a header row into row dicts.

    Short rows leave their trailing columns as ``None``.
    """
    reader = csv.DictReader(io.StringIO(text))
    if transform is None:
        return list(reader)
    return [result for row in reader if (result := transform(row)) is not None]


class CsvFileSource:
    """Reads dataset CSV files from a local directory."""

    def __init__(self, directory: Path, filenames: Mapping[str, str] | None = None):
        self.directory = Path(directory)
        self.filenames = dict(filenames or default_filenames())

    def path_for(self, resource_id: str) -> Path:
        try:
            return self.directory / self.filenames[resource_id]
        except KeyError as e:
            raise DatasetFetchError(resource_id, "unknown dataset") from e

    async def fetch(self, resource_id: str, transform: RowTransform | None = None) -> list:
        """Read and parse one dataset file without blocking the event loop."""
        path = self.path_for(resource_id)
        try:
            text = await asyncio.to_thread(path.read_text, encoding="utf-8-sig")
        except OSError as e:
            logger.warning("Dataset file unreadable", dataset=resource_id, path=str(path))
            raise DatasetFetchError(resource_id, f"{path.name}: {e.strerror or e}") from e
        except UnicodeDecodeError as e:
            logger.warning("Dataset file is not UTF-8", dataset=resource_id, path=str(path))
            raise DatasetFetchError(resource_id, f"{path.name}: {e.reason}") from e

        rows = parse_csv_text(text, transform)
        logger.debug("Dataset file loaded", dataset=resource_id, rows=len(rows))
        return rows


class HttpCsvSource:
    """Fetches dataset CSV files over HTTP.

    No timeout is applied unless one is configured; a hung request only delays
    the chart that depends on it.
    """

    def __init__(
        self,
        base_url: str,
        filenames: Mapping[str, str] | None = None,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.filenames = dict(filenames or default_filenames())
        self.timeout = timeout
        self.client = client

    def url_for(self, resource_id: str) -> str:
        try:
            filename = self.filenames[resource_id]
        except KeyError as e:
            raise DatasetFetchError(resource_id, "unknown dataset") from e
        return f"{self.base_url}/{filename}"

    async def _get(self, client: httpx.AsyncClient, url: str) -> httpx.Response:
        response = await client.get(url, timeout=self.timeout)
        response.raise_for_status()
        return response

    async def fetch(self, resource_id: str, transform: RowTransform | None = None) -> list:
        """Download and parse one dataset."""
        url = self.url_for(resource_id)
        try:
            if self.client is not None:
                response = await self._get(self.client, url)
            else:
                async with httpx.AsyncClient() as client:
                    response = await self._get(client, url)
        except httpx.HTTPStatusError as e:
            raise DatasetFetchError(
                resource_id, f"HTTP {e.response.status_code} for {url}"
            ) from e
        except httpx.HTTPError as e:
            raise DatasetFetchError(resource_id, f"{type(e).__name__} for {url}") from e

        rows = parse_csv_text(response.text, transform)
        logger.debug("Dataset downloaded", dataset=resource_id, url=url, rows=len(rows))
        return rows
