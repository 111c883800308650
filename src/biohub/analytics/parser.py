"""Row decoding and validation for the species-speed datasets.

Every decoder takes one raw row (column name to string) and returns either
``Valid(record)`` or ``Rejected(reason)``. Dropping rejected rows is a policy of
the caller: ``parse_rows`` and ``RowDecoder`` both discard them silently, while
keeping a count so a malformed file can still be diagnosed from the logs.
"""

import logging
import math
from collections.abc import Callable, Iterable, Iterator, Mapping
from dataclasses import dataclass
from typing import Generic, TypeVar

from biohub.analytics.records import (
    DIET_ORDER,
    ENDANGERMENT_ORDER,
    DatasetId,
    Diet,
    DietRecord,
    EndangermentRecord,
    EndangermentStatus,
    WeightRecord,
)

logger = logging.getLogger(__name__)

INTEGER_PREFIXES = ("0x", "0o", "0b")

R = TypeVar("R")

RawRow = Mapping[str, str | None]

_DIETS_BY_VALUE = {diet.value: diet for diet in DIET_ORDER}
_STATUSES_BY_VALUE = {status.value: status for status in ENDANGERMENT_ORDER}


@dataclass(frozen=True)
class Valid(Generic[R]):
    """A row that decoded into a complete record."""

    record: R


@dataclass(frozen=True)
class Rejected:
    """A row that failed validation."""

    reason: str


Decoder = Callable[[RawRow], Valid[R] | Rejected]


def _text(row: RawRow, column: str) -> str:
    """Return the trimmed cell value, treating a missing column as empty."""
    return (row.get(column) or "").strip()


def coerce_number(raw: str | None) -> float:
    """Convert a cell to a float, returning NaN for empty or unparsable text.

    Unsigned ``0x``, ``0o`` and ``0b`` integers are accepted; digit separators
    such as ``1_000`` are not.
    """
    text = (raw or "").strip()
    if not text or "_" in text:
        return math.nan
    try:
        if text[:2].lower() in INTEGER_PREFIXES:
            return float(int(text, 0))
        return float(text)
    except ValueError:
        return math.nan


def _name_and_speed(row: RawRow) -> tuple[str, float] | Rejected:
    name = _text(row, "name")
    if not name:
        return Rejected("empty name")
    speed = coerce_number(row.get("speed"))
    if not math.isfinite(speed):
        return Rejected(f"non-finite speed {row.get('speed')!r}")
    return name, speed


def decode_diet_row(row: RawRow) -> Valid[DietRecord] | Rejected:
    """Decode a speed-vs-diet row; diet is matched case-insensitively."""
    common = _name_and_speed(row)
    if isinstance(common, Rejected):
        return common
    diet: Diet | None = _DIETS_BY_VALUE.get(_text(row, "diet").lower())
    if diet is None:
        return Rejected(f"unknown diet {row.get('diet')!r}")
    return Valid(DietRecord(name=common[0], speed=common[1], diet=diet))


def decode_weight_row(row: RawRow) -> Valid[WeightRecord] | Rejected:
    """Decode a speed-vs-weight row; body mass must be finite and positive."""
    common = _name_and_speed(row)
    if isinstance(common, Rejected):
        return common
    body_mass = coerce_number(row.get("body_mass"))
    # Body mass feeds a logarithmic axis
    if not math.isfinite(body_mass) or body_mass <= 0:
        return Rejected(f"invalid body mass {row.get('body_mass')!r}")
    return Valid(WeightRecord(name=common[0], speed=common[1], body_mass=body_mass))


def decode_endangerment_row(row: RawRow) -> Valid[EndangermentRecord] | Rejected:
    """Decode a speed-vs-endangerment row; status must match exactly after trimming."""
    common = _name_and_speed(row)
    if isinstance(common, Rejected):
        return common
    status: EndangermentStatus | None = _STATUSES_BY_VALUE.get(_text(row, "endangerment"))
    if status is None:
        return Rejected(f"unknown endangerment status {row.get('endangerment')!r}")
    return Valid(EndangermentRecord(name=common[0], speed=common[1], status=status))


DECODERS: dict[DatasetId, Decoder] = {
    DatasetId.DIET: decode_diet_row,
    DatasetId.WEIGHT: decode_weight_row,
    DatasetId.ENDANGERMENT: decode_endangerment_row,
}


def parse_rows(rows: Iterable[RawRow], decoder: Decoder[R]) -> Iterator[R]:
    """Lazily yield the records of every row that decodes, dropping the rest."""
    for row in rows:
        decoded = decoder(row)
        if isinstance(decoded, Valid):
            yield decoded.record


class RowDecoder(Generic[R]):
    """Per-row transform for dataset sources that counts what it drops.

    Sources call the instance once per row and keep the row only when the
    result is not ``None``.
    """

    def __init__(self, decoder: Decoder[R]):
        self.decoder = decoder
        self.accepted = 0
        self.rejected = 0

    def __call__(self, row: RawRow) -> R | None:
        decoded = self.decoder(row)
        if isinstance(decoded, Rejected):
            self.rejected += 1
            logger.debug("Dropping invalid row: %s", decoded.reason)
            return None
        self.accepted += 1
        return decoded.record
