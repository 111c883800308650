"""Typed records for the species-speed datasets.

Rows arrive from the dataset sources as untyped string mappings. The parser turns
each row into one of the frozen record types below; summaries are derived from
those records on every refresh and never mutated in place.
"""

from dataclasses import dataclass
from enum import Enum


class Diet(str, Enum):
    """Diet categories, declared in chart order."""

    HERBIVORE = "herbivore"
    OMNIVORE = "omnivore"
    CARNIVORE = "carnivore"


class EndangermentStatus(str, Enum):
    """Conservation statuses, declared from lowest to highest concern."""

    NOT_EVALUATED = "Not Evaluated"
    DATA_DEFICIENT = "Data Deficient"
    LEAST_CONCERN = "Least Concern"
    NEAR_THREATENED = "Near Threatened"
    VULNERABLE = "Vulnerable"
    ENDANGERED = "Endangered"
    CRITICALLY_ENDANGERED = "Critically Endangered"
    EXTINCT_IN_THE_WILD = "Extinct in the Wild"
    EXTINCT = "Extinct"


DIET_ORDER: tuple[Diet, ...] = tuple(Diet)
ENDANGERMENT_ORDER: tuple[EndangermentStatus, ...] = tuple(EndangermentStatus)


class DatasetId(str, Enum):
    """Identifiers of the three species-speed datasets."""

    DIET = "speed-vs-diet"
    WEIGHT = "speed-vs-weight"
    ENDANGERMENT = "speed-vs-endangerment"

    @property
    def subject(self) -> str:
        """Short subject used in titles and placeholder text."""
        return self.value.removeprefix("speed-vs-")

    @property
    def default_filename(self) -> str:
        """File name the dataset is published under."""
        return f"speed vs {self.subject}.csv"

    @property
    def placeholder_text(self) -> str:
        """Text shown instead of a chart when no valid rows survived parsing."""
        return f"No valid speed vs {self.subject} data available."


@dataclass(frozen=True)
class DietRecord:
    """One animal from the speed-vs-diet dataset."""

    name: str
    speed: float  # km/h
    diet: Diet


@dataclass(frozen=True)
class WeightRecord:
    """One animal from the speed-vs-weight dataset."""

    name: str
    speed: float  # km/h
    body_mass: float  # kg, always > 0


@dataclass(frozen=True)
class EndangermentRecord:
    """One animal from the speed-vs-endangerment dataset."""

    name: str
    speed: float  # km/h
    status: EndangermentStatus


SpeedRecord = DietRecord | WeightRecord | EndangermentRecord


@dataclass(frozen=True)
class DietSummary:
    """Mean speed and sample size for one diet."""

    diet: Diet
    average_speed: float
    count: int


@dataclass(frozen=True)
class EndangermentSummary:
    """Mean speed and sample size for one conservation status."""

    status: EndangermentStatus
    average_speed: float
    count: int
