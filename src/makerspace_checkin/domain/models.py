"""Domain models for members, workshops and attendance."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Member:
    """Represents a makerspace member keyed by membership id."""

    id: int
    is_staff: bool = False


@dataclass(frozen=True)
class Workshop:
    """Represents a workshop in the catalog."""

    id: str
    name: str


@dataclass(frozen=True)
class TakenRecord:
    """Represents one completion of a workshop by a member."""

    id: str
    member_id: int
    workshop_id: str


@dataclass(frozen=True)
class AttendanceEntry:
    """An attendance record paired with the workshop it references."""

    taken: TakenRecord
    workshop: Workshop
