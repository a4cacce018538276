"""Check-in outcomes."""

from dataclasses import dataclass, field

from makerspace_checkin.domain.models import AttendanceEntry


@dataclass(frozen=True)
class CheckInAllow:
    """Visitor may enter."""

    html: str
    name: str
    member_id: int
    workshops: list[AttendanceEntry] = field(default_factory=list)


@dataclass(frozen=True)
class CheckInDisallow:
    """Visitor is turned away; html is usually Atrium's explanation."""

    html: str


CheckInResult = CheckInAllow | CheckInDisallow
