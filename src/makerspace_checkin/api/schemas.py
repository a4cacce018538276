"""Pydantic response models for the HTTP API."""

from typing import Literal

from pydantic import BaseModel

from makerspace_checkin.domain.check_in import CheckInAllow, CheckInResult
from makerspace_checkin.domain.models import AttendanceEntry, Workshop


class WorkshopOut(BaseModel):
    """Workshop payload."""

    id: str
    name: str

    @classmethod
    def from_domain(cls, workshop: Workshop) -> "WorkshopOut":
        return cls(id=workshop.id, name=workshop.name)


class TakenRecordOut(BaseModel):
    """Attendance record payload."""

    id: str
    member_id: int
    workshop_id: str


class AttendanceOut(BaseModel):
    """Attendance record together with its workshop."""

    taken_record: TakenRecordOut
    workshop: WorkshopOut

    @classmethod
    def from_domain(cls, entry: AttendanceEntry) -> "AttendanceOut":
        return cls(
            taken_record=TakenRecordOut(
                id=entry.taken.id,
                member_id=entry.taken.member_id,
                workshop_id=entry.taken.workshop_id,
            ),
            workshop=WorkshopOut.from_domain(entry.workshop),
        )


class CheckInAllowOut(BaseModel):
    """Visitor admitted; the raw Atrium HTML is not sent back."""

    entry: Literal["Allow"] = "Allow"
    name: str
    member_id: int
    workshops: list[AttendanceOut]


class CheckInDisallowOut(BaseModel):
    """Visitor denied, with Atrium's HTML or message explaining why."""

    entry: Literal["Disallow"] = "Disallow"
    html: str


def check_in_response(result: CheckInResult) -> CheckInAllowOut | CheckInDisallowOut:
    """Convert a check-in outcome into its tagged response payload."""
    if isinstance(result, CheckInAllow):
        return CheckInAllowOut(
            name=result.name,
            member_id=result.member_id,
            workshops=[AttendanceOut.from_domain(entry) for entry in result.workshops],
        )
    return CheckInDisallowOut(html=result.html)
