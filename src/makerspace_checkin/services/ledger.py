"""Workshop attendance ledger."""

import logging
from dataclasses import dataclass
from typing import Protocol
from uuid import uuid4

from makerspace_checkin.domain.models import (
    AttendanceEntry,
    Member,
    TakenRecord,
    Workshop,
)
from makerspace_checkin.errors import NotFound, StorageError

logger = logging.getLogger(__name__)


class LedgerRepository(Protocol):
    """Persistence interface for members, workshops and attendance.

    Implementations raise ``AlreadyTaken`` when an insert hits the
    ``(member_id, workshop_id)`` unique constraint and ``StorageError`` for any
    other storage fault.
    """

    def ensure_member(self, member: Member) -> None:
        """Insert a member row unless one already exists."""

    def get_member(self, member_id: int) -> Member | None:
        """Return a member by membership id, if present."""

    def get_workshop(self, workshop_id: str) -> Workshop | None:
        """Return a workshop by id, if present."""

    def list_workshops(self) -> list[Workshop]:
        """Return every workshop in the catalog."""

    def create_workshop(self, workshop: Workshop) -> None:
        """Insert a workshop."""

    def delete_workshop(self, workshop_id: str) -> None:
        """Delete a workshop without touching attendance rows."""

    def insert_taken(self, record: TakenRecord) -> TakenRecord:
        """Insert an attendance record and return the stored row."""

    def get_taken(self, member_id: int, workshop_id: str) -> TakenRecord | None:
        """Return the attendance record for a member/workshop pair, if present."""

    def delete_taken(self, record_id: str) -> bool:
        """Delete an attendance record by id; return whether a row was removed."""

    def list_taken(self, member_id: int) -> list[AttendanceEntry]:
        """Return a member's attendance records joined with their workshops."""


@dataclass
class AttendanceLedger:
    """Application service for attendance and the workshop catalog."""

    repository: LedgerRepository

    def upsert_member(self, member_id: int) -> None:
        """Make sure a member row exists for the membership id."""
        self.repository.ensure_member(Member(id=member_id))

    def record_attendance(self, member_id: int, workshop_id: str) -> AttendanceEntry:
        """Record that a member completed a workshop."""
        workshop = self._require(member_id, workshop_id)
        record = TakenRecord(
            id=str(uuid4()), member_id=member_id, workshop_id=workshop.id
        )
        stored = self.repository.insert_taken(record)
        logger.info("Member %s took workshop %s", member_id, workshop.id)
        return AttendanceEntry(taken=stored, workshop=workshop)

    def reverse_attendance(self, member_id: int, workshop_id: str) -> AttendanceEntry:
        """Remove a member's completion of a workshop and return what was removed."""
        workshop = self._require(member_id, workshop_id)
        record = self.repository.get_taken(member_id, workshop.id)
        # The row can vanish between the read and the delete.
        if record is None or not self.repository.delete_taken(record.id):
            raise NotFound(
                f"Member {member_id} has no record for workshop {workshop.id}"
            )
        logger.info("Member %s no longer took workshop %s", member_id, workshop.id)
        return AttendanceEntry(taken=record, workshop=workshop)

    def list_attendance(self, member_id: int) -> list[AttendanceEntry]:
        """Return a member's completed workshops, or nothing if storage fails."""
        try:
            return self.repository.list_taken(member_id)
        except StorageError:
            logger.warning(
                "Non-fatal error loading workshops for member %s",
                member_id,
                exc_info=True,
            )
            return []

    def list_workshops(self) -> list[Workshop]:
        """Return the workshop catalog."""
        return self.repository.list_workshops()

    def create_workshop(self, name: str) -> Workshop:
        """Add a workshop to the catalog under a fresh id."""
        workshop = Workshop(id=str(uuid4()), name=name)
        self.repository.create_workshop(workshop)
        return workshop

    def delete_workshop(self, workshop_id: str) -> None:
        """Remove a workshop; attendance rows pointing at it are left alone."""
        self.repository.delete_workshop(workshop_id)

    def _require(self, member_id: int, workshop_id: str) -> Workshop:
        if self.repository.get_member(member_id) is None:
            raise NotFound(f"Unknown member {member_id}")
        workshop = self.repository.get_workshop(workshop_id)
        if workshop is None:
            raise NotFound(f"Unknown workshop {workshop_id}")
        return workshop
