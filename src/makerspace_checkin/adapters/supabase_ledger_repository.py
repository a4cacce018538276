"""Supabase implementation of the attendance ledger."""

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass

import httpx
from postgrest import APIError
from supabase import Client

from makerspace_checkin.domain.models import (
    AttendanceEntry,
    Member,
    TakenRecord,
    Workshop,
)
from makerspace_checkin.errors import AlreadyTaken, StorageError
from makerspace_checkin.services.ledger import LedgerRepository

UNIQUE_VIOLATION = "23505"


@contextmanager
def _storage_errors(action: str) -> Iterator[None]:
    """Translate PostgREST and transport failures into ``StorageError``."""
    try:
        yield
    except APIError as exc:
        raise StorageError(f"Failed to {action}: {exc.message}") from exc
    except httpx.HTTPError as exc:
        raise StorageError(f"Failed to {action}: {exc}") from exc


@dataclass
class SupabaseLedgerRepository(LedgerRepository):
    """Supabase-backed repository for members, workshops and attendance."""

    client: Client

    def ensure_member(self, member: Member) -> None:
        """Insert the member, leaving an existing row untouched."""
        with _storage_errors("upsert member"):
            self.client.table("members").upsert(
                {"id": member.id, "is_staff": member.is_staff},
                on_conflict="id",
                ignore_duplicates=True,
            ).execute()

    def get_member(self, member_id: int) -> Member | None:
        """Return a member by membership id, if present."""
        with _storage_errors("load member"):
            response = (
                self.client.table("members")
                .select("id, is_staff")
                .eq("id", member_id)
                .limit(1)
                .execute()
            )
        if not response.data:
            return None
        row = response.data[0]
        return Member(id=int(row["id"]), is_staff=bool(row.get("is_staff", False)))

    def get_workshop(self, workshop_id: str) -> Workshop | None:
        """Return a workshop by id, if present."""
        with _storage_errors("load workshop"):
            response = (
                self.client.table("workshops")
                .select("id, name")
                .eq("id", workshop_id)
                .limit(1)
                .execute()
            )
        if not response.data:
            return None
        return _parse_workshop(response.data[0])

    def list_workshops(self) -> list[Workshop]:
        """Return every workshop."""
        with _storage_errors("list workshops"):
            response = self.client.table("workshops").select("id, name").execute()
        return [_parse_workshop(row) for row in response.data or []]

    def create_workshop(self, workshop: Workshop) -> None:
        """Insert a workshop row."""
        with _storage_errors("create workshop"):
            self.client.table("workshops").insert(
                {"id": workshop.id, "name": workshop.name}
            ).execute()

    def delete_workshop(self, workshop_id: str) -> None:
        """Delete a workshop row."""
        with _storage_errors("delete workshop"):
            self.client.table("workshops").delete().eq("id", workshop_id).execute()

    def insert_taken(self, record: TakenRecord) -> TakenRecord:
        """Insert an attendance row, reporting unique violations as AlreadyTaken."""
        try:
            response = (
                self.client.table("taken")
                .insert(
                    {
                        "id": record.id,
                        "member_id": record.member_id,
                        "workshop_id": record.workshop_id,
                    }
                )
                .execute()
            )
        except APIError as exc:
            if exc.code == UNIQUE_VIOLATION:
                raise AlreadyTaken(
                    f"Member {record.member_id} already took {record.workshop_id}"
                ) from exc
            raise StorageError(f"Failed to record attendance: {exc.message}") from exc
        except httpx.HTTPError as exc:
            raise StorageError(f"Failed to record attendance: {exc}") from exc
        if not response.data:
            raise StorageError("Attendance insert returned no row")
        return _parse_taken(response.data[0])

    def get_taken(self, member_id: int, workshop_id: str) -> TakenRecord | None:
        """Return the attendance row for a member/workshop pair, if present."""
        with _storage_errors("load attendance"):
            response = (
                self.client.table("taken")
                .select("id, member_id, workshop_id")
                .eq("member_id", member_id)
                .eq("workshop_id", workshop_id)
                .limit(1)
                .execute()
            )
        if not response.data:
            return None
        return _parse_taken(response.data[0])

    def delete_taken(self, record_id: str) -> bool:
        """Delete an attendance row by id; PostgREST returns the deleted rows."""
        with _storage_errors("delete attendance"):
            response = (
                self.client.table("taken").delete().eq("id", record_id).execute()
            )
        return bool(response.data)

    def list_taken(self, member_id: int) -> list[AttendanceEntry]:
        """Return attendance rows joined with workshops that still exist."""
        with _storage_errors("list attendance"):
            taken_response = (
                self.client.table("taken")
                .select("id, member_id, workshop_id")
                .eq("member_id", member_id)
                .execute()
            )
            records = [_parse_taken(row) for row in taken_response.data or []]
            if not records:
                return []
            workshops_response = (
                self.client.table("workshops")
                .select("id, name")
                .in_("id", sorted({record.workshop_id for record in records}))
                .execute()
            )
        workshops = {
            workshop.id: workshop
            for workshop in map(_parse_workshop, workshops_response.data or [])
        }
        return [
            AttendanceEntry(taken=record, workshop=workshops[record.workshop_id])
            for record in records
            if record.workshop_id in workshops
        ]


def _parse_workshop(row: dict[str, object]) -> Workshop:
    return Workshop(id=str(row["id"]), name=str(row.get("name", "")))


def _parse_taken(row: dict[str, object]) -> TakenRecord:
    return TakenRecord(
        id=str(row["id"]),
        member_id=int(row["member_id"]),
        workshop_id=str(row["workshop_id"]),
    )
