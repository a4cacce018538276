"""Attendance and workshop catalog endpoints."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Annotated
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Form, Path, Request, Response, status

from makerspace_checkin.api.schemas import AttendanceOut, WorkshopOut
from makerspace_checkin.errors import StorageError

if TYPE_CHECKING:
    from makerspace_checkin.containers import AppContainer

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["ledger"])

MemberId = Annotated[int, Path(ge=0)]


@router.post("/members/{member_id}/workshop/{workshop_id}")
def take_workshop(
    member_id: MemberId, workshop_id: UUID, request: Request
) -> AttendanceOut:
    """Record that a member took a workshop."""
    container: AppContainer = request.app.state.container
    entry = container.ledger.record_attendance(member_id, str(workshop_id))
    return AttendanceOut.from_domain(entry)


@router.delete("/members/{member_id}/workshop/{workshop_id}")
def untake_workshop(
    member_id: MemberId, workshop_id: UUID, request: Request
) -> AttendanceOut:
    """Undo a recorded workshop completion."""
    container: AppContainer = request.app.state.container
    entry = container.ledger.reverse_attendance(member_id, str(workshop_id))
    return AttendanceOut.from_domain(entry)


@router.get("/members/{member_id}/workshops")
def member_workshops(member_id: MemberId, request: Request) -> list[AttendanceOut]:
    """List the workshops a member has completed."""
    container: AppContainer = request.app.state.container
    entries = container.ledger.list_attendance(member_id)
    return [AttendanceOut.from_domain(entry) for entry in entries]


@router.get("/workshops", response_model=list[WorkshopOut])
def list_workshops(request: Request) -> list[WorkshopOut] | Response:
    """List workshops so staff can pick one to check students in for."""
    container: AppContainer = request.app.state.container
    try:
        workshops = container.ledger.list_workshops()
    except StorageError:
        logger.exception("Error when loading workshops")
        return Response(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)
    return [WorkshopOut.from_domain(workshop) for workshop in workshops]


@router.post("/workshops", status_code=status.HTTP_201_CREATED)
def add_workshop(name: Annotated[str, Form()], request: Request) -> Response:
    """Create a new workshop."""
    container: AppContainer = request.app.state.container
    try:
        container.ledger.create_workshop(name)
    except StorageError:
        logger.exception("Error when creating workshop %r", name)
        return Response(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)
    return Response(status_code=status.HTTP_201_CREATED)


@router.delete("/workshops/{workshop_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_workshop(workshop_id: UUID, request: Request) -> Response:
    """Shallow-delete a workshop."""
    container: AppContainer = request.app.state.container
    try:
        container.ledger.delete_workshop(str(workshop_id))
    except StorageError:
        logger.exception("Error when deleting workshop %s", workshop_id)
        return Response(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
