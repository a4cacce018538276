"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from makerspace_checkin.adapters.atrium_client import HttpxAtriumClient
from makerspace_checkin.adapters.supabase_ledger_repository import (
    SupabaseLedgerRepository,
)
from makerspace_checkin.config import Settings, parse_member_ids
from makerspace_checkin.services.atrium_session import AtriumSessionManager
from makerspace_checkin.services.check_in import (
    CheckInService,
    ExtractionFailurePolicy,
)
from makerspace_checkin.services.eligibility import EligibilityPolicy
from makerspace_checkin.services.extraction import IdentityExtractor
from makerspace_checkin.services.ledger import AttendanceLedger


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    session_manager: AtriumSessionManager
    ledger: AttendanceLedger
    check_in_service: CheckInService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    ledger = AttendanceLedger(SupabaseLedgerRepository(supabase_client))

    def connect_atrium() -> HttpxAtriumClient:
        return HttpxAtriumClient.create(
            base_url=resolved_settings.atrium_base_url,
            username=resolved_settings.atrium_username,
            password=resolved_settings.atrium_password,
            timeout=resolved_settings.atrium_timeout_seconds,
        )

    session_manager = AtriumSessionManager(connect_atrium)
    check_in_service = CheckInService(
        session_manager=session_manager,
        extractor=IdentityExtractor(
            name_element_id=resolved_settings.identity_name_element_id,
            member_id_class=resolved_settings.identity_member_id_class,
        ),
        policy=EligibilityPolicy(
            alumni=parse_member_ids(resolved_settings.alumni_member_ids),
            duplicate_swipe_code=resolved_settings.duplicate_swipe_code,
        ),
        ledger=ledger,
        on_extraction_failure=ExtractionFailurePolicy(
            resolved_settings.extraction_failure_policy
        ),
    )

    async def close_resources() -> None:
        await session_manager.close()

    return AppContainer(
        settings=resolved_settings,
        session_manager=session_manager,
        ledger=ledger,
        check_in_service=check_in_service,
        close_resources=close_resources,
    )
