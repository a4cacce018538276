"""Check-in orchestration."""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum

from makerspace_checkin.domain.atrium import AtriumUndetailed
from makerspace_checkin.domain.check_in import (
    CheckInAllow,
    CheckInDisallow,
    CheckInResult,
)
from makerspace_checkin.errors import ExtractionFailed, LedgerError, UpstreamUnavailable
from makerspace_checkin.services.atrium_session import AtriumSessionManager
from makerspace_checkin.services.eligibility import EligibilityPolicy
from makerspace_checkin.services.extraction import IdentityExtractor
from makerspace_checkin.services.ledger import AttendanceLedger

logger = logging.getLogger(__name__)


class ExtractionFailurePolicy(str, Enum):
    """What to do when Atrium's HTML cannot be parsed for an identity."""

    DENY = "deny"
    RAISE = "raise"


@dataclass
class CheckInService:
    """Runs a single check-in from card swipe to admit/deny."""

    session_manager: AtriumSessionManager
    extractor: IdentityExtractor
    policy: EligibilityPolicy
    ledger: AttendanceLedger
    on_extraction_failure: ExtractionFailurePolicy = ExtractionFailurePolicy.DENY

    async def check_in(self, lookup_key: str) -> CheckInResult:
        """Look a visitor up in Atrium and decide whether to let them in."""
        try:
            response = await self.session_manager.perform(lookup_key)
        except UpstreamUnavailable as exc:
            logger.warning("Atrium lookup for check-in failed: %s", exc.message)
            return CheckInDisallow(html=exc.message)

        if isinstance(response, AtriumUndetailed):
            return CheckInDisallow(html=response.message)

        try:
            identity = self.extractor.identify(response)
        except ExtractionFailed as exc:
            if self.on_extraction_failure is ExtractionFailurePolicy.RAISE:
                raise
            logger.error("Could not read identity from Atrium HTML: %s", exc.reason)
            return CheckInDisallow(html=response.html)

        member_id = identity.extracted_member_id
        try:
            await asyncio.to_thread(self.ledger.upsert_member, member_id)
        except LedgerError:
            logger.exception("Failed to record member %s", member_id)
        workshops = await asyncio.to_thread(self.ledger.list_attendance, member_id)

        decision = self.policy.decide(
            identity.eligible, identity.eligibility_code, member_id
        )
        if not decision.admitted:
            logger.info(
                "Denied member %s (code %s)", member_id, identity.eligibility_code
            )
            return CheckInDisallow(html=identity.raw_html)

        logger.info("Admitted member %s (%s)", member_id, decision.reason.value)
        return CheckInAllow(
            html=identity.raw_html,
            name=identity.display_name,
            member_id=member_id,
            workshops=workshops,
        )
