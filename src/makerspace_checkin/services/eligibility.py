"""Admission policy layered over Atrium's eligibility verdict."""

from dataclasses import dataclass, field
from enum import Enum


class AdmitReason(str, Enum):
    """Why a visitor was admitted or denied."""

    ELIGIBLE = "eligible"
    RECENT_SWIPE = "recent_swipe"
    ALUMNUS = "alumnus"
    INELIGIBLE = "ineligible"


@dataclass(frozen=True)
class Decision:
    """Outcome of the admission policy."""

    admitted: bool
    reason: AdmitReason


@dataclass(frozen=True)
class EligibilityPolicy:
    """Decides admission from Atrium's verdict and local overrides.

    Atrium denies a card that was swiped moments ago with ``duplicate_swipe_code``;
    that is its own rate limit rather than a real ineligibility, so it admits.
    Alumni on the allow-list are admitted whatever Atrium says.
    """

    alumni: frozenset[int] = field(default_factory=frozenset)
    duplicate_swipe_code: str = "DENY902"

    def decide(self, eligible: bool, code: str, member_id: int) -> Decision:
        """Return the admission decision for a visitor."""
        if eligible:
            return Decision(admitted=True, reason=AdmitReason.ELIGIBLE)
        if code == self.duplicate_swipe_code:
            return Decision(admitted=True, reason=AdmitReason.RECENT_SWIPE)
        if member_id in self.alumni:
            return Decision(admitted=True, reason=AdmitReason.ALUMNUS)
        return Decision(admitted=False, reason=AdmitReason.INELIGIBLE)
