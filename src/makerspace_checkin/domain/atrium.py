"""Models for Atrium identity lookup responses."""

from dataclasses import dataclass

from pydantic import BaseModel

LOGGED_OUT_MESSAGE = "log_out"


class AtriumEligibility(BaseModel):
    """Eligibility verdict reported by Atrium."""

    code: str
    eligible: bool


class AtriumDetailed(BaseModel):
    """Full lookup payload returned for a live session."""

    success: bool
    html: str
    eligibility: AtriumEligibility


class AtriumUndetailed(BaseModel):
    """Terse payload Atrium returns instead of the full one, e.g. on logout."""

    success: bool
    message: str

    @property
    def is_logged_out(self) -> bool:
        """Return whether this response signals an expired session."""
        return not self.success and self.message == LOGGED_OUT_MESSAGE


AtriumResponse = AtriumDetailed | AtriumUndetailed


@dataclass(frozen=True)
class UpstreamIdentity:
    """Identity and eligibility of a visitor for a single check-in attempt."""

    raw_html: str
    eligible: bool
    eligibility_code: str
    display_name: str
    extracted_member_id: int
