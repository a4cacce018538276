"""Best-effort extraction of visitor identity from Atrium HTML."""

from dataclasses import dataclass

from bs4 import BeautifulSoup
from bs4.element import Comment, NavigableString, Tag

from makerspace_checkin.domain.atrium import AtriumDetailed, UpstreamIdentity
from makerspace_checkin.errors import ExtractionFailed

# Upper bound of the ``members.id`` integer column.
MAX_MEMBER_ID = 2**31 - 1


@dataclass(frozen=True)
class IdentityExtractor:
    """Pulls the visitor's name and membership id out of a lookup fragment.

    Atrium's markup is not a contract, so fields are located by id and class
    rather than by position, and the membership id is searched for among all
    text children of its container instead of assuming a fixed child.
    """

    name_element_id: str = "person_name"
    member_id_class: str = "campus_id"

    def extract(self, html: str) -> tuple[str, int]:
        """Return ``(display_name, membership_id)`` parsed from the fragment."""
        soup = BeautifulSoup(html, "html.parser")

        name_element = soup.find(id=self.name_element_id)
        if not isinstance(name_element, Tag):
            raise ExtractionFailed(f"No element with id {self.name_element_id!r}")
        display_name = " ".join(name_element.get_text().split())

        id_element = soup.find(class_=self.member_id_class)
        if not isinstance(id_element, Tag):
            raise ExtractionFailed(f"No element with class {self.member_id_class!r}")
        member_id = _first_integer_child(id_element)
        if member_id is None:
            raise ExtractionFailed(
                f"No membership id inside .{self.member_id_class} element"
            )
        return display_name, member_id

    def identify(self, response: AtriumDetailed) -> UpstreamIdentity:
        """Combine a detailed lookup with the identity parsed from its HTML."""
        display_name, member_id = self.extract(response.html)
        return UpstreamIdentity(
            raw_html=response.html,
            eligible=response.eligibility.eligible,
            eligibility_code=response.eligibility.code,
            display_name=display_name,
            extracted_member_id=member_id,
        )


def _first_integer_child(element: Tag) -> int | None:
    """Return the first direct text child that is a storable non-negative integer."""
    for child in element.children:
        if not isinstance(child, NavigableString) or isinstance(child, Comment):
            continue
        candidate = child.strip()
        if candidate.isascii() and candidate.isdigit():
            value = int(candidate)
            if value <= MAX_MEMBER_ID:
                return value
    return None
