"""Error hierarchy for check-in and attendance operations."""


class CheckInError(Exception):
    """Base class for failures on the check-in path."""


class UpstreamUnavailable(CheckInError):  # noqa: N818
    """Atrium could not be reached, answered garbage, or rejected our session."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ExtractionFailed(CheckInError):  # noqa: N818
    """The Atrium HTML did not carry the expected identity markers."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class LedgerError(Exception):
    """Base class for attendance ledger failures."""

    code = "DBError"


class NotFound(LedgerError):  # noqa: N818
    """A referenced member, workshop or attendance record does not exist."""

    code = "NotFound"


class AlreadyTaken(LedgerError):  # noqa: N818
    """The member already has an attendance record for the workshop."""

    code = "AlreadyTaken"


class StorageError(LedgerError):
    """Unclassified storage engine fault."""

    code = "DBError"
