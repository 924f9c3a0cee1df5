class ScoringError(Exception):
    """Base for rule violations; the message is safe to show to the caller."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ForbiddenError(ScoringError):
    """Caller is identified but lacks ownership or admin rights."""


class InvalidRequestError(ScoringError):
    """Input is well-formed but violates a rule (dates, pars, totals)."""


class ConflictError(ScoringError):
    """Request clashes with current state (already registered, full, confirmed, completed)."""
