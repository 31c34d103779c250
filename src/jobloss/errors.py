from __future__ import annotations


class JoblossError(Exception):
    """Base class for domain errors raised by the stores and the review pipeline."""


class NotFoundError(JoblossError, ValueError):
    def __init__(self, kind: str, item_id: int):
        super().__init__(f"{kind} {item_id} not found")
        self.kind = kind
        self.item_id = item_id


class ReportValidationError(JoblossError, ValueError):
    def __init__(self, missing: list[str]):
        super().__init__(f"missing required fields: {', '.join(missing)}")
        self.missing = missing


class CandidateStateError(JoblossError, ValueError):
    """Raised when a review decision targets a candidate that is no longer pending."""


class DiscoveryError(JoblossError):
    pass


class DiscoveryNotConfiguredError(DiscoveryError):
    pass


class DiscoveryUnavailableError(DiscoveryError):
    pass
