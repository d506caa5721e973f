"""Typed errors raised by the scoring core.

Ties are never errors: they resolve deterministically in the resolver
and the champion aggregator.
"""


class SkunkError(Exception):
    """Base exception for the scoring core."""


class MalformedRecord(SkunkError):
    """A wire record is missing a field it cannot be decoded without.

    Attributes:
        field: Wire name of the offending field.
        reason: Human-readable explanation.
    """

    def __init__(self, field: str, reason: str) -> None:
        self.field = field
        self.reason = reason
        super().__init__(f'{field}: {reason}')


class MissingGameReference(SkunkError):
    """A match was encoded before a game was assigned to it."""

    def __init__(self, match_id: str) -> None:
        self.match_id = match_id
        super().__init__(f'match {match_id} has no game reference')
