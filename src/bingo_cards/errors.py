from __future__ import annotations


class BingoCardsError(Exception):
    """Base class for card generation failures."""


class UnsupportedFormat(BingoCardsError, ValueError):
    def __init__(self, card_format: str):
        super().__init__(f"Unsupported card format: {card_format}")
        self.card_format = card_format


class InvalidCount(BingoCardsError, ValueError):
    def __init__(self, count: int, *, minimum: int = 1, maximum: int = 100):
        super().__init__(f"Count must be between {minimum} and {maximum}, got {count}")
        self.count = count


class OutOfRange(BingoCardsError, ValueError):
    """More unique values were requested than a range can supply."""


class ExhaustedUniqueSpace(BingoCardsError, RuntimeError):
    """No novel card could be found for a session within the attempt budget."""

    def __init__(self, session_id: str, card_format: str, attempts: int):
        super().__init__(
            f"Could not generate a unique {card_format} card for session {session_id!r} "
            f"after {attempts} attempts; clear or rotate the session"
        )
        self.session_id = session_id
        self.card_format = card_format
        self.attempts = attempts
