"""Card generation facade enforcing per-session uniqueness."""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Dict, List, Optional

from ..errors import ExhaustedUniqueSpace, InvalidCount, UnsupportedFormat
from ..models import BingoCard, GenerateCardsRequest, GenerateCardsResponse
from ..rng import RandomSource
from ..strategies import CardStrategy, default_strategies
from ..uniqueness import CardRegistry, generate_card_hash

logger = logging.getLogger(__name__)

MIN_BATCH = 1
MAX_BATCH = 100
DEFAULT_MAX_ATTEMPTS = 100


class BingoGeneratorService:
    """Generates cards per format and never repeats a card within a session."""

    def __init__(
        self,
        *,
        registry: Optional[CardRegistry] = None,
        strategies: Optional[Dict[str, CardStrategy]] = None,
        rng: Optional[RandomSource] = None,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        self.registry = registry if registry is not None else CardRegistry()
        self.strategies = strategies if strategies is not None else default_strategies(rng)
        self.max_attempts = max_attempts

    @property
    def supported_formats(self) -> List[str]:
        return sorted(self.strategies)

    def _strategy(self, card_format: str) -> CardStrategy:
        strategy = self.strategies.get(card_format)
        if strategy is None:
            raise UnsupportedFormat(card_format)
        return strategy

    def generate_card(self, card_format: str, session_id: str) -> BingoCard:
        """Generate one card whose hash is new for the session.

        The hash is registered as soon as it is accepted, so the card counts
        as already seen by `validate_uniqueness` on return.
        """
        strategy = self._strategy(card_format)

        for attempt in range(1, self.max_attempts + 1):
            cells = strategy.generate_cells()
            card_hash = generate_card_hash(cells)
            if self.registry.register(session_id, card_hash):
                if attempt > 1:
                    logger.debug(
                        "%s card for session %s accepted on attempt %d",
                        card_format,
                        session_id,
                        attempt,
                    )
                return BingoCard(
                    id=str(uuid.uuid4()),
                    format=card_format,
                    session_id=session_id,
                    cells=cells,
                    hash=card_hash,
                    created_at=datetime.now(timezone.utc),
                )

        logger.warning(
            "no unique %s card for session %s after %d attempts",
            card_format,
            session_id,
            self.max_attempts,
        )
        raise ExhaustedUniqueSpace(session_id, card_format, self.max_attempts)

    def generate_batch(self, card_format: str, session_id: str, count: int) -> List[BingoCard]:
        if not isinstance(count, int) or isinstance(count, bool) or not (MIN_BATCH <= count <= MAX_BATCH):
            raise InvalidCount(count, minimum=MIN_BATCH, maximum=MAX_BATCH)
        self._strategy(card_format)
        return [self.generate_card(card_format, session_id) for _ in range(count)]

    def generate(self, request: GenerateCardsRequest, session_id: str) -> GenerateCardsResponse:
        cards = self.generate_batch(request.format, session_id, request.count)
        return GenerateCardsResponse(session_id=session_id, generated_count=len(cards), cards=cards)

    def validate_uniqueness(self, card: BingoCard, session_id: str) -> bool:
        """True when the card's cells have not been issued in the session."""
        return not self.registry.exists(session_id, generate_card_hash(card.cells))

    def clear_session(self, session_id: str) -> None:
        self.registry.clear_session(session_id)

    def get_session_card_count(self, session_id: str) -> int:
        return self.registry.get_session_count(session_id)
