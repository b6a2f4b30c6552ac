"""
Compare service - coordinates prompt, model call, parsing and completion
"""

import logging
import random
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from .completer import complete_result
from .errors import ClientInputError, ConfigurationError
from .gemini_client import GeminiEngine
from .normalizer import normalize, ParseStatus
from .prompts import ComparePrompt
from .schemas import ComparisonResult
from .settings import Settings

logger = logging.getLogger(__name__)

ITEMS_REQUIRED = "Provide at least two items"


@dataclass
class CompareOutcome:
    """Either a completed result or the raw text the model produced."""
    result: Optional[ComparisonResult] = None
    raw: Optional[str] = None
    status: ParseStatus = ParseStatus.PARSED


class CompareService:
    """Runs one comparison request end to end"""

    def __init__(self, engine: GeminiEngine, randomize_order: bool = True,
                 tie_threshold: float = 3.0, rng: Optional[random.Random] = None):
        self.engine = engine
        self.randomize_order = randomize_order
        self.tie_threshold = tie_threshold
        self.rng = rng or random.Random()
        self.request_count = 0
        self.total_processing_time = 0.0

    @classmethod
    def from_settings(cls, settings: Settings, rng: Optional[random.Random] = None) -> "CompareService":
        """Build a service, failing fast when the Gemini key is missing"""
        if not settings.gemini_api_key:
            raise ConfigurationError("Server misconfigured: missing GEMINI_API_KEY")
        return cls(
            GeminiEngine.from_settings(settings),
            randomize_order=settings.randomize_order,
            tie_threshold=settings.tie_threshold,
            rng=rng,
        )

    async def compare(self, items: Sequence[str], attributes: Optional[List[str]] = None) -> CompareOutcome:
        """Compare the first two items and return the completed result"""
        if len(items) < 2 or not all(items[:2]):
            raise ClientInputError(ITEMS_REQUIRED)
        if len(items) > 2:
            logger.warning(f"Received {len(items)} items, comparing only the first two")

        start_time = time.time()
        self.request_count += 1
        pair = (items[0], items[1])
        logger.info(f"Comparing {pair[0]!r} vs {pair[1]!r}")

        try:
            plan = ComparePrompt.build(
                pair,
                attributes=attributes,
                rng=self.rng,
                randomize=self.randomize_order,
                tie_threshold=self.tie_threshold,
            )
            if plan.swapped:
                logger.debug("Presenting items to the model in swapped order")

            text = await self.engine.generate(plan.text)

            normalized = normalize(text)
            if not normalized.ok:
                return CompareOutcome(raw=normalized.raw, status=normalized.status)

            result = complete_result(
                normalized.data,
                pair,
                presented=plan.presented,
                tie_threshold=self.tie_threshold,
            )
            logger.info(f"Comparison finished, winner: {result.winner}")
            return CompareOutcome(result=result, status=normalized.status)
        finally:
            self.total_processing_time += time.time() - start_time

    def get_stats(self) -> Dict[str, Any]:
        """Get service statistics"""
        return {
            "request_count": self.request_count,
            "total_processing_time": self.total_processing_time,
            "average_processing_time": (
                self.total_processing_time / self.request_count if self.request_count else 0.0
            ),
            "engine_stats": self.engine.get_stats(),
        }
