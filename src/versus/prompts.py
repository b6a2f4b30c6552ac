"""Prompt construction for the comparison engine."""

import random
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

# Exemplar attribute sets that anchor the model's choice of categories
DOMAIN_ATTRIBUTES = [
    ("tech products", ["Performance", "Design", "Price", "Features", "Value"]),
    ("fictional characters", ["Power", "Intelligence", "Charisma", "Combat Skills", "Popularity"]),
    ("athletes", ["Skill", "Achievements", "Impact", "Consistency", "Legacy"]),
    ("food", ["Taste", "Nutrition", "Cost", "Availability", "Versatility"]),
    ("programming tools", ["Performance", "Ease of Use", "Community", "Documentation", "Flexibility"]),
]

RESULT_SCHEMA = """{
  "items": ["item1", "item2"],
  "attributes": ["Attr1", "Attr2", "Attr3", "Attr4"],
  "scores": {
    "item1": { "Attr1": 85, "Attr2": 90, ... },
    "item2": { "Attr1": 78, "Attr2": 92, ... }
  },
  "pros": {
    "item1": { "Attr1": ["pro1", "pro2"], ... },
    "item2": { "Attr1": ["pro1"], ... }
  },
  "cons": {
    "item1": { "Attr1": ["con1"], ... },
    "item2": { "Attr1": ["con1", "con2"], ... }
  },
  "winner": "item1",
  "winnerReason": "Brief 1-sentence explanation of why this item wins overall",
  "summary": "1-2 sentence neutral comparison summary",
  "confidence": 85,
  "sources": ["source info"]
}"""


@dataclass(frozen=True)
class PromptPlan:
    """Prompt text plus the order in which the items were shown to the model."""
    text: str
    presented: Tuple[str, str]
    swapped: bool


class ComparePrompt:
    """Centralized prompt management for item comparisons."""

    @staticmethod
    def system_prompt(tie_threshold: float = 3.0) -> str:
        """Rules, schema and bias guards sent ahead of every task."""
        domains = "\n".join(
            f"   - For {domain}: {', '.join(attrs)}" for domain, attrs in DOMAIN_ATTRIBUTES
        )
        threshold = f"{tie_threshold:g}"
        return (
            "You are a concise, impartial comparison engine. Output ONLY valid JSON with no extra text.\n\n"
            "CRITICAL RULES:\n"
            "1. Choose 4-5 comparison attributes that are RELEVANT to what is being compared:\n"
            f"{domains}\n"
            "   - For concepts/abstract things: choose the most meaningful comparison criteria\n\n"
            "2. NEVER use irrelevant attributes (e.g., don't use \"Price\" for anime characters).\n\n"
            "3. BE FAIR:\n"
            "   - Do NOT favor an item because it is named first or second.\n"
            "   - Do NOT favor an item because it is more famous or popular.\n"
            "   - Weigh both items equally and judge each attribute on its merits.\n\n"
            "4. You MUST pick a winner. Analyze the scores and declare a clear winner.\n"
            f"   Only if the average scores differ by {threshold} points or less may you answer \"winner\": \"Tie\".\n\n"
            "5. Use this exact JSON schema:\n"
            f"{RESULT_SCHEMA}\n\n"
            "Scores are integers 0-100. Be fair and objective."
        )

    @staticmethod
    def user_prompt(first: str, second: str, attributes: Optional[Sequence[str]] = None) -> str:
        """The per-request task."""
        prompt = (
            f"Compare: \"{first}\" vs \"{second}\"\n\n"
            "First, determine what TYPE of things these are (products, characters, people, food, concepts, etc.).\n"
            "Then choose 4-5 attributes that make sense for comparing these specific items.\n"
            "Provide scores, pros, cons for each attribute.\n"
            "Pick a winner based on overall scores and provide a reason.\n"
        )
        if attributes:
            prompt += (
                f"The user suggested these attributes: {', '.join(attributes)}. "
                "Use them if they are relevant; otherwise pick better ones.\n"
            )
        return prompt + "Return ONLY the JSON."

    @classmethod
    def build(cls, items: Sequence[str], attributes: Optional[List[str]] = None,
              rng: Optional[random.Random] = None, randomize: bool = True,
              tie_threshold: float = 3.0) -> PromptPlan:
        """Combine system and user blocks, presenting the items in coin-flip order."""
        first, second = items[0], items[1]
        swapped = bool(randomize) and (rng or random).random() < 0.5
        if swapped:
            first, second = second, first

        text = f"{cls.system_prompt(tie_threshold)}\n\n{cls.user_prompt(first, second, attributes)}"
        return PromptPlan(text=text, presented=(first, second), swapped=swapped)
