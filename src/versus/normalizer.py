"""Parse-or-degrade handling of raw model output.

The model is asked for bare JSON but sometimes wraps it in prose or a
Markdown fence. ``normalize`` recovers the object when it can and otherwise
hands the raw text back; it never raises for malformed output.
"""

import json
import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

_CODE_FENCE_RE = re.compile(r"```(?:json|JSON)?\s*([\s\S]*?)\s*```")


class ParseStatus(str, Enum):
    PARSED = "parsed"        # whole text was a JSON object
    RECOVERED = "recovered"  # object found inside surrounding text
    UNPARSED = "unparsed"    # nothing usable, raw text only


@dataclass
class NormalizedOutput:
    status: ParseStatus
    raw: str
    data: Optional[Dict[str, Any]] = None

    @property
    def ok(self) -> bool:
        return self.data is not None


def _loads_object(candidate: Optional[str]) -> Optional[Dict[str, Any]]:
    if not candidate:
        return None
    try:
        value = json.loads(candidate)
    except ValueError:
        return None
    return value if isinstance(value, dict) else None


def _strip_code_fence(text: str) -> str:
    match = _CODE_FENCE_RE.search(text)
    return match.group(1) if match else text


def extract_balanced_object(text: str) -> Optional[str]:
    """Return the first balanced {...} span, ignoring braces inside strings."""
    start = text.find("{")
    while start != -1:
        depth = 0
        in_str = False
        esc = False
        for i in range(start, len(text)):
            c = text[i]
            if in_str:
                if esc:
                    esc = False
                elif c == "\\":
                    esc = True
                elif c == '"':
                    in_str = False
            elif c == '"':
                in_str = True
            elif c == "{":
                depth += 1
            elif c == "}":
                depth -= 1
                if depth == 0:
                    candidate = text[start:i + 1]
                    if _loads_object(candidate) is not None:
                        return candidate
                    break
        # unbalanced or not JSON; try the next opening brace
        start = text.find("{", start + 1)
    return None


def extract_greedy_object(text: str) -> Optional[str]:
    """First '{' to last '}' span; last resort when the balanced scan finds nothing."""
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end <= start:
        return None
    return text[start:end + 1]


def normalize(text: str) -> NormalizedOutput:
    """Parse model output into a dict, degrading to the raw text."""
    raw = text if isinstance(text, str) else str(text)

    data = _loads_object(raw.strip())
    if data is not None:
        return NormalizedOutput(ParseStatus.PARSED, raw, data)

    body = _strip_code_fence(raw)
    for extract in (extract_balanced_object, extract_greedy_object):
        data = _loads_object(extract(body))
        if data is not None:
            logger.info(f"Recovered JSON object from model output using {extract.__name__}")
            return NormalizedOutput(ParseStatus.RECOVERED, raw, data)

    logger.warning(f"Model output is not JSON, returning raw text ({len(raw)} chars)")
    return NormalizedOutput(ParseStatus.UNPARSED, raw)
