"""
Shared fixtures for Versus tests
"""

import json

import pytest
import requests


def build_response(status: int = 200, body=None, text: str = None, headers=None) -> requests.Response:
    """A real requests.Response carrying the given body"""
    response = requests.models.Response()
    response.status_code = status
    if body is not None:
        text = json.dumps(body)
    response._content = (text or "").encode("utf-8")
    response.encoding = "utf-8"
    response.headers.update(headers or {})
    return response


def gemini_body(text: str) -> dict:
    return {"candidates": [{"content": {"parts": [{"text": text}], "role": "model"}}]}


@pytest.fixture
def make_response():
    return build_response


@pytest.fixture
def gemini_reply():
    """Factory for a successful generateContent reply wrapping the given text or dict"""
    def _reply(payload):
        text = payload if isinstance(payload, str) else json.dumps(payload)
        return build_response(200, gemini_body(text))
    return _reply


@pytest.fixture
def complete_comparison():
    """A complete, well-formed model answer"""
    return {
        "items": ["iPhone 15", "Galaxy S24"],
        "attributes": ["Performance", "Design", "Price", "Features", "Value"],
        "scores": {
            "iPhone 15": {"Performance": 88, "Design": 90, "Price": 70, "Features": 82, "Value": 78},
            "Galaxy S24": {"Performance": 86, "Design": 85, "Price": 75, "Features": 88, "Value": 80},
        },
        "pros": {
            "iPhone 15": {"Design": ["Premium build"]},
            "Galaxy S24": {"Features": ["AI features", "Zoom camera"]},
        },
        "cons": {
            "iPhone 15": {"Price": ["Expensive"]},
            "Galaxy S24": {"Design": ["Plain look"]},
        },
        "winner": "Galaxy S24",
        "winnerReason": "Galaxy S24 offers more features for the money.",
        "summary": "Both are strong flagships with different strengths.",
        "confidence": 80,
        "sources": ["Manufacturer spec sheets"],
    }
