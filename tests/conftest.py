"""
Shared fixtures for the blog pipeline test suite.

Every outbound dependency (LLM providers, Serper, image endpoint) is replaced
with an in-process double so the suite never touches the network.
"""

import copy
import json
from typing import Any, Dict, List, Optional

import pytest

from app.errors import UpstreamError
from models.ai_models import LLMRequest, LLMResponse
from services.image_client import ImageClient
from services.llm_client import LLMGateway, LLMProvider
from services.storage import MemoryStore


# ---------------------------------------------------------------------------
# Test doubles
# ---------------------------------------------------------------------------

class FakeProvider(LLMProvider):
    """Returns queued payloads in order and records every request."""

    def __init__(self, payloads: Optional[List[Any]] = None):
        self.payloads = list(payloads or [])
        self.requests: List[LLMRequest] = []

    def generate(self, request: LLMRequest) -> LLMResponse:
        self.requests.append(request)
        payload = self.payloads.pop(0) if self.payloads else {}
        if isinstance(payload, Exception):
            raise payload
        content = payload if isinstance(payload, str) else json.dumps(payload)
        return LLMResponse(content=content)


class FakeSerpClient:
    def __init__(self, payload: Optional[Dict[str, Any]] = None, error: Optional[Exception] = None):
        self.payload = payload if payload is not None else {"organic": []}
        self.error = error
        self.calls: List[Dict[str, Any]] = []

    def search(self, keyword: str, num: int = 10) -> Dict[str, Any]:
        self.calls.append({"keyword": keyword, "num": num})
        if self.error is not None:
            raise self.error
        return self.payload


# ---------------------------------------------------------------------------
# Sample data
# ---------------------------------------------------------------------------

def make_organic(count: int) -> List[Dict[str, Any]]:
    return [
        {
            "position": i,
            "title": f"Result {i}",
            "link": f"https://example.com/{i}",
            "snippet": f"Snippet {i}",
        }
        for i in range(1, count + 1)
    ]


SAMPLE_ANALYSIS = {
    "contentType": "Listicle (78%)",
    "avgWordCount": 2400,
    "tone": "Professional",
    "topRankingPages": [
        {
            "position": 1,
            "title": "Best CRM Tools",
            "url": "https://example.com/1",
            "wordCount": 2847,
            "lastUpdated": "Jan 2025",
            "keyElements": ["Comparison Table"],
            "description": "Long comparison",
        }
    ],
    "competitiveAdvantages": ["Add pricing table"],
    "recommendedStructure": ["Introduction", "Main content"],
}

SAMPLE_PLAN = {
    "suggestedTitle": "Best CRM Software in 2025: Tested and Ranked",
    "titleLength": 44,
    "structure": {
        "intro": "Hook",
        "methodology": "How we tested",
        "mainContent": "Tool reviews",
        "comparison": "Table",
        "conclusion": "Verdict",
    },
    "keywordDistribution": {
        "primary": {"target": 10, "placement": ["Title", "H1"]},
        "secondary": {"target": 5, "placement": ["H2s"]},
        "lsi": {"target": 18, "placement": ["throughout content"]},
    },
    "competitiveAdvantages": ["pricing comparison"],
}

SAMPLE_CONTENT = {
    "title": "Best CRM Software in 2025: Tested and Ranked",
    "metaDescription": "We tested the top CRM tools.",
    "intro": "Choosing a CRM is hard.",
    "sections": [
        {
            "heading": "Why a CRM Matters",
            "content": "A CRM keeps customers organized.",
            "subheadings": [{"title": "Sales Pipelines", "content": "Track every deal."}],
        },
        {"heading": "Top Picks", "content": "Here are our favorites."},
    ],
    "conclusion": "Pick the one that fits your team.",
    "wordCount": 2100,
    "seoScore": 88,
    "readingTime": 9,
}


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def google_provider():
    return FakeProvider()


@pytest.fixture
def openai_provider():
    return FakeProvider()


@pytest.fixture
def gateway(google_provider, openai_provider):
    return LLMGateway(providers={"google": google_provider, "openai": openai_provider})


@pytest.fixture
def serp_client():
    return FakeSerpClient(payload={"searchParameters": {"q": "best crm"}, "organic": make_organic(12)})


@pytest.fixture
def failing_serp_client():
    return FakeSerpClient(error=UpstreamError("SERP request failed with status 403"))


@pytest.fixture
def image_client():
    return ImageClient(
        base_url="https://images.test/prompt/",
        model="flux",
        width=1024,
        height=1024,
        timeout=30.0,
        max_workers=2,
    )


@pytest.fixture
def sample_analysis():
    return copy.deepcopy(SAMPLE_ANALYSIS)


@pytest.fixture
def sample_plan():
    return copy.deepcopy(SAMPLE_PLAN)


@pytest.fixture
def sample_content():
    return copy.deepcopy(SAMPLE_CONTENT)
