"""Pytest configuration and fixtures."""

import itertools

import pytest

from proposal_wizard.core.state import initial_state


class FakeTimer:
    """Manual stand-in for threading.Timer; tests fire it explicitly."""

    def __init__(self, interval, function):
        self.interval = interval
        self.function = function
        self.started = False
        self.cancelled = False
        self.daemon = False

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def fire(self):
        if not self.cancelled:
            self.function()


class FakeTimerFactory:
    def __init__(self):
        self.timers = []

    def __call__(self, interval, function):
        timer = FakeTimer(interval, function)
        self.timers.append(timer)
        return timer

    @property
    def live(self):
        return [t for t in self.timers if t.started and not t.cancelled]


@pytest.fixture
def timers():
    return FakeTimerFactory()


@pytest.fixture
def clock():
    """Deterministic ISO timestamps: 2026-01-01T00:00:01, :02, ..."""
    counter = itertools.count(1)
    return lambda: f"2026-01-01T00:00:{next(counter):02d}+00:00"


@pytest.fixture
def fresh_state():
    return initial_state("doc-1")


@pytest.fixture
def brand_research():
    return {
        "companyDescription": "Acme is a family-owned footwear maker founded in 1982, selling comfort shoes across Israel.",
        "targetDemographics": {
            "primaryAudience": {
                "gender": "נשים",
                "ageRange": "25-45",
                "lifestyle": "Urban professionals who walk a lot during the day",
                "interests": ["fashion", "wellness"],
                "painPoints": ["sore feet", "shoes that look orthopedic"],
            }
        },
        "suggestedApproach": "Lean on everyday comfort stories told by relatable micro creators.",
    }


@pytest.fixture
def influencer_strategy():
    return {
        "strategyTitle": "Comfort, all day",
        "strategySummary": "A tiered creator program mixing macro reach with micro trust.",
        "tiers": [
            {"name": "Macro", "recommendedCount": 2},
            {"name": "Micro", "recommendedCount": "8"},
        ],
        "recommendations": [
            {"name": "Dana", "handle": "@dana.walks", "category": "lifestyle", "followers": "120K", "engagement": "3.5%"},
        ],
        "contentThemes": [
            {"theme": "Day in my shoes", "description": "Follow a creator from morning to night"},
        ],
        "expectedKPIs": [
            {"metric": "Reach", "target": "1.2M"},
            {"metric": "מעורבות", "target": "45K"},
            {"metric": "CPE (עלות למעורבות)", "target": "0.8"},
        ],
    }
