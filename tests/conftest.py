import random

import pytest

from helpers.builders import config, multi, rule, short_text, single
from helpers.fakes import FakeFormSession, FakeSessionProvider
from survey_autofill.orchestrator import SubmissionOrchestrator, Timeouts


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def survey():
    """Three-question survey: Q2 depends on Q1 through one rule."""
    return config(
        [
            single("1", {"A": 1, "B": 1}),
            multi("2", {"x": 1, "y": 1, "z": 1}, lo=1, hi=2),
            short_text("3", ["good", "fine"]),
        ],
        rules=[rule("1", ["A"], "2", "z", 4)],
    )


@pytest.fixture
def provider():
    return FakeSessionProvider()


@pytest.fixture
def make_orchestrator(rng):
    """Build an orchestrator with no pauses and small, recognisable timeouts."""

    def _make(cfg, session_factory=None, **kw):
        sessions = kw.pop("sessions", None) or FakeSessionProvider(session_factory or FakeFormSession)
        orchestrator = SubmissionOrchestrator(
            cfg,
            sessions,
            timeouts=kw.pop(
                "timeouts",
                Timeouts(navigation=5, challenge_probe=1, challenge_resolution=3, completion=2, action=4),
            ),
            pause_range=(0, 0),
            rng=kw.pop("rng", rng),
            **kw,
        )
        return orchestrator, sessions

    return _make
