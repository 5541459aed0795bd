# tests/conftest.py
from __future__ import annotations

import asyncio
import json
import os
import sys
from pathlib import Path
from typing import Any, Dict, List

import pytest
from starlette.testclient import TestClient

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("GATEWAY_API_KEY", "test-gateway-key")
os.environ.setdefault("LOG_JSON", "true")

from ideagen.main import create_app  # noqa: E402

ONE_IDEA: Dict[str, Any] = {
    "ideas": [
        {
            "title": "FitQuest",
            "tagline": "Turn campus workouts into a team game",
            "problem": "Students skip exercise. Solo routines are boring.",
            "solution": "A mobile app that scores group workouts and runs weekly leagues.",
            "features": ["Leagues", "Workout logging", "Streaks", "Leaderboards", "Badges"],
            "tech_stack": ["React Native", "FastAPI", "PostgreSQL", "Redis", "Docker", "Expo"],
            "architecture": "[App] --> [API] --> [DB]",
            "roadmap": [{"phase": "Day 1", "tasks": ["Scaffold", "Auth", "Schema"]}],
            "feasibility": {"technical": 8, "time_days": 7, "market_fit": 7},
            "persona": "A second-year student who wants to stay fit with friends.",
            "monetization": "Campus sponsorships and a premium coaching tier.",
            "task_breakdown": [
                {"area": "frontend", "tasks": ["Screens", "State", "Charts", "Polish"], "estimated_hours": 28},
                {"area": "backend", "tasks": ["API", "Leagues", "Scoring", "Tests"], "estimated_hours": 28},
            ],
        }
    ]
}

VALID_BODY: Dict[str, Any] = {
    "domain": "fitness",
    "audience": "students",
    "difficulty": "beginner",
    "mode": "hackathon",
}


class FakeGateway:
    """Stands in for the model gateway; records the messages it was sent."""

    def __init__(self, content: str = "", error: Exception | None = None) -> None:
        self.content = content or json.dumps(ONE_IDEA)
        self.error = error
        self.calls: List[List[Dict[str, str]]] = []

    async def complete(self, messages: List[Dict[str, str]]) -> str:
        self.calls.append(messages)
        if self.error is not None:
            raise self.error
        return self.content


@pytest.fixture()
def one_idea() -> Dict[str, Any]:
    return json.loads(json.dumps(ONE_IDEA))


@pytest.fixture()
def valid_body() -> Dict[str, Any]:
    return dict(VALID_BODY)


@pytest.fixture()
def fake_gateway(monkeypatch) -> FakeGateway:
    import ideagen.routes.generate as generate

    fake = FakeGateway()
    monkeypatch.setattr(generate, "get_client", lambda settings=None: fake)
    return fake


@pytest.fixture()
def app():
    # Function scope: new app (and limiter) for each test to pick up monkeypatched env.
    return create_app()


@pytest.fixture()
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.hookimpl(tryfirst=True)
def pytest_pyfunc_call(pyfuncitem: pytest.Function) -> bool | None:
    """Minimal asyncio support without requiring pytest-asyncio."""

    test_func = pyfuncitem.obj
    if asyncio.iscoroutinefunction(test_func):
        loop = asyncio.new_event_loop()
        try:
            asyncio.set_event_loop(loop)
            call_kwargs = {
                name: pyfuncitem.funcargs[name] for name in pyfuncitem._fixtureinfo.argnames
            }
            loop.run_until_complete(test_func(**call_kwargs))
        finally:
            asyncio.set_event_loop(None)
            loop.close()
        return True
    return None
