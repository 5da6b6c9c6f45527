"""
Pytest fixtures for FitMetrics tests.
"""
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from fitmetrics.api.deps import get_calculator
from fitmetrics.core.config import Settings
from fitmetrics.main import create_app
from fitmetrics.services.analytics import AnalyticsCalculator, InMemoryRecordSource

NOW = datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)


# ============================================================================
# Stored Records
# ============================================================================

USERS = [
    {
        "id": "u1",
        "username": "alice",
        "displayName": "Alice Smith",
        "createdAt": "2025-01-15T10:00:00Z",
        "heightFeet": 5,
        "heightInches": 6,
        "weight": 140,
        "age": 30,
        "activityLevel": "moderate",
    },
    {"id": "u2", "username": "bob", "displayName": "Bob Jones"},
    {"id": "c1", "username": "coach", "displayName": "Coach Carter"},
    {"id": "u3", "username": "newbie", "displayName": "New Bie"},
]

WORKOUTS = [
    {
        "id": "w1",
        "userId": "u1",
        "name": "Push Day",
        "status": "completed",
        "date": "2026-03-10T08:00:00Z",
        "exercises": [
            {
                "name": "Bench Press",
                "sets": [
                    {"actualWeight": 200, "actualReps": 5},
                    {"actualWeight": 210, "actualReps": 3},
                ],
            },
            {
                "name": "Squat",
                "sets": [{"prescribedWeight": "250 lbs", "prescribedReps": "5"}],
            },
        ],
    },
    {
        "id": "w2",
        "userId": "u1",
        "name": "Pull Day",
        "status": "completed",
        "date": {"seconds": 1773043200, "nanoseconds": 0},  # 2026-03-09T08:00:00Z
        "exercises": [
            {"name": "Deadlift", "sets": [{"actualWeight": 300, "actualReps": 5}]},
        ],
    },
    {
        "id": "w3",
        "userId": "u1",
        "name": "Leg Day",
        "status": "completed",
        "date": "2026-03-05T18:30:00Z",
        "exercises": [
            {"name": "Squat", "sets": [{"actualWeight": 240, "actualReps": 5}]},
            {
                "name": "Bench Press",
                "sets": [{"actualWeight": 0, "prescribedWeight": 185, "actualReps": 8}],
            },
        ],
    },
    {
        "id": "w4",
        "userId": "u1",
        "name": "Planned Session",
        "status": "planned",
        "date": "2026-03-01T08:00:00Z",
        "exercises": [
            {"name": "Bench Press", "sets": [{"actualWeight": 400, "actualReps": 1}]},
        ],
    },
    {
        "id": "w5",
        "userId": "u1",
        "name": "Old Session",
        "status": "completed",
        "date": "2025-10-01T08:00:00Z",
        "exercises": [
            {"name": "Bench Press", "sets": [{"actualWeight": 180, "actualReps": 5}]},
        ],
    },
]

GROUP_WORKOUTS = [
    {
        "id": "gw1",
        "assignedTo": "u1",
        "groupId": "g1",
        "name": "Team Conditioning",
        "status": "completed",
        "date": "2026-03-08T07:00:00Z",
        "exercises": [
            {"name": "Squat", "sets": [{"actualWeight": 200, "actualReps": 10}]},
        ],
    },
    {"id": "gw2", "assignedTo": "u2", "groupId": "g1", "status": "completed", "date": "2026-03-07T07:00:00Z"},
    {"id": "gw3", "assignedTo": "u2", "groupId": "g1", "status": "assigned", "date": "2026-03-09T07:00:00Z"},
    {"id": "gw4", "assignedTo": "u2", "groupId": "g1", "status": "completed", "date": "2026-03-02T07:00:00Z"},
]

GROUPS = [
    {"id": "g1", "name": "Barbell Club", "members": ["c1", "u1", "u2", "u9"], "admins": ["c1"]},
]

GOALS = [
    {
        "id": "goal1",
        "userId": "u1",
        "lift": "Bench Press",
        "startWeight": 185,
        "currentWeight": 210,
        "targetWeight": 225,
        "status": "active",
        "targetDate": "2026-06-01",
    },
    {
        "id": "goal2",
        "userId": "u1",
        "lift": "Squat",
        "startValue": 200,
        "targetValue": 300,
        "status": "active",
    },
    {
        "id": "goal3",
        "userId": "u1",
        "lift": "Deadlift",
        "startValue": 250,
        "currentValue": 320,
        "targetValue": 315,
        "status": "completed",
    },
]

ACTIVITY = [
    {
        "id": "a1",
        "type": "research",
        "title": "Morning scan",
        "source": "scout",
        "model": "gpt-4o",
        "tokens": {"total": 1200},
        "cost": 0.0125,
        "timestamp": "2026-03-10T09:00:00Z",
    },
    {
        "id": "a2",
        "type": "research",
        "title": "Follow-up",
        "source": "scout",
        "model": "gpt-4o",
        "tokens": {"total": 800},
        "cost": 0.0075,
        "timestamp": "2026-03-09T09:00:00Z",
    },
    {
        "id": "a3",
        "type": "draft",
        "title": "Weekly post",
        "source": "writer",
        "cost": 0.1,
        "timestamp": "2026-03-09T15:00:00Z",
    },
    {
        "id": "a4",
        "type": "research",
        "title": "Archive sweep",
        "source": "writer",
        "model": "claude",
        "tokens": {"total": 500},
        "timestamp": "2026-02-01T00:00:00Z",
    },
    {
        "id": "a5",
        "type": "draft",
        "title": "Lost entry",
        "source": "scout",
        "cost": 0.5,
        "timestamp": "not a date",
    },
]


def sample_collections():
    return {
        "users": USERS,
        "workouts": WORKOUTS,
        "groupWorkouts": GROUP_WORKOUTS,
        "groups": GROUPS,
        "goals": GOALS,
        "agent_activity": ACTIVITY,
    }


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def source():
    """In-memory record source seeded with the sample collections."""
    return InMemoryRecordSource(sample_collections())


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def test_settings():
    return Settings(_env_file=None)


@pytest.fixture
def calculator(source, test_settings):
    """Calculator with "now" pinned to 2026-03-10 12:00 UTC."""
    return AnalyticsCalculator(source, config=test_settings, clock=lambda: NOW)


@pytest.fixture
def client(source, calculator):
    app = create_app(source)
    app.dependency_overrides[get_calculator] = lambda: calculator
    with TestClient(app) as test_client:
        yield test_client
