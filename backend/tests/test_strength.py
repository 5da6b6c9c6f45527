"""
Tests for the strength metric engine.
"""
from datetime import date, datetime, timedelta, timezone

import pytest

from fitmetrics.models import WORKOUT, Event, Exercise, ExerciseSet, WorkoutPayload
from fitmetrics.services.analytics.metrics.strength import (
    check_rep_cap,
    compute_max_lifts,
    compute_pr_history,
    compute_top_exercises,
    compute_training_volume,
    estimate_one_rep_max,
    qualifies_for_max,
    summarize_workouts,
)

DAY_ONE = datetime(2024, 1, 1, 8, tzinfo=timezone.utc)


def workout(*exercises, day=0, name=None):
    """Build a workout event from (exercise name, [(weight, reps), ...]) pairs."""
    occurred_at = DAY_ONE + timedelta(days=day) if day is not None else None
    payload = WorkoutPayload(
        name=name,
        status="completed",
        exercises=tuple(
            Exercise(name=ex_name, sets=tuple(ExerciseSet(weight=w, reps=r) for w, r in sets))
            for ex_name, sets in exercises
        ),
    )
    return Event(owner_id="u1", occurred_at=occurred_at, kind=WORKOUT, payload=payload)


class TestEstimateOneRepMax:
    """e1RM formulas"""

    def test_epley(self):
        # 200 * (1 + 5/30) = 233.33
        assert estimate_one_rep_max(200, 5) == 233
        # 210 * (1 + 3/30) = 231
        assert estimate_one_rep_max(210, 3) == 231

    def test_brzycki(self):
        # 200 * 36 / 32 = 225
        assert estimate_one_rep_max(200, 5, formula="brzycki") == 225

    def test_unknown_formula(self):
        with pytest.raises(ValueError, match="Unknown e1RM formula"):
            estimate_one_rep_max(200, 5, formula="lombardi")

    def test_brzycki_rep_cap(self):
        check_rep_cap("brzycki", 36)
        with pytest.raises(ValueError, match="below 37"):
            check_rep_cap("brzycki", 37)
        with pytest.raises(ValueError):
            compute_max_lifts([], formula="brzycki", max_reps=40)
        with pytest.raises(ValueError):
            compute_pr_history([], max_reps=0)
        check_rep_cap("epley", 40)

    def test_qualifying_sets(self):
        assert qualifies_for_max(ExerciseSet(weight=100, reps=12))
        assert not qualifies_for_max(ExerciseSet(weight=100, reps=13))
        assert not qualifies_for_max(ExerciseSet(weight=0, reps=5))
        assert not qualifies_for_max(ExerciseSet(weight=100, reps=0))


class TestMaxLifts:
    """Best estimated 1RM per exercise"""

    def test_best_set_per_exercise(self):
        events = [
            workout(("Bench Press", [(200, 5), (210, 3)]), ("Squat", [(250, 5)])),
            workout(("Bench Press", [(185, 8)]), day=1),
        ]
        lifts = compute_max_lifts(events)
        assert [l.exercise for l in lifts] == ["Squat", "Bench Press"]
        bench = lifts[1]
        # 185 * (1 + 8/30) = 234.33 beats 200x5 (233)
        assert (bench.weight, bench.reps, bench.estimated_1rm) == (185, 8, 234)

    def test_high_rep_sets_ignored(self):
        events = [workout(("Bench Press", [(500, 13), (100, 5)]))]
        lifts = compute_max_lifts(events)
        assert lifts[0].weight == 100
        assert lifts[0].estimated_1rm == 117

    def test_only_high_rep_sets(self):
        assert compute_max_lifts([workout(("Curl", [(40, 15)]))]) == []

    def test_tie_keeps_first(self):
        # 120x10 and 150x2 both estimate 160
        tie = [workout(("Row", [(120, 10)])), workout(("Row", [(150, 2)]), day=1)]
        assert compute_max_lifts(tie)[0].weight == 120

    def test_to_dict(self):
        lift = compute_max_lifts([workout(("Deadlift", [(300, 5)]))])[0]
        assert lift.to_dict() == {
            "exercise": "Deadlift",
            "weight": 300,
            "reps": 5,
            "estimated1RM": 350,
        }


class TestPRHistory:
    """Strictly improving e1RM histories"""

    def test_running_max_in_chronological_order(self):
        events = [
            workout(("Bench Press", [(200, 5)]), day=0),
            workout(("Bench Press", [(210, 3)]), day=1),
        ]
        # 210x3 (231) does not beat 200x5 (233)
        assert len(compute_pr_history(events)["Bench Press"].history) == 1

    def test_reversed_chronology(self):
        events = [
            workout(("Bench Press", [(210, 3)]), day=0),
            workout(("Bench Press", [(200, 5)]), day=1),
        ]
        history = compute_pr_history(events)["Bench Press"].history
        assert [entry.estimated_1rm for entry in history] == [231, 233]

    def test_events_sorted_before_scanning(self):
        events = [
            workout(("Squat", [(300, 1)]), day=5),
            workout(("Squat", [(250, 1)]), day=0),
        ]
        history = compute_pr_history(events)["Squat"].history
        assert [entry.day for entry in history] == [date(2024, 1, 1), date(2024, 1, 6)]

    def test_equal_e1rm_is_not_a_pr(self):
        events = [
            workout(("Squat", [(300, 1)]), day=0),
            workout(("Squat", [(300, 1)]), day=1),
        ]
        assert len(compute_pr_history(events)["Squat"].history) == 1

    def test_reps_over_twelve_never_count(self):
        events = [workout(("Squat", [(1000, 13)]))]
        assert compute_pr_history(events) == {}

    def test_zero_estimate_leaves_no_history(self):
        # 0.4 x 1 estimates 0
        events = [workout(("Band Press", [(0.4, 1)]))]
        assert compute_pr_history(events) == {}

    def test_undated_events_skipped(self):
        events = [workout(("Squat", [(300, 1)]), day=None)]
        assert compute_pr_history(events) == {}

    def test_exercise_filter_is_case_insensitive(self):
        events = [workout(("Bench Press", [(200, 5)]), ("Squat", [(250, 5)]))]
        records = compute_pr_history(events, exercise="bench press")
        assert list(records) == ["Bench Press"]

    def test_record_to_dict(self):
        events = [
            workout(("Bench Press", [(180, 5)]), day=0),
            workout(("Bench Press", [(185, 8)]), day=3),
        ]
        record = compute_pr_history(events)["Bench Press"]
        assert record.to_dict() == {
            "currentPR": {"date": "2024-01-04", "weight": 185, "reps": 8, "e1rm": 234},
            "prCount": 2,
            "history": [
                {"date": "2024-01-01", "weight": 180, "reps": 5, "e1rm": 210},
                {"date": "2024-01-04", "weight": 185, "reps": 8, "e1rm": 234},
            ],
        }
        assert record.best_weight == 185
        assert record.best_reps == 8


class TestTrainingVolume:
    """Volume over loaded sets"""

    def test_totals(self):
        events = [
            workout(("Bench Press", [(200, 5), (0, 10)]), ("Plank", [(0, 0)])),
            workout(("Squat", [(250, 5), (100, 0)]), day=1),
        ]
        result = compute_training_volume(events, period_days=30)
        assert result.total_volume == 2250
        assert result.total_sets == 2
        assert result.total_reps == 10
        assert result.workout_count == 2
        assert result.avg_volume_per_workout == 1125

    def test_empty_period(self):
        result = compute_training_volume([], period_days=30)
        assert result.avg_volume_per_workout == 0
        assert result.to_dict()["totalVolume"] == 0


class TestTopExercises:
    """Exercise frequency ranking"""

    def test_ranked_by_sessions(self):
        events = [
            workout(("Bench Press", [(200, 5)]), ("Squat", [(250, 5)])),
            workout(("Squat", [(240, 5)]), day=1),
            workout(("Deadlift", [(300, 5)]), ("Squat", [(200, 10)]), day=2),
        ]
        result = compute_top_exercises(events, limit=2)
        assert result.total_exercises == 3
        assert [(e.name, e.sessions) for e in result.top_by_frequency] == [
            ("Squat", 3),
            ("Bench Press", 1),
        ]
        assert result.top_by_frequency[0].total_volume == 1250 + 1200 + 2000

    def test_invalid_limit(self):
        with pytest.raises(ValueError):
            compute_top_exercises([], limit=0)


class TestRecentWorkouts:

    def test_summary_shape(self):
        events = [workout(("Bench Press", [(200, 5), (210, 3)]), name="Push Day")]
        assert summarize_workouts(events).to_dict() == {
            "workoutCount": 1,
            "workouts": [{
                "name": "Push Day",
                "date": "2024-01-01",
                "exercises": [{"name": "Bench Press", "sets": 2}],
            }],
        }
