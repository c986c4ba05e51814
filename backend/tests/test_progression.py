from types import SimpleNamespace

import pytest

from liftlog.schemas.plan import PlannedExercise, ProgressionRule
from liftlog.services.progression import rep_bounds, suggest_for_exercise

RULE = ProgressionRule(weight_increment=5, rep_increment=1, trigger="2 sessions")
BENCH = PlannedExercise(name="Bench Press", category="push", sets=3, reps="8-12", rest=90)


def workout(name, *sets):
    return SimpleNamespace(exercises=[SimpleNamespace(
        name=name, sets=[SimpleNamespace(weight=w, reps=r) for w, r in sets],
    )])


@pytest.mark.parametrize("reps,expected", [
    ("8-12", (8, 12)),
    ("3-5", (3, 5)),
    ("12 each", (12, 12)),
    ("20 total", (20, 20)),
    ("30-60s", None),
    (None, None),
])
def test_rep_bounds(reps, expected):
    assert rep_bounds(reps) == expected


def test_top_of_range_twice_means_more_weight():
    recent = [workout("Bench Press", (60, 12), (60, 12), (60, 12))] * 2
    s = suggest_for_exercise(BENCH, recent, RULE)
    assert s.suggestion == "Increase weight to 65"
    assert s.current_weight == 60


def test_inside_range_means_more_reps():
    recent = [
        workout("bench press", (60, 10), (60, 9), (60, 9)),
        workout("Bench Press", (60, 9), (60, 9), (60, 8)),
    ]
    s = suggest_for_exercise(BENCH, recent, RULE)
    assert s.suggestion == "Aim for 10 reps per set at 60"
    assert s.current_reps == 9


def test_no_suggestion_without_two_full_sessions():
    full = workout("Bench Press", (60, 12), (60, 12), (60, 12))
    short = workout("Bench Press", (60, 12))
    assert suggest_for_exercise(BENCH, [full], RULE) is None
    assert suggest_for_exercise(BENCH, [full, short], RULE) is None
