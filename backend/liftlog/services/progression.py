from __future__ import annotations
import re
from typing import Callable, Iterable

from liftlog.models import Workout, WorkoutSet
from liftlog.schemas.plan import GeneratedPlan, PlannedExercise, ProgressionRule, ProgressionSuggestion
from liftlog.services.generator import STRENGTH_CATEGORIES

_RANGE = re.compile(r"^\s*(\d+)\s*(?:-\s*(\d+))?")


def rep_bounds(reps: str | None) -> tuple[int, int] | None:
    """Parse a rep target: '8-12' -> (8, 12), '12 each' -> (12, 12), timed '30-60s' -> None."""
    if not reps or reps.strip().endswith("s"):
        return None
    m = _RANGE.match(reps)
    if not m:
        return None
    low = int(m.group(1))
    high = int(m.group(2)) if m.group(2) else low
    return low, high


def _sets_for(workout: Workout, name: str) -> list[WorkoutSet]:
    return [s for ex in workout.exercises if ex.name.lower() == name.lower() for s in ex.sets]


def suggest_for_exercise(
    planned: PlannedExercise, recent: list[Workout], rule: ProgressionRule
) -> ProgressionSuggestion | None:
    bounds = rep_bounds(planned.reps)
    if bounds is None or len(recent) < 2:
        return None
    sessions = [_sets_for(w, planned.name) for w in recent[:2]]
    if any(len(sets) < planned.sets for sets in sessions):
        return None

    top = bounds[1]
    latest = sessions[0]
    weight = max(s.weight for s in latest)
    reps = min(s.reps for s in latest)
    if all(s.reps >= top for sets in sessions for s in sets):
        return ProgressionSuggestion(
            exercise_name=planned.name,
            current_weight=weight,
            current_reps=reps,
            suggestion=f"Increase weight to {weight + rule.weight_increment:g}",
            reason=f"Hit {top} reps on every set for 2 consecutive sessions",
        )
    return ProgressionSuggestion(
        exercise_name=planned.name,
        current_weight=weight,
        current_reps=reps,
        suggestion=f"Aim for {reps + rule.rep_increment} reps per set at {weight:g}",
        reason=f"Completed all {planned.sets} sets for 2 consecutive sessions",
    )


def suggest(
    plan: GeneratedPlan, recent_workouts: Callable[[str], list[Workout]]
) -> list[ProgressionSuggestion]:
    """`recent_workouts(name)` returns the newest workouts containing that exercise."""
    seen: set[str] = set()
    out: list[ProgressionSuggestion] = []
    for planned in _strength_exercises(plan.days):
        if planned.name in seen:
            continue
        seen.add(planned.name)
        suggestion = suggest_for_exercise(planned, recent_workouts(planned.name), plan.progression)
        if suggestion:
            out.append(suggestion)
    return out


def _strength_exercises(days: Iterable) -> Iterable[PlannedExercise]:
    for day in days:
        for planned in day.exercises:
            if planned.category in STRENGTH_CATEGORIES:
                yield planned
