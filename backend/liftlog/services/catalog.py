from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, Protocol

CATEGORIES = ("push", "pull", "legs", "core", "cardio")


@dataclass(frozen=True, slots=True)
class ExerciseEntry:
    name: str
    category: str
    equipment: frozenset[str]
    avoid: frozenset[str] = frozenset()
    sets: int = 3
    reps: str | None = None
    duration: float | None = None   # minutes, for timed/cardio entries

    def is_eligible(self, equipment: Iterable[str], avoid: Iterable[str]) -> bool:
        """True if the user owns some required equipment and no constraint rules it out."""
        return bool(self.equipment & set(equipment)) and not (self.avoid & set(avoid))


class CatalogAccessor(Protocol):
    def lookup(self, category: str, equipment: Iterable[str], avoid: Iterable[str]) -> list[ExerciseEntry]:
        ...


def _e(name, category, equipment, avoid=(), sets=3, reps=None, duration=None) -> ExerciseEntry:
    return ExerciseEntry(name, category, frozenset(equipment), frozenset(avoid), sets, reps, duration)


DEFAULT_LIBRARY: tuple[ExerciseEntry, ...] = (
    # Upper body - push
    _e("Barbell Bench Press", "push", ["barbells"], ["shoulder_issues"], 4, "8-10"),
    _e("Dumbbell Press", "push", ["dumbbells"], ["shoulder_issues"], 4, "10-12"),
    _e("Push-ups", "push", ["bodyweight"], [], 3, "12-15"),
    _e("Overhead Press", "push", ["barbells", "dumbbells"], ["shoulder_issues"], 3, "8-10"),
    _e("Dumbbell Flyes", "push", ["dumbbells"], ["shoulder_issues"], 3, "12-15"),
    _e("Tricep Dips", "push", ["bodyweight"], ["shoulder_issues"], 3, "10-12"),
    # Upper body - pull
    _e("Pull-ups", "pull", ["bodyweight"], ["shoulder_issues"], 4, "6-10"),
    _e("Barbell Rows", "pull", ["barbells"], ["back_issues"], 4, "8-10"),
    _e("Dumbbell Rows", "pull", ["dumbbells"], ["back_issues"], 4, "10-12"),
    _e("Lat Pulldown", "pull", ["machines"], [], 3, "10-12"),
    _e("Face Pulls", "pull", ["bands", "machines"], [], 3, "15-20"),
    _e("Bicep Curls", "pull", ["dumbbells", "barbells", "bands"], [], 3, "12-15"),
    # Lower body
    _e("Barbell Squats", "legs", ["barbells"], ["knee_issues"], 4, "8-10"),
    _e("Goblet Squats", "legs", ["dumbbells"], ["knee_issues"], 3, "12-15"),
    _e("Romanian Deadlift", "legs", ["barbells", "dumbbells"], ["back_issues"], 4, "10-12"),
    _e("Leg Press", "legs", ["machines"], [], 4, "10-12"),
    _e("Lunges", "legs", ["dumbbells", "bodyweight"], ["knee_issues"], 3, "12 each"),
    _e("Leg Curl", "legs", ["machines", "bands"], [], 3, "12-15"),
    _e("Calf Raises", "legs", ["dumbbells", "bodyweight", "machines"], [], 3, "15-20"),
    # Core
    _e("Plank", "core", ["bodyweight"], [], 3, "30-60s"),
    _e("Dead Bug", "core", ["bodyweight"], [], 3, "12 each"),
    _e("Russian Twists", "core", ["dumbbells", "bodyweight"], ["back_issues"], 3, "20 total"),
    _e("Hanging Leg Raise", "core", ["bodyweight"], [], 3, "10-15"),
    _e("Cable Crunches", "core", ["machines"], ["back_issues"], 3, "15-20"),
    # Cardio
    _e("Treadmill Run", "cardio", ["cardio_machines"], ["knee_issues"], 1, duration=20),
    _e("Cycling", "cardio", ["cardio_machines"], [], 1, duration=25),
    _e("Rowing", "cardio", ["cardio_machines"], ["back_issues"], 1, duration=15),
    _e("Jump Rope", "cardio", ["bodyweight"], ["knee_issues"], 3, duration=3),
)


class ExerciseCatalog:
    """Read-only, in-memory catalog. Lookups keep library order."""

    def __init__(self, entries: Iterable[ExerciseEntry] = DEFAULT_LIBRARY):
        self._entries = tuple(entries)

    def lookup(self, category: str, equipment: Iterable[str], avoid: Iterable[str] = ()) -> list[ExerciseEntry]:
        equipment, avoid = set(equipment), set(avoid)
        return [
            e for e in self._entries
            if e.category == category and e.is_eligible(equipment, avoid)
        ]

    def get(self, name: str) -> ExerciseEntry | None:
        for e in self._entries:
            if e.name.lower() == name.lower():
                return e
        return None

    def all(self) -> list[ExerciseEntry]:
        return list(self._entries)


default_catalog = ExerciseCatalog()
