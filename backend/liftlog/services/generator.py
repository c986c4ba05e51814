"""
Program generator: turns a ProfileInput into a weekly schedule.

The only source of non-determinism is exercise sampling, which draws from the
``rng`` argument. Pass ``random.Random(seed)`` to get the same plan twice.
"""
from __future__ import annotations
import logging
import random
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Iterable, Mapping

import pydantic

from liftlog.errors import ValidationError
from liftlog.schemas.plan import GeneratedPlan, PlannedExercise, ProgressionRule, WorkoutDay
from liftlog.schemas.profile import (
    Constraint,
    ExperienceLevel,
    FitnessGoal,
    FrequencyBand,
    ProfileInput,
    SecondaryObjective,
)
from liftlog.services.catalog import CatalogAccessor, ExerciseEntry, default_catalog

logger = logging.getLogger(__name__)

STRENGTH_CATEGORIES = frozenset({"push", "pull", "legs"})
CONDITIONING_REST_SECONDS = 60
PROGRESSION_TRIGGER = (
    "Complete all sets with correct form for 2 consecutive sessions of the same workout day"
)


@dataclass(frozen=True, slots=True)
class VolumeScheme:
    sets: int
    reps: str
    rest: int   # seconds


@dataclass(frozen=True, slots=True)
class DayTemplate:
    label: str
    focus: str
    slots: tuple[tuple[str, int], ...]   # (category, how many exercises)


SPLITS: dict[FrequencyBand, tuple[DayTemplate, ...]] = {
    FrequencyBand.low: (
        DayTemplate("Day 1: Full Body A", "Compound Movements",
                    (("push", 2), ("pull", 2), ("legs", 1), ("core", 1))),
        DayTemplate("Day 2: Full Body B", "Leg Emphasis & Accessory Work",
                    (("legs", 2), ("push", 1), ("pull", 1), ("core", 1))),
    ),
    FrequencyBand.mid: (
        DayTemplate("Day 1: Upper Body A", "Push Emphasis", (("push", 3), ("pull", 2))),
        DayTemplate("Day 2: Lower Body A", "Squat Emphasis", (("legs", 4), ("core", 2))),
        DayTemplate("Day 3: Upper Body B", "Pull Emphasis", (("pull", 3), ("push", 2))),
        DayTemplate("Day 4: Lower Body B", "Hinge Emphasis", (("legs", 4), ("core", 2))),
    ),
    FrequencyBand.high: (
        DayTemplate("Day 1: Push", "Chest, Shoulders, Triceps", (("push", 6),)),
        DayTemplate("Day 2: Pull", "Back, Biceps", (("pull", 6),)),
        DayTemplate("Day 3: Legs", "Quads, Hamstrings, Glutes", (("legs", 5), ("core", 2))),
    ),
}

# Push/Pull/Legs/Push/Pull: days 4 and 5 repeat days 1 and 2.
HIGH_BAND_REPEATS = ((0, "Day 4: Push"), (1, "Day 5: Pull"))


def volume_scheme(goal: FitnessGoal, experience: ExperienceLevel) -> VolumeScheme:
    """Sets, rep range and rest for strength slots."""
    if goal == FitnessGoal.get_stronger:
        if experience == ExperienceLevel.advanced:
            return VolumeScheme(5, "3-5", 180)
        return VolumeScheme(4, "5-8", 120)
    if goal == FitnessGoal.build_muscle:
        if experience == ExperienceLevel.beginner:
            return VolumeScheme(3, "10-12", 90)
        return VolumeScheme(4, "8-12", 90)
    if goal in (FitnessGoal.lose_fat, FitnessGoal.recomp):
        return VolumeScheme(3, "12-15", 60)
    return VolumeScheme(3, "10-12", 75)


def progression_rule(experience: ExperienceLevel) -> ProgressionRule:
    return ProgressionRule(
        weight_increment=2.5 if experience == ExperienceLevel.beginner else 5,
        rep_increment=1,
        trigger=PROGRESSION_TRIGGER,
    )


def coerce_profile(profile: ProfileInput | Mapping[str, Any]) -> ProfileInput:
    if isinstance(profile, ProfileInput):
        return profile
    try:
        return ProfileInput.model_validate(profile)
    except pydantic.ValidationError as e:
        raise ValidationError(f"invalid profile: {e}") from e


def sample_exercises(
    catalog: CatalogAccessor,
    category: str,
    count: int,
    equipment: Iterable[str],
    avoid: Iterable[str],
    rng: random.Random,
    exclude: Iterable[str] = (),
) -> list[ExerciseEntry]:
    """
    Draw `count` eligible entries of `category` without replacement.
    A short pool is returned whole (in catalog order), never padded.
    """
    equipment, avoid, exclude = set(equipment), set(avoid), set(exclude)
    pool = [
        e for e in catalog.lookup(category, equipment, avoid)
        if e.is_eligible(equipment, avoid) and e.name not in exclude
    ]
    if count >= len(pool):
        return pool
    return rng.sample(pool, count)


def plan_exercise(entry: ExerciseEntry, scheme: VolumeScheme, notes: str | None = None) -> PlannedExercise:
    if entry.category in STRENGTH_CATEGORIES:
        return PlannedExercise(
            name=entry.name, category=entry.category,
            sets=scheme.sets, reps=scheme.reps, rest=scheme.rest, notes=notes,
        )
    if entry.duration is not None:
        return PlannedExercise(
            name=entry.name, category=entry.category,
            sets=entry.sets, duration=entry.duration, rest=CONDITIONING_REST_SECONDS, notes=notes,
        )
    return PlannedExercise(
        name=entry.name, category=entry.category,
        sets=entry.sets, reps=entry.reps or scheme.reps, rest=CONDITIONING_REST_SECONDS, notes=notes,
    )


def _day_slots(template: DayTemplate, profile: ProfileInput) -> list[tuple[str, int, str | None]]:
    slots = [(category, count, None) for category, count in template.slots]
    if Constraint.cardio_first in profile.constraints:
        slots.insert(0, ("cardio", 1, "Start the session with this"))
    elif (profile.goal == FitnessGoal.lose_fat
          or SecondaryObjective.improve_endurance in profile.secondary_objectives):
        slots.append(("cardio", 1, "Finisher"))
    return slots


def build_day(
    template: DayTemplate,
    profile: ProfileInput,
    catalog: CatalogAccessor,
    rng: random.Random,
    scheme: VolumeScheme,
) -> WorkoutDay:
    equipment, avoid = profile.equipment_values(), profile.constraint_values()
    exercises: list[PlannedExercise] = []
    used: set[str] = set()
    for category, count, notes in _day_slots(template, profile):
        picked = sample_exercises(catalog, category, count, equipment, avoid, rng, exclude=used)
        if len(picked) < count:
            logger.info("%s: only %d of %d %s exercises eligible", template.label, len(picked), count, category)
        used.update(e.name for e in picked)
        exercises.extend(plan_exercise(e, scheme, notes) for e in picked)
    if not exercises:
        logger.warning("%s has no eligible exercises", template.label)
    return WorkoutDay(
        label=template.label,
        focus=template.focus,
        duration=int(profile.session_length.value),
        exercises=exercises,
    )


def generate(
    profile: ProfileInput | Mapping[str, Any],
    owner_id: str,
    *,
    catalog: CatalogAccessor = default_catalog,
    rng: random.Random | None = None,
    now: datetime | None = None,
) -> GeneratedPlan:
    """
    Build the weekly plan. Only a malformed profile raises; thin equipment
    or strict constraints give underfilled (possibly empty) days, and the
    split keeps its shape.
    """
    profile = coerce_profile(profile)
    rng = rng or random.Random()
    scheme = volume_scheme(profile.goal, profile.experience)

    days = [build_day(t, profile, catalog, rng, scheme) for t in SPLITS[profile.frequency]]
    if profile.frequency == FrequencyBand.high:
        for index, label in HIGH_BAND_REPEATS:
            days.append(days[index].model_copy(update={"label": label}, deep=True))

    if not any(day.exercises for day in days):
        logger.warning("no eligible exercises for owner %s; plan has only empty days", owner_id)

    return GeneratedPlan(
        id=str(uuid.uuid4()),
        owner_id=owner_id,
        name=f"{profile.goal.value.replace('_', ' ').upper()} Plan",
        description=(
            f"Personalized {profile.frequency.value} day/week "
            f"{profile.experience.value} program"
        ),
        days=days,
        current_week=1,
        started_at=now or datetime.now(timezone.utc),
        progression=progression_rule(profile.experience),
        profile=profile,
    )
