import itertools
import random

import pytest

from liftlog.errors import ValidationError
from liftlog.schemas.profile import Constraint, Equipment, ExperienceLevel, FitnessGoal
from liftlog.services.catalog import default_catalog
from liftlog.services.generator import generate, sample_exercises, volume_scheme


def profile(**overrides):
    base = {
        "goal": "build_muscle",
        "experience": "intermediate",
        "frequency": "3-4",
        "equipment": ["dumbbells", "barbells", "bodyweight"],
    }
    base.update(overrides)
    return base


def all_exercises(plan):
    return [ex for day in plan.days for ex in day.exercises]


def test_advanced_strength_high_frequency_is_push_pull_legs_push_pull():
    plan = generate(
        profile(goal="get_stronger", experience="advanced", frequency="5+", equipment=["barbells"]),
        "u1", rng=random.Random(1),
    )
    assert [d.label for d in plan.days] == [
        "Day 1: Push", "Day 2: Pull", "Day 3: Legs", "Day 4: Push", "Day 5: Pull",
    ]
    assert {ex.category for ex in plan.days[0].exercises} == {"push"}
    assert {ex.category for ex in plan.days[1].exercises} == {"pull"}
    assert {ex.category for ex in plan.days[2].exercises} == {"legs"}
    # days 4 and 5 repeat days 1 and 2
    assert plan.days[3].exercises == plan.days[0].exercises
    assert plan.days[4].exercises == plan.days[1].exercises
    for ex in all_exercises(plan):
        assert (ex.sets, ex.reps, ex.rest) == (5, "3-5", 180)
    assert plan.name == "GET STRONGER Plan"
    assert plan.current_week == 1
    assert plan.progression.weight_increment == 5


def test_knee_issues_with_bodyweight_only_never_prescribes_risky_legs():
    plan = generate(
        profile(equipment=["bodyweight"], constraints=["knee_issues"]), "u1", rng=random.Random(3)
    )
    names = {ex.name for ex in all_exercises(plan)}
    assert "Lunges" not in names
    assert "Barbell Squats" not in names
    assert "Jump Rope" not in names
    for ex in all_exercises(plan):
        entry = default_catalog.get(ex.name)
        assert "bodyweight" in entry.equipment
        assert "knee_issues" not in entry.avoid


def test_every_prescribed_exercise_is_eligible():
    for size in (1, 2):
        for equipment in itertools.combinations([e.value for e in Equipment], size):
            for constraint in [None, *Constraint]:
                constraints = [constraint.value] if constraint else []
                plan = generate(
                    profile(frequency="5+", equipment=list(equipment), constraints=constraints),
                    "u1", rng=random.Random(0),
                )
                assert len(plan.days) == 5
                for ex in all_exercises(plan):
                    assert default_catalog.get(ex.name).is_eligible(equipment, constraints)


def test_no_repeated_exercise_within_a_day():
    plan = generate(profile(frequency="5+"), "u1", rng=random.Random(11))
    for day in plan.days:
        names = [ex.name for ex in day.exercises]
        assert len(names) == len(set(names))


def test_short_pool_is_returned_whole():
    picked = sample_exercises(
        default_catalog, "push", 10, {"bodyweight"}, set(), random.Random(0)
    )
    assert [e.name for e in picked] == ["Push-ups", "Tricep Dips"]


def test_sampling_respects_count_without_duplicates():
    picked = sample_exercises(
        default_catalog, "push", 3, {"dumbbells", "barbells", "bodyweight"}, set(), random.Random(5)
    )
    assert len(picked) == 3
    assert len({e.name for e in picked}) == 3


def test_same_seed_same_plan():
    a = generate(profile(frequency="2-3"), "u1", rng=random.Random(42))
    b = generate(profile(frequency="2-3"), "u1", rng=random.Random(42))
    assert [d.model_dump() for d in a.days] == [d.model_dump() for d in b.days]


def test_day_duration_follows_session_length():
    plan = generate(profile(session_length=60), "u1", rng=random.Random(0))
    assert {d.duration for d in plan.days} == {60}


def test_lose_fat_gets_cardio_finisher():
    plan = generate(
        profile(goal="lose_fat", equipment=["dumbbells", "cardio_machines"]), "u1", rng=random.Random(2)
    )
    for day in plan.days:
        last = day.exercises[-1]
        assert last.category == "cardio"
        assert last.notes == "Finisher"
        assert last.duration is not None and last.reps is None
        assert last.rest == 60


def test_cardio_first_puts_cardio_at_the_start():
    plan = generate(
        profile(equipment=["cardio_machines"], constraints=["cardio_first"]), "u1", rng=random.Random(0)
    )
    # only cardio is eligible, so each day is a single cardio block
    assert plan.days
    for day in plan.days:
        assert [ex.category for ex in day.exercises] == ["cardio"]


def test_no_eligible_exercises_keeps_the_split():
    plan = generate(profile(equipment=["cardio_machines"]), "u1", rng=random.Random(0))
    assert [d.label for d in plan.days] == [
        "Day 1: Upper Body A", "Day 2: Lower Body A", "Day 3: Upper Body B", "Day 4: Lower Body B",
    ]
    assert all(d.exercises == [] for d in plan.days)


def test_missing_category_leaves_that_day_empty():
    plan = generate(profile(frequency="5+", equipment=["machines"]), "u1", rng=random.Random(0))
    assert [d.label for d in plan.days] == [
        "Day 1: Push", "Day 2: Pull", "Day 3: Legs", "Day 4: Push", "Day 5: Pull",
    ]
    # no push exercise uses machines
    assert plan.days[0].exercises == [] and plan.days[3].exercises == []
    assert {ex.name for ex in plan.days[1].exercises} == {"Lat Pulldown", "Face Pulls"}
    assert plan.days[4].exercises == plan.days[1].exercises
    assert {ex.category for ex in plan.days[2].exercises} == {"legs", "core"}


@pytest.mark.parametrize("bad", [
    {"goal": "fly"},
    {"frequency": "7"},
    {"equipment": []},
    {"secondary_objectives": ["improve_endurance", "improve_mobility", "look_leaner"]},
])
def test_invalid_profile_raises_validation_error(bad):
    with pytest.raises(ValidationError):
        generate(profile(**bad), "u1")


@pytest.mark.parametrize("goal,experience,expected", [
    (FitnessGoal.get_stronger, ExperienceLevel.advanced, (5, "3-5", 180)),
    (FitnessGoal.get_stronger, ExperienceLevel.beginner, (4, "5-8", 120)),
    (FitnessGoal.build_muscle, ExperienceLevel.beginner, (3, "10-12", 90)),
    (FitnessGoal.build_muscle, ExperienceLevel.advanced, (4, "8-12", 90)),
    (FitnessGoal.lose_fat, ExperienceLevel.intermediate, (3, "12-15", 60)),
    (FitnessGoal.maintain, ExperienceLevel.intermediate, (3, "10-12", 75)),
])
def test_volume_table(goal, experience, expected):
    scheme = volume_scheme(goal, experience)
    assert (scheme.sets, scheme.reps, scheme.rest) == expected
