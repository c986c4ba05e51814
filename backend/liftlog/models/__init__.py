from liftlog.models.workout import Workout, WorkoutExercise, WorkoutSet
from liftlog.models.aggregates import GamificationRecord, GamificationCommit, MonthlyGoal
from liftlog.models.plan import TrainingPlan
from liftlog.models.session_cache import SessionCache
from liftlog.models.body_weight import BodyWeightLog

__all__ = [
    "Workout",
    "WorkoutExercise",
    "WorkoutSet",
    "GamificationRecord",
    "GamificationCommit",
    "MonthlyGoal",
    "TrainingPlan",
    "SessionCache",
    "BodyWeightLog",
]
