from pydantic import BaseModel

class ExerciseEntryRead(BaseModel):
    name: str
    category: str
    equipment: list[str]
    avoid: list[str]
    sets: int
    reps: str | None = None
    duration: float | None = None

    @classmethod
    def from_entry(cls, entry) -> "ExerciseEntryRead":
        return cls(
            name=entry.name,
            category=entry.category,
            equipment=sorted(entry.equipment),
            avoid=sorted(entry.avoid),
            sets=entry.sets,
            reps=entry.reps,
            duration=entry.duration,
        )
