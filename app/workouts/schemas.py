from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from app.utils import as_utc, isoformat_utc


def completes_before_start(started_at, completed_at):
    #    Gedeelde controle: een einde mag nooit voor het begin liggen.
    return completed_at is not None and as_utc(completed_at) < as_utc(started_at)


@dataclass(frozen=True)
class WorkoutSetPayload:
    """
    Een gevalideerde set in de aanmaak-payload van een training.
    Notities:
        - set_number is 1-gebaseerd per oefening.
        - reps en rest_time zijn gehele getallen; weight is niet afgerond.
    """
    exercise_id: int
    exercise_name: str
    set_number: int
    reps: int
    technique: str
    weight: Optional[float] = None
    rest_time: Optional[int] = None

    def to_dict(self):
        return {
            'exercise_id': self.exercise_id,
            'exercise_name': self.exercise_name,
            'set_number': self.set_number,
            'weight': self.weight,
            'reps': self.reps,
            'technique': self.technique,
            'rest_time': self.rest_time,
        }


@dataclass(frozen=True)
class CreateWorkoutRequest:
    """
    Canonieke payload voor het aanmaken van een training.

    Notities:
        - Tijdstippen zijn tijdzone-bewust (UTC); to_dict geeft ISO-8601 met offset.
        - Wordt gevuld door het trainingslog (app.workout_log) of door POST /api/workouts.
    """
    routine_id: int
    routine_name: str
    started_at: datetime
    sets: tuple
    completed_at: Optional[datetime] = None
    duration: Optional[int] = None
    notes: Optional[str] = None

    @property
    def total_sets(self):
        return len(self.sets)

    def to_dict(self):
        return {
            'routine_id': self.routine_id,
            'routine_name': self.routine_name,
            'started_at': isoformat_utc(self.started_at),
            'completed_at': isoformat_utc(self.completed_at),
            'duration': self.duration,
            'notes': self.notes,
            'sets': [workout_set.to_dict() for workout_set in self.sets],
        }

    @classmethod
    def from_forms(cls, form, set_forms):
        #    Bouw de payload uit een gevalideerd WorkoutForm en de bijbehorende set-formulieren.
        notes = (form.notes.data or '').strip()
        return cls(
            routine_id=form.routine_id.data,
            routine_name=form.routine_name.data.strip(),
            started_at=form.started_at.data,
            completed_at=form.completed_at.data,
            duration=form.duration.data,
            notes=notes or None,
            sets=tuple(
                WorkoutSetPayload(
                    exercise_id=set_form.exercise_id.data,
                    exercise_name=set_form.exercise_name.data.strip(),
                    set_number=set_form.set_number.data,
                    weight=set_form.weight.data,
                    reps=set_form.reps.data,
                    technique=set_form.technique.data,
                    rest_time=set_form.rest_time.data,
                )
                for set_form in set_forms
            ),
        )
