"""
Afgeleide statistieken voor het tonen van een opgeslagen training.

Werkt op alles met de attributen van Workout/WorkoutSet, dus ook op
niet-opgeslagen modelobjecten in tests.
"""
from dataclasses import dataclass, field
from typing import Optional

from app.utils import as_utc, round_half_up


@dataclass
class ExerciseSetGroup:
    exercise_id: int
    exercise_name: str
    sets: list = field(default_factory=list)

    def to_dict(self):
        return {
            'exercise_id': self.exercise_id,
            'exercise_name': self.exercise_name,
            'sets': [
                dict(workout_set.to_dict(),
                     volume=set_volume(workout_set),
                     rest_display=format_rest_time(workout_set.rest_time))
                for workout_set in self.sets
            ],
        }


@dataclass
class WorkoutSummary:
    total_sets: int
    total_volume: float
    duration_seconds: Optional[int]
    groups: list

    def to_dict(self):
        return {
            'total_sets': self.total_sets,
            'total_volume': self.total_volume,
            'duration_seconds': self.duration_seconds,
            'duration_display': format_duration(self.duration_seconds),
            'exercises': [group.to_dict() for group in self.groups],
        }


def set_volume(workout_set):
    # Sets zonder gewicht tellen als 0
    if workout_set.weight is None:
        return 0
    return float(workout_set.weight) * workout_set.reps


def total_volume(sets):
    return sum(set_volume(workout_set) for workout_set in sets)


def display_duration(workout):
    """
    Bepaal de duur (seconden) om te tonen.

    Notities:
        - Opgeslagen duur heeft voorrang.
        - Anders herberekend uit completed_at - started_at, alleen als het einde niet voor het begin ligt.
        - Anders None ('niet beschikbaar').
    """
    if workout.duration is not None:
        return workout.duration
    if workout.completed_at is not None and workout.started_at is not None:
        started_at = as_utc(workout.started_at)
        completed_at = as_utc(workout.completed_at)
        if completed_at >= started_at:
            return round_half_up((completed_at - started_at).total_seconds())
    return None


def group_sets_by_exercise(sets):
    #    Groepeer per exercise_id in volgorde van eerste voorkomen, binnen de groep gesorteerd op set_number.
    groups = {}
    for workout_set in sets:
        group = groups.get(workout_set.exercise_id)
        if group is None:
            group = ExerciseSetGroup(workout_set.exercise_id, workout_set.exercise_name)
            groups[workout_set.exercise_id] = group
        group.sets.append(workout_set)
    for group in groups.values():
        group.sets.sort(key=lambda workout_set: workout_set.set_number)
    return list(groups.values())


def summarize_workout(workout):
    sets = list(workout.sets or [])
    return WorkoutSummary(
        total_sets=len(sets),
        total_volume=total_volume(sets),
        duration_seconds=display_duration(workout),
        groups=group_sets_by_exercise(sets),
    )


def format_duration(seconds):
    if seconds is None or seconds < 0:
        return 'N/A'
    hours = seconds // 3600
    minutes = (seconds % 3600) // 60
    remaining_seconds = seconds % 60
    if hours > 0:
        return f'{hours}h {minutes}m'
    if minutes > 0:
        return f'{minutes}m {remaining_seconds}s'
    return f'{remaining_seconds}s'


def format_rest_time(seconds):
    if seconds is None:
        return '—'
    if seconds < 60:
        return f'{seconds}s'
    minutes = seconds // 60
    remaining_seconds = seconds % 60
    return f'{minutes}m {remaining_seconds}s' if remaining_seconds > 0 else f'{minutes}m'


def workout_with_summary(workout):
    data = workout.to_dict()
    data['summary'] = summarize_workout(workout).to_dict()
    return data
