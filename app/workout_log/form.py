"""
Het bewerkbare trainingslog dat uit een routine wordt opgebouwd.

Alle functies hier zijn puur: ze geven een nieuw formulier terug en laten
het oude ongemoeid. Het formulier leeft alleen in de sessie en wordt pas bij
het indienen omgezet naar een CreateWorkoutRequest (zie validation.py).
"""
from dataclasses import dataclass, field, replace
from typing import Optional

from app.models import Technique

SET_FIELDS = ('weight', 'reps', 'technique', 'rest_time')
SUMMARY_FIELDS = ('started_at', 'completed_at', 'duration_minutes', 'notes')
DEFAULT_REPS = 10


@dataclass(frozen=True)
class WorkoutSetForm:
    # Alle invoer als tekst, zoals de gebruiker hem intypt
    weight: str = ''
    reps: str = str(DEFAULT_REPS)
    technique: str = Technique.NORMAL.value
    rest_time: str = ''

    def to_dict(self):
        return {
            'weight': self.weight,
            'reps': self.reps,
            'technique': self.technique,
            'rest_time': self.rest_time,
        }

    @classmethod
    def from_dict(cls, data):
        return cls(**{name: str(data.get(name, getattr(cls, name))) for name in SET_FIELDS})


@dataclass(frozen=True)
class ExerciseWorkoutForm:
    """
    Eén oefening in het log.
    Notities:
        - defaults bevat de startwaarden uit de routine; gebruikt als een nieuwe set geen vorige set heeft.
        - Setnummers worden niet opgeslagen; ze volgen uit de positie bij het indienen.
    """
    exercise_id: int
    exercise_name: str
    sets: tuple = ()
    defaults: WorkoutSetForm = field(default_factory=WorkoutSetForm)
    target_range: Optional[str] = None

    def to_dict(self):
        return {
            'exercise_id': self.exercise_id,
            'exercise_name': self.exercise_name,
            'target_range': self.target_range,
            'defaults': self.defaults.to_dict(),
            'sets': [set_form.to_dict() for set_form in self.sets],
        }

    @classmethod
    def from_dict(cls, data):
        return cls(
            exercise_id=data['exercise_id'],
            exercise_name=data['exercise_name'],
            target_range=data.get('target_range'),
            defaults=WorkoutSetForm.from_dict(data.get('defaults') or {}),
            sets=tuple(WorkoutSetForm.from_dict(set_data) for set_data in data.get('sets') or []),
        )


@dataclass(frozen=True)
class WorkoutLogForm:
    routine_id: Optional[int]
    routine_name: str = ''
    exercises: tuple = ()
    started_at: str = ''
    mark_completed: bool = False
    completed_at: str = ''
    duration_minutes: str = ''
    notes: str = ''

    def to_dict(self):
        return {
            'routine_id': self.routine_id,
            'routine_name': self.routine_name,
            'exercises': [exercise.to_dict() for exercise in self.exercises],
            'started_at': self.started_at,
            'mark_completed': self.mark_completed,
            'completed_at': self.completed_at,
            'duration_minutes': self.duration_minutes,
            'notes': self.notes,
        }

    @classmethod
    def from_dict(cls, data):
        return cls(
            routine_id=data.get('routine_id'),
            routine_name=data.get('routine_name') or '',
            exercises=tuple(ExerciseWorkoutForm.from_dict(item) for item in data.get('exercises') or []),
            started_at=data.get('started_at') or '',
            mark_completed=bool(data.get('mark_completed')),
            completed_at=data.get('completed_at') or '',
            duration_minutes=data.get('duration_minutes') or '',
            notes=data.get('notes') or '',
        )


def target_range_label(rep_range_min, rep_range_max):
    #    Leesbaar doelbereik op basis van de rep-range grenzen; None zonder grenzen.
    if rep_range_min is not None and rep_range_max is not None:
        if rep_range_min == rep_range_max:
            return f'{rep_range_min} repeticiones'
        return f'{rep_range_min}-{rep_range_max} repeticiones'
    if rep_range_min is not None:
        return f'≥ {rep_range_min} repeticiones'
    if rep_range_max is not None:
        return f'≤ {rep_range_max} repeticiones'
    return None


def default_set(routine_exercise):
    if routine_exercise.rep_range_min is not None:
        reps = routine_exercise.rep_range_min
    elif routine_exercise.rep_range_max is not None:
        reps = routine_exercise.rep_range_max
    else:
        reps = DEFAULT_REPS
    rest_time = routine_exercise.rest_time
    return WorkoutSetForm(
        weight='',
        reps=str(reps),
        technique=routine_exercise.technique,
        rest_time=str(rest_time) if rest_time is not None else '',
    )


def materialize_log_form(routine, started_at=''):
    """
    Bouw het bewerkbare log uit een routine.

    Notities:
        - Eén ExerciseWorkoutForm per RoutineExercise, in de volgorde van de routine.
        - Precies 'sets' sets per oefening, allemaal gelijk aan de routine-standaard.
        - started_at komt van de aanroeper zodat de afbeelding deterministisch blijft.
    """
    exercises = []
    for routine_exercise in routine.exercises:
        defaults = default_set(routine_exercise)
        exercises.append(ExerciseWorkoutForm(
            exercise_id=routine_exercise.exercise_id,
            exercise_name=routine_exercise.exercise_name,
            target_range=target_range_label(routine_exercise.rep_range_min, routine_exercise.rep_range_max),
            defaults=defaults,
            sets=tuple(defaults for _ in range(routine_exercise.sets)),
        ))
    return WorkoutLogForm(
        routine_id=routine.id,
        routine_name=routine.name,
        exercises=tuple(exercises),
        started_at=started_at,
    )


def total_sets(form):
    return sum(len(exercise.sets) for exercise in form.exercises)


def _replace_exercise(form, exercise_index, exercise):
    exercises = list(form.exercises)
    exercises[exercise_index] = exercise
    return replace(form, exercises=tuple(exercises))


def _in_range(index, items):
    return 0 <= index < len(items)


def edit_set_field(form, exercise_index, set_index, field_name, value):
    """
    Vervang één veld van één set.

    Notities:
        - Indexen buiten bereik zijn een no-op.
    Raises:
        ValueError: Bij een onbekend veld of een onbekende techniek.
    """
    if field_name not in SET_FIELDS:
        raise ValueError(f'Campo desconocido: {field_name}')
    if field_name == 'technique':
        if value not in Technique.values():
            raise ValueError(f'Técnica no válida: {value}')
    else:
        value = '' if value is None else str(value)

    if not _in_range(exercise_index, form.exercises):
        return form
    exercise = form.exercises[exercise_index]
    if not _in_range(set_index, exercise.sets):
        return form

    sets = list(exercise.sets)
    sets[set_index] = replace(sets[set_index], **{field_name: value})
    return _replace_exercise(form, exercise_index, replace(exercise, sets=tuple(sets)))


def add_set(form, exercise_index):
    #    Voeg achteraan een set toe die reps/techniek/rust van de laatste set overneemt; gewicht begint leeg.
    if not _in_range(exercise_index, form.exercises):
        return form
    exercise = form.exercises[exercise_index]
    template = exercise.sets[-1] if exercise.sets else exercise.defaults
    new_set = replace(template, weight='')
    return _replace_exercise(form, exercise_index, replace(exercise, sets=exercise.sets + (new_set,)))


def remove_set(form, exercise_index, set_index):
    #    Verwijder een set; de laatste overgebleven set blijft altijd staan.
    if not _in_range(exercise_index, form.exercises):
        return form
    exercise = form.exercises[exercise_index]
    if len(exercise.sets) <= 1 or not _in_range(set_index, exercise.sets):
        return form
    sets = exercise.sets[:set_index] + exercise.sets[set_index + 1:]
    return _replace_exercise(form, exercise_index, replace(exercise, sets=sets))


def set_mark_completed(form, checked, now_local):
    # Aanvinken vult het einde met 'nu' als het leeg is; uitvinken wist het
    if checked:
        return replace(form, mark_completed=True, completed_at=form.completed_at or now_local)
    return replace(form, mark_completed=False, completed_at='')


def update_summary(form, **fields):
    unknown = set(fields) - set(SUMMARY_FIELDS)
    if unknown:
        raise ValueError(f'Campo desconocido: {", ".join(sorted(unknown))}')
    return replace(form, **{name: '' if value is None else str(value) for name, value in fields.items()})
