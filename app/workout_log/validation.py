import logging

from app.utils import parse_datetime, parse_finite_number, round_half_up
from app.workouts.schemas import CreateWorkoutRequest, WorkoutSetPayload, completes_before_start

logger = logging.getLogger(__name__)

MESSAGES = {
    'routine_missing': 'No se pudo identificar la rutina seleccionada.',
    'started_at_missing': 'Selecciona la fecha y hora de inicio del entrenamiento.',
    'started_at_invalid': 'La fecha de inicio no es válida.',
    'no_exercises': 'La rutina no tiene ejercicios configurados.',
    'invalid_reps': 'Cada serie debe tener al menos 1 repetición.',
    'invalid_weight': 'El peso debe ser un número válido.',
    'invalid_rest_time': 'El tiempo de descanso debe ser un número válido.',
    'no_sets': 'Registra al menos una serie antes de guardar el entrenamiento.',
    'completed_at_invalid': 'La fecha de finalización no es válida.',
    'completed_before_start': 'La fecha de finalización no puede ser anterior al inicio.',
    'invalid_duration': 'La duración debe ser un número positivo en minutos.',
}


class WorkoutValidationError(ValueError):
    """
    Eerste mislukte controle bij het indienen van het trainingslog.
    Notities:
        - code identificeert de oorzaak; message is de melding voor de gebruiker.
        - exercise_index/set_index (0-gebaseerd) zijn alleen gevuld bij fouten in een set.
    """

    def __init__(self, code, message=None, exercise_index=None, set_index=None):
        self.code = code
        self.message = message or MESSAGES[code]
        self.exercise_index = exercise_index
        self.set_index = set_index
        super().__init__(self.message)

    def to_dict(self):
        data = {'code': self.code}
        if self.exercise_index is not None:
            data['exercise_index'] = self.exercise_index
            data['set_index'] = self.set_index
        return data


def _set_error(code, exercise, exercise_index, set_index):
    message = f'{exercise.exercise_name}, serie {set_index + 1}: {MESSAGES[code]}'
    return WorkoutValidationError(code, message, exercise_index, set_index)


def _optional_number(text):
    # Blanco of alleen spaties telt als 'niet ingevuld'; geeft (ingevuld, getal)
    if text is None or not str(text).strip():
        return False, None
    return True, parse_finite_number(text)


def flatten_sets(form):
    """
    Maak van alle oefeningen één geordende lijst sets.

    Notities:
        - set_number begint per oefening opnieuw bij 1.
        - reps en rust worden half-omhoog afgerond, gewicht niet.
    Raises:
        WorkoutValidationError: Bij de eerste ongeldige set.
    """
    sets = []
    for exercise_index, exercise in enumerate(form.exercises):
        for set_index, set_form in enumerate(exercise.sets):
            reps = parse_finite_number(set_form.reps)
            if reps is None or reps < 1:
                raise _set_error('invalid_reps', exercise, exercise_index, set_index)

            has_weight, weight = _optional_number(set_form.weight)
            if has_weight and weight is None:
                raise _set_error('invalid_weight', exercise, exercise_index, set_index)

            has_rest, rest_time = _optional_number(set_form.rest_time)
            if has_rest and rest_time is None:
                raise _set_error('invalid_rest_time', exercise, exercise_index, set_index)

            sets.append(WorkoutSetPayload(
                exercise_id=exercise.exercise_id,
                exercise_name=exercise.exercise_name,
                set_number=set_index + 1,
                reps=round_half_up(reps),
                technique=set_form.technique,
                weight=weight,
                rest_time=round_half_up(rest_time) if rest_time is not None else None,
            ))
    return sets


def resolve_completed_at(form, started_at, tz):
    if not form.mark_completed or not form.completed_at.strip():
        return None
    completed_at = parse_datetime(form.completed_at, tz)
    if completed_at is None:
        raise WorkoutValidationError('completed_at_invalid')
    if completes_before_start(started_at, completed_at):
        raise WorkoutValidationError('completed_before_start')
    return completed_at


def resolve_duration(form, started_at, completed_at):
    """
    Bepaal de duur in seconden.

    Notities:
        - Expliciete minuten hebben voorrang (x60, afgerond).
        - Anders het verschil tussen einde en begin, alleen als dat positief is.
    """
    if form.duration_minutes.strip():
        minutes = parse_finite_number(form.duration_minutes)
        if minutes is None or minutes <= 0:
            raise WorkoutValidationError('invalid_duration')
        seconds = round_half_up(minutes * 60)
        if seconds < 1:
            raise WorkoutValidationError('invalid_duration')
        return seconds
    if completed_at is not None:
        seconds = round_half_up((completed_at - started_at).total_seconds())
        if seconds > 0:
            return seconds
    return None


def build_workout_payload(form, tz):
    """
    Valideer het trainingslog en zet het om naar een CreateWorkoutRequest.

    Args:
        form: Het WorkoutLogForm uit de sessie, of None als er geen routine geladen is.
        tz: pytz-tijdzone waarin de lokale tijdstippen van het formulier gelezen worden.
    Raises:
        WorkoutValidationError: Bij de eerste mislukte controle; er wordt niets opgeslagen.
    """
    if form is None or form.routine_id is None:
        raise WorkoutValidationError('routine_missing')
    if not form.started_at.strip():
        raise WorkoutValidationError('started_at_missing')
    started_at = parse_datetime(form.started_at, tz)
    if started_at is None:
        raise WorkoutValidationError('started_at_invalid')
    if not form.exercises:
        raise WorkoutValidationError('no_exercises')

    sets = flatten_sets(form)
    if not sets:
        raise WorkoutValidationError('no_sets')

    completed_at = resolve_completed_at(form, started_at, tz)
    duration = resolve_duration(form, started_at, completed_at)
    notes = form.notes.strip()

    logger.debug(f"Trainingslog gevalideerd: routine={form.routine_id}, sets={len(sets)}, duur={duration}")
    return CreateWorkoutRequest(
        routine_id=form.routine_id,
        routine_name=form.routine_name,
        started_at=started_at,
        completed_at=completed_at,
        duration=duration,
        notes=notes or None,
        sets=tuple(sets),
    )
