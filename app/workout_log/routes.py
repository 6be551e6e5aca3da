import logging
import time
from flask import request, session
from flask_login import login_required

from app.errors.handlers import error_response
from app.exceptions import NotFoundError, PayloadValidationError
from app.routines.service import get_routine
from app.utils import app_timezone, current_identity, local_now, success
from app.workout_log import bp
from app.workout_log.form import (WorkoutLogForm, add_set, edit_set_field, materialize_log_form, remove_set,
                                  set_mark_completed, total_sets, update_summary)
from app.workout_log.submission import WorkoutSubmissionError, submit_workout_log
from app.workout_log.timer import RestTimer, format_seconds
from app.workout_log.validation import WorkoutValidationError
from app.workouts.metrics import workout_with_summary

logger = logging.getLogger(__name__)

LOG_SESSION_KEY = 'workout_log'
LOG_OWNER_KEY = 'workout_log_user'
TIMER_SESSION_KEY = 'rest_timer'


def owns_log():
    # Een log van een andere gebruiker in dezelfde sessie telt als afwezig.
    return session.get(LOG_OWNER_KEY) == current_identity().user_id


def load_log_form():
    data = session.get(LOG_SESSION_KEY)
    if not data:
        return None
    if not owns_log():
        logger.debug(f"Trainingslog hoort bij gebruiker {session.get(LOG_OWNER_KEY)}, genegeerd")
        return None
    return WorkoutLogForm.from_dict(data)


def require_log_form():
    form = load_log_form()
    if form is None:
        raise NotFoundError('No hay ningún entrenamiento en curso.')
    return form


def save_log_form(form):
    session[LOG_SESSION_KEY] = form.to_dict()
    session[LOG_OWNER_KEY] = current_identity().user_id


def clear_log_form():
    session.pop(LOG_SESSION_KEY, None)
    session.pop(LOG_OWNER_KEY, None)
    session.pop(TIMER_SESSION_KEY, None)


def log_response(form, status=200):
    return success({'form': form.to_dict(), 'total_sets': total_sets(form)}, status)


def json_object():
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise PayloadValidationError('Solicitud no válida.')
    return payload


def timer_response(timer):
    elapsed = timer.elapsed(time.time())
    return success({'running': timer.running, 'elapsed': elapsed, 'display': format_seconds(elapsed)})


@bp.route('/start/<int:routine_id>', methods=['POST'])
@login_required
def start_log(routine_id):
    """
    Start een nieuw trainingslog voor een routine.
    Notities:
        - Een eventueel lopend log in de sessie wordt vervangen.
        - started_at krijgt het huidige lokale tijdstip (APP_TIMEZONE).
    """
    routine = get_routine(current_identity(), routine_id)
    form = materialize_log_form(routine, started_at=local_now(app_timezone()))
    save_log_form(form)
    session[TIMER_SESSION_KEY] = RestTimer().to_dict()
    logger.debug(f"Trainingslog gestart: routine={routine_id}, sets={total_sets(form)}")
    return log_response(form, 201)


@bp.route('', methods=['GET'])
@login_required
def get_log():
    return log_response(require_log_form())


@bp.route('', methods=['DELETE'])
@login_required
def discard_log():
    if LOG_SESSION_KEY not in session or owns_log():
        clear_log_form()
    logger.debug("Trainingslog verworpen")
    return success(None)


@bp.route('/exercises/<int:exercise_index>/sets/<int:set_index>', methods=['PATCH'])
@login_required
def edit_set(exercise_index, set_index):
    form = require_log_form()
    try:
        for field_name, value in json_object().items():
            form = edit_set_field(form, exercise_index, set_index, field_name, value)
    except ValueError as e:
        raise PayloadValidationError(str(e))
    save_log_form(form)
    return log_response(form)


@bp.route('/exercises/<int:exercise_index>/sets', methods=['POST'])
@login_required
def append_set(exercise_index):
    form = add_set(require_log_form(), exercise_index)
    save_log_form(form)
    logger.debug(f"Set toegevoegd aan oefening {exercise_index}, totaal={total_sets(form)}")
    return log_response(form)


@bp.route('/exercises/<int:exercise_index>/sets/<int:set_index>', methods=['DELETE'])
@login_required
def delete_set(exercise_index, set_index):
    form = remove_set(require_log_form(), exercise_index, set_index)
    save_log_form(form)
    return log_response(form)


@bp.route('/summary', methods=['PATCH'])
@login_required
def edit_summary():
    form = require_log_form()
    fields = dict(json_object())
    if 'mark_completed' in fields:
        checked = fields.pop('mark_completed')
        if not isinstance(checked, bool):
            raise PayloadValidationError('mark_completed debe ser verdadero o falso.')
        form = set_mark_completed(form, checked, local_now(app_timezone()))
    try:
        form = update_summary(form, **fields)
    except ValueError as e:
        raise PayloadValidationError(str(e))
    save_log_form(form)
    return log_response(form)


@bp.route('/submit', methods=['POST'])
@login_required
def submit_log():
    """
    Dien het trainingslog in als één training.
    Notities:
        - Bij een validatie- of servicefout blijft het log in de sessie staan.
        - Alleen na succes worden log en timer uit de sessie gewist.
    """
    form = load_log_form()
    try:
        workout = submit_workout_log(form, current_identity(), app_timezone())
    except WorkoutValidationError as e:
        logger.debug(f"Trainingslog ongeldig ({e.code}): {e.message}")
        return error_response(400, e.message, **e.to_dict())
    except WorkoutSubmissionError as e:
        return error_response(e.status_code, e.message)

    clear_log_form()
    return success(workout_with_summary(workout), 201)


@bp.route('/timer', methods=['GET'])
@login_required
def get_timer():
    return timer_response(RestTimer.from_dict(session.get(TIMER_SESSION_KEY)))


@bp.route('/timer/<action>', methods=['POST'])
@login_required
def control_timer(action):
    timer = RestTimer.from_dict(session.get(TIMER_SESSION_KEY))
    now = time.time()
    if action == 'start':
        timer = timer.start(now)
    elif action == 'pause':
        timer = timer.pause(now)
    elif action == 'reset':
        timer = timer.reset()
    else:
        raise NotFoundError(f'Acción de temporizador desconocida: {action}')
    session[TIMER_SESSION_KEY] = timer.to_dict()
    return timer_response(timer)
