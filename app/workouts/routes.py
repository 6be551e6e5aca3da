import logging
from flask import current_app, request
from flask_login import login_required

from app import db
from app.exceptions import PayloadValidationError
from app.forms import WorkoutForm, WorkoutSetEntryForm, json_formdata, first_error, validate_entries
from app.utils import current_identity, get_pagination, pagination_dict, success
from app.workouts import bp
from app.workouts import service
from app.workouts.metrics import summarize_workout, workout_with_summary
from app.workouts.schemas import CreateWorkoutRequest

logger = logging.getLogger(__name__)


@bp.route('', methods=['POST'])
@login_required
def create_workout():
    payload = request.get_json(silent=True) or {}
    form = WorkoutForm(formdata=json_formdata(payload))
    if not form.validate():
        logger.debug(f"Training ongeldig: {form.errors}")
        raise PayloadValidationError(first_error(form), form.errors)

    entries = payload.get('sets') or []
    if not isinstance(entries, list):
        raise PayloadValidationError('La lista de series no es válida.')
    set_forms, error = validate_entries(WorkoutSetEntryForm, entries, 'Serie')
    if error:
        raise PayloadValidationError(error)

    workout = service.create_workout(current_identity(), CreateWorkoutRequest.from_forms(form, set_forms))
    return success(workout_with_summary(workout), 201)


@bp.route('', methods=['GET'])
@login_required
def list_workouts():
    page, per_page = get_pagination(current_app.config['WORKOUTS_PER_PAGE'])
    pagination = db.paginate(service.workouts_query(current_identity()), page=page, per_page=per_page,
                             error_out=False)

    workouts = []
    for workout in pagination.items:
        summary = summarize_workout(workout)
        data = workout.to_dict(include_sets=False)
        data['summary'] = {
            'total_sets': summary.total_sets,
            'total_volume': summary.total_volume,
            'duration_seconds': summary.duration_seconds,
        }
        workouts.append(data)

    return success({'workouts': workouts, 'pagination': pagination_dict(pagination)})


@bp.route('/<int:workout_id>', methods=['GET'])
@login_required
def get_workout(workout_id):
    return success(workout_with_summary(service.get_workout(current_identity(), workout_id)))
