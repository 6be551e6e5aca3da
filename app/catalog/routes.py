import logging
from flask import current_app, request
from flask_login import login_required

from app import db
from app.catalog import bp
from app.catalog import service
from app.exceptions import PayloadValidationError
from app.forms import ExerciseForm, SearchExerciseForm, json_formdata, first_error
from app.utils import admin_required, current_identity, get_pagination, pagination_dict, success

logger = logging.getLogger(__name__)

EXERCISE_FIELDS = ('name', 'description', 'video_path', 'aliases')


@bp.route('', methods=['GET'])
@login_required
def list_exercises():
    form = SearchExerciseForm(formdata=request.args)
    if not form.validate():
        raise PayloadValidationError(first_error(form), form.errors)

    page, per_page = get_pagination(current_app.config['EXERCISES_PER_PAGE'])
    pagination = db.paginate(service.search_query(form.q.data), page=page, per_page=per_page, error_out=False)
    logger.debug(f"Oefeningen gezocht: q={form.q.data!r}, page={page}, gevonden={pagination.total}")

    return success({
        'exercises': [exercise.to_dict() for exercise in pagination.items],
        'pagination': pagination_dict(pagination),
    })


@bp.route('/<int:exercise_id>', methods=['GET'])
@login_required
def get_exercise(exercise_id):
    return success(service.get_exercise(exercise_id).to_dict())


@bp.route('', methods=['POST'])
@login_required
@admin_required
def create_exercise():
    payload = request.get_json(silent=True) or {}
    form = ExerciseForm(formdata=json_formdata(payload))
    if not form.validate():
        logger.debug(f"Oefening ongeldig: {form.errors}")
        raise PayloadValidationError(first_error(form), form.errors)

    exercise = service.create_exercise(
        current_identity(),
        name=form.name.data,
        description=form.description.data,
        video_path=form.video_path.data,
        aliases=form.aliases.data,
    )
    return success(exercise.to_dict(), 201)


@bp.route('/<int:exercise_id>', methods=['PUT'])
@login_required
@admin_required
def update_exercise(exercise_id):
    payload = request.get_json(silent=True) or {}
    exercise = service.get_exercise(exercise_id)

    # Vul ontbrekende velden aan met de huidige waarden zodat het formulier volledig valideert
    merged = exercise.to_dict()
    merged.update({key: value for key, value in payload.items() if key in EXERCISE_FIELDS})
    form = ExerciseForm(formdata=json_formdata(merged))
    if not form.validate():
        logger.debug(f"Oefening {exercise_id} ongeldig: {form.errors}")
        raise PayloadValidationError(first_error(form), form.errors)

    changes = {key: form[key].data for key in EXERCISE_FIELDS if key in payload}
    exercise = service.update_exercise(current_identity(), exercise_id, changes)
    return success(exercise.to_dict())


@bp.route('/<int:exercise_id>', methods=['DELETE'])
@login_required
@admin_required
def delete_exercise(exercise_id):
    service.delete_exercise(current_identity(), exercise_id)
    return success({'id': exercise_id})
