import logging
from flask import request
from flask_login import login_required

from app.exceptions import PayloadValidationError
from app.forms import RoutineForm, RoutineExerciseForm, json_formdata, first_error, validate_entries
from app.routines import bp
from app.routines import service
from app.utils import current_identity, success

logger = logging.getLogger(__name__)


def _validated_payload():
    #    Valideer de routine en al haar oefeningen; geeft (form, subformulieren) terug.
    payload = request.get_json(silent=True) or {}
    form = RoutineForm(formdata=json_formdata(payload))
    if not form.validate():
        raise PayloadValidationError(first_error(form), form.errors)

    entries = payload.get('exercises') or []
    if not isinstance(entries, list):
        raise PayloadValidationError('La lista de ejercicios no es válida.')
    exercise_forms, error = validate_entries(RoutineExerciseForm, entries, 'Ejercicio')
    if error:
        raise PayloadValidationError(error)
    return form, exercise_forms


@bp.route('', methods=['GET'])
@login_required
def list_routines():
    routines = service.list_routines(current_identity())
    return success([routine.to_dict() for routine in routines])


@bp.route('/<int:routine_id>', methods=['GET'])
@login_required
def get_routine(routine_id):
    return success(service.get_routine(current_identity(), routine_id).to_dict())


@bp.route('', methods=['POST'])
@login_required
def create_routine():
    form, exercise_forms = _validated_payload()
    routine = service.create_routine(current_identity(), form.name.data, form.description.data, exercise_forms)
    return success(routine.to_dict(), 201)


@bp.route('/<int:routine_id>', methods=['PUT'])
@login_required
def update_routine(routine_id):
    form, exercise_forms = _validated_payload()
    routine = service.update_routine(current_identity(), routine_id, form.name.data, form.description.data,
                                     exercise_forms)
    return success(routine.to_dict())


@bp.route('/<int:routine_id>', methods=['DELETE'])
@login_required
def delete_routine(routine_id):
    service.delete_routine(current_identity(), routine_id)
    return success({'id': routine_id})
