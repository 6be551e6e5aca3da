import logging
import math

import sqlalchemy as sa
from sqlalchemy.exc import SQLAlchemyError

from app import db
from app.exceptions import ForbiddenError, NotFoundError, PayloadValidationError, ServiceError
from app.models import Technique, Workout, WorkoutSet
from app.workouts.schemas import completes_before_start

logger = logging.getLogger(__name__)


def check_invariants(payload):
    """
    Controleer de invarianten van een training voordat er iets wordt opgeslagen.

    Raises:
        PayloadValidationError: Bij de eerste geschonden invariant.
    """
    if not payload.sets:
        raise PayloadValidationError('Registra al menos una serie antes de guardar el entrenamiento.')
    if completes_before_start(payload.started_at, payload.completed_at):
        raise PayloadValidationError('La fecha de finalización no puede ser anterior al inicio.')
    if payload.duration is not None and (not isinstance(payload.duration, int) or payload.duration <= 0):
        raise PayloadValidationError('La duración debe ser un número positivo.')

    for workout_set in payload.sets:
        label = f'{workout_set.exercise_name}, serie {workout_set.set_number}'
        if not isinstance(workout_set.reps, int) or workout_set.reps < 1:
            raise PayloadValidationError(f'{label}: cada serie debe tener al menos 1 repetición.')
        if workout_set.weight is not None and (not math.isfinite(workout_set.weight) or workout_set.weight < 0):
            raise PayloadValidationError(f'{label}: el peso debe ser un número válido y no negativo.')
        if workout_set.rest_time is not None and (not isinstance(workout_set.rest_time, int)
                                                  or workout_set.rest_time < 0):
            raise PayloadValidationError(f'{label}: el descanso debe ser un número entero no negativo.')
        if workout_set.technique not in Technique.values():
            raise PayloadValidationError(f'{label}: técnica no válida.')


def create_workout(identity, payload):
    """
    Sla een training met al haar sets op in een enkele transactie.

    Notities:
        - routine_name en exercise_name worden als momentopname opgeslagen.
        - Bij een databasefout wordt alles teruggedraaid; er blijft geen halve training achter.
    Returns:
        Workout: de opgeslagen training met gegenereerd id.
    """
    check_invariants(payload)

    workout = Workout(
        user_id=identity.user_id,
        routine_id=payload.routine_id,
        routine_name=payload.routine_name,
        started_at=payload.started_at,
        completed_at=payload.completed_at,
        duration=payload.duration,
        notes=payload.notes,
    )
    workout.sets = [
        WorkoutSet(
            exercise_id=workout_set.exercise_id,
            exercise_name=workout_set.exercise_name,
            set_number=workout_set.set_number,
            weight=workout_set.weight,
            reps=workout_set.reps,
            technique=workout_set.technique,
            rest_time=workout_set.rest_time,
        )
        for workout_set in payload.sets
    ]
    db.session.add(workout)

    try:
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Training opslaan mislukt: {str(e)}")
        raise ServiceError('No se pudo guardar el entrenamiento.') from e

    logger.debug(f"Training opgeslagen: id={workout.id}, user={identity.user_id}, sets={len(payload.sets)}")
    return workout


def get_workout(identity, workout_id):
    workout = db.session.get(Workout, workout_id)
    if workout is None:
        raise NotFoundError('Entrenamiento no encontrado')
    if workout.user_id != identity.user_id and not identity.is_admin:
        logger.debug(f"User {identity.user_id} attempted to access workout {workout_id}")
        raise ForbiddenError('No tienes acceso a este entrenamiento.')
    return workout


def workouts_query(identity):
    return sa.select(Workout).where(Workout.user_id == identity.user_id) \
        .order_by(Workout.started_at.desc(), Workout.id.desc())
