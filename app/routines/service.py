import logging

import sqlalchemy as sa

from app import db
from app.exceptions import ForbiddenError, NotFoundError, PayloadValidationError
from app.models import Exercise, Routine, RoutineExercise

logger = logging.getLogger(__name__)


def list_routines(identity):
    query = sa.select(Routine).where(Routine.user_id == identity.user_id) \
        .order_by(Routine.created_at.desc(), Routine.id.desc())
    return db.session.scalars(query).all()


def get_routine(identity, routine_id):
    """
    Haal een routine op voor lezen.

    Notities:
        - Eigenaar of beheerder mag lezen.
    Raises:
        NotFoundError: Als de routine niet bestaat.
        ForbiddenError: Als de gebruiker geen toegang heeft.
    """
    routine = db.session.get(Routine, routine_id)
    if routine is None:
        raise NotFoundError('Rutina no encontrada.')
    if routine.user_id != identity.user_id and not identity.is_admin:
        logger.debug(f"User {identity.user_id} attempted to access routine {routine_id}")
        raise ForbiddenError('No tienes acceso a esta rutina.')
    return routine


def _get_owned_routine(identity, routine_id):
    routine = db.session.get(Routine, routine_id)
    if routine is None:
        raise NotFoundError('Rutina no encontrada.')
    if routine.user_id != identity.user_id:
        logger.debug(f"User {identity.user_id} attempted to modify routine {routine_id}")
        raise ForbiddenError('Solo puedes modificar tus propias rutinas.')
    return routine


def build_routine_exercises(entries):
    """
    Zet gevalideerde subformulieren om naar RoutineExercise-objecten.

    Notities:
        - De naam van de oefening wordt als momentopname uit de catalogus gekopieerd.
        - Zonder order_in_routine geldt de 1-gebaseerde positie in de lijst.
        - Het resultaat is gesorteerd op order_in_routine, zoals de relatie het laadt.
        - Elke oefening mag maar een keer voorkomen.
    """
    exercises = []
    seen = set()
    for index, entry in enumerate(entries):
        exercise_id = entry.exercise_id.data
        if exercise_id in seen:
            raise PayloadValidationError(f'El ejercicio {exercise_id} ya está en la rutina.')
        seen.add(exercise_id)

        exercise = db.session.get(Exercise, exercise_id)
        if exercise is None:
            raise PayloadValidationError(f'El ejercicio {exercise_id} no existe.')

        exercises.append(RoutineExercise(
            exercise_id=exercise.id,
            exercise_name=exercise.name,
            sets=entry.sets.data,
            rep_range_min=entry.rep_range_min.data,
            rep_range_max=entry.rep_range_max.data,
            technique=entry.technique.data,
            rest_time=entry.rest_time.data,
            order_in_routine=entry.order_in_routine.data or index + 1,
        ))
    exercises.sort(key=lambda e: e.order_in_routine)
    return exercises


def create_routine(identity, name, description, entries):
    routine = Routine(
        user_id=identity.user_id,
        name=name.strip(),
        description=(description or '').strip() or None,
    )
    routine.exercises = build_routine_exercises(entries)
    db.session.add(routine)
    db.session.commit()
    logger.debug(f"Routine aangemaakt: id={routine.id}, oefeningen={len(routine.exercises)}")
    return routine


def update_routine(identity, routine_id, name, description, entries):
    routine = _get_owned_routine(identity, routine_id)
    exercises = build_routine_exercises(entries)
    routine.name = name.strip()
    routine.description = (description or '').strip() or None
    # Vervang de volledige lijst; oude items worden via delete-orphan gewist
    routine.exercises = exercises
    db.session.commit()
    logger.debug(f"Routine bijgewerkt: id={routine.id}, oefeningen={len(routine.exercises)}")
    return routine


def delete_routine(identity, routine_id):
    routine = _get_owned_routine(identity, routine_id)
    db.session.delete(routine)
    db.session.commit()
    logger.debug(f"Routine verwijderd: id={routine_id}")
