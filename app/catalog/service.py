import logging

import sqlalchemy as sa

from app import db
from app.exceptions import ForbiddenError, NotFoundError
from app.models import Exercise, ExerciseAlias

logger = logging.getLogger(__name__)


def normalize_aliases(aliases):
    #    Trim, laat lege weg en ontdubbel hoofdletterongevoelig (eerste schrijfwijze wint).
    seen = set()
    result = []
    for alias in aliases or []:
        alias = str(alias).strip()
        key = alias.lower()
        if alias and key not in seen:
            seen.add(key)
            result.append(alias)
    return result


def search_query(q=None):
    """
    Bouw de select voor het zoeken van oefeningen.
    Notities:
        - Matcht hoofdletterongevoelig op een deel van de naam of van een alias.
        - Gesorteerd op naam voor stabiele paginering.
    """
    query = sa.select(Exercise)
    if q and q.strip():
        pattern = f"%{q.strip()}%"
        query = query.where(sa.or_(
            Exercise.name.ilike(pattern),
            Exercise.aliases.any(ExerciseAlias.alias.ilike(pattern)),
        ))
    return query.order_by(Exercise.name, Exercise.id)


def get_exercise(exercise_id):
    exercise = db.session.get(Exercise, exercise_id)
    if exercise is None:
        raise NotFoundError('Ejercicio no encontrado.')
    return exercise


def _require_admin(identity):
    if not identity.is_admin:
        raise ForbiddenError('Solo los administradores pueden modificar el catálogo.')


def create_exercise(identity, name, description=None, video_path=None, aliases=None):
    _require_admin(identity)
    exercise = Exercise(
        name=name.strip(),
        description=(description or '').strip() or None,
        video_path=(video_path or '').strip() or None,
        created_by=identity.user_id,
    )
    exercise.aliases = [ExerciseAlias(alias=alias) for alias in normalize_aliases(aliases)]
    db.session.add(exercise)
    db.session.commit()
    logger.debug(f"Oefening aangemaakt: id={exercise.id}, name={exercise.name}, aliases={len(exercise.aliases)}")
    return exercise


def update_exercise(identity, exercise_id, changes):
    """
    Werk een oefening gedeeltelijk bij.

    Notities:
        - Alleen sleutels die in changes voorkomen worden aangepast.
        - 'aliases' vervangt de volledige set; verwijderde aliassen worden ge-orphaned en gewist.
    """
    _require_admin(identity)
    exercise = get_exercise(exercise_id)
    if 'name' in changes:
        exercise.name = changes['name'].strip()
    if 'description' in changes:
        exercise.description = (changes['description'] or '').strip() or None
    if 'video_path' in changes:
        exercise.video_path = (changes['video_path'] or '').strip() or None
    if 'aliases' in changes:
        exercise.aliases = [ExerciseAlias(alias=alias) for alias in normalize_aliases(changes['aliases'])]
    db.session.commit()
    logger.debug(f"Oefening bijgewerkt: id={exercise.id}, velden={sorted(changes)}")
    return exercise


def delete_exercise(identity, exercise_id):
    _require_admin(identity)
    exercise = get_exercise(exercise_id)
    db.session.delete(exercise)
    db.session.commit()
    logger.debug(f"Oefening verwijderd: id={exercise_id}")
