import csv
import logging
import re
import sys

import chardet
import sqlalchemy as sa
from sqlalchemy.exc import IntegrityError

from app import db, create_app
from app.catalog.service import normalize_aliases
from app.models import Exercise, ExerciseAlias, Role, User

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = {'name'}


def detect_encoding(file_path):
    with open(file_path, 'rb') as f:
        raw_data = f.read()
        result = chardet.detect(raw_data)
        return result['encoding'] or 'utf-8'


def detect_delimiter(file_path, encoding):
    # Kies het scheidingsteken dat de kopregel in de meeste velden splitst
    with open(file_path, newline='', encoding=encoding, errors='replace') as csvfile:
        first_line = csvfile.readline().strip()
        best_delimiter = ','
        max_fields = 0
        for delimiter in [',', ';', '\t']:
            fields = first_line.split(delimiter)
            if len(fields) > max_fields:
                max_fields = len(fields)
                best_delimiter = delimiter
        return best_delimiter


def split_aliases(value):
    """Aliassen staan in één kolom, gescheiden door '|' of ','."""
    if not value:
        return []
    return [alias.strip() for alias in re.split(r'[|,]', value) if alias.strip()]


def load_exercise_rows(csv_file_path):
    """
    Lees de oefeningen uit een CSV-bestand.

    Notities:
        - Encoding wordt met chardet bepaald, het scheidingsteken uit de kopregel.
        - Kolommen: name (verplicht), description, video_path, aliases.
        - Rijen zonder naam worden overgeslagen.
    Raises:
        ValueError: Als de verplichte kolommen ontbreken.
    """
    encoding = detect_encoding(csv_file_path)
    delimiter = detect_delimiter(csv_file_path, encoding)
    logger.info(f"CSV {csv_file_path}: encoding={encoding}, delimiter={delimiter!r}")

    rows = []
    with open(csv_file_path, newline='', encoding=encoding, errors='replace') as csvfile:
        reader = csv.DictReader(csvfile, delimiter=delimiter)
        fieldnames = [name.strip() for name in reader.fieldnames or []]
        reader.fieldnames = fieldnames
        missing = REQUIRED_COLUMNS - set(fieldnames)
        if missing:
            raise ValueError(f"CSV mist kolommen: {', '.join(sorted(missing))}")

        for row_number, row in enumerate(reader, start=1):
            name = (row.get('name') or '').strip()
            if not name:
                logger.warning(f"Rij {row_number} overgeslagen: geen naam")
                continue
            rows.append({
                'name': name,
                'description': (row.get('description') or '').strip() or None,
                'video_path': (row.get('video_path') or '').strip() or None,
                'aliases': split_aliases(row.get('aliases')),
            })
    return rows


def resolve_creator(username=None):
    """
    Bepaal welke gebruiker als maker van nieuwe oefeningen geldt.

    Notities:
        - Met een gebruikersnaam moet die gebruiker bestaan en beheerder zijn.
        - Zonder gebruikersnaam wordt de eerste beheerder (laagste id) gekozen.
    Raises:
        ValueError: Als er geen geschikte beheerder is.
    Returns:
        int: het id van de maker
    """
    query = sa.select(User).where(User.role == Role.ADMIN.value)
    if username:
        query = query.where(User.username == username)
    user = db.session.scalar(query.order_by(User.id).limit(1))
    if user is None:
        raise ValueError(f"Geen beheerder gevonden{f' met naam {username}' if username else ''}; "
                         f"registreer eerst een beheerder.")
    logger.info(f"Oefeningen worden aangemaakt door {user.username} (id={user.id})")
    return user.id


def seed_exercises(rows, created_by):
    """
    Voeg oefeningen toe aan de catalogus of werk ze bij.

    Notities:
        - Een bestaande oefening wordt hoofdletterongevoelig op naam gevonden.
        - Bestaande aliassen blijven staan; nieuwe worden toegevoegd.
        - Elke rij wordt apart gecommit; een mislukte rij wordt teruggedraaid en overgeslagen.
    Raises:
        ValueError: Als er geen maker is opgegeven.
    Returns:
        tuple: (aantal toegevoegd, aantal bijgewerkt)
    """
    if created_by is None:
        raise ValueError("Een maker (created_by) is verplicht voor nieuwe oefeningen.")

    created = updated = 0
    for row in rows:
        try:
            exercise = db.session.scalar(
                sa.select(Exercise).where(sa.func.lower(Exercise.name) == row['name'].lower()))
            if exercise is None:
                exercise = Exercise(name=row['name'], description=row.get('description'),
                                    video_path=row.get('video_path'), created_by=created_by)
                db.session.add(exercise)
                is_new = True
            else:
                if row.get('description'):
                    exercise.description = row['description']
                if row.get('video_path'):
                    exercise.video_path = row['video_path']
                is_new = False

            existing = [alias.alias for alias in exercise.aliases]
            for alias in normalize_aliases(existing + list(row.get('aliases') or []))[len(existing):]:
                exercise.aliases.append(ExerciseAlias(alias=alias))

            db.session.commit()
            if is_new:
                created += 1
            else:
                updated += 1
            logger.debug(f"Oefening verwerkt: {row['name']} (aliassen={len(exercise.aliases)})")
        except IntegrityError as e:
            db.session.rollback()
            logger.error(f"Fout bij oefening {row.get('name', 'Onbekend')}: {str(e)}")

    logger.info(f"Catalogus gevuld: {created} toegevoegd, {updated} bijgewerkt")
    return created, updated


if __name__ == '__main__':
    csv_file_path = sys.argv[1] if len(sys.argv) > 1 else 'exercises.csv'
    admin_username = sys.argv[2] if len(sys.argv) > 2 else None
    app = create_app()
    with app.app_context():
        try:
            creator_id = resolve_creator(admin_username)
        except ValueError as e:
            logger.error(str(e))
            sys.exit(1)
        seed_exercises(load_exercise_rows(csv_file_path), creator_id)
