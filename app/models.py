from enum import Enum
import sqlalchemy as sa
import sqlalchemy.orm as so
from datetime import datetime, timezone
from typing import Optional
from werkzeug.security import generate_password_hash, check_password_hash
from app import db
from app.utils import isoformat_utc


def utcnow():
    return datetime.now(timezone.utc)


class Technique(str, Enum):
    """
    Enum voor trainingstechnieken die op een set worden toegepast.
    Notities:
        - Gebruikt in RoutineExercise.technique en WorkoutSet.technique.
        - Opgeslagen als de string-waarde, niet als enum-naam.
    """
    NORMAL = "normal"
    DROPSET = "dropset"
    MYO_REPS = "myo-reps"
    FAILURE = "failure"
    REST_PAUSE = "rest-pause"

    @classmethod
    def values(cls):
        return [technique.value for technique in cls]


class Role(str, Enum):
    USER = "user"
    ADMIN = "admin"


class User(db.Model):
    """
    Model voor gebruikers van de applicatie.

    Notities:
        - Authenticatie gebeurt met bearer-tokens, zie app.auth.tokens.
        - Implementeert de Flask-Login eigenschappen (is_active, is_authenticated, etc.).
    """
    id: so.Mapped[int] = so.mapped_column(primary_key=True)
    username: so.Mapped[str] = so.mapped_column(sa.String(64), unique=True, index=True, nullable=False)
    password_hash: so.Mapped[str] = so.mapped_column(sa.String(256), nullable=False)
    role: so.Mapped[str] = so.mapped_column(sa.String(20), default=Role.USER.value, nullable=False)
    created_at: so.Mapped[datetime] = so.mapped_column(sa.DateTime(timezone=True), default=utcnow)

    def set_password(self, password):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        return check_password_hash(self.password_hash, password)

    @property
    def is_admin(self):
        return self.role == Role.ADMIN.value

    @property
    def is_active(self):
        """Vlag of de gebruiker actief is (voor Flask-Login)."""
        return True

    @property
    def is_authenticated(self):
        """Vlag of de gebruiker is geauthenticeerd (voor Flask-Login)."""
        return True

    @property
    def is_anonymous(self):
        """Vlag of de gebruiker anoniem is (voor Flask-Login)."""
        return False

    def get_id(self):
        return str(self.id)

    def __repr__(self):
        return f'<User {self.username}>'

    def to_dict(self):
        return {
            'id': self.id,
            'username': self.username,
            'role': self.role,
            'created_at': isoformat_utc(self.created_at),
        }


class Exercise(db.Model):
    """
    Model voor oefeningen in de catalogus.
    Notities:
        - Aliassen worden meeverwijderd met de oefening (cascade + ON DELETE CASCADE).
        - Zoeken op naam of alias gebeurt hoofdletterongevoelig, zie app.catalog.service.
    """
    id: so.Mapped[int] = so.mapped_column(primary_key=True)
    name: so.Mapped[str] = so.mapped_column(sa.String(100), index=True, nullable=False)
    description: so.Mapped[Optional[str]] = so.mapped_column(sa.Text)
    video_path: so.Mapped[Optional[str]] = so.mapped_column(sa.String(255))
    created_by: so.Mapped[int] = so.mapped_column(nullable=False)
    created_at: so.Mapped[datetime] = so.mapped_column(sa.DateTime(timezone=True), default=utcnow)
    updated_at: so.Mapped[datetime] = so.mapped_column(sa.DateTime(timezone=True), default=utcnow, onupdate=utcnow)
    aliases: so.Mapped[list['ExerciseAlias']] = so.relationship(
        back_populates='exercise',
        cascade="all, delete-orphan",
        order_by='ExerciseAlias.id'
    )

    def __repr__(self):
        return f'<Exercise {self.name}>'

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'video_path': self.video_path,
            'aliases': [alias.alias for alias in self.aliases],
            'created_by': self.created_by,
            'created_at': isoformat_utc(self.created_at),
            'updated_at': isoformat_utc(self.updated_at),
        }


class ExerciseAlias(db.Model):
    __tablename__ = 'exercise_aliases'
    id: so.Mapped[int] = so.mapped_column(primary_key=True)
    exercise_id: so.Mapped[int] = so.mapped_column(sa.ForeignKey('exercise.id', ondelete='CASCADE'), index=True)
    alias: so.Mapped[str] = so.mapped_column(sa.String(100), nullable=False)
    created_at: so.Mapped[datetime] = so.mapped_column(sa.DateTime(timezone=True), default=utcnow)
    exercise: so.Mapped['Exercise'] = so.relationship(back_populates='aliases')

    def __repr__(self):
        return f'<ExerciseAlias {self.alias}>'


class Routine(db.Model):
    """
    Model voor routines (sjablonen) van gebruikers.

    Notities:
        - Volgorde van oefeningen is expliciet via RoutineExercise.order_in_routine.
        - Een lege routine is geldig om op te slaan, maar kan niet gelogd worden.
    """
    id: so.Mapped[int] = so.mapped_column(primary_key=True)
    user_id: so.Mapped[int] = so.mapped_column(sa.ForeignKey('user.id'), index=True)
    name: so.Mapped[str] = so.mapped_column(sa.String(100), nullable=False)
    description: so.Mapped[Optional[str]] = so.mapped_column(sa.Text)
    created_at: so.Mapped[datetime] = so.mapped_column(sa.DateTime(timezone=True), default=utcnow)
    updated_at: so.Mapped[datetime] = so.mapped_column(sa.DateTime(timezone=True), default=utcnow, onupdate=utcnow)
    exercises: so.Mapped[list['RoutineExercise']] = so.relationship(
        back_populates='routine',
        cascade="all, delete-orphan",
        order_by='RoutineExercise.order_in_routine'
    )

    def __repr__(self):
        return f'<Routine {self.name}>'

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'name': self.name,
            'description': self.description,
            'exercises': [exercise.to_dict() for exercise in self.exercises],
            'created_at': isoformat_utc(self.created_at),
            'updated_at': isoformat_utc(self.updated_at),
        }


class RoutineExercise(db.Model):
    """
    Model voor een voorgeschreven oefening binnen een routine.
    Notities:
        - exercise_name is een momentopname van de naam bij het opslaan.
        - exercise_id heeft geen foreign key, zodat de routine blijft bestaan als de oefening verdwijnt.
    """
    __tablename__ = 'routine_exercises'
    id: so.Mapped[int] = so.mapped_column(primary_key=True)
    routine_id: so.Mapped[int] = so.mapped_column(sa.ForeignKey('routine.id', ondelete='CASCADE'), index=True)
    exercise_id: so.Mapped[int] = so.mapped_column(nullable=False)
    exercise_name: so.Mapped[str] = so.mapped_column(sa.String(100), nullable=False)
    sets: so.Mapped[int] = so.mapped_column(nullable=False)
    rep_range_min: so.Mapped[Optional[int]] = so.mapped_column()
    rep_range_max: so.Mapped[Optional[int]] = so.mapped_column()
    technique: so.Mapped[str] = so.mapped_column(sa.String(50), default=Technique.NORMAL.value, nullable=False)
    rest_time: so.Mapped[Optional[int]] = so.mapped_column()
    order_in_routine: so.Mapped[int] = so.mapped_column(nullable=False)
    created_at: so.Mapped[datetime] = so.mapped_column(sa.DateTime(timezone=True), default=utcnow)
    routine: so.Mapped['Routine'] = so.relationship(back_populates='exercises')

    def __repr__(self):
        return f'<RoutineExercise {self.exercise_name} in {self.routine_id}>'

    def to_dict(self):
        return {
            'id': self.id,
            'exercise_id': self.exercise_id,
            'exercise_name': self.exercise_name,
            'sets': self.sets,
            'rep_range_min': self.rep_range_min,
            'rep_range_max': self.rep_range_max,
            'technique': self.technique,
            'rest_time': self.rest_time,
            'order_in_routine': self.order_in_routine,
        }


class Workout(db.Model):
    """
    Model voor een gelogde trainingssessie op basis van een routine.

    Notities:
        - routine_name is een momentopname; routine_id heeft geen foreign key.
        - Sets worden in dezelfde transactie aangemaakt en meeverwijderd (cascade).
        - Afgeleide statistieken staan in app.workouts.metrics.
    """
    id: so.Mapped[int] = so.mapped_column(primary_key=True)
    user_id: so.Mapped[int] = so.mapped_column(sa.ForeignKey('user.id'), index=True)
    routine_id: so.Mapped[int] = so.mapped_column(nullable=False)
    routine_name: so.Mapped[str] = so.mapped_column(sa.String(100), nullable=False)
    started_at: so.Mapped[datetime] = so.mapped_column(sa.DateTime(timezone=True), nullable=False)
    completed_at: so.Mapped[Optional[datetime]] = so.mapped_column(sa.DateTime(timezone=True))
    duration: so.Mapped[Optional[int]] = so.mapped_column()
    notes: so.Mapped[Optional[str]] = so.mapped_column(sa.Text)
    created_at: so.Mapped[datetime] = so.mapped_column(sa.DateTime(timezone=True), default=utcnow)
    sets: so.Mapped[list['WorkoutSet']] = so.relationship(
        back_populates='workout',
        cascade="all, delete-orphan",
        order_by='WorkoutSet.id'
    )

    def __repr__(self):
        return f'<Workout {self.routine_name} at {self.started_at}>'

    def to_dict(self, include_sets=True):
        data = {
            'id': self.id,
            'user_id': self.user_id,
            'routine_id': self.routine_id,
            'routine_name': self.routine_name,
            'started_at': isoformat_utc(self.started_at),
            'completed_at': isoformat_utc(self.completed_at),
            'duration': self.duration,
            'notes': self.notes,
            'created_at': isoformat_utc(self.created_at),
        }
        if include_sets:
            data['sets'] = [workout_set.to_dict() for workout_set in self.sets]
        return data


class WorkoutSet(db.Model):
    """
    Model voor een individuele set binnen een gelogde training.
    Notities:
        - set_number is 1-gebaseerd en loopt per oefening binnen de training.
        - weight is optioneel (Numeric(5,2)); sets zonder gewicht tellen niet mee in het volume.
    """
    __tablename__ = 'workout_sets'
    id: so.Mapped[int] = so.mapped_column(primary_key=True)
    workout_id: so.Mapped[int] = so.mapped_column(sa.ForeignKey('workout.id', ondelete='CASCADE'), index=True)
    exercise_id: so.Mapped[int] = so.mapped_column(nullable=False)
    exercise_name: so.Mapped[str] = so.mapped_column(sa.String(100), nullable=False)
    set_number: so.Mapped[int] = so.mapped_column(nullable=False)
    weight: so.Mapped[Optional[float]] = so.mapped_column(sa.Numeric(5, 2, asdecimal=False))
    reps: so.Mapped[int] = so.mapped_column(nullable=False)
    technique: so.Mapped[str] = so.mapped_column(sa.String(50), default=Technique.NORMAL.value, nullable=False)
    rest_time: so.Mapped[Optional[int]] = so.mapped_column()
    completed_at: so.Mapped[datetime] = so.mapped_column(sa.DateTime(timezone=True), default=utcnow)
    workout: so.Mapped['Workout'] = so.relationship(back_populates='sets')

    def __repr__(self):
        return f'<WorkoutSet {self.id}: Exercise {self.exercise_id}, Set {self.set_number}>'

    def to_dict(self):
        return {
            'id': self.id,
            'exercise_id': self.exercise_id,
            'exercise_name': self.exercise_name,
            'set_number': self.set_number,
            'weight': float(self.weight) if self.weight is not None else None,
            'reps': self.reps,
            'technique': self.technique,
            'rest_time': self.rest_time,
            'completed_at': isoformat_utc(self.completed_at),
        }
