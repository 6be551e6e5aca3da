"""
Tests voor het valideren en indienen van het trainingslog.
"""
from dataclasses import replace
from datetime import datetime
from types import SimpleNamespace

import pytest
import pytz

from app.auth.identity import Identity
from app.exceptions import PayloadValidationError, ServiceError
from app.workout_log.form import (add_set, edit_set_field, materialize_log_form, remove_set, set_mark_completed,
                                  update_summary)
from app.workout_log.submission import GENERIC_SUBMISSION_ERROR, WorkoutSubmissionError, submit_workout_log
from app.workout_log.validation import WorkoutValidationError, build_workout_payload
from tests.conftest import routine_exercise, routine_stub

UTC = pytz.UTC


def build(form, tz=UTC):
    return build_workout_payload(form, tz)


def assert_rejected(form, code):
    with pytest.raises(WorkoutValidationError) as excinfo:
        build(form)
    assert excinfo.value.code == code
    return excinfo.value


@pytest.fixture
def form():
    return materialize_log_form(routine_stub([
        routine_exercise(1, 'Sentadilla', sets=3, rep_range_min=8, rep_range_max=12),
        routine_exercise(2, 'Press banca', sets=2, rest_time=60),
    ]), started_at='2024-01-01T10:00')


# ─── Volledige doorloop ──────────────────────────────────────────────────────

def test_unedited_form_submits_all_planned_sets(form):
    payload = build(form)
    assert payload.total_sets == 5
    assert payload.routine_id == 7
    assert payload.routine_name == 'Fuerza A'


def test_single_exercise_routine_defaults_end_to_end():
    form = materialize_log_form(routine_stub([
        routine_exercise(sets=3, rep_range_min=8, rep_range_max=12, technique='normal'),
    ]), started_at='2024-01-01T10:00')

    payload = build(form)

    assert [s.set_number for s in payload.sets] == [1, 2, 3]
    assert {s.reps for s in payload.sets} == {8}
    assert {s.technique for s in payload.sets} == {'normal'}
    assert payload.completed_at is None
    assert payload.duration is None
    assert payload.notes is None


def test_set_numbers_restart_per_exercise(form):
    payload = build(form)
    assert [(s.exercise_id, s.set_number) for s in payload.sets] == [(1, 1), (1, 2), (1, 3), (2, 1), (2, 2)]


def test_started_at_is_localized_to_utc(form):
    payload = build(form, pytz.timezone('Europe/Madrid'))
    assert payload.started_at == datetime(2024, 1, 1, 9, 0, tzinfo=UTC)


# ─── Volgorde van controles ──────────────────────────────────────────────────

def test_missing_form_is_rejected():
    assert_rejected(None, 'routine_missing')


def test_routine_missing(form):
    assert_rejected(replace(form, routine_id=None), 'routine_missing')


def test_started_at_missing_and_invalid(form):
    assert_rejected(update_summary(form, started_at='  '), 'started_at_missing')
    assert_rejected(update_summary(form, started_at='mañana'), 'started_at_invalid')


def test_started_at_is_checked_before_exercises(form):
    assert_rejected(replace(form, started_at='', exercises=()), 'started_at_missing')


def test_no_exercises(form):
    assert_rejected(replace(form, exercises=()), 'no_exercises')


def test_no_sets(form):
    emptied = tuple(replace(exercise, sets=()) for exercise in form.exercises)
    assert_rejected(replace(form, exercises=emptied), 'no_sets')


# ─── Sets ────────────────────────────────────────────────────────────────────

@pytest.mark.parametrize('reps', ['0', '-1', 'abc', '', 'inf', '0.4'])
def test_invalid_reps_are_rejected(form, reps):
    error = assert_rejected(edit_set_field(form, 1, 1, 'reps', reps), 'invalid_reps')
    assert error.exercise_index == 1
    assert error.set_index == 1
    assert error.message.startswith('Press banca, serie 2:')


@pytest.mark.parametrize('reps', ['5', '5.0', ' 5 ', '4.5'])
def test_valid_reps_round_to_integer(form, reps):
    payload = build(edit_set_field(form, 0, 0, 'reps', reps))
    assert payload.sets[0].reps == 5


def test_first_offending_set_halts_submission(form):
    form = edit_set_field(form, 0, 2, 'reps', '0')
    form = edit_set_field(form, 1, 0, 'weight', 'x')
    error = assert_rejected(form, 'invalid_reps')
    assert (error.exercise_index, error.set_index) == (0, 2)


def test_weight_is_optional_but_must_be_finite(form):
    assert build(edit_set_field(form, 0, 0, 'weight', '   ')).sets[0].weight is None
    assert build(edit_set_field(form, 0, 0, 'weight', '82.25')).sets[0].weight == 82.25
    assert_rejected(edit_set_field(form, 0, 0, 'weight', 'pesado'), 'invalid_weight')
    assert_rejected(edit_set_field(form, 0, 0, 'weight', 'nan'), 'invalid_weight')


def test_rest_time_is_optional_rounded_and_finite(form):
    assert build(form).sets[0].rest_time is None
    assert build(form).sets[3].rest_time == 60
    assert build(edit_set_field(form, 0, 0, 'rest_time', '89.5')).sets[0].rest_time == 90
    assert_rejected(edit_set_field(form, 0, 0, 'rest_time', '1m'), 'invalid_rest_time')


def test_added_and_removed_sets_are_renumbered(form):
    form = remove_set(add_set(form, 0), 0, 0)
    payload = build(form)
    assert [s.set_number for s in payload.sets if s.exercise_id == 1] == [1, 2, 3]


# ─── Einde en duur ───────────────────────────────────────────────────────────

def completed(form, completed_at):
    return update_summary(set_mark_completed(form, True, completed_at), completed_at=completed_at)


def test_completed_at_is_ignored_unless_marked(form):
    form = update_summary(form, completed_at='2024-01-01T09:00')
    assert build(form).completed_at is None


def test_completed_before_start_is_rejected(form):
    assert_rejected(completed(form, '2024-01-01T09:59'), 'completed_before_start')


def test_completed_at_invalid(form):
    assert_rejected(completed(form, 'luego'), 'completed_at_invalid')


def test_duration_computed_from_completion(form):
    payload = build(completed(form, '2024-01-01T10:45'))
    assert payload.completed_at == datetime(2024, 1, 1, 10, 45, tzinfo=UTC)
    assert payload.duration == 2700


def test_explicit_minutes_take_priority(form):
    form = update_summary(completed(form, '2024-01-01T10:45'), duration_minutes='30')
    assert build(form).duration == 1800


def test_equal_start_and_completion_leaves_duration_unset(form):
    assert build(completed(form, '2024-01-01T10:00')).duration is None


@pytest.mark.parametrize('minutes', ['0', '-5', 'una hora', 'inf'])
def test_invalid_duration(form, minutes):
    assert_rejected(update_summary(form, duration_minutes=minutes), 'invalid_duration')


def test_notes_are_trimmed(form):
    assert build(update_summary(form, notes='  ')).notes is None
    assert build(update_summary(form, notes=' Buen día ')).notes == 'Buen día'


# ─── Indienen ────────────────────────────────────────────────────────────────

IDENTITY = Identity(user_id=1)


def test_submit_calls_service_once_with_payload(form):
    calls = []

    def create_workout(identity, payload):
        calls.append((identity, payload))
        return SimpleNamespace(id=42)

    workout = submit_workout_log(form, IDENTITY, UTC, create_workout=create_workout)

    assert workout.id == 42
    assert len(calls) == 1
    assert calls[0][0] == IDENTITY
    assert calls[0][1].total_sets == 5


def test_invalid_form_never_reaches_service(form):
    def create_workout(identity, payload):
        raise AssertionError('should not be called')

    with pytest.raises(WorkoutValidationError):
        submit_workout_log(replace(form, exercises=()), IDENTITY, UTC, create_workout=create_workout)


def test_service_message_is_surfaced(form):
    def create_workout(identity, payload):
        raise PayloadValidationError('La rutina ya no existe.')

    with pytest.raises(WorkoutSubmissionError) as excinfo:
        submit_workout_log(form, IDENTITY, UTC, create_workout=create_workout)
    assert excinfo.value.message == 'La rutina ya no existe.'
    assert excinfo.value.status_code == 400


def test_generic_fallback_without_service_message(form):
    def create_workout(identity, payload):
        raise ServiceError('')

    with pytest.raises(WorkoutSubmissionError) as excinfo:
        submit_workout_log(form, IDENTITY, UTC, create_workout=create_workout)
    assert excinfo.value.message == GENERIC_SUBMISSION_ERROR
    assert excinfo.value.status_code == 500
