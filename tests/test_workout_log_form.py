"""
Tests voor het opbouwen en bewerken van het trainingslog.
"""
import pytest

from app.workout_log.form import (WorkoutLogForm, WorkoutSetForm, add_set, edit_set_field,
                                  materialize_log_form, remove_set, set_mark_completed, target_range_label,
                                  total_sets, update_summary)
from tests.conftest import routine_exercise, routine_stub


# ─── Materialisatie ──────────────────────────────────────────────────────────

def test_materialize_creates_one_exercise_per_prescription_in_order():
    routine = routine_stub([
        routine_exercise(1, 'Sentadilla', sets=3, rep_range_min=8, rep_range_max=12, rest_time=90),
        routine_exercise(2, 'Press banca', sets=2, technique='dropset'),
    ])
    form = materialize_log_form(routine, started_at='2024-05-01T10:00')

    assert form.routine_id == 7
    assert form.routine_name == 'Fuerza A'
    assert form.started_at == '2024-05-01T10:00'
    assert [e.exercise_name for e in form.exercises] == ['Sentadilla', 'Press banca']
    assert [len(e.sets) for e in form.exercises] == [3, 2]
    assert total_sets(form) == 5


def test_materialized_sets_use_routine_defaults():
    routine = routine_stub([routine_exercise(sets=3, rep_range_min=8, rep_range_max=12, rest_time=90)])
    form = materialize_log_form(routine)

    for set_form in form.exercises[0].sets:
        assert set_form == WorkoutSetForm(weight='', reps='8', technique='normal', rest_time='90')


@pytest.mark.parametrize('rep_min, rep_max, expected', [
    (8, 12, '8'),
    (None, 6, '6'),
    (None, None, '10'),
])
def test_default_reps_fall_back_from_min_to_max_to_ten(rep_min, rep_max, expected):
    routine = routine_stub([routine_exercise(rep_range_min=rep_min, rep_range_max=rep_max)])
    form = materialize_log_form(routine)
    assert form.exercises[0].sets[0].reps == expected


def test_missing_rest_time_becomes_empty_string():
    form = materialize_log_form(routine_stub([routine_exercise(rest_time=None)]))
    assert form.exercises[0].sets[0].rest_time == ''


@pytest.mark.parametrize('rep_min, rep_max, expected', [
    (8, 12, '8-12 repeticiones'),
    (10, 10, '10 repeticiones'),
    (8, None, '≥ 8 repeticiones'),
    (None, 12, '≤ 12 repeticiones'),
    (None, None, None),
])
def test_target_range_label(rep_min, rep_max, expected):
    assert target_range_label(rep_min, rep_max) == expected


def test_materialize_is_deterministic():
    routine = routine_stub([routine_exercise(sets=2, rep_range_min=5)])
    assert materialize_log_form(routine, '2024-05-01T10:00') == materialize_log_form(routine, '2024-05-01T10:00')


# ─── Bewerkingen ─────────────────────────────────────────────────────────────

@pytest.fixture
def form():
    return materialize_log_form(routine_stub([
        routine_exercise(1, 'Sentadilla', sets=2, rep_range_min=8, rest_time=90),
        routine_exercise(2, 'Press banca', sets=1),
    ]), started_at='2024-05-01T10:00')


def test_edit_set_field_replaces_only_that_field(form):
    edited = edit_set_field(form, 0, 1, 'weight', '80')

    assert edited.exercises[0].sets[1].weight == '80'
    assert edited.exercises[0].sets[0].weight == ''
    assert edited.exercises[1] == form.exercises[1]
    assert form.exercises[0].sets[1].weight == ''


def test_edit_set_field_converts_numbers_to_text(form):
    assert edit_set_field(form, 0, 0, 'reps', 12).exercises[0].sets[0].reps == '12'


def test_edit_set_field_out_of_range_is_noop(form):
    assert edit_set_field(form, 5, 0, 'reps', '3') == form
    assert edit_set_field(form, 0, 9, 'reps', '3') == form


def test_edit_set_field_rejects_unknown_field_and_technique(form):
    with pytest.raises(ValueError):
        edit_set_field(form, 0, 0, 'tempo', '3-1-1')
    with pytest.raises(ValueError):
        edit_set_field(form, 0, 0, 'technique', 'superset')


def test_add_set_copies_last_set_with_empty_weight(form):
    form = edit_set_field(form, 0, 1, 'weight', '100')
    form = edit_set_field(form, 0, 1, 'reps', '6')
    form = edit_set_field(form, 0, 1, 'technique', 'failure')

    grown = add_set(form, 0)

    assert len(grown.exercises[0].sets) == 3
    assert grown.exercises[0].sets[2] == WorkoutSetForm(weight='', reps='6', technique='failure', rest_time='90')
    assert total_sets(grown) == total_sets(form) + 1


def test_add_set_out_of_range_is_noop(form):
    assert add_set(form, 3) == form


def test_remove_set_drops_only_that_set(form):
    form = edit_set_field(form, 0, 0, 'weight', '60')
    shrunk = remove_set(form, 0, 0)

    assert len(shrunk.exercises[0].sets) == 1
    assert shrunk.exercises[0].sets[0].weight == ''


def test_remove_last_remaining_set_is_noop(form):
    assert remove_set(form, 1, 0) == form


def test_set_mark_completed_prefills_and_clears(form):
    checked = set_mark_completed(form, True, '2024-05-01T11:00')
    assert checked.mark_completed is True
    assert checked.completed_at == '2024-05-01T11:00'

    kept = set_mark_completed(update_summary(form, completed_at='2024-05-01T10:45'), True, '2024-05-01T11:00')
    assert kept.completed_at == '2024-05-01T10:45'

    unchecked = set_mark_completed(checked, False, '2024-05-01T11:00')
    assert unchecked.mark_completed is False
    assert unchecked.completed_at == ''


def test_update_summary_rejects_unknown_fields(form):
    assert update_summary(form, notes='Buen día').notes == 'Buen día'
    with pytest.raises(ValueError):
        update_summary(form, routine_id=3)


def test_form_survives_session_serialization(form):
    form = set_mark_completed(edit_set_field(form, 0, 0, 'weight', '72.5'), True, '2024-05-01T11:00')
    assert WorkoutLogForm.from_dict(form.to_dict()) == form
