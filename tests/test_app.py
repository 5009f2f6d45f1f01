import pytest
from unittest.mock import patch

from study_tracker import store
from study_tracker.app import (
    SessionExitRequested, cmd_calendar, cmd_days, cmd_progress, cmd_setup, cmd_tasks, cmd_tracker,
    session_int_prompt, session_prompt,
)
from study_tracker.models import IMPORTANT, THEORY
from study_tracker.sync import find_group, resync


def test_session_exit_requested_is_exception():
    with pytest.raises(SessionExitRequested):
        raise SessionExitRequested()


def test_session_prompt_raises_on_q():
    with patch("study_tracker.app.Prompt.ask", return_value="q"):
        with pytest.raises(SessionExitRequested):
            session_prompt("test prompt")


def test_session_prompt_raises_on_menu():
    with patch("study_tracker.app.Prompt.ask", return_value="menu"):
        with pytest.raises(SessionExitRequested):
            session_prompt("test prompt")


def test_session_prompt_returns_normal_input():
    with patch("study_tracker.app.Prompt.ask", return_value="hello"):
        assert session_prompt("test prompt") == "hello"


def test_session_int_prompt_returns_number():
    with patch("study_tracker.app.Prompt.ask", return_value="3"):
        assert session_int_prompt("days") == 3


def test_session_int_prompt_retries_on_text():
    with patch("study_tracker.app.Prompt.ask", side_effect=["tres", "3"]):
        assert session_int_prompt("days") == 3


def test_cmd_tracker_renders_all_groups(seeded_db):
    groups = resync(seeded_db)
    cmd_tracker(groups)
    cmd_calendar(groups)


def test_cmd_progress_updates_selected_task(seeded_db):
    groups = resync(seeded_db)
    # table 1 (Teoría), task 1 (Álgebra), 3 of 5 read
    with patch("study_tracker.app.Prompt.ask", side_effect=["1", "1", "3", "5"]):
        cmd_progress(seeded_db, groups)
    task = find_group(groups, THEORY).tasks[0]
    assert (task.fraction.numerator, task.fraction.denominator) == (3, 5)
    row = [p for p in store.get_progress(seeded_db) if p.subject_name == "Álgebra" and p.table_type == "theory"][0]
    assert row.current_progress == 3


def test_cmd_days_sets_countdown(seeded_db):
    groups = resync(seeded_db)
    with patch("study_tracker.app.Prompt.ask", side_effect=["2", "3", "4"]):
        cmd_days(seeded_db, groups)
    assert groups[1].tasks[2].days_remaining == 4


def test_cmd_tasks_add(seeded_db, tmp_path):
    groups = resync(seeded_db)
    answers = ["add", "Entrega TP", "5d", "", "Listas, Pilas"]
    with patch("study_tracker.app.Prompt.ask", side_effect=answers):
        cmd_tasks(seeded_db, groups, str(tmp_path / "local.json"))
    task = find_group(groups, IMPORTANT).tasks[0]
    assert task.text == "Entrega TP"
    assert task.days_remaining == 5
    assert task.subtopics == ["Listas", "Pilas"]
    assert store.get_important_tasks(seeded_db)[0].text == "Entrega TP"


def test_cmd_tasks_exit_midway(seeded_db, tmp_path):
    groups = resync(seeded_db)
    with patch("study_tracker.app.Prompt.ask", side_effect=["add", "q"]):
        with pytest.raises(SessionExitRequested):
            cmd_tasks(seeded_db, groups, str(tmp_path / "local.json"))
    assert store.get_important_tasks(seeded_db) == []


def test_cmd_setup_defaults_keep_stored_pdf_count(seeded_db):
    store.update_subject(seeded_db, "Álgebra", pdf_count=6)
    store.update_progress(seeded_db, "Álgebra", "theory", 3, 6)
    # accept every default
    with patch("study_tracker.app.Prompt.ask", side_effect=lambda prompt, **kw: kw.get("default", "")):
        cmd_setup(seeded_db)
    assert store.get_subject(seeded_db, "Álgebra").pdf_count == 6
    row = [p for p in store.get_progress(seeded_db) if p.subject_name == "Álgebra" and p.table_type == "theory"][0]
    assert (row.current_progress, row.total_pdfs) == (3, 6)
