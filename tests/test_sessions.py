import os
import re
from datetime import datetime

import pytest

import models
import queries
import sessions
from emotions import empty_vector
from sessions import SessionNotFound, SessionClosed


def test_start_session_creates_directories_and_row(db_session, tmp_upload_dirs):
    webcam_root, screenshot_root = tmp_upload_dirs
    game_session = sessions.start_session(db_session)

    assert game_session.session_id.startswith("session_")
    assert (webcam_root / game_session.session_id).is_dir()
    assert (screenshot_root / game_session.session_id).is_dir()
    stored = queries.query_get_game_session(db_session, game_session.session_id)
    assert stored is not None
    assert stored.ended_at is None
    assert stored.capture_count == 0


def test_session_ids_are_unique(db_session, tmp_upload_dirs):
    ids = {sessions.start_session(db_session).session_id for _ in range(20)}
    assert len(ids) == 20


def test_directory_failure_propagates(db_session, tmp_upload_dirs, monkeypatch):
    def broken_makedirs(*a, **k):
        raise PermissionError("read-only filesystem")

    monkeypatch.setattr(sessions.os, "makedirs", broken_makedirs)
    with pytest.raises(OSError):
        sessions.start_session(db_session)
    assert db_session.query(models.GameSession).count() == 0


def test_capture_filename_is_timestamped_and_unique():
    now = datetime(2025, 3, 4, 5, 6, 7, 890123)
    a = sessions.capture_filename(now)
    b = sessions.capture_filename(now)
    assert re.fullmatch(r"2025-03-04_05-06-07-890123_[0-9a-f]{8}\.png", a)
    assert a != b


def test_save_capture_writes_bytes_to_role_directory(db_session, tmp_upload_dirs):
    webcam_root, screenshot_root = tmp_upload_dirs
    game_session = sessions.start_session(db_session)

    webcam_path = sessions.save_capture(game_session, sessions.ROLE_WEBCAM, b"webcam-bytes")
    screenshot_path = sessions.save_capture(game_session, sessions.ROLE_SCREENSHOT, b"screen-bytes")

    assert os.path.dirname(webcam_path) == str(webcam_root / game_session.session_id)
    assert os.path.dirname(screenshot_path) == str(screenshot_root / game_session.session_id)
    with open(webcam_path, "rb") as f:
        assert f.read() == b"webcam-bytes"


def test_get_open_session_errors(db_session, tmp_upload_dirs):
    with pytest.raises(SessionNotFound):
        sessions.get_open_session(db_session, "session_missing")

    game_session = sessions.start_session(db_session)
    assert sessions.get_open_session(db_session, game_session.session_id) is game_session

    sessions.end_session(db_session, game_session.session_id)
    with pytest.raises(SessionClosed):
        sessions.get_open_session(db_session, game_session.session_id)


def test_end_unknown_session(db_session):
    with pytest.raises(SessionNotFound):
        sessions.end_session(db_session, "session_missing")


def test_end_session_is_idempotent(db_session, tmp_upload_dirs):
    game_session = sessions.start_session(db_session)
    first = sessions.end_session(db_session, game_session.session_id).ended_at
    second = sessions.end_session(db_session, game_session.session_id).ended_at
    assert first == second


def test_filesystem_session_ids_without_root(monkeypatch, tmp_path):
    import config
    monkeypatch.setattr(config, "WEBCAM_DIR", str(tmp_path / "does-not-exist"))
    assert sessions.filesystem_session_ids() == []


def test_list_sessions_has_no_duplicates(db_session, tmp_upload_dirs):
    webcam_root, _ = tmp_upload_dirs
    for name in ("session_100_aaaaaa", "session_200_bbbbbb", "session_300_cccccc"):
        (webcam_root / name).mkdir()
    # stray file is not a session
    (webcam_root / "notes.txt").write_text("x")

    queries.query_save_session_analysis(db_session, "session_200_bbbbbb", [], empty_vector(), "neutral")
    queries.query_save_session_analysis(db_session, "session_050_legacy", [], empty_vector(), "neutral")

    listed = sessions.list_sessions(db_session)
    assert len(listed) == len(set(listed))
    assert set(listed) == {"session_100_aaaaaa", "session_200_bbbbbb", "session_300_cccccc", "session_050_legacy"}
    # analysed sessions come first
    assert set(listed[:2]) == {"session_200_bbbbbb", "session_050_legacy"}
    assert listed[2:] == ["session_300_cccccc", "session_100_aaaaaa"]


def test_session_id_shape(db_session, tmp_upload_dirs):
    assert sessions.is_valid_session_id(sessions.new_session_id())
    assert sessions.is_valid_session_id("session_1")
    for bad in ["", ".", "..", "a/b", "a\\b", "session_1.png"]:
        assert not sessions.is_valid_session_id(bad)


def test_filesystem_listing_skips_odd_directory_names(tmp_upload_dirs):
    webcam_root, _ = tmp_upload_dirs
    (webcam_root / "session_1").mkdir()
    (webcam_root / "has.dot").mkdir()
    assert sessions.filesystem_session_ids() == ["session_1"]
