# sessions.py
"""
Session registry and capture storage.

A session id is handed to the client by start_session() and must come back
with every upload; there is no process-wide "current session".
"""
import os
import re
import time
import uuid
import logging
from datetime import datetime

from sqlalchemy.orm import Session

import config
import queries

logger = logging.getLogger(__name__)

ROLE_WEBCAM = "webcam"
ROLE_SCREENSHOT = "screenshot"

# URL segment / directory name per role
ROLE_DIRS = {
    ROLE_WEBCAM: "webcam_images",
    ROLE_SCREENSHOT: "screenshots",
}

# letters, digits, "_" and "-" only; keeps ids inside the capture roots
SESSION_ID_PATTERN = re.compile(r"[A-Za-z0-9_-]+")


class SessionNotFound(Exception):
    pass


class SessionClosed(Exception):
    pass


def is_valid_session_id(session_id: str) -> bool:
    return bool(session_id) and SESSION_ID_PATTERN.fullmatch(session_id) is not None


def role_root(role: str) -> str:
    if role == ROLE_WEBCAM:
        return config.WEBCAM_DIR
    if role == ROLE_SCREENSHOT:
        return config.SCREENSHOT_DIR
    raise ValueError(f"Unknown capture role: {role}")


def session_dir(role: str, session_id: str) -> str:
    return os.path.join(role_root(role), session_id)


def new_session_id() -> str:
    return f"session_{int(time.time() * 1000)}_{uuid.uuid4().hex[:6]}"


def capture_filename(now: datetime | None = None) -> str:
    now = now or datetime.now()
    return f"{now.strftime('%Y-%m-%d_%H-%M-%S-%f')}_{uuid.uuid4().hex[:8]}.png"


def start_session(db: Session):
    """Create the two capture directories and register a new session. OSError propagates."""
    session_id = new_session_id()
    webcam_dir = session_dir(ROLE_WEBCAM, session_id)
    screenshot_dir = session_dir(ROLE_SCREENSHOT, session_id)
    os.makedirs(webcam_dir, exist_ok=True)
    os.makedirs(screenshot_dir, exist_ok=True)
    game_session = queries.query_save_game_session(db, session_id, webcam_dir, screenshot_dir)
    logger.info(f"[session] started {session_id}")
    return game_session


def end_session(db: Session, session_id: str):
    game_session = queries.query_end_game_session(db, session_id)
    if game_session is None:
        raise SessionNotFound(session_id)
    logger.info(f"[session] ended {session_id} after {game_session.capture_count} captures")
    return game_session


def get_open_session(db: Session, session_id: str):
    game_session = queries.query_get_game_session(db, session_id)
    if game_session is None:
        raise SessionNotFound(session_id)
    if game_session.ended_at is not None:
        raise SessionClosed(session_id)
    return game_session


def save_capture(game_session, role: str, data: bytes) -> str:
    """Write one capture into the session's directory for `role`; returns the file path."""
    target_dir = game_session.webcam_dir if role == ROLE_WEBCAM else game_session.screenshot_dir
    os.makedirs(target_dir, exist_ok=True)
    path = os.path.join(target_dir, capture_filename())
    with open(path, "wb") as f:
        f.write(data)
    return path


def filesystem_session_ids() -> list[str]:
    """Session directories under the webcam root, newest first (ids are time-derived)."""
    root = config.WEBCAM_DIR
    if not os.path.isdir(root):
        return []
    names = [
        n for n in os.listdir(root)
        if is_valid_session_id(n) and os.path.isdir(os.path.join(root, n))
    ]
    return sorted(names, reverse=True)


def list_sessions(db: Session) -> list[str]:
    """Analyzed sessions first, then any other session found on disk; no duplicates."""
    seen = {}
    for session_id in queries.query_get_analyzed_session_ids(db) + filesystem_session_ids():
        seen.setdefault(session_id, None)
    return list(seen)
