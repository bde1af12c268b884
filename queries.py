#queries.py
from sqlalchemy.orm import Session
from models import User, GameSession, SessionAnalysis, ImageAnalysis
from emotions import EMOTION_LABELS
from datetime import datetime


def ensure_user(db: Session, username: str, password: str):
    if not username:
        return
    user = db.get(User, username)
    if user is None:
        db.add(User(username=username, password=password))
    else:
        user.password = password
    db.commit()


def query_verify_user(db: Session, username: str, password: str) -> bool:
    return db.query(User).filter_by(username=username, password=password).first() is not None


def query_save_game_session(db: Session, session_id: str, webcam_dir: str, screenshot_dir: str):
    game_session = GameSession(
        session_id=session_id,
        webcam_dir=webcam_dir,
        screenshot_dir=screenshot_dir,
        created_at=datetime.utcnow(),
    )
    db.add(game_session)
    db.commit()
    return game_session


def query_get_game_session(db: Session, session_id: str):
    return db.query(GameSession).filter_by(session_id=session_id).first()


def query_end_game_session(db: Session, session_id: str):
    game_session = query_get_game_session(db, session_id)
    if game_session is None:
        return None
    if game_session.ended_at is None:
        game_session.ended_at = datetime.utcnow()
        db.commit()
    return game_session


def query_record_capture(db: Session, session_id: str):
    game_session = query_get_game_session(db, session_id)
    if game_session is not None:
        game_session.capture_count = (game_session.capture_count or 0) + 1
        db.commit()


def query_get_session_analysis(db: Session, session_id: str):
    return db.query(SessionAnalysis).filter_by(session_id=session_id).first()


def query_save_session_analysis(db: Session, session_id: str, image_results, overall: dict, dominant: str):
    analysis = SessionAnalysis(
        session_id=session_id,
        created_at=datetime.utcnow(),
        dominant_emotion=dominant,
        **{label: overall[label] for label in EMOTION_LABELS},
    )
    for position, result in enumerate(image_results):
        analysis.images.append(ImageAnalysis(
            position=position,
            image_path=result.image_path,
            dominant_emotion=result.dominant_emotion,
            status=result.status,
            **{label: result.emotions[label] for label in EMOTION_LABELS},
        ))
    db.add(analysis)
    db.commit()
    db.refresh(analysis)
    return analysis


def query_get_analyzed_session_ids(db: Session):
    rows = (
        db.query(SessionAnalysis.session_id)
        .order_by(SessionAnalysis.created_at.desc())
        .all()
    )
    return [r[0] for r in rows]
