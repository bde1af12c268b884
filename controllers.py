# controllers.py
from fastapi import APIRouter, UploadFile, File, Form, Depends, HTTPException
from fastapi.responses import FileResponse
from sqlalchemy.orm import Session
import os
import logging

import queries
import sessions
from db import get_db
from aggregator import aggregate_session
from emotions import EMOTION_LABELS
from sessions import SessionNotFound, SessionClosed

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/start-session")
def start_session(db: Session = Depends(get_db)):
    try:
        game_session = sessions.start_session(db)
    except OSError as e:
        logger.exception("[api] could not create session directories")
        raise HTTPException(status_code=500, detail=f"Could not create session: {e}")
    return {"sessionId": game_session.session_id}


@router.post("/end-session")
def end_session(session_id: str | None = Form(None), db: Session = Depends(get_db)):
    if not session_id:
        raise HTTPException(status_code=400, detail="Session ID is missing.")
    try:
        game_session = sessions.end_session(db, session_id)
    except SessionNotFound:
        raise HTTPException(status_code=404, detail="Session not found")
    return {"sessionId": game_session.session_id, "endedAt": game_session.ended_at.isoformat()}


@router.post("/upload")
def upload(
    session_id: str | None = Form(None),
    screenshot: UploadFile | None = File(None),
    webcam: UploadFile | None = File(None),
    db: Session = Depends(get_db),
):
    if not session_id:
        raise HTTPException(status_code=400, detail="Session ID is missing.")
    if screenshot is None or webcam is None:
        raise HTTPException(status_code=400, detail="Both 'screenshot' and 'webcam' files are required")

    try:
        game_session = sessions.get_open_session(db, session_id)
    except SessionNotFound:
        raise HTTPException(status_code=400, detail="No active session: session not found")
    except SessionClosed:
        raise HTTPException(status_code=400, detail="No active session: session has ended")

    try:
        webcam_path = sessions.save_capture(game_session, sessions.ROLE_WEBCAM, webcam.file.read())
        screenshot_path = sessions.save_capture(game_session, sessions.ROLE_SCREENSHOT, screenshot.file.read())
    except OSError as e:
        logger.exception(f"[api] writing captures for {session_id} failed")
        raise HTTPException(status_code=500, detail=f"Could not store images: {e}")

    queries.query_record_capture(db, session_id)
    logger.info(f"[api] stored captures for {session_id}: {os.path.basename(webcam_path)}")
    return {
        "message": "Images uploaded successfully!",
        "files": {
            "webcam": os.path.basename(webcam_path),
            "screenshot": os.path.basename(screenshot_path),
        },
    }


@router.get("/sessions")
def get_sessions(db: Session = Depends(get_db)):
    return {"sessions": sessions.list_sessions(db)}


@router.get("/analyze/{session_id}")
def analyze_session(session_id: str, db: Session = Depends(get_db)):
    try:
        analysis = aggregate_session(db, session_id)
    except SessionNotFound:
        raise HTTPException(status_code=404, detail="Session not found")
    except OSError as e:
        logger.exception(f"[api] reading images for {session_id} failed")
        raise HTTPException(status_code=500, detail=f"Error analyzing images: {e}")
    return analysis_to_dict(analysis)


@router.get("/uploads/{role_dir}/{session_id}/{filename}")
def get_image(role_dir: str, session_id: str, filename: str):
    roles = {d: role for role, d in sessions.ROLE_DIRS.items()}
    if role_dir not in roles:
        raise HTTPException(status_code=400, detail="Invalid image type")
    if os.path.basename(filename) != filename or filename in (".", "..") or not sessions.is_valid_session_id(session_id):
        raise HTTPException(status_code=400, detail="Invalid image path")

    file_path = os.path.join(sessions.session_dir(roles[role_dir], session_id), filename)
    if os.path.isfile(file_path):
        return FileResponse(file_path)
    raise HTTPException(status_code=404, detail="Image not found")


@router.get("/health")
def health():
    return {"status": "ok"}


def emotions_to_dict(row):
    return {label: getattr(row, label) for label in EMOTION_LABELS}


def analysis_to_dict(analysis):
    return {
        "sessionId": analysis.session_id,
        "imageAnalyses": [
            {
                "imagePath": image.image_path,
                "emotions": emotions_to_dict(image),
                "dominantEmotion": image.dominant_emotion,
                "status": image.status,
            }
            for image in analysis.images
        ],
        "overallAnalysis": {
            "emotions": emotions_to_dict(analysis),
            "dominantEmotion": analysis.dominant_emotion,
        },
        "createdAt": analysis.created_at.isoformat() if analysis.created_at else None,
    }
