# models.py
from sqlalchemy import Column, String, DateTime, Integer, Float, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime

from db import Base


class User(Base):
    __tablename__ = 'users'
    username = Column(String, primary_key=True)
    password = Column(String, nullable=False)


class GameSession(Base):
    """One play-through: the capture directories it owns and whether it still accepts uploads."""
    __tablename__ = 'game_sessions'
    session_id = Column(String, primary_key=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    webcam_dir = Column(String, nullable=False)
    screenshot_dir = Column(String, nullable=False)
    capture_count = Column(Integer, default=0, nullable=False)
    ended_at = Column(DateTime, nullable=True)


# no FK to game_sessions: an analysis may outlive (or precede) the registry row
class SessionAnalysis(Base):
    __tablename__ = 'session_analyses'
    session_id = Column(String, primary_key=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    angry = Column(Float, default=0.0)
    disgust = Column(Float, default=0.0)
    fear = Column(Float, default=0.0)
    happy = Column(Float, default=0.0)
    sad = Column(Float, default=0.0)
    surprise = Column(Float, default=0.0)
    neutral = Column(Float, default=0.0)
    dominant_emotion = Column(String, default="neutral")
    images = relationship(
        "ImageAnalysis",
        back_populates="analysis",
        order_by="ImageAnalysis.position",
        cascade="all, delete-orphan",
    )


class ImageAnalysis(Base):
    __tablename__ = 'image_analyses'
    id = Column(Integer, primary_key=True, autoincrement=True)
    session_id = Column(String, ForeignKey('session_analyses.session_id'))
    position = Column(Integer, nullable=False)
    image_path = Column(String)
    angry = Column(Float, default=0.0)
    disgust = Column(Float, default=0.0)
    fear = Column(Float, default=0.0)
    happy = Column(Float, default=0.0)
    sad = Column(Float, default=0.0)
    surprise = Column(Float, default=0.0)
    neutral = Column(Float, default=0.0)
    dominant_emotion = Column(String)
    status = Column(String, default="ok")
    analysis = relationship("SessionAnalysis", back_populates="images")
