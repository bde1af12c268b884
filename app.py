# app.py
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import config
import queries
from db import SessionLocal, init_db
from auth_middleware import basic_auth_middleware
import controllers

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s.%(msecs)03d %(levelname)s %(name)s %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger(__name__)

init_db()


def seed_admin():
    if not config.ADMIN_PASSWORD:
        logger.warning("ADMIN_PASSWORD not set; dashboard routes accept only existing users")
        return
    db = SessionLocal()
    try:
        queries.ensure_user(db, config.ADMIN_USERNAME, config.ADMIN_PASSWORD)
    finally:
        db.close()


seed_admin()

app = FastAPI(title="Shape Game Emotion Capture API")
app.middleware("http")(basic_auth_middleware())
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"], allow_credentials=True,
    allow_methods=["*"], allow_headers=["*"],
)

app.include_router(controllers.router)

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=config.PORT)
