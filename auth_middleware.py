# auth_middleware.py
import base64
from fastapi import Request
from fastapi.responses import JSONResponse
from db import SessionLocal
import queries


def verify_user(username: str, password: str):
    db = SessionLocal()
    try:
        return queries.query_verify_user(db, username, password)
    finally:
        db.close()


def is_admin_path(path: str) -> bool:
    return path == "/sessions" or path.startswith("/analyze/")


def basic_auth_middleware():
    async def middleware(request: Request, call_next):
        # game-facing endpoints stay open; only the dashboard needs credentials
        if not is_admin_path(request.url.path):
            return await call_next(request)

        auth = request.headers.get("Authorization")
        if not auth:
            return JSONResponse(status_code=401, content={"detail": "Missing credentials"})
        try:
            encoded = auth.split(" ")[1]
            decoded = base64.b64decode(encoded).decode("utf-8")
            username, password = decoded.split(":", 1)
        except Exception:
            return JSONResponse(status_code=401, content={"detail": "Invalid credentials"})
        if not verify_user(username, password):
            return JSONResponse(status_code=401, content={"detail": "Invalid credentials"})
        return await call_next(request)

    return middleware
