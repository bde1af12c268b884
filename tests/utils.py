# tests/utils.py
import io
import base64
from PIL import Image
from emotions import LabelScore


def get_auth_headers(username="testuser", password="testpass"):
    token = base64.b64encode(f"{username}:{password}".encode()).decode()
    return {"Authorization": f"Basic {token}"}


def png_bytes(color=(0, 255, 0), size=(20, 20)):
    img = Image.new("RGB", size, color=color)
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


def upload_files():
    return {
        "screenshot": ("screenshot.png", png_bytes((0, 0, 255)), "image/png"),
        "webcam": ("webcam.png", png_bytes(), "image/png"),
    }


def happy_scores(_image_bytes=None):
    return [LabelScore(label="happy", score=0.9), LabelScore(label="neutral", score=0.1)]
