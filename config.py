# config.py
import os
from dotenv import load_dotenv

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./analyses.db")

UPLOAD_ROOT = os.getenv("UPLOAD_ROOT", "uploads")
WEBCAM_DIR = os.path.join(UPLOAD_ROOT, "webcam_images")
SCREENSHOT_DIR = os.path.join(UPLOAD_ROOT, "screenshots")

CLASSIFIER_URL = os.getenv(
    "CLASSIFIER_URL",
    "https://api-inference.huggingface.co/models/motheecreator/vit-Facial-Expression-Recognition",
)
HF_API_TOKEN = os.getenv("HF_API_TOKEN", "")
CLASSIFIER_TIMEOUT = float(os.getenv("CLASSIFIER_TIMEOUT", "30"))

ANALYZE_MAX_RETRIES = int(os.getenv("ANALYZE_MAX_RETRIES", "5"))
BACKOFF_BASE_SECONDS = float(os.getenv("BACKOFF_BASE_SECONDS", "1"))
BACKOFF_MAX_SECONDS = float(os.getenv("BACKOFF_MAX_SECONDS", "10"))
ANALYSIS_BATCH_SIZE = int(os.getenv("ANALYSIS_BATCH_SIZE", "3"))

ADMIN_USERNAME = os.getenv("ADMIN_USERNAME", "admin")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD")  # seeded only when set

# capture client
API_URL = os.getenv("API_URL", "http://localhost:5000")
CAPTURE_INTERVAL = float(os.getenv("CAPTURE_INTERVAL", "3"))
CAMERA_INDEX = int(os.getenv("CAMERA_INDEX", "0"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
PORT = int(os.getenv("PORT", "5000"))
