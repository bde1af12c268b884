# capture_client.py
"""
Periodic webcam + screen capture for a running game.

Every tick grabs one webcam frame and one screenshot, encodes both as PNG and
posts them to /upload under the client's session id. A failed tick is logged
and the schedule goes on. The camera is opened once per run and released on
every exit path.
"""
import io
import logging
import threading
from contextlib import contextmanager

import cv2
import httpx
from PIL import ImageGrab

import config

logger = logging.getLogger(__name__)

MIN_INTERVAL = 3.0
MAX_INTERVAL = 5.0


class CameraError(Exception):
    pass


@contextmanager
def open_camera(index: int = 0, factory=None):
    factory = factory or cv2.VideoCapture
    cap = factory(index)
    try:
        if not cap.isOpened():
            raise CameraError(f"Cannot open camera {index}")
        yield cap
    finally:
        cap.release()
        logger.info(f"[capture] camera {index} released")


def grab_webcam_png(cap) -> bytes:
    ok, frame = cap.read()
    if not ok or frame is None:
        raise CameraError("Camera returned no frame")
    ok, buf = cv2.imencode(".png", frame)
    if not ok:
        raise CameraError("PNG encoding of webcam frame failed")
    return buf.tobytes()


def grab_screenshot_png(grab=None) -> bytes:
    image = (grab or ImageGrab.grab)()
    out = io.BytesIO()
    image.save(out, format="PNG")
    return out.getvalue()


class CaptureClient:
    def __init__(
        self,
        api_url: str | None = None,
        interval: float | None = None,
        camera_index: int | None = None,
        http: httpx.Client | None = None,
        camera_factory=None,
        screen_grabber=None,
    ):
        interval = config.CAPTURE_INTERVAL if interval is None else interval
        self.interval = min(max(interval, MIN_INTERVAL), MAX_INTERVAL)
        self.camera_index = config.CAMERA_INDEX if camera_index is None else camera_index
        self.http = http or httpx.Client(base_url=api_url or config.API_URL, timeout=10.0)
        self.camera_factory = camera_factory
        self.screen_grabber = screen_grabber
        self.session_id: str | None = None
        self.uploads = 0
        self.failures = 0
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    def start_session(self) -> str:
        r = self.http.get("/start-session")
        r.raise_for_status()
        self.session_id = r.json()["sessionId"]
        logger.info(f"[capture] session {self.session_id} started")
        return self.session_id

    def end_session(self):
        if not self.session_id:
            return
        try:
            r = self.http.post("/end-session", data={"session_id": self.session_id})
            r.raise_for_status()
            logger.info(f"[capture] session {self.session_id} ended")
        except httpx.HTTPError as e:
            logger.error(f"[capture] could not end session {self.session_id}: {e}")

    def upload(self, screenshot: bytes, webcam: bytes):
        r = self.http.post(
            "/upload",
            data={"session_id": self.session_id},
            files={
                "screenshot": ("screenshot.png", screenshot, "image/png"),
                "webcam": ("webcam.png", webcam, "image/png"),
            },
        )
        r.raise_for_status()
        return r.json()

    def capture_once(self, camera) -> bool:
        try:
            webcam = grab_webcam_png(camera)
            screenshot = grab_screenshot_png(self.screen_grabber)
            self.upload(screenshot, webcam)
        except Exception:
            self.failures += 1
            logger.exception("[capture] tick failed")
            return False
        self.uploads += 1
        return True

    def run(self):
        """Capture every `interval` seconds until stop() is called."""
        with open_camera(self.camera_index, self.camera_factory) as camera:
            while not self._stop.wait(self.interval):
                self.capture_once(camera)

    def _run_logged(self):
        try:
            self.run()
        except CameraError as e:
            logger.error(f"[capture] stopped: {e}")

    def start(self) -> str:
        if self.session_id is None:
            self.start_session()
        self._stop.clear()
        self._thread = threading.Thread(target=self._run_logged, name="capture", daemon=True)
        self._thread.start()
        return self.session_id

    def stop(self):
        self._stop.set()
        if self._thread is not None:
            self._thread.join()
            self._thread = None
        self.end_session()
        logger.info(f"[capture] {self.uploads} uploads, {self.failures} failed ticks")

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, *exc):
        self.stop()
        return False
