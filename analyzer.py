# analyzer.py
import os
import time
import logging
from dataclasses import dataclass, field

import config
from classifier import classify_image, ClassifierError, ModelLoadingError
from emotions import normalize_scores, dominant_emotion, neutral_fallback

logger = logging.getLogger(__name__)

STATUS_OK = "ok"
STATUS_FALLBACK = "fallback"


@dataclass
class ImageResult:
    image_path: str
    emotions: dict = field(default_factory=neutral_fallback)
    dominant_emotion: str = "neutral"
    status: str = STATUS_OK
    attempts: int = 0


def backoff_delay(retry: int) -> float:
    """Delay before retry number `retry` (0-based): base * 2**retry, capped."""
    return min(config.BACKOFF_BASE_SECONDS * (2 ** retry), config.BACKOFF_MAX_SECONDS)


def _fallback(image_path: str, attempts: int) -> ImageResult:
    return ImageResult(
        image_path=image_path,
        emotions=neutral_fallback(),
        dominant_emotion="neutral",
        status=STATUS_FALLBACK,
        attempts=attempts,
    )


def analyze_image(image_path: str, classify=None, sleep=None) -> ImageResult:
    """
    Classify one image and turn the answer into an emotion vector.

    Never raises. An empty or unreadable file yields the neutral fallback right
    away; classifier failures are retried up to ANALYZE_MAX_RETRIES times with
    exponential backoff before falling back to neutral.
    """
    classify = classify or classify_image
    sleep = sleep or time.sleep
    name = os.path.basename(image_path)
    try:
        with open(image_path, "rb") as f:
            image_bytes = f.read()
    except OSError as e:
        logger.error(f"[analyze] cannot read {name}: {e}")
        return _fallback(name, attempts=0)
    if not image_bytes:
        logger.error(f"[analyze] {name} is empty")
        return _fallback(name, attempts=0)

    max_attempts = config.ANALYZE_MAX_RETRIES + 1
    for attempt in range(1, max_attempts + 1):
        try:
            scores = classify(image_bytes)
            emotions = normalize_scores(scores)
            return ImageResult(
                image_path=name,
                emotions=emotions,
                dominant_emotion=dominant_emotion(emotions),
                status=STATUS_OK,
                attempts=attempt,
            )
        except ModelLoadingError as e:
            reason = f"model loading ({e})"
        except ClassifierError as e:
            reason = str(e)
        except Exception as e:
            logger.exception(f"[analyze] unexpected classifier failure for {name}")
            reason = repr(e)

        if attempt == max_attempts:
            logger.error(f"[analyze] {name}: giving up after {attempt} attempts, last error: {reason}")
            break
        delay = backoff_delay(attempt - 1)
        logger.warning(f"[analyze] {name}: attempt {attempt} failed ({reason}); retrying in {delay}s")
        sleep(delay)

    return _fallback(name, attempts=max_attempts)
