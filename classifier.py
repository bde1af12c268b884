# classifier.py
import logging

import httpx
from pydantic import ValidationError

import config
from emotions import LABEL_SCORES, LabelScore

logger = logging.getLogger(__name__)


class ClassifierError(Exception):
    """The classification service failed or answered with something unusable."""


class ModelLoadingError(ClassifierError):
    """The service is still warming the model up; worth retrying."""


def _headers() -> dict:
    headers = {"Content-Type": "application/octet-stream"}
    if config.HF_API_TOKEN:
        headers["Authorization"] = f"Bearer {config.HF_API_TOKEN}"
    return headers


def classify_image(image_bytes: bytes, client: httpx.Client | None = None) -> list[LabelScore]:
    """
    Send raw image bytes to the emotion classifier.

    Returns the validated list of {label, score} pairs. Raises ModelLoadingError
    when the service reports the model is loading, ClassifierError on any other
    failure (transport error, error payload, malformed body).
    """
    try:
        if client is not None:
            r = client.post(config.CLASSIFIER_URL, content=image_bytes, headers=_headers())
        else:
            r = httpx.post(
                config.CLASSIFIER_URL,
                content=image_bytes,
                headers=_headers(),
                timeout=config.CLASSIFIER_TIMEOUT,
            )
    except httpx.HTTPError as e:
        raise ClassifierError(f"Classifier request failed: {e}") from e

    try:
        payload = r.json()
    except ValueError as e:
        raise ClassifierError(f"Classifier returned non-JSON body (status {r.status_code})") from e

    if isinstance(payload, dict) and "error" in payload:
        message = str(payload.get("error"))
        if "loading" in message.lower():
            raise ModelLoadingError(message)
        raise ClassifierError(f"Classifier error (status {r.status_code}): {message}")

    if r.status_code != 200:
        raise ClassifierError(f"Classifier returned status {r.status_code}")

    try:
        return LABEL_SCORES.validate_python(payload)
    except ValidationError as e:
        raise ClassifierError(f"Malformed classifier response: {e}") from e
