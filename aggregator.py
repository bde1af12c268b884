# aggregator.py
import os
import logging
from concurrent.futures import ThreadPoolExecutor

from sqlalchemy.orm import Session

import config
import queries
from analyzer import analyze_image
from emotions import mean_vector, dominant_emotion
from sessions import ROLE_WEBCAM, session_dir, is_valid_session_id, SessionNotFound

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = (".png", ".jpg", ".jpeg")


def webcam_dir_or_raise(session_id: str) -> str:
    if not is_valid_session_id(session_id):
        raise SessionNotFound(session_id)
    directory = session_dir(ROLE_WEBCAM, session_id)
    if not os.path.isdir(directory):
        raise SessionNotFound(session_id)
    return directory


def list_session_images(session_id: str) -> list[str]:
    directory = webcam_dir_or_raise(session_id)
    names = sorted(
        n for n in os.listdir(directory)
        if n.lower().endswith(IMAGE_EXTENSIONS) and os.path.isfile(os.path.join(directory, n))
    )
    return [os.path.join(directory, n) for n in names]


def analyze_in_batches(paths: list[str], analyze=None, batch_size: int | None = None):
    """Run `analyze` over paths, `batch_size` at a time; batches run one after another."""
    analyze = analyze or analyze_image
    batch_size = batch_size or config.ANALYSIS_BATCH_SIZE
    results = []
    if not paths:
        return results
    with ThreadPoolExecutor(max_workers=batch_size) as pool:
        for i in range(0, len(paths), batch_size):
            batch = paths[i:i + batch_size]
            results.extend(pool.map(analyze, batch))
    return results


def aggregate_session(db: Session, session_id: str, analyze=None):
    """
    Return the stored analysis for a session, computing and persisting it first
    if there is none yet.

    A stored analysis is returned as-is and never recomputed. Analysing a
    registered session ends it before its images are listed, so no upload can
    land after the listing. Raises SessionNotFound (and ends nothing) when the
    id is malformed or its webcam directory does not exist.
    """
    existing = queries.query_get_session_analysis(db, session_id)
    if existing is not None:
        logger.info(f"[aggregate] serving stored analysis for {session_id}")
        return existing

    # ended before listing; uploads from here on are refused
    webcam_dir_or_raise(session_id)
    if queries.query_get_game_session(db, session_id) is not None:
        queries.query_end_game_session(db, session_id)
    paths = list_session_images(session_id)

    logger.info(f"[aggregate] analysing {len(paths)} images for {session_id}")
    results = analyze_in_batches(paths, analyze=analyze)

    overall = mean_vector([r.emotions for r in results])
    fallbacks = sum(1 for r in results if r.status != "ok")
    if fallbacks:
        logger.warning(f"[aggregate] {session_id}: {fallbacks}/{len(results)} images fell back to neutral")

    analysis = queries.query_save_session_analysis(
        db, session_id, results, overall, dominant_emotion(overall)
    )
    logger.info(f"[aggregate] stored analysis for {session_id} (dominant={analysis.dominant_emotion})")
    return analysis
