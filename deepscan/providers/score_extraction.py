"""Deepfake score extraction from Sightengine responses.

The response schema has varied between API revisions, so the score is looked
up through an ordered list of candidate paths and the first numeric value
wins. Video responses may also carry per-scene (or per-frame) scores.
"""

from collections.abc import Sequence
from typing import Any

ScorePath = tuple[str, ...]

SUMMARY_SCORE_PATHS: tuple[ScorePath, ...] = (
    ("deepfake", "prob"),
    ("type", "deepfake"),
    ("deepfake", "deepfake_score"),
    ("deepfake", "score"),
)

SCENE_SCORE_PATHS: tuple[ScorePath, ...] = (
    ("deepfake", "prob"),
    ("type", "deepfake"),
)

SCENE_LIST_PATHS: tuple[ScorePath, ...] = (
    ("scenes",),
    ("data", "frames"),
)


def lookup(data: Any, path: ScorePath) -> Any:
    """Follow path through nested dicts. Returns None on any miss."""
    current = data
    for key in path:
        if not isinstance(current, dict) or key not in current:
            return None
        current = current[key]
    return current


def clamp_score(value: float) -> float:
    return max(0.0, min(1.0, float(value)))


def _as_number(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def extract_score(
    data: Any,
    paths: Sequence[ScorePath] = SUMMARY_SCORE_PATHS,
    default: float = 0.0,
) -> float:
    """Return the first numeric value found along paths, clamped to [0, 1]."""
    for path in paths:
        number = _as_number(lookup(data, path))
        if number is not None:
            return clamp_score(number)
    return default


def extract_scene_scores(data: Any) -> list[float]:
    """Collect one score per scene from the first scene list present."""
    for path in SCENE_LIST_PATHS:
        scenes = lookup(data, path)
        if isinstance(scenes, list):
            return [extract_score(scene, SCENE_SCORE_PATHS) for scene in scenes]
    return []


def extract_video_score(data: Any) -> float:
    """The most alarming signal wins: max of the summary and every scene."""
    return max([extract_score(data), *extract_scene_scores(data)])
