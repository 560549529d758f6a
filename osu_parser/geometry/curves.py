"""Slider curve endpoints.

Computes where a slider ends by walking its curve for ``path_length``
osu! pixels. Each curve type is approximated by a dense polyline, which is
then walked by arc length; a path shorter than ``path_length`` is extended
along its last segment.
"""

from __future__ import annotations

import math
from typing import Callable, Sequence

import numpy as np

from osu_parser.schemas.beatmap import CurveType, Point

EndpointResolver = Callable[[CurveType, float, Sequence[Point]], "Point | None"]

BEZIER_SAMPLES = 64
CATMULL_SAMPLES = 50
COLLINEAR_EPSILON = 1e-3


def _walk(path: np.ndarray, length: float) -> np.ndarray | None:
    """Point at arc length *length* along a polyline."""
    segments = np.diff(path, axis=0)
    seg_lengths = np.hypot(segments[:, 0], segments[:, 1])
    nonzero = np.flatnonzero(seg_lengths > 0)
    if nonzero.size == 0:
        return None

    cumulative = np.cumsum(seg_lengths)
    idx = int(np.searchsorted(cumulative, length))
    if idx >= len(seg_lengths):
        idx = int(nonzero[-1])

    start = cumulative[idx] - seg_lengths[idx]
    t = (length - start) / seg_lengths[idx]
    return path[idx] + segments[idx] * t


def _bezier_segment(points: np.ndarray, samples: int = BEZIER_SAMPLES) -> np.ndarray:
    """Sample one bezier segment by de Casteljau's repeated interpolation."""
    t = np.linspace(0.0, 1.0, samples)[:, None, None]
    work = np.broadcast_to(points, (samples, *points.shape))
    while work.shape[1] > 1:
        work = work[:, :-1] + (work[:, 1:] - work[:, :-1]) * t
    return work[:, 0]


def _bezier_path(points: np.ndarray) -> np.ndarray:
    """Sample a multi-segment bezier. Repeated points start a new segment."""
    pieces = []
    start = 0
    for i in range(1, len(points)):
        at_end = i == len(points) - 1
        if at_end or np.array_equal(points[i], points[i + 1]):
            segment = points[start:i + 1]
            if len(segment) > 1:
                pieces.append(_bezier_segment(segment))
            start = i + 1
    if not pieces:
        return points
    return np.vstack(pieces)


def _catmull_path(points: np.ndarray) -> np.ndarray:
    t = np.linspace(0.0, 1.0, CATMULL_SAMPLES)[:, None]
    pieces = []
    for i in range(len(points) - 1):
        v1 = points[i - 1] if i > 0 else points[i]
        v2 = points[i]
        v3 = points[i + 1]
        v4 = points[i + 2] if i < len(points) - 2 else 2 * v3 - v2
        pieces.append(0.5 * (
            2 * v2
            + (-v1 + v3) * t
            + (2 * v1 - 5 * v2 + 4 * v3 - v4) * t ** 2
            + (-v1 + 3 * v2 - 3 * v3 + v4) * t ** 3
        ))
    return np.vstack(pieces)


def _arc_end(points: np.ndarray, length: float) -> np.ndarray | None:
    """Endpoint on the circle through three points, or None if collinear."""
    a, b, c = points
    d = 2 * (a[0] * (b[1] - c[1]) + b[0] * (c[1] - a[1]) + c[0] * (a[1] - b[1]))
    if abs(d) < COLLINEAR_EPSILON:
        return None

    sq = (a ** 2).sum(), (b ** 2).sum(), (c ** 2).sum()
    center = np.array([
        (sq[0] * (b[1] - c[1]) + sq[1] * (c[1] - a[1]) + sq[2] * (a[1] - b[1])) / d,
        (sq[0] * (c[0] - b[0]) + sq[1] * (a[0] - c[0]) + sq[2] * (b[0] - a[0])) / d,
    ])
    radius = float(np.hypot(*(a - center)))

    # Orientation of a -> b -> c decides the sweep direction.
    cross = (b[0] - a[0]) * (c[1] - b[1]) - (b[1] - a[1]) * (c[0] - b[0])
    direction = 1.0 if cross > 0 else -1.0

    start_angle = math.atan2(a[1] - center[1], a[0] - center[0])
    end_angle = start_angle + direction * length / radius
    return center + radius * np.array([np.cos(end_angle), np.sin(end_angle)])


def get_end_point(
    curve_type: CurveType, path_length: float, points: Sequence[Point],
) -> Point | None:
    """Return the slider endpoint, or None when it cannot be resolved."""
    if curve_type == CurveType.UNKNOWN or len(points) < 2:
        return None
    if not math.isfinite(path_length) or path_length <= 0:
        return None

    control = np.asarray(points, dtype=float)
    if not np.isfinite(control).all():
        return None

    end = None
    with np.errstate(all="ignore"):
        if curve_type == CurveType.PASS_THROUGH and len(control) == 3:
            end = _arc_end(control, path_length)
        if end is None:
            if curve_type == CurveType.LINEAR:
                path = control
            elif curve_type == CurveType.CATMULL:
                path = _catmull_path(control)
            else:
                path = _bezier_path(control)
            end = _walk(path, path_length)

    if end is None or not np.isfinite(end).all():
        return None
    return float(end[0]), float(end[1])
