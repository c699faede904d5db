"""
Adapter for an optional external shape oracle.

The oracle (typically a hosted vision model) looks at a rendered image of the
stroke and answers {isShape, shapeType}. It is advisory only: the local
classifier always decides first, the oracle is consulted off the critical
path, and every failure is treated as "no shape detected".
"""

from abc import ABC, abstractmethod
from concurrent.futures import TimeoutError as FutureTimeoutError
from concurrent.futures import wait
from typing import Literal

import cv2
import numpy as np
from pydantic import BaseModel, ConfigDict, Field

from shapesnap.config import OracleConfig
from shapesnap.geometry.metrics import bounding_box
from shapesnap.models import ShapeKind, ShapeVerdict
from shapesnap.tracer import get_tracer

POLICIES = ("ignore", "confirm")


class OracleResponse(BaseModel):
    """The oracle's answer, in its own wire field names."""
    is_shape: bool = Field(alias="isShape")
    shape_type: Literal["triangle", "square", "circle", "none"] = Field(alias="shapeType")

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @classmethod
    def negative(cls):
        return cls(is_shape=False, shape_type="none")

    @property
    def detected(self):
        return self.is_shape and self.shape_type != "none"


class ShapeOracle(ABC):
    """Abstract interface for external shape classifiers."""

    @abstractmethod
    def identify(self, png_bytes):
        """
        Classify a rendered stroke.

        Args:
            png_bytes: PNG image of the stroke

        Returns:
            OracleResponse, a mapping, or the raw JSON text of one
        """
        pass

    @abstractmethod
    def is_available(self):
        """Check if this oracle is ready to use."""
        pass


class NullOracle(ShapeOracle):
    """
    Oracle that never detects a shape.

    Placeholder when no external classifier is configured.
    """

    def identify(self, png_bytes):
        return OracleResponse.negative()

    def is_available(self):
        return True


def render_stroke_png(points, config=None):
    """
    Rasterize a stroke as a black polyline on a white square image.

    The stroke is scaled uniformly to fit inside the padding.

    Returns:
        PNG-encoded bytes
    """
    if config is None:
        config = OracleConfig()

    size = config.image_size
    pad = config.padding
    img = np.full((size, size), 255, dtype=np.uint8)

    if points:
        box = bounding_box(points)
        scale = (size - 2 * pad) / max(box.width, box.height, 1.0)
        pts = np.array(
            [[(p.x - box.x) * scale + pad, (p.y - box.y) * scale + pad] for p in points],
            dtype=np.int32,
        )
        cv2.polylines(img, [pts], isClosed=False, color=0, thickness=config.line_thickness)

    ok, encoded = cv2.imencode(".png", img)
    if not ok:
        raise ValueError("PNG encoding failed")
    return encoded.tobytes()


def parse_response(raw):
    """Validate an oracle reply given as a model, mapping, str or bytes."""
    if isinstance(raw, OracleResponse):
        return raw
    if isinstance(raw, (str, bytes)):
        return OracleResponse.model_validate_json(raw)
    return OracleResponse.model_validate(raw)


def consult_oracle(oracle, points, config=None):
    """
    Ask the oracle about a stroke, failing closed.

    Any exception from rendering, the oracle call or response validation
    yields a negative response.
    """
    if config is None:
        config = OracleConfig()
    tracer = get_tracer()

    if oracle is None or not oracle.is_available():
        return OracleResponse.negative()

    try:
        response = parse_response(oracle.identify(render_stroke_png(points, config)))
    except Exception as e:
        tracer.event(f"Oracle failed, treating as no shape: {type(e).__name__}: {e}", level="WARN")
        return OracleResponse.negative()

    tracer.event("Oracle answered", is_shape=response.is_shape, shape_type=response.shape_type)
    return response


def submit_oracle_check(executor, oracle, points, config=None):
    """Run consult_oracle on an executor; returns a Future."""
    return executor.submit(consult_oracle, oracle, list(points), config)


def await_oracle(future, config=None):
    """Wait for a submitted check up to the configured timeout, failing closed."""
    if config is None:
        config = OracleConfig()

    try:
        return future.result(timeout=config.timeout_seconds)
    except FutureTimeoutError:
        future.cancel()
        get_tracer().event("Oracle timed out, treating as no shape", level="WARN")
        return OracleResponse.negative()


def await_oracles(futures, config=None):
    """
    Wait for a batch of submitted checks under one shared deadline.

    Checks still pending at the deadline count as "no shape"; those that
    have not started yet are cancelled.

    Returns:
        list of OracleResponse in the order of futures
    """
    if config is None:
        config = OracleConfig()

    done, pending = wait(futures, timeout=config.timeout_seconds)
    for future in pending:
        future.cancel()
    if pending:
        get_tracer().event(
            f"Oracle timed out on {len(pending)} of {len(futures)} strokes, treating as no shape",
            level="WARN",
        )

    return [f.result() if f in done else OracleResponse.negative() for f in futures]


def reconcile(verdict, response, policy="ignore"):
    """
    Combine the local verdict with an oracle response.

    "ignore" keeps the local verdict. "confirm" withdraws a closed primitive
    (triangle, square, circle) the oracle does not see as a shape. Lines are
    never withdrawn and the oracle never upgrades a NONE verdict.
    """
    if policy not in POLICIES:
        raise ValueError(f"Unknown oracle policy: {policy}")

    if policy == "ignore":
        return verdict

    closed = verdict.kind in (ShapeKind.TRIANGLE, ShapeKind.SQUARE, ShapeKind.CIRCLE)
    if closed and not response.detected:
        get_tracer().event(f"Oracle withdrew {verdict.kind.value} verdict")
        return ShapeVerdict.none()

    return verdict
