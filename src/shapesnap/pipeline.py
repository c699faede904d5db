"""
Batch recognition pipeline for ShapeSnap.

Replays a file of finished strokes onto an empty board, auto-correcting each
one, and writes the resulting board and per-stroke verdicts.
"""

import os
from concurrent.futures import ThreadPoolExecutor

from shapesnap.board.correction import element_from_verdict, make_path_element
from shapesnap.config import load_config
from shapesnap.io.save_artifacts import DebugArtifactWriter, ensure_dir, save_json
from shapesnap.io.strokes_io import load_strokes
from shapesnap.models import Board
from shapesnap.recognition.classifier import analyze
from shapesnap.recognition.oracle import (
    NullOracle, await_oracles, reconcile, submit_oracle_check,
)
from shapesnap.tracer import get_tracer, trace


@trace(label="run_recognition")
def run_recognition(input_path, out_dir, config=None, config_path=None, oracle=None):
    """
    Classify every stroke in input_path and build the corrected board.

    Args:
        input_path: JSON file of strokes
        out_dir: output directory for board.json, verdicts.json and debug files
        config: EngineConfig object (optional)
        config_path: path to YAML config file (optional)
        oracle: ShapeOracle consulted when config.oracle.enabled

    Returns:
        tuple of (elements, reports) where reports is a list of dicts
    """
    tracer = get_tracer()

    if config is None:
        config = load_config(config_path)

    records = load_strokes(input_path)
    ensure_dir(out_dir)

    debug_writer = DebugArtifactWriter(
        out_dir,
        enabled=config.debug.enabled,
        max_strokes=config.debug.max_strokes,
        margin=config.debug.canvas_margin,
        max_size=config.debug.max_canvas_size,
    )

    analyses = []
    for idx, record in enumerate(records):
        with tracer.span(f"stroke_{idx}", module="pipeline", points=record.points):
            analysis = analyze(record.points, config.recognition)
            analyses.append(analysis)
            debug_writer.save_analysis(idx, record.points, analysis)

    verdicts = [a.verdict for a in analyses]
    if config.oracle.enabled:
        verdicts = _apply_oracle(records, verdicts, config.oracle, oracle or NullOracle())

    elements = []
    reports = []
    for idx, (record, analysis, verdict) in enumerate(zip(records, analyses, verdicts)):
        path_element = make_path_element(record.points, record.color, record.stroke_width, index=idx)
        element = element_from_verdict(path_element, verdict)
        elements.append(element)
        reports.append({
            "index": idx,
            "element_id": element.element_id,
            "kind": verdict.kind.value,
            "local_kind": analysis.verdict.kind.value,
            "rule": analysis.rule,
            "points": analysis.point_count,
            "corners": len(analysis.corners),
            "radius_ratio": analysis.radius_ratio,
            "area_ratio": analysis.area_ratio,
        })

    save_json(Board(elements=elements), os.path.join(out_dir, "board.json"))
    save_json(reports, os.path.join(out_dir, "verdicts.json"))

    recognized = sum(1 for v in verdicts if v.recognized)
    tracer.event(f"Recognized {recognized} of {len(verdicts)} strokes")
    return elements, reports


def _apply_oracle(records, verdicts, oracle_config, oracle):
    """
    Consult the oracle for every stroke concurrently and reconcile.

    All checks share one deadline of oracle_config.timeout_seconds; the run
    never waits on a check that outlives it.
    """
    executor = ThreadPoolExecutor(max_workers=4)
    try:
        futures = [
            submit_oracle_check(executor, oracle, record.points, oracle_config)
            for record in records
        ]
        responses = await_oracles(futures, oracle_config)
    finally:
        executor.shutdown(wait=False, cancel_futures=True)

    return [
        reconcile(verdict, response, oracle_config.policy)
        for verdict, response in zip(verdicts, responses)
    ]
