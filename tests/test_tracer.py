"""Tests for the tracer module."""

import json

import numpy as np
import pytest


class TestSummarize:
    """Tests for object summarization."""

    def test_numpy_array_summary(self):
        """Test that numpy arrays are summarized with shape and type."""
        from shapesnap.tracer import summarize

        arr = np.zeros((40, 3), dtype=np.float64)
        summary = summarize(arr)

        assert "ndarray" in summary
        assert "40x3" in summary
        assert "float64" in summary

    def test_summary_capped_length(self):
        """Test that summary never exceeds max length."""
        from shapesnap.tracer import summarize

        large_dict = {f"key_{i}": f"value_{i}" for i in range(100)}
        summary = summarize(large_dict, max_len=30)

        assert len(summary) <= 30

    def test_point_list_summary(self):
        """Test that point sequences report their count and extent."""
        from shapesnap.models import Point
        from shapesnap.tracer import summarize

        points = [Point(x=0, y=5), Point(x=20, y=-5), Point(x=10, y=0)]
        summary = summarize(points)

        assert summary == "points(n=3,x=[0.0,20.0],y=[-5.0,5.0])"

    def test_list_summary(self):
        from shapesnap.tracer import summarize

        summary = summarize([1, 2, 3, 4, 5])

        assert "list" in summary
        assert "len=5" in summary

    def test_enum_summary(self):
        from shapesnap.models import ShapeKind
        from shapesnap.tracer import summarize

        assert summarize(ShapeKind.CIRCLE) == "circle"

    def test_verdict_summary(self):
        from shapesnap.models import Point, ShapeKind, ShapeVerdict
        from shapesnap.tracer import summarize

        verdict = ShapeVerdict(
            kind=ShapeKind.TRIANGLE,
            vertices=[Point(x=0, y=0), Point(x=1, y=0), Point(x=0, y=1)],
        )

        assert summarize(verdict) == "ShapeVerdict(triangle,vertices=3)"

    def test_element_summary(self):
        """Test that board elements show their kind and id."""
        from shapesnap.models import RectangleElement
        from shapesnap.tracer import summarize

        rect = RectangleElement(element_id="r1", x=0, y=0, width=1, height=1)

        assert summarize(rect) == "RectangleElement(kind=rectangle,id=r1)"

    def test_float_summary(self):
        from shapesnap.tracer import summarize

        assert summarize(0.123456789) == "0.1235"

    def test_none_summary(self):
        from shapesnap.tracer import summarize

        assert summarize(None) == "None"


class TestTracerSpan:
    """Tests for tracer span functionality."""

    def test_span_nesting(self, capsys):
        """Test that spans produce proper indentation."""
        from shapesnap.tracer import configure_tracer, get_tracer

        configure_tracer(enabled=True, level="INFO")
        tracer = get_tracer()

        try:
            with tracer.span("outer", module="test"):
                with tracer.span("inner", module="test"):
                    tracer.event("inside")
        finally:
            configure_tracer(enabled=False)

        lines = capsys.readouterr().err.strip().split("\n")

        assert len(lines) == 5
        assert "test:outer  start" in lines[0]
        assert "  test:inner  start" in lines[1]
        assert "    test:inner  inside" in lines[2]
        assert "end ok" in lines[4]

    def test_span_logs_failure(self, capsys):
        """Test that an exception inside a span is logged and re-raised."""
        from shapesnap.tracer import configure_tracer, get_tracer

        configure_tracer(enabled=True, level="INFO")
        tracer = get_tracer()

        try:
            with pytest.raises(ValueError):
                with tracer.span("boom", module="test"):
                    raise ValueError("bad stroke")
            # depth restored after the failure
            tracer.event("after")
        finally:
            configure_tracer(enabled=False)

        lines = capsys.readouterr().err.strip().split("\n")
        assert "ERROR" in lines[1]
        assert "ValueError: bad stroke" in lines[1]
        assert lines[2].endswith(" INFO    after")

    def test_level_filtering(self, capsys):
        from shapesnap.tracer import configure_tracer, get_tracer

        configure_tracer(enabled=True, level="WARN")
        tracer = get_tracer()
        try:
            tracer.event("quiet")
            tracer.event("loud", level="WARN")
        finally:
            configure_tracer(enabled=False)

        err = capsys.readouterr().err
        assert "quiet" not in err
        assert "loud" in err

    def test_json_output(self, capsys):
        """Test that JSON mode emits one parseable record per line."""
        from shapesnap.models import Point
        from shapesnap.tracer import configure_tracer, get_tracer

        configure_tracer(enabled=True, level="INFO", json_output=True)
        try:
            get_tracer().event("hello", points=[Point(x=1, y=2)])
        finally:
            configure_tracer(enabled=False)

        record = json.loads(capsys.readouterr().err.strip())
        assert record["level"] == "INFO"
        assert record["message"].startswith("hello")
        assert record["meta"]["points"].startswith("points(n=1")

    def test_trace_file(self, temp_dir):
        import os

        from shapesnap.tracer import configure_tracer, get_tracer

        path = os.path.join(temp_dir, "trace.log")
        configure_tracer(enabled=True, level="INFO", file_path=path)
        try:
            get_tracer().event("written")
        finally:
            configure_tracer(enabled=False)

        with open(path, encoding="utf-8") as f:
            assert "written" in f.read()

    def test_tracer_disabled_no_output(self, capsys):
        """Test that disabled tracer produces no output."""
        from shapesnap.tracer import configure_tracer, get_tracer

        configure_tracer(enabled=False)
        tracer = get_tracer()

        with tracer.span("test", module="test"):
            tracer.event("should not appear")

        assert capsys.readouterr().err == ""


class TestTraceDecorator:
    """Tests for the @trace decorator."""

    def test_decorator_runs_function(self):
        """Test that decorated function executes normally."""
        from shapesnap.tracer import configure_tracer, trace

        configure_tracer(enabled=False)

        @trace(label="test_func")
        def my_func(x):
            return x * 2

        assert my_func(5) == 10

    def test_decorator_logs_span(self, capsys):
        from shapesnap.tracer import configure_tracer, trace

        @trace(label="double", arg_names=["x"])
        def my_func(x):
            return x * 2

        configure_tracer(enabled=True, level="INFO")
        try:
            assert my_func(x=4) == 8
        finally:
            configure_tracer(enabled=False)

        err = capsys.readouterr().err
        assert "double  start x=4" in err
        assert "end ok" in err

    def test_decorator_with_exception(self):
        """Test that decorator handles exceptions properly."""
        from shapesnap.tracer import configure_tracer, trace

        configure_tracer(enabled=False)

        @trace(label="failing_func")
        def failing_func():
            raise ValueError("test error")

        with pytest.raises(ValueError):
            failing_func()
