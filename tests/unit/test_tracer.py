"""
Tests for the tracer module.

These tests verify the debug tracing infrastructure used to capture
detailed information about the routing pipeline.
"""

from cablerouter import Connection, LayoutEngine, RouteTrace
from cablerouter.tracer import PipelineStage


class TestPipelineStage:
    """Tests for PipelineStage dataclass."""

    def test_creation(self):
        stage = PipelineStage(name="sides", data={"c1": "right->left"})
        assert stage.name == "sides"
        assert stage.routes_snapshot is None

    def test_str_lists_data_and_routes(self):
        stage = PipelineStage(
            name="routes_snapped",
            data={"half_grid": 12},
            routes_snapshot={"c1": [(100, 30), (204, 30)]},
        )
        result = str(stage)
        assert "=== Stage: routes_snapped ===" in result
        assert "half_grid: 12" in result
        assert "c1: (100,30) -> (204,30)" in result

    def test_str_truncates_long_values(self):
        stage = PipelineStage(name="ports", data={"long": "x" * 500})
        assert "..." in str(stage)


class TestRouteTrace:
    """Tests for RouteTrace."""

    def test_add_stage_copies_routes(self):
        trace = RouteTrace()
        routes = {"c1": [(0, 0), (10, 0)]}
        trace.add_stage("routes_built", {}, routes)
        routes["c1"].append((10, 10))
        assert trace.get_routes_at_stage("routes_built") == {"c1": [(0, 0), (10, 0)]}

    def test_get_missing_stage(self):
        trace = RouteTrace()
        assert trace.get_stage("nope") is None
        assert trace.get_routes_at_stage("nope") is None


class TestTracedPipeline:
    """Tests for traces recorded by LayoutEngine."""

    def test_stages_recorded(self, s_shape_rects):
        trace = RouteTrace()
        LayoutEngine().compute_frame(
            [Connection("c1", "A", "B")], s_shape_rects, "LOGICAL", trace=trace
        )

        assert trace.mode == "LOGICAL"
        assert [s.name for s in trace.stages] == [
            "resolve",
            "sides",
            "ports",
            "routes_built",
            "routes_snapped",
            "routes_separated",
        ]
        assert trace.get_stage("sides").data == {"c1": "right->left"}

    def test_route_history(self, s_shape_rects):
        trace = RouteTrace()
        LayoutEngine().compute_frame(
            [Connection("c1", "A", "B")], s_shape_rects, "LOGICAL", trace=trace
        )

        history = trace.route_history("c1")

        assert [name for name, _ in history] == [
            "routes_built",
            "routes_snapped",
            "routes_separated",
        ]
        assert history[0][1][2] == (200, 30)
        assert history[1][1] == [(100, 30), (204, 30), (204, 150), (300, 150)]

    def test_summary_counts_dropped(self, s_shape_rects):
        trace = RouteTrace()
        conns = [Connection("c1", "A", "B"), Connection("c2", "A", "GONE")]
        LayoutEngine().compute_frame(conns, s_shape_rects, "LOGICAL", trace=trace)

        summary = trace.summary()

        assert "ROUTE TRACE SUMMARY" in summary
        assert "Mode: LOGICAL" in summary
        assert "Pipeline stages: 6" in summary
        assert "Dropped connections: 1" in summary

    def test_dump_to_file(self, s_shape_rects, tmp_path):
        trace = RouteTrace()
        LayoutEngine().compute_frame(
            [Connection("c1", "A", "B")], s_shape_rects, "LOGICAL", trace=trace
        )
        output = tmp_path / "trace.txt"

        trace.dump_to_file(str(output))

        content = output.read_text(encoding="utf-8")
        assert "DETAILED TRACE" in content
        assert "=== Stage: routes_separated ===" in content
