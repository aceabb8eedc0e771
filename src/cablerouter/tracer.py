"""
Debug tracing infrastructure for cablerouter.

This module provides data structures for capturing detailed traces of the
routing pipeline. When a RouteTrace is passed to LayoutEngine.compute_frame,
the engine records every pipeline stage together with the routes as they
looked after that stage.

This is primarily useful for:
1. Debugging routing issues (seeing which stage moved a bend)
2. Understanding the pipeline flow (sides, ports, raw and snapped routes)
3. Writing targeted tests (verifying specific routing decisions)

Usage:
    >>> engine = LayoutEngine()
    >>> trace = RouteTrace()
    >>> frame = engine.compute_frame(store, store, DisplayMode.LOGICAL, trace=trace)
    >>> print(trace.summary())
    >>> trace.dump_to_file("route_trace.txt")
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .models import Route


def _format_route(points: Route) -> str:
    return " -> ".join(f"({x:g},{y:g})" for x, y in points)


@dataclass
class PipelineStage:
    """
    Snapshot of state at a pipeline stage.

    The routing pipeline has these stages:
    1. resolve - Node rectangles looked up, dangling connections dropped
    2. sides - Exit/entry side chosen per connection
    3. ports - Port coordinates allocated
    4. routes_built - Default and override routes before snapping
    5. routes_snapped - Main bends snapped to the half-grid
    6. routes_separated - Routes sharing a start anchor fanned out

    Attributes:
        name: Name of this pipeline stage
        data: Dictionary of relevant data at this stage
        routes_snapshot: Optional copy of the routes after this stage
    """

    name: str
    data: Dict[str, Any]
    routes_snapshot: Optional[Dict[str, Route]] = None

    def __str__(self) -> str:
        lines = [f"=== Stage: {self.name} ==="]
        for key, value in self.data.items():
            # Truncate long values
            str_val = str(value)
            if len(str_val) > 100:
                str_val = str_val[:100] + "..."
            lines.append(f"  {key}: {str_val}")
        if self.routes_snapshot:
            lines.append("  Routes:")
            for conn_id, points in self.routes_snapshot.items():
                lines.append(f"    {conn_id}: {_format_route(points)}")
        return "\n".join(lines)


@dataclass
class RouteTrace:
    """
    Complete trace of one pipeline run.

    Attributes:
        stages: List of pipeline stages with their data
        mode: Display mode name of the traced run
    """

    stages: List[PipelineStage] = field(default_factory=list)
    mode: str = ""

    def add_stage(
        self,
        name: str,
        data: Dict[str, Any],
        routes: Optional[Dict[str, Route]] = None,
    ) -> None:
        """
        Add a pipeline stage snapshot.

        Args:
            name: Name of the stage (e.g., "routes_snapped")
            data: Dictionary of relevant data at this stage
            routes: Optional routes to snapshot
        """
        snapshot = None
        if routes is not None:
            snapshot = {conn_id: list(points) for conn_id, points in routes.items()}
        self.stages.append(PipelineStage(name, data.copy(), snapshot))

    def get_stage(self, name: str) -> Optional[PipelineStage]:
        """Get a specific pipeline stage by name."""
        for stage in self.stages:
            if stage.name == name:
                return stage
        return None

    def get_routes_at_stage(self, name: str) -> Optional[Dict[str, Route]]:
        """Get the routes snapshot at a specific stage."""
        stage = self.get_stage(name)
        if stage and stage.routes_snapshot is not None:
            return stage.routes_snapshot
        return None

    def route_history(self, connection_id: str) -> List[tuple]:
        """
        Follow one connection through every stage that snapshotted routes.

        Returns:
            List of (stage name, route) tuples.
        """
        history = []
        for stage in self.stages:
            if stage.routes_snapshot and connection_id in stage.routes_snapshot:
                history.append((stage.name, stage.routes_snapshot[connection_id]))
        return history

    def summary(self) -> str:
        """Generate a human-readable summary of the trace."""
        lines = [
            "=" * 60,
            "ROUTE TRACE SUMMARY",
            "=" * 60,
            "",
            f"Mode: {self.mode}",
            "",
            f"Pipeline stages: {len(self.stages)}",
        ]

        for stage in self.stages:
            has_routes = "+" if stage.routes_snapshot else "-"
            lines.append(f"  [{has_routes}] {stage.name}")

        resolve = self.get_stage("resolve")
        if resolve is not None:
            dropped = resolve.data.get("dropped", [])
            lines.extend(["", f"Dropped connections: {len(dropped)}"])

        return "\n".join(lines)

    def dump(self) -> str:
        """Generate a complete human-readable dump of the trace."""
        lines = [self.summary(), "", "=" * 60, "DETAILED TRACE", "=" * 60, ""]
        lines.append("PIPELINE STAGES:")
        lines.append("-" * 40)
        for stage in self.stages:
            lines.append(str(stage))
            lines.append("")
        return "\n".join(lines)

    def dump_to_file(self, filename: str) -> None:
        """Write the complete trace dump to a file."""
        with open(filename, "w", encoding="utf-8") as f:
            f.write(self.dump())
