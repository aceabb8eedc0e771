#!/usr/bin/env python3
"""
Demo script for cablerouter.

Routes a few small diagrams, prints the polylines and the pipeline trace,
and writes a PNG preview of each diagram to the current directory.
"""

from cablerouter import (
    Connection,
    DisplayMode,
    FramePreview,
    LayoutEngine,
    Node,
    NudgeDirection,
    RouteTrace,
    RoutingSession,
)
from cablerouter.store import load_store


def print_header(title):
    """Print a formatted header."""
    print("\n" + "=" * 70)
    print(f"  {title}")
    print("=" * 70 + "\n")


def print_routes(frame):
    for conn_id, points in frame.routes.items():
        src, tgt = frame.sides[conn_id]
        path = " -> ".join(f"({x:g},{y:g})" for x, y in points)
        print(f"  {conn_id:10} {src.value:>5}/{tgt.value:<5} {path}")


def demo_1():
    """Demo 1: S-shaped and same-side routes"""
    print_header("Demo 1: S-Shape and Stacked Boxes")

    store = load_store(
        [
            Node("router", logical_pos=(0, 0)),
            Node("switch", logical_pos=(12, 5)),
            Node("ap", logical_pos=(1, 12)),
        ],
        [
            Connection("uplink", "router", "switch"),
            Connection("wifi", "router", "ap"),
        ],
    )
    trace = RouteTrace()
    frame = LayoutEngine().compute_frame(store, store, DisplayMode.LOGICAL, trace)
    print_routes(frame)
    print()
    print(trace.summary())
    FramePreview().render(frame, "demo_1.png")


def demo_2():
    """Demo 2: Fan-out on a shared side"""
    print_header("Demo 2: Three Cables on One Side")

    nodes = [Node("nas", physical_pos=(0, 96))]
    connections = []
    for index in range(3):
        node_id = f"server{index + 1}"
        nodes.append(Node(node_id, physical_pos=(240, index * 96)))
        connections.append(Connection(f"c{index + 1}", "nas", node_id))

    store = load_store(nodes, connections)
    frame = LayoutEngine().compute_frame(store, store, DisplayMode.PHYSICAL)
    print_routes(frame)
    FramePreview(scale=3).render(frame, "demo_2.png")


def demo_3():
    """Demo 3: Bend override and nudge"""
    print_header("Demo 3: Moving a Bend")

    store = load_store(
        [Node("a", logical_pos=(0, 0)), Node("b", logical_pos=(12, 5))],
        [Connection("c1", "a", "b")],
    )
    session = RoutingSession(store, DisplayMode.LOGICAL)
    print("Default:")
    print_routes(session.frame)

    drag = session.bend.begin_drag(session.frame, "c1")
    drag.move(150, 0)
    drag.release()
    print("\nAfter dragging the handle to x=150:")
    print_routes(session.frame)

    session.bend.nudge(session.frame, "c1", NudgeDirection.RIGHT)
    print("\nAfter one nudge to the right:")
    print_routes(session.frame)

    FramePreview().render(session.frame, "demo_3.png", selected=["c1"])
    session.close()


def main():
    """Run all demos."""
    print("\n" + "=" * 70)
    print("  CABLEROUTER - DEMO")
    print("=" * 70)

    demo_1()
    demo_2()
    demo_3()

    print_header("Done")
    print("Previews written to demo_1.png, demo_2.png and demo_3.png")


if __name__ == "__main__":
    main()
