"""Tests for path separation."""

from cablerouter.separation import apply_path_separation, group_by_start


def first_vertical_x(route):
    for (x1, y1), (x2, y2) in zip(route[1:], route[2:-1]):
        if x1 == x2 and y1 != y2:
            return x1
    return None


class TestGroupByStart:
    """Tests for group_by_start."""

    def test_groups(self):
        routes = {
            "a": [(0, 0), (10, 0)],
            "b": [(0, 0), (0, 10)],
            "c": [(5, 5), (10, 5)],
            "d": [(1, 1)],
        }
        assert group_by_start(routes) == {(0, 0): ["a", "b"], (5, 5): ["c"]}


class TestApplyPathSeparation:
    """Tests for apply_path_separation."""

    def test_single_route_unchanged(self):
        routes = {"c1": [(100, 30), (204, 30), (204, 150), (300, 150)]}
        assert apply_path_separation(routes) == routes

    def test_two_routes_fan_out_around_bend(self):
        routes = {
            "c1": [(100, 30), (204, 30), (204, 150), (300, 150)],
            "c2": [(100, 30), (204, 30), (204, 270), (300, 270)],
        }

        result = apply_path_separation(routes)

        assert result["c1"] == [(100, 30), (199, 30), (199, 150), (300, 150)]
        assert result["c2"] == [(100, 30), (209, 30), (209, 270), (300, 270)]

    def test_three_routes_middle_stays(self):
        routes = {
            cid: [(100, 30), (204, 30), (204, y), (300, y)]
            for cid, y in (("c1", 150), ("c2", 270), ("c3", 390))
        }

        result = apply_path_separation(routes)

        assert [first_vertical_x(result[c]) for c in ("c1", "c2", "c3")] == [
            194,
            204,
            214,
        ]
        assert result["c2"] is routes["c2"]

    def test_distinct_and_gap_apart(self):
        routes = {
            f"c{i}": [(0, 0), (48, 0), (48, 100 + 50 * i), (200, 100 + 50 * i)]
            for i in range(5)
        }

        result = apply_path_separation(routes, gap=8)

        xs = sorted(first_vertical_x(points) for points in result.values())
        assert len(set(xs)) == 5
        assert all(b - a == 8 for a, b in zip(xs, xs[1:]))

    def test_endpoints_untouched(self):
        routes = {
            "c1": [(100, 30), (204, 30), (204, 150), (300, 150)],
            "c2": [(100, 30), (204, 30), (204, 270), (300, 270)],
        }
        result = apply_path_separation(routes)
        for cid, points in routes.items():
            assert result[cid][0] == points[0]
            assert result[cid][-1] == points[-1]

    def test_route_without_interior_vertical_is_skipped(self):
        routes = {
            "straight": [(100, 30), (300, 30)],
            "bent": [(100, 30), (204, 30), (204, 150), (300, 150)],
        }

        result = apply_path_separation(routes)

        assert result["straight"] == [(100, 30), (300, 30)]
        assert result["bent"] == [(100, 30), (209, 30), (209, 150), (300, 150)]

    def test_input_not_mutated(self):
        routes = {
            "c1": [(100, 30), (204, 30), (204, 150), (300, 150)],
            "c2": [(100, 30), (204, 30), (204, 270), (300, 270)],
        }
        apply_path_separation(routes)
        assert routes["c1"][1] == (204, 30)
        assert routes["c2"][1] == (204, 30)

    def test_keeps_key_order(self):
        routes = {
            "z": [(0, 0), (24, 0), (24, 50), (80, 50)],
            "a": [(0, 0), (24, 0), (24, 90), (80, 90)],
        }
        assert list(apply_path_separation(routes)) == ["z", "a"]
