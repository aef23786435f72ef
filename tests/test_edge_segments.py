import math

import pytest

from fieldglyph.edge_segments import (
    CubicSegment,
    EdgeColor,
    LinearSegment,
    QuadraticSegment,
    SignedDistance,
    Vector2,
    mix,
)

SEGMENT_CLASSES = {
    "linear": LinearSegment,
    "quadratic": QuadraticSegment,
    "cubic": CubicSegment,
}

CONTROL_POINTS = {
    "linear": [(0, 0), (3, 1)],
    "quadratic": [(0, 0), (1, 2), (2, 0)],
    "cubic": [(0, 0), (0.5, 2), (2.5, -1), (3, 1)],
}

KINDS = list(SEGMENT_CLASSES)


def close(a, b, tol=1e-9):
    return abs(a.x - b.x) <= tol and abs(a.y - b.y) <= tol


def brute_min_distance(segment, origin, samples=4000):
    return min(
        (segment.point(i / samples) - origin).length() for i in range(samples + 1)
    )


def make_segments():
    return [
        LinearSegment(Vector2(0, 0), Vector2(3, 1)),
        QuadraticSegment(Vector2(0, 0), Vector2(1, 2), Vector2(2, 0)),
        CubicSegment(Vector2(0, 0), Vector2(0.5, 2), Vector2(2.5, -1), Vector2(3, 1)),
    ]


def test_vector_basics():
    v = Vector2(3, 4)
    assert v.length() == 5
    assert close(v.normalize(), v / v.length())
    assert Vector2().normalize() == Vector2(0, 1)
    assert Vector2().normalize(True) == Vector2(0, 0)
    assert v.orthonormal().dot(v) == pytest.approx(0.0)
    assert v.orthonormal(True) == -v.orthonormal(False)
    assert v.cross(v) == 0
    assert not Vector2()
    assert Vector2(1, 2) * Vector2(3, 4) == Vector2(3, 8)


def test_mix_endpoints():
    a, b = Vector2(1, -2), Vector2(5, 7)
    assert mix(a, b, 0) == a
    assert mix(a, b, 1) == b
    assert mix(2.0, 6.0, 0.5) == 4.0


def test_signed_distance_ordering():
    near = SignedDistance(-1.0, 0.5)
    far = SignedDistance(2.0, 0.0)
    assert near < far
    assert far > near
    assert SignedDistance(1.0, 0.1) < SignedDistance(-1.0, 0.2)
    assert SignedDistance(1.0, 0.2) <= SignedDistance(-1.0, 0.2)
    assert far < SignedDistance()


def test_edge_color_combinations_survive_clone_and_split():
    line = LinearSegment(Vector2(0, 0), Vector2(3, 0), EdgeColor.RED | EdgeColor.GREEN)
    copy = line.clone()
    assert copy.color == EdgeColor.YELLOW
    assert copy.color & EdgeColor.RED
    assert not (copy.color & EdgeColor.BLUE)
    parts = line.split_in_thirds()
    assert [part.color for part in parts] == [EdgeColor.YELLOW] * 3
    cyan = QuadraticSegment(Vector2(0, 0), Vector2(1, 2), Vector2(2, 0), EdgeColor.CYAN)
    assert not (cyan.clone().color & EdgeColor.RED)


@pytest.mark.parametrize("kind", KINDS)
def test_endpoints(kind):
    points = [Vector2(x, y) for x, y in CONTROL_POINTS[kind]]
    segment = SEGMENT_CLASSES[kind](*points)
    start = segment.point(0)
    end = segment.point(1)
    assert (start.x, start.y) == pytest.approx(CONTROL_POINTS[kind][0], abs=1e-9)
    assert (end.x, end.y) == pytest.approx(CONTROL_POINTS[kind][-1], abs=1e-9)


@pytest.mark.parametrize("kind", KINDS)
def test_reverse_twice_is_identity(kind):
    points = [Vector2(x, y) for x, y in CONTROL_POINTS[kind]]
    segment = SEGMENT_CLASSES[kind](*points)
    original = list(segment.points)
    segment.reverse()
    assert close(segment.point(0), points[-1])
    assert close(segment.point(1), points[0])
    segment.reverse()
    assert segment.points == original


@pytest.mark.parametrize("kind", KINDS)
def test_clone_is_independent(kind):
    points = [Vector2(x, y) for x, y in CONTROL_POINTS[kind]]
    segment = SEGMENT_CLASSES[kind](*points, EdgeColor.MAGENTA)
    copy = segment.clone()
    assert copy.points == segment.points
    assert copy.color == EdgeColor.MAGENTA
    copy.reverse()
    assert copy.points != segment.points
    assert close(segment.point(0), points[0])


@pytest.mark.parametrize("kind", KINDS)
def test_split_in_thirds_reproduces_curve(kind):
    points = [Vector2(x, y) for x, y in CONTROL_POINTS[kind]]
    segment = SEGMENT_CLASSES[kind](*points)
    parts = segment.split_in_thirds()
    assert len(parts) == 3
    assert close(parts[0].point(0), points[0])
    assert close(parts[2].point(1), points[-1])
    for index, part in enumerate(parts):
        for t in (0.0, 0.25, 0.5, 1.0):
            assert close(part.point(t), segment.point((index + t) / 3), 1e-9)


@pytest.mark.parametrize("segment", make_segments())
def test_signed_distance_matches_sampling(segment):
    for origin in (Vector2(1, 0.3), Vector2(1.5, 2), Vector2(-1, -1), Vector2(4, 0)):
        distance, _param = segment.signed_distance(origin)
        assert abs(distance.distance) == pytest.approx(
            brute_min_distance(segment, origin), abs=2e-3
        )


def test_signed_distance_sign_flips_across_curve():
    curve = QuadraticSegment(Vector2(0, 0), Vector2(1, 2), Vector2(2, 0))
    below, param_below = curve.signed_distance(Vector2(1, 0.3))
    above, param_above = curve.signed_distance(Vector2(1, 1.5))
    assert below.distance * above.distance < 0
    assert 0 <= param_below <= 1 and 0 <= param_above <= 1
    assert below.dot == 0 and above.dot == 0


def test_linear_signed_distance_sides():
    line = LinearSegment(Vector2(0, 0), Vector2(2, 0))
    left, param = line.signed_distance(Vector2(1, 1))
    right, _ = line.signed_distance(Vector2(1, -1))
    assert param == pytest.approx(0.5)
    assert left.distance == pytest.approx(-right.distance)
    assert abs(left.distance) == pytest.approx(1.0)


def test_pseudo_distance_beyond_end():
    line = LinearSegment(Vector2(0, 0), Vector2(1, 0))
    origin = Vector2(2, 1)
    distance, param = line.signed_distance(origin)
    assert param > 1
    pseudo = line.distance_to_pseudo_distance(distance, origin, param)
    assert abs(pseudo.distance) == pytest.approx(1.0)
    assert abs(pseudo.distance) < abs(distance.distance)
    assert pseudo.dot == 0


def test_pseudo_distance_inside_range_unchanged():
    line = LinearSegment(Vector2(0, 0), Vector2(1, 0))
    distance, param = line.signed_distance(Vector2(0.5, 1))
    assert line.distance_to_pseudo_distance(distance, Vector2(0.5, 1), param) == distance


def test_lengths():
    assert LinearSegment(Vector2(0, 0), Vector2(3, 4)).length() == 5
    curve = QuadraticSegment(Vector2(0, 0), Vector2(1, 2), Vector2(2, 0))
    samples = 2000
    polyline = sum(
        (curve.point((i + 1) / samples) - curve.point(i / samples)).length()
        for i in range(samples)
    )
    assert curve.length() == pytest.approx(polyline, rel=1e-5)
    straight = QuadraticSegment(Vector2(0, 0), Vector2(0, 0), Vector2(4, 2))
    assert straight.length() == pytest.approx(
        LinearSegment(Vector2(0, 0), Vector2(4, 2)).length()
    )


def test_degenerate_control_points_are_moved():
    quad = QuadraticSegment(Vector2(0, 0), Vector2(0, 0), Vector2(2, 2))
    assert quad.points[1] == mix(Vector2(0, 0), Vector2(2, 2), 0.5)
    cubic = CubicSegment(Vector2(0, 0), Vector2(0, 0), Vector2(3, 3), Vector2(3, 3))
    assert close(cubic.point(0.5), mix(Vector2(0, 0), Vector2(3, 3), 0.5))


def test_convert_to_cubic_same_curve():
    quad = QuadraticSegment(Vector2(0, 0), Vector2(1, 2), Vector2(2, 0), EdgeColor.CYAN)
    cubic = quad.convert_to_cubic()
    assert cubic.color == EdgeColor.CYAN
    for t in (0.0, 0.2, 0.5, 0.9, 1.0):
        assert close(cubic.point(t), quad.point(t))
    assert sorted(cubic.scanline_intersections(0.5)) == pytest.approx(
        sorted(quad.scanline_intersections(0.5))
    )


def test_direction_and_change():
    line = LinearSegment(Vector2(1, 1), Vector2(4, 5))
    assert line.direction(0.3) == Vector2(3, 4)
    assert line.direction_change(0.3) == Vector2()
    quad = QuadraticSegment(Vector2(0, 0), Vector2(1, 2), Vector2(2, 0))
    assert quad.direction(0) == Vector2(1, 2)
    assert quad.direction_change(0.7) == Vector2(2, 0) - Vector2(1, 2) - Vector2(1, 2)


def test_linear_scanline():
    line = LinearSegment(Vector2(0, 0), Vector2(0, 2))
    assert line.scanline_intersections(1.0) == [(0.0, 1)]
    assert line.scanline_intersections(3.0) == []
    reversed_line = LinearSegment(Vector2(0, 2), Vector2(0, 0))
    assert reversed_line.scanline_intersections(1.0) == [(0.0, -1)]


def test_closed_triangle_scanline_balanced():
    a, b, c = Vector2(0, 0), Vector2(2, 0), Vector2(1, 2)
    edges = [LinearSegment(a, b), LinearSegment(b, c), LinearSegment(c, a)]
    hits = [hit for edge in edges for hit in edge.scanline_intersections(1.0)]
    assert len(hits) == 2
    assert sum(dy for _, dy in hits) == 0
    assert all(0 < x < 2 for x, _ in hits)


def test_quadratic_scanline_crossings():
    quad = QuadraticSegment(Vector2(0, 0), Vector2(1, 2), Vector2(2, 0))
    hits = quad.scanline_intersections(0.5)
    assert len(hits) == 2
    assert sorted(dy for _, dy in hits) == [-1, 1]
    assert hits[0][0] + hits[1][0] == pytest.approx(2.0)
    assert quad.scanline_intersections(5.0) == []


@pytest.mark.parametrize("kind", KINDS)
def test_bound_encloses_curve(kind):
    points = [Vector2(x, y) for x, y in CONTROL_POINTS[kind]]
    segment = SEGMENT_CLASSES[kind](*points)
    inf = math.inf
    left, bottom, right, top = segment.bound(inf, inf, -inf, -inf)
    for i in range(201):
        p = segment.point(i / 200)
        assert left - 1e-9 <= p.x <= right + 1e-9
        assert bottom - 1e-9 <= p.y <= top + 1e-9
    xs = [segment.point(i / 2000).x for i in range(2001)]
    ys = [segment.point(i / 2000).y for i in range(2001)]
    assert left == pytest.approx(min(xs), abs=1e-5)
    assert top == pytest.approx(max(ys), abs=1e-5)


@pytest.mark.parametrize("segment", make_segments())
def test_move_endpoints(segment):
    start, end = Vector2(-0.2, 0.1), Vector2(3.1, 1.2)
    segment.move_start_point(start)
    segment.move_end_point(end)
    assert segment.point(0) == start
    assert close(segment.point(1), end)


def test_cubic_move_start_keeps_handle_offset():
    cubic = CubicSegment(Vector2(0, 0), Vector2(1, 1), Vector2(2, 1), Vector2(3, 0))
    cubic.move_start_point(Vector2(1, 0))
    assert cubic.points[1] - cubic.points[0] == Vector2(1, 1)


def test_deconverge_moves_only_control_point():
    cubic = CubicSegment(Vector2(0, 0), Vector2(1, 1), Vector2(2, 1), Vector2(3, 0))
    original = list(cubic.points)
    cubic.deconverge(0, 0.1)
    assert cubic.points[0] == original[0]
    assert cubic.points[1] != original[1]
    assert cubic.points[2:] == original[2:]
    cubic.deconverge(1, 0.1)
    assert cubic.points[3] == original[3]
    assert cubic.points[2] != original[2]