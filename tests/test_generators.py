import numpy as np
import pytest

from fieldglyph.edge_segments import EdgeColor, LinearSegment, Vector2
from fieldglyph.error_correction import median
from fieldglyph.generators import (
    generate_msdf_legacy,
    generate_mtsdf_legacy,
    generate_pseudo_sdf_legacy,
    generate_sdf_legacy,
)
from fieldglyph.shape_description import Shape

CORNERS = [Vector2(1, 1), Vector2(1, 3), Vector2(3, 3), Vector2(3, 1)]
ARGS = (4, 4, 2.0, Vector2(1, 1), Vector2(0, 0))


def make_square(colors=None, inverse=False):
    shape = Shape(inverse_y_axis=inverse)
    contour = shape.add_contour()
    colors = colors or [EdgeColor.WHITE] * 4
    for i, color in enumerate(colors):
        contour.add_edge(LinearSegment(CORNERS[i], CORNERS[(i + 1) % 4], color))
    return shape


INSIDE = np.zeros((4, 4), dtype=bool)
INSIDE[1:3, 1:3] = True


def test_sdf_output_shape_and_dtype():
    out = generate_sdf_legacy(make_square(), *ARGS)
    assert out.shape == (4, 4, 1)
    assert out.dtype == np.float32


def test_sdf_inside_and_outside():
    out = generate_sdf_legacy(make_square(), *ARGS)
    channel = out[:, :, 0]
    assert (channel > 0.5).tolist() == INSIDE.tolist()
    assert float(channel[INSIDE].min()) > 0.5
    assert float(channel[~INSIDE].max()) < 0.5


def test_sdf_center_pixel_value():
    out = generate_sdf_legacy(make_square(), *ARGS)
    assert out[1, 1, 0] == pytest.approx(0.75)


def test_sdf_is_symmetric_for_square():
    out = generate_sdf_legacy(make_square(), *ARGS)[..., 0]
    assert np.allclose(out, out.T)
    assert np.allclose(out, np.flipud(out))


def test_tuple_scale_and_translate_match_vectors():
    a = generate_sdf_legacy(make_square(), 4, 4, 2.0, (1, 1), (0, 0))
    b = generate_sdf_legacy(make_square(), *ARGS)
    assert np.array_equal(a, b)


def test_inverse_y_axis_flips_rows():
    shape = Shape()
    contour = shape.add_contour()
    pts = [Vector2(1, 1), Vector2(1, 2), Vector2(3, 2), Vector2(3, 1)]
    for i in range(4):
        contour.add_edge(LinearSegment(pts[i], pts[(i + 1) % 4]))
    normal = generate_sdf_legacy(shape, *ARGS)
    shape.inverse_y_axis = True
    flipped = generate_sdf_legacy(shape, *ARGS)
    assert np.array_equal(flipped, normal[::-1])


def test_pseudo_sdf_extends_edges_at_corners():
    true_sdf = generate_sdf_legacy(make_square(), *ARGS)
    pseudo = generate_pseudo_sdf_legacy(make_square(), *ARGS)
    assert pseudo[0, 0, 0] > true_sdf[0, 0, 0]
    assert np.allclose(pseudo[INSIDE], true_sdf[INSIDE])
    assert pseudo[0, 1, 0] == pytest.approx(true_sdf[0, 1, 0])


def test_white_msdf_channels_equal_pseudo_sdf():
    pseudo = generate_pseudo_sdf_legacy(make_square(), *ARGS)[..., 0]
    msdf = generate_msdf_legacy(make_square(), *ARGS)
    assert msdf.shape == (4, 4, 3)
    for channel in range(3):
        assert np.allclose(msdf[..., channel], pseudo)


def test_mtsdf_alpha_is_true_distance():
    shape = make_square([EdgeColor.CYAN, EdgeColor.MAGENTA] * 2)
    mtsdf = generate_mtsdf_legacy(shape, *ARGS)
    msdf = generate_msdf_legacy(shape, *ARGS)
    true_sdf = generate_sdf_legacy(shape, *ARGS)
    assert mtsdf.shape == (4, 4, 4)
    assert np.array_equal(mtsdf[..., :3], msdf)
    assert np.array_equal(mtsdf[..., 3], true_sdf[..., 0])


def test_colored_msdf_median_matches_inside():
    shape = make_square([EdgeColor.CYAN, EdgeColor.MAGENTA] * 2)
    msdf = generate_msdf_legacy(shape, *ARGS)
    for row in range(4):
        for col in range(4):
            value = median(*msdf[row, col])
            assert (value > 0.5) == INSIDE[row, col]


def test_colored_msdf_channels_differ_outside():
    shape = make_square([EdgeColor.CYAN, EdgeColor.MAGENTA] * 2)
    msdf = generate_msdf_legacy(shape, *ARGS)
    # Left of the square the red channel only sees the horizontal edges.
    assert msdf[1, 0, 0] > 0.5
    assert msdf[1, 0, 1] < 0.5
    assert msdf[1, 0, 2] < 0.5