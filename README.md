# fieldglyph

Generate signed distance fields (SDF), pseudo-distance fields and
multi-channel signed distance fields (MSDF / MTSDF) from vector shapes
made of lines and quadratic or cubic Bézier curves, then render them back
or save them as BMP or floating-point TIFF images.

## Installation

```
pip install fieldglyph
```

The only runtime dependency is `numpy`.

## Describing a shape

Shapes use a compact text format. Each contour sits in braces, points are
separated by semicolons, control points go in parentheses, and `#` closes
the contour back to its first point. A colour letter (`c`, `m`, `y`, `w`)
placed before an edge's control points assigns that edge a channel colour.
A description may start with `@invert-y` to flip the vertical axis.

```python
from fieldglyph.shape_description import parse_shape_description, format_shape_description

shape, colors_specified = parse_shape_description("{ 0,0; 10,0; 10,10; 0,10; # }")
print(format_shape_description(shape))
```

`parse_shape_description` returns the `Shape` together with a flag telling
whether any edge colour was given explicitly. Malformed input raises
`ShapeDescriptionError`, as does formatting a shape whose contours are not
closed (see `Shape.validate`). `read_shape_description` and
`write_shape_description` do the same work on text streams.

Shapes can also be built directly: `Shape.add_contour()` returns a new
`Contour`, and `Contour.add_edge()` appends a `LinearSegment`,
`QuadraticSegment` or `CubicSegment`.

## Generating distance fields

```python
from fieldglyph.generators import generate_msdf_legacy
from fieldglyph.edge_segments import Vector2

field = generate_msdf_legacy(
    shape, 32, 32,
    distance_range=4.0,
    scale=Vector2(2.0, 2.0),
    translate=Vector2(3.0, 3.0),
)
```

Each pixel centre `(x + 0.5, y + 0.5)` is mapped to shape space as
`point / scale - translate`. `generate_sdf_legacy` and
`generate_pseudo_sdf_legacy` return `(height, width, 1)` fields,
`generate_msdf_legacy` a `(height, width, 3)` field whose channels follow
the edge colours, and `generate_mtsdf_legacy` a `(height, width, 4)` field
with the true distance in the fourth channel. Values are `float32`, with
0.5 on the shape's outline. Edges must be coloured (for example `CYAN`,
`MAGENTA`, `YELLOW`) for the channels of a multi-channel field to differ.

The generators do not correct clashes themselves. To flatten texels whose
channels clash with a neighbour, pass the field to
`fieldglyph.error_correction.msdf_error_correction_legacy`, which works in
place on three- or four-channel arrays and takes a horizontal and vertical
threshold:

```python
from fieldglyph.error_correction import msdf_error_correction_legacy

msdf_error_correction_legacy(field, (0.5, 0.5))
```

## Rendering and saving

```python
from fieldglyph.render import render_sdf, simulate_8bit
from fieldglyph.save_bmp import save_bmp
from fieldglyph.save_tiff import save_tiff

preview = render_sdf(field, 128, 128, 1, px_range=4.0, mid_value=0.5)
save_bmp(preview, "preview.bmp")
save_tiff(field, "field.tiff")
```

`render_sdf` resamples the field bilinearly; a `px_range` of zero gives a
hard threshold at `mid_value`. `simulate_8bit` snaps a float bitmap in
place to values representable in 8 bits. `encode_bmp` and `encode_tiff`
return the file contents as `bytes` instead of writing them. Row 0 of an
array is the bottom row of the image. BMP cannot hold four-channel images
(a `ValueError` is raised); TIFF output is uncompressed 32-bit float with
one, three or four samples per pixel.

## Lower-level pieces

- `fieldglyph.equation_solver`: `solve_quadratic` and `solve_cubic`,
  returning a tuple of the real roots, or `None` when every number solves
  the equation.
- `fieldglyph.edge_segments`: `Vector2`, `SignedDistance`, `EdgeColor`,
  `mix`, and `LinearSegment`, `QuadraticSegment`, `CubicSegment` with point
  evaluation, signed distance, scanline intersections, bounds, splitting
  and reversal.
- `fieldglyph.edge_selectors`: the true-distance, pseudo-distance and
  multi-channel selectors (`TrueDistanceSelector`,
  `PseudoDistanceSelector`, `MultiDistanceSelector`,
  `MultiAndTrueDistanceSelector`) that pick the nearest edge for a point.

## What is not included

- There is no command-line tool; everything is used from Python.
- Shapes are not loaded from font files; they come from the text format or
  are built in code.
- There is no automatic edge colouring, no shape-aware error correction,
  no fill-rule rasterisation or sign correction, and no error estimation;
  only the clash-based `msdf_error_correction_legacy` is provided.

## Running the tests

```
pip install fieldglyph[test]
pytest
```