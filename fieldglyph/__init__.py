"""Signed and multi-channel signed distance fields from vector shapes, with rendering and BMP/TIFF output."""

__version__ = "0.1.0"

__all__ = [
    "edge_segments",
    "edge_selectors",
    "equation_solver",
    "error_correction",
    "generators",
    "render",
    "save_bmp",
    "save_tiff",
    "shape_description",
]