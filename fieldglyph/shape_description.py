"""Shapes made of contours, and their plain-text description format."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Optional, TextIO

from .edge_segments import (
    CubicSegment,
    EdgeColor,
    EdgeSegment,
    LinearSegment,
    QuadraticSegment,
    Vector2,
)

__all__ = [
    "ShapeDescriptionError",
    "Contour",
    "Shape",
    "parse_shape_description",
    "read_shape_description",
    "format_shape_description",
    "write_shape_description",
]


class ShapeDescriptionError(ValueError):
    """A shape description is malformed, or a shape cannot be described."""


@dataclass
class Contour:
    """A closed sequence of edges."""

    edges: list[EdgeSegment] = field(default_factory=list)

    def add_edge(self, edge: EdgeSegment) -> EdgeSegment:
        self.edges.append(edge)
        return edge


@dataclass
class Shape:
    """A vector shape made of contours."""

    contours: list[Contour] = field(default_factory=list)
    inverse_y_axis: bool = False

    def add_contour(self) -> Contour:
        contour = Contour()
        self.contours.append(contour)
        return contour

    def validate(self) -> bool:
        """True if every contour is connected and closed."""
        for contour in self.contours:
            if not contour.edges:
                continue
            corner = contour.edges[-1].point(1)
            for edge in contour.edges:
                if edge.point(0) != corner:
                    return False
                corner = edge.point(1)
        return True


_NUMBER = re.compile(
    r"[ \t\r\n\f\v]*([+-]?(?:(?:\d+\.?\d*|\.\d+)(?:e[+-]?\d+)?|inf(?:inity)?|nan))",
    re.IGNORECASE,
)
_WHITESPACE = " \t\r\n"
_COLOR_CODES = {
    "C": EdgeColor.CYAN,
    "M": EdgeColor.MAGENTA,
    "Y": EdgeColor.YELLOW,
    "W": EdgeColor.WHITE,
}
_INVERT_Y = "invert-y"


class _Reader:
    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0
        self.colors_specified = False

    def read_char(self) -> Optional[str]:
        """Next non-blank character, or None at the end."""
        while self.pos < len(self.text):
            c = self.text[self.pos]
            self.pos += 1
            if c not in _WHITESPACE:
                return c
        return None

    def read_coord(self) -> tuple[int, Optional[Vector2]]:
        """Read "x,y": (2, point) on success, else (number of values read, None)."""
        first = _NUMBER.match(self.text, self.pos)
        if not first:
            return 0, None
        end = first.end()
        if end >= len(self.text) or self.text[end] != ",":
            return 1, None
        second = _NUMBER.match(self.text, end + 1)
        if not second:
            return 1, None
        self.pos = second.end()
        return 2, Vector2(float(first.group(1)), float(second.group(1)))


def _read_control_points(reader: _Reader) -> Optional[list[Vector2]]:
    result, a = reader.read_coord()
    if result == 2:
        c = reader.read_char()
        if c == ")":
            return [a]
        if c != ";":
            return None
        result, b = reader.read_coord()
        if result == 2 and reader.read_char() == ")":
            return [a, b]
    elif result != 1 and reader.read_char() == ")":
        return []
    return None


def _make_edge(points: list[Vector2], color: EdgeColor) -> EdgeSegment:
    if len(points) == 2:
        return LinearSegment(*points, color)
    if len(points) == 3:
        return QuadraticSegment(*points, color)
    return CubicSegment(*points, color)


def _read_contour(
    reader: _Reader, contour: Contour, first: Optional[Vector2], terminator: Optional[str]
) -> bool:
    if first is None:
        result, first = reader.read_coord()
        if result != 2:
            return result != 1 and reader.read_char() == terminator
    current = start = first
    while (c := reader.read_char()) != terminator:
        if c != ";":
            return False
        color = EdgeColor.WHITE
        result, point = reader.read_coord()
        if result == 2:
            contour.add_edge(LinearSegment(current, point, color))
            current = point
            continue
        if result == 1:
            return False
        c = reader.read_char()
        if c == "#":
            contour.add_edge(LinearSegment(current, start, color))
            current = start
            continue
        control: list[Vector2] = []
        read_control = c == "("
        if c != ";" and not read_control:
            code = _COLOR_CODES.get(c.upper()) if c is not None else None
            if code is None:
                return c == terminator
            color = code
            reader.colors_specified = True
            c = reader.read_char()
            if c == "(":
                read_control = True
            elif c != ";":
                return False
        if read_control:
            parsed = _read_control_points(reader)
            if parsed is None:
                return False
            control = parsed
            if reader.read_char() != ";":
                return False
        result, point = reader.read_coord()
        if result != 2:
            if result == 1 or reader.read_char() != "#":
                return False
            point = start
        contour.add_edge(_make_edge([current, *control, point], color))
        current = point
    return True


def parse_shape_description(text: str) -> tuple[Shape, bool]:
    """Parse a shape description.

    Returns the shape and whether any edge colours were given explicitly.
    Raises ShapeDescriptionError if the text is malformed.
    """
    reader = _Reader(text)
    shape = Shape()
    result, point = reader.read_coord()
    if result == 2:
        if not _read_contour(reader, shape.add_contour(), point, None):
            raise ShapeDescriptionError("malformed contour")
        return shape, reader.colors_specified
    if result == 1:
        raise ShapeDescriptionError("incomplete coordinate")
    c = reader.read_char()
    if c == "@":
        if not text.startswith(_INVERT_Y, reader.pos):
            raise ShapeDescriptionError("unknown directive")
        shape.inverse_y_axis = True
        reader.pos += len(_INVERT_Y)
        c = reader.read_char()
    while c == "{":
        if not _read_contour(reader, shape.add_contour(), None, "}"):
            raise ShapeDescriptionError("malformed contour")
        c = reader.read_char()
    if c is not None:
        raise ShapeDescriptionError(f"unexpected character {c!r}")
    return shape, reader.colors_specified


def read_shape_description(stream: TextIO) -> tuple[Shape, bool]:
    """Parse a shape description read from a text stream."""
    return parse_shape_description(stream.read())


def _coord(point: Vector2) -> str:
    return f"{point.x:.12g}, {point.y:.12g}"


_COLOR_LETTERS = {
    EdgeColor.YELLOW: "y",
    EdgeColor.MAGENTA: "m",
    EdgeColor.CYAN: "c",
    EdgeColor.WHITE: "w",
}


def format_shape_description(shape: Shape) -> str:
    """Serialise a shape; raises ShapeDescriptionError if it is not valid."""
    if not shape.validate():
        raise ShapeDescriptionError("shape contours are not closed")
    write_colors = any(
        edge.color != EdgeColor.WHITE
        for contour in shape.contours
        for edge in contour.edges
    )
    lines: list[str] = []
    if shape.inverse_y_axis:
        lines.append("@invert-y\n")
    for contour in shape.contours:
        lines.append("{\n")
        if contour.edges:
            for edge in contour.edges:
                code = _COLOR_LETTERS.get(edge.color, "") if write_colors else ""
                pts = edge.points
                lines.append(f"\t{_coord(pts[0])};\n")
                if isinstance(edge, LinearSegment):
                    if code:
                        lines.append(f"\t\t{code};\n")
                elif isinstance(edge, QuadraticSegment):
                    lines.append(f"\t\t{code}({_coord(pts[1])});\n")
                elif isinstance(edge, CubicSegment):
                    lines.append(f"\t\t{code}({_coord(pts[1])}; {_coord(pts[2])});\n")
            lines.append("\t#\n")
        lines.append("}\n")
    return "".join(lines)


def write_shape_description(shape: Shape, stream: TextIO) -> None:
    """Write the shape's description to a text stream."""
    stream.write(format_shape_description(shape))