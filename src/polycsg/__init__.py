# -*- coding: utf-8 -*-
"""polyCSG: constructive solid geometry on polygon meshes."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("polyCSG")
except PackageNotFoundError:  # pragma: no cover - handled when package not installed
    __version__ = "unknown"

from polycsg.bounds import Bounds
from polycsg.color import Color
from polycsg.line import Line, LineSegment
from polycsg.mesh import Mesh, mesh
from polycsg.path import Path, PathPoint
from polycsg.plane import Plane, plane
from polycsg.polygon import Polygon, polygon
from polycsg.transform import Rotation, Transform
from polycsg.vector import Vector, vector
from polycsg.vertex import Vertex, vertex

__all__ = ['__version__', 'Bounds', 'Color', 'Line', 'LineSegment', 'Mesh', 'mesh',
           'Path', 'PathPoint', 'Plane', 'plane', 'Polygon', 'polygon', 'Rotation',
           'Transform', 'Vector', 'vector', 'Vertex', 'vertex']
