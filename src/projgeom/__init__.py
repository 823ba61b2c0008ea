# -*- coding: utf-8 -*-
from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("projgeom")
except PackageNotFoundError:  # pragma: no cover - handled when package not installed
    __version__ = "unknown"

from projgeom.pn import ELLIPTIC, EUCLIDEAN, HYPERBOLIC, PROJECTIVE
from projgeom.quaternion import Quaternion
from projgeom.matrix import Matrix
from projgeom.factored_matrix import FactoredMatrix
from projgeom.sylvester import SylvesterDecomposition
from projgeom.conic_section import ConicSection
from projgeom.point_range import PointRangeFactory
from projgeom.tube import FrameFieldType, FrameInfo, PolygonalTubeFactory, TubeFactory

__all__ = [
    "__version__",
    "ELLIPTIC",
    "EUCLIDEAN",
    "HYPERBOLIC",
    "PROJECTIVE",
    "Quaternion",
    "Matrix",
    "FactoredMatrix",
    "SylvesterDecomposition",
    "ConicSection",
    "PointRangeFactory",
    "FrameFieldType",
    "FrameInfo",
    "TubeFactory",
    "PolygonalTubeFactory",
]
