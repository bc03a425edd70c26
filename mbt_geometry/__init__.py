"""Polygon visibility and view frustum clipping for model-based tracking."""

__version__ = "0.1.0"

from . import calibration
from . import polygon
from . import utils
from .config import GeometryConfig
from .errors import FovNotComputedError, PolygonError, PolygonStateError
