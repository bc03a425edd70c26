"""Exceptions raised by mbt_geometry."""


class PolygonError(Exception):
    """Base class for polygon geometry errors."""


class PolygonStateError(PolygonError, RuntimeError):
    """
    Raised when polygon operations are called out of order.

    A polygon must be transformed into the camera frame before visibility
    or clipping is computed, and clipped before the clipped region of
    interest can be read.
    """

    def __init__(self, operation: str, state, required):
        self.operation = operation
        self.state = state
        self.required = tuple(required)
        names = ", ".join(s.name for s in self.required)
        super().__init__(
            f"{operation} requires polygon state in ({names}), got {state.name}"
        )


class FovNotComputedError(PolygonError, ValueError):
    """Raised when field-of-view clipping is requested without FOV normals."""
