"""Exception hierarchy for Skeletonizer."""


class SkeletonizerError(Exception):
    """Base exception for all Skeletonizer errors."""

    pass


class PolygonError(SkeletonizerError):
    """Errors related to polygon documents or polygon input."""

    pass


class PolygonLoadError(PolygonError):
    """Error loading a polygon document."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load polygons '{path}': {reason}")


class PolygonSaveError(PolygonError):
    """Error saving a result document."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to save results '{path}': {reason}")


class PolygonFormatError(PolygonError):
    """Unsupported or invalid polygon document format."""

    def __init__(self, path: str, details: str) -> None:
        self.path = path
        self.details = details
        super().__init__(f"Invalid polygon document '{path}': {details}")


class InvalidPolygonError(PolygonError):
    """Polygon has too few distinct points to have a skeleton."""

    def __init__(self, name: str, reason: str) -> None:
        self.name = name
        self.reason = reason
        super().__init__(f"Invalid polygon '{name}': {reason}")


class GeometryError(SkeletonizerError):
    """Errors in geometric calculations."""

    pass


class TopologyError(GeometryError):
    """Active vertex list bookkeeping reached an impossible state.

    This signals a bug in topology maintenance, not bad input, and aborts
    the computation.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)


class ProcessingCancelledError(SkeletonizerError):
    """Processing was cancelled by user."""

    def __init__(self, processed_count: int, pending_count: int) -> None:
        self.processed_count = processed_count
        self.pending_count = pending_count
        super().__init__(
            f"Processing cancelled: {processed_count} completed, {pending_count} pending"
        )
