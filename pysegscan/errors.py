"""PySegScan error types."""


class SegScanError(Exception):
    """Base error for all pysegscan failures."""


class ShapeMismatchError(SegScanError):
    """Vector element width or dimensionality does not fit the operation."""


class InvalidSegmentError(SegScanError):
    """Segment lengths are negative or do not sum to the data length."""


class IndexOutOfBoundsError(SegScanError):
    """A scatter/gather index falls outside its target range."""
