"""
Error taxonomy for the measurement engine.

Every failure is a local validation failure: nothing here is transient and
nothing is retried. Each error carries the field, index, actual and expected
values so the calling layer can build an actionable message. The engine never
formats a response itself; callers map `code` to whatever they return.
"""


class TakeoffError(ValueError):
    """Base class for all engine failures."""

    code = "TAKEOFF_ERROR"

    def __init__(self, message: str, field: str = None, index: int = None,
                 actual=None, expected=None):
        super().__init__(message)
        self.message = message
        self.field = field
        self.index = index
        self.actual = actual
        self.expected = expected

    def to_dict(self) -> dict:
        """Structured context for the calling layer."""
        return {
            "code": self.code,
            "message": self.message,
            "field": self.field,
            "index": self.index,
            "actual": self.actual,
            "expected": self.expected,
        }


class UnitMismatch(TakeoffError):
    """A unit was applied to a value of a different dimension (or is unknown)."""
    code = "UNIT_MISMATCH"


class InsufficientPoints(TakeoffError):
    """Geometry has fewer points than the operation needs."""
    code = "INSUFFICIENT_POINTS"


class InvalidPolygon(TakeoffError):
    """Ring is open, self-intersecting, or has (near) zero area."""
    code = "INVALID_POLYGON"


class UnknownFactorKey(TakeoffError):
    """Factor table lookup on a key the table does not define."""
    code = "UNKNOWN_FACTOR_KEY"


class InconsistentInput(TakeoffError):
    """Inputs contradict each other or the measurement's shape."""
    code = "INCONSISTENT_INPUT"


class OutOfRangeParameter(TakeoffError):
    """A parameter is outside its physically meaningful range."""
    code = "OUT_OF_RANGE_PARAMETER"


class UnknownMeasurementKind(TakeoffError):
    """The `type` discriminator is not one of the supported measurement kinds."""
    code = "UNKNOWN_MEASUREMENT_KIND"
