from __future__ import annotations


class ShapeMismatchError(ValueError):
    """
    Raised when a raw output tensor does not hold exactly S*S*B*record_size floats.
    """

    def __init__(self, expected: int, actual: int):
        self.expected = expected
        self.actual = actual
        super().__init__(f"Output tensor has {actual} values, expected {expected}.")


class DegenerateBoxError(ValueError):
    """Box with zero or negative width/height."""
