"""Errors raised by the checkers engine."""


class InvalidMoveError(ValueError):
    """Requested move is not reachable for the moving color.

    Raised before any mutation, so the board is left exactly as it was.
    """


class MalformedSnapshotError(ValueError):
    """A transported board snapshot cannot be turned into a Board."""
