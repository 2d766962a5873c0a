"""
Errors raised by the game logic.
None of them are fatal - the caller decides whether to ignore or report them.
"""


class GameError(Exception):
    pass


class OutOfRangeError(GameError):
    """Cell index (or row/col) is not on the board."""
    pass


class AlreadyClassifiedError(GameError):
    """Tried to write a symbol into a cell that already holds one."""
    pass


class CellUnavailableError(GameError):
    """Cell can't be selected right now (already classified, or a turn is pending)."""
    pass


class StateInconsistencyError(GameError):
    """The caller broke the select -> submit ordering. Indicates a bug."""
    pass
