"""
Logic module for drawn TicTacToe.
Handles the board, win detection, and turn sequencing.
"""

from .board_state import BoardState, Symbol, cell_to_index, index_to_cell
from .errors import (
    GameError,
    OutOfRangeError,
    AlreadyClassifiedError,
    CellUnavailableError,
    StateInconsistencyError,
)
from .win_detector import WinDetector, WinResult
from .turn_controller import TurnController, TurnState
from .move_validator import MoveValidator, ValidationResult
