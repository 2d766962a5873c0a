"""
Turn controller for drawn TicTacToe.

One turn is: pick an empty cell -> the drawing gets classified somewhere else
-> the symbol is written to the board -> the board is checked for a winner.
Only one turn can be in flight. While a cell is selected, no other cell can
be picked (the input surface stays locked until the turn completes or aborts).
"""

from enum import Enum
from typing import Optional

from .board_state import BoardState, Symbol, index_to_cell
from .errors import (
    AlreadyClassifiedError,
    CellUnavailableError,
    StateInconsistencyError,
)
from .win_detector import WinDetector, WinResult


class TurnState(Enum):
    """Where the controller is within a turn."""
    IDLE = "idle"
    AWAITING_CLASSIFICATION = "awaiting_classification"
    EVALUATED = "evaluated"


class TurnController:
    """
    Sequences turns and owns the board.

    The board is only ever written through submit_classification(), so
    everything outside this class sees it read-only.

    An optional renderer gets told about every step of a turn. It needs
    on_select(index), on_abort(), on_placement(index, symbol),
    on_result(win_result) and on_reset().
    """

    def __init__(
        self,
        win_detector: Optional[WinDetector] = None,
        renderer=None
    ):
        """
        Initialize the controller with an empty board.

        Args:
            win_detector: Detector to evaluate the board with.
            renderer: Optional collaborator that draws the board.
        """
        self._board = BoardState()
        self.win_detector = win_detector or WinDetector()
        self.renderer = renderer

        self._state = TurnState.IDLE
        self._active_cell: Optional[int] = None
        self.last_result = WinResult()

    @property
    def board(self) -> BoardState:
        return self._board

    @property
    def state(self) -> TurnState:
        return self._state

    @property
    def active_cell(self) -> Optional[int]:
        """The cell selected for the pending turn, if any."""
        return self._active_cell

    def is_idle(self) -> bool:
        """True when a new cell may be selected."""
        return self._state == TurnState.IDLE

    @property
    def is_round_over(self) -> bool:
        """True once a line is complete or the board is full."""
        return self.last_result.has_winner or self._board.is_full()

    def select_cell(self, index: int) -> None:
        """
        Start a turn on a cell.

        Args:
            index: Cell index (0-8).

        Raises:
            OutOfRangeError: index is not on the board.
            CellUnavailableError: a turn is already pending, or the cell
                is already classified.
        """
        index_to_cell(index)

        if self._state != TurnState.IDLE:
            raise CellUnavailableError(
                f"Cell {self._active_cell} is still waiting for a classification"
            )

        if self._board.get(index) is not None:
            raise CellUnavailableError(f"Cell {index} is already classified")

        self._active_cell = index
        self._state = TurnState.AWAITING_CLASSIFICATION

        if self.renderer is not None:
            self.renderer.on_select(index)

    def submit_classification(self, index: int, symbol: Symbol) -> WinResult:
        """
        Finish the pending turn with the classifier's verdict.

        Args:
            index: The cell the drawing was made for (must be the selected one).
            symbol: The recognized symbol.

        Returns:
            WinResult for the board after the placement.

        Raises:
            StateInconsistencyError: no turn is pending, the index doesn't
                match the selected cell, or the cell got classified behind
                the controller's back.
            ValueError: symbol is not a Symbol. The turn stays pending.
        """
        if self._state != TurnState.AWAITING_CLASSIFICATION:
            raise StateInconsistencyError(
                f"Got a classification for cell {index} but no cell is selected"
            )

        if index != self._active_cell:
            raise StateInconsistencyError(
                f"Got a classification for cell {index} but cell {self._active_cell} is selected"
            )

        try:
            self._board.set_classification(index, symbol)
        except AlreadyClassifiedError as e:
            self._finish_turn()
            raise StateInconsistencyError(str(e)) from e

        if self.renderer is not None:
            self.renderer.on_placement(index, symbol)

        self._state = TurnState.EVALUATED
        result = self.win_detector.evaluate(self._board)
        self.last_result = result

        if self.renderer is not None:
            self.renderer.on_result(result)

        self._finish_turn()
        return result

    def abort(self) -> None:
        """Cancel the pending turn without touching the board."""
        if self._state == TurnState.AWAITING_CLASSIFICATION:
            self._finish_turn()

            if self.renderer is not None:
                self.renderer.on_abort()

    def new_round(self) -> None:
        """Clear the board for a new round."""
        self._board.reset()
        self.last_result = WinResult()
        self._finish_turn()

        if self.renderer is not None:
            self.renderer.on_reset()

    def _finish_turn(self):
        self._active_cell = None
        self._state = TurnState.IDLE


# Quick test
if __name__ == "__main__":
    print("Testing TurnController...")

    controller = TurnController()

    for index in (0, 1, 2):
        controller.select_cell(index)
        result = controller.submit_classification(index, Symbol.A)
        print(f"Cell {index}: winner={result.winner}, line={result.winning_line}")

    controller.select_cell(4)
    try:
        controller.select_cell(5)
    except CellUnavailableError as e:
        print(f"Second selection rejected: {e}")
    controller.abort()
    print(f"After abort: state={controller.state.value}")

    print(controller.board.get_grid_display())
    print("\nTurnController test done!")
