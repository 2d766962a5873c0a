"""
Win detector for drawn TicTacToe.
Checks if a symbol has completed a line, and which line it is.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from .board_state import BoardState, Symbol


@dataclass(frozen=True)
class WinResult:
    """Result of evaluating a board."""
    winner: Optional[Symbol] = None
    winning_line: Optional[Tuple[int, int, int]] = None  # cell indices

    @property
    def has_winner(self) -> bool:
        return self.winner is not None


class WinDetector:
    """
    Checks for win conditions in TicTacToe.

    Win condition: 3 cells classified as the same symbol in a row
    (horizontally, vertically, or diagonally).
    """

    # All possible winning lines as cell indices, in priority order
    WINNING_LINES: Tuple[Tuple[int, int, int], ...] = (
        # Rows, top to bottom
        (0, 1, 2),
        (3, 4, 5),
        (6, 7, 8),
        # Columns, left to right
        (0, 3, 6),
        (1, 4, 7),
        (2, 5, 8),
        # Diagonals
        (0, 4, 8),
        (2, 4, 6),
    )

    def evaluate(self, board: BoardState) -> WinResult:
        """
        Check if there's a winner.

        The first winning line in WINNING_LINES order is reported, so the
        result is deterministic even if a caller managed to complete two.

        Args:
            board: The board to evaluate. Not modified.

        Returns:
            WinResult with the winner and its line, or an empty WinResult.
        """
        cells = board.cells
        for line in self.WINNING_LINES:
            winner = self._check_line(cells, line)
            if winner is not None:
                return WinResult(winner=winner, winning_line=line)

        return WinResult()

    def _check_line(
        self,
        cells: Tuple[Optional[Symbol], ...],
        line: Tuple[int, int, int]
    ) -> Optional[Symbol]:
        """
        Check if a single line has a winner.

        Args:
            cells: Snapshot of the board cells.
            line: The 3 cell indices to check.

        Returns:
            The symbol if all 3 cells hold it, None otherwise.
        """
        first = cells[line[0]]
        if first is None:
            return None  # Empty cell, no winner on this line

        for index in line[1:]:
            if cells[index] != first:
                return None

        return first

    def is_draw(self, board: BoardState) -> bool:
        """
        Check if the round ended without a winner.

        Args:
            board: The board to evaluate.

        Returns:
            True if every cell is classified and no line is complete.
        """
        return board.is_full() and not self.evaluate(board).has_winner


# Quick test
if __name__ == "__main__":
    print("Testing WinDetector...")

    detector = WinDetector()

    # Test 1: Diagonal win
    board = BoardState()
    for index in (0, 4, 8):
        board.set_classification(index, Symbol.B)
    result = detector.evaluate(board)
    print(f"Test 1 (diagonal): winner = {result.winner}, line = {result.winning_line}")
    assert result.winner == Symbol.B

    # Test 2: No winner
    board.reset()
    board.set_classification(0, Symbol.A)
    board.set_classification(1, Symbol.B)
    result = detector.evaluate(board)
    print(f"Test 2 (no winner): winner = {result.winner}")
    assert result.winner is None

    print("\nWinDetector test done!")
