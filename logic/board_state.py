"""
Board state for drawn TicTacToe.
Holds the classification of each of the 9 cells.
"""

from enum import Enum
from typing import Optional, List, Tuple

from .errors import OutOfRangeError, AlreadyClassifiedError


class Symbol(Enum):
    """The two symbols the classifier can recognize."""
    A = "o"
    B = "x"


# TicTacToe is a 3x3 grid
BOARD_SIZE = 3
CELL_COUNT = BOARD_SIZE * BOARD_SIZE


def _is_valid_index(index) -> bool:
    # bool is an int subclass, but True/False are not cell indices
    return isinstance(index, int) and not isinstance(index, bool) and 0 <= index < CELL_COUNT


def cell_to_index(row: int, col: int) -> int:
    """
    Convert (row, col) to a linear cell index.

    Args:
        row: Row index (0-2).
        col: Column index (0-2).

    Returns:
        Index 0-8, row major.
    """
    if not (0 <= row < BOARD_SIZE and 0 <= col < BOARD_SIZE):
        raise OutOfRangeError(f"Invalid position ({row}, {col}). Must be 0-{BOARD_SIZE - 1}.")
    return row * BOARD_SIZE + col


def index_to_cell(index: int) -> Tuple[int, int]:
    """Convert a linear cell index to (row, col)."""
    if not _is_valid_index(index):
        raise OutOfRangeError(f"Invalid cell index {index!r}. Must be 0-{CELL_COUNT - 1}.")
    return divmod(index, BOARD_SIZE)


class BoardState:
    """
    The 3x3 board. None means the cell has not been classified yet.

    A classified cell is never overwritten - only reset() clears it.
    """

    def __init__(self):
        self._cells: List[Optional[Symbol]] = [None] * CELL_COUNT

    @property
    def cells(self) -> Tuple[Optional[Symbol], ...]:
        """Snapshot of all 9 cells."""
        return tuple(self._cells)

    def set_classification(self, index: int, symbol: Symbol) -> None:
        """
        Store the classified symbol for a cell.

        Args:
            index: Cell index (0-8).
            symbol: The recognized symbol.

        Raises:
            OutOfRangeError: index is not on the board.
            AlreadyClassifiedError: the cell already holds a symbol.
            ValueError: symbol is not a Symbol.
        """
        if not _is_valid_index(index):
            raise OutOfRangeError(f"Invalid cell index {index!r}. Must be 0-{CELL_COUNT - 1}.")

        if not isinstance(symbol, Symbol):
            raise ValueError(f"Expected a Symbol, got {symbol!r}")

        current = self._cells[index]
        if current is not None:
            raise AlreadyClassifiedError(
                f"Cell {index} is already classified as {current.value}"
            )

        self._cells[index] = symbol

    def get(self, index: int) -> Optional[Symbol]:
        """Get the symbol in a cell, or None if it is unclassified."""
        if not _is_valid_index(index):
            raise OutOfRangeError(f"Invalid cell index {index!r}. Must be 0-{CELL_COUNT - 1}.")
        return self._cells[index]

    def reset(self) -> None:
        """Clear all cells. Only used between rounds."""
        self._cells = [None] * CELL_COUNT

    def get_empty_cells(self) -> List[int]:
        """
        Get all unclassified cells.

        Returns:
            List of cell indices, in board order.
        """
        return [index for index, symbol in enumerate(self._cells) if symbol is None]

    def classified_count(self) -> int:
        return CELL_COUNT - len(self.get_empty_cells())

    def is_full(self) -> bool:
        return all(symbol is not None for symbol in self._cells)

    def get_grid_display(self) -> str:
        """
        Get a text representation of the board.

        Returns:
            Multi-line string with O/X in the classified cells.
        """
        lines = ["┌───┬───┬───┐"]

        for row in range(BOARD_SIZE):
            row_str = "│"
            for col in range(BOARD_SIZE):
                symbol = self._cells[row * BOARD_SIZE + col]
                if symbol is None:
                    row_str += "   │"
                else:
                    row_str += f" {symbol.value.upper()} │"
            lines.append(row_str)

            if row < BOARD_SIZE - 1:
                lines.append("├───┼───┼───┤")

        lines.append("└───┴───┴───┘")
        return "\n".join(lines)

    def __repr__(self) -> str:
        cells = "".join("." if s is None else s.value for s in self._cells)
        return f"BoardState({cells!r})"


# Quick test
if __name__ == "__main__":
    print("Testing BoardState...")

    board = BoardState()
    board.set_classification(cell_to_index(1, 1), Symbol.A)
    board.set_classification(0, Symbol.B)

    try:
        board.set_classification(4, Symbol.B)
    except AlreadyClassifiedError as e:
        print(f"Overwrite rejected: {e}")

    print(board.get_grid_display())
    print(f"Empty cells: {board.get_empty_cells()}")

    print("\nBoardState test done!")
