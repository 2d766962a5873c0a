"""
Board view for drawn TicTacToe.
Draws the board with OpenCV as turn events come in.
"""

import cv2
import numpy as np
from typing import Optional, List, Tuple

from logic.board_state import Symbol, index_to_cell
from logic.win_detector import WinResult
from .config import GameConfig


class BoardRenderer:
    """
    Keeps an image of the board up to date.

    Plugs into TurnController as its renderer: the selected cell is
    highlighted until its turn completes or aborts, O is drawn as a circle,
    X as two crossing lines, and the winning line is drawn across its cells.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize the renderer with an empty board.

        Args:
            config: Game configuration.
        """
        self.config = config or GameConfig()
        self.placements: List[Tuple[int, Symbol]] = []
        self.winning_line: Optional[Tuple[int, int, int]] = None
        self.selected_cell: Optional[int] = None
        self.image = self._render()

    def _render(self) -> np.ndarray:
        """Draw the whole board from the current state."""
        size = self.config.BOARD_OUTPUT_SIZE
        cell_size = self.config.CELL_OUTPUT_SIZE
        line_thickness = 3

        image = np.zeros((size, size, 3), dtype=np.uint8)
        image[:] = self.config.BACKGROUND_COLOR

        # Highlight goes under the grid lines
        if self.selected_cell is not None:
            row, col = index_to_cell(self.selected_cell)
            cv2.rectangle(
                image,
                (col * cell_size, row * cell_size),
                ((col + 1) * cell_size - 1, (row + 1) * cell_size - 1),
                self.config.HIGHLIGHT_COLOR,
                cv2.FILLED
            )

        for i in range(1, self.config.BOARD_SIZE):
            # Vertical lines
            x = i * cell_size
            cv2.line(image, (x, 0), (x, size), self.config.GRID_COLOR, line_thickness)
            # Horizontal lines
            y = i * cell_size
            cv2.line(image, (0, y), (size, y), self.config.GRID_COLOR, line_thickness)

        for index, symbol in self.placements:
            self._draw_symbol(image, index, symbol)

        if self.winning_line is not None:
            start = self._cell_center(self.winning_line[0])
            end = self._cell_center(self.winning_line[-1])
            cv2.line(image, start, end, self.config.WIN_LINE_COLOR, self.config.MARKER_THICKNESS * 2)

        return image

    def _cell_center(self, index: int) -> Tuple[int, int]:
        """Pixel center (x, y) of a cell."""
        row, col = index_to_cell(index)
        cell_size = self.config.CELL_OUTPUT_SIZE
        return (col * cell_size + cell_size // 2, row * cell_size + cell_size // 2)

    def _draw_symbol(self, image: np.ndarray, index: int, symbol: Symbol):
        cx, cy = self._cell_center(index)
        cell_size = self.config.CELL_OUTPUT_SIZE
        margin = cell_size // 5
        marker_size = cell_size // 2 - margin
        thickness = self.config.MARKER_THICKNESS

        if symbol == Symbol.A:
            cv2.circle(image, (cx, cy), marker_size, self.config.O_COLOR, thickness)
        else:
            cv2.line(
                image,
                (cx - marker_size, cy - marker_size),
                (cx + marker_size, cy + marker_size),
                self.config.X_COLOR,
                thickness
            )
            cv2.line(
                image,
                (cx + marker_size, cy - marker_size),
                (cx - marker_size, cy + marker_size),
                self.config.X_COLOR,
                thickness
            )

    def on_select(self, index: int):
        """Highlight the cell the next drawing goes to."""
        self.selected_cell = index
        self.image = self._render()

    def on_abort(self):
        """Drop the highlight, the turn was cancelled."""
        self.selected_cell = None
        self.image = self._render()

    def on_placement(self, index: int, symbol: Symbol):
        """Draw a classified symbol in its cell."""
        if not isinstance(symbol, Symbol):
            raise ValueError(f"Expected a Symbol, got {symbol!r}")

        self.selected_cell = None
        self.placements.append((index, symbol))
        self.image = self._render()

    def on_result(self, result: WinResult):
        """Draw the winning line, if there is one."""
        if not result.has_winner:
            return

        self.winning_line = result.winning_line
        self.image = self._render()

        if self.config.DEBUG_MODE:
            print(f"Winning line {result.winning_line} for {result.winner.value.upper()}")

    def on_reset(self):
        """Clear the board for a new round."""
        self.placements = []
        self.winning_line = None
        self.selected_cell = None
        self.image = self._render()

    def get_image(self) -> np.ndarray:
        """Get a copy of the current board image (BGR)."""
        return self.image.copy()


# Quick test
if __name__ == "__main__":
    print("Testing board renderer...")

    renderer = BoardRenderer()
    renderer.on_select(4)
    renderer.on_placement(4, Symbol.A)
    renderer.on_select(0)
    renderer.on_placement(0, Symbol.B)
    renderer.on_result(WinResult(winner=Symbol.B, winning_line=(0, 4, 8)))

    cv2.imwrite("board_test.png", renderer.get_image())
    print("Saved: board_test.png")

    print("Board renderer test done!")
