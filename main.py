"""
Main orchestration script for drawn TicTacToe.

This script ties together:
- Vision (drawing classifier, board view)
- Logic (board, win detection, turn sequencing)

A turn: pick a cell, draw an O or an X, the classifier decides which
symbol it was and it gets placed on the board.
"""

import sys
import numpy as np
from typing import Optional, Sequence

# Vision imports
from vision.config import GameConfig
from vision.drawing_classifier import DrawingClassifier, is_blank, normalize_pixels
from vision.board_renderer import BoardRenderer

# Logic imports
from logic.errors import OutOfRangeError, CellUnavailableError, StateInconsistencyError
from logic.move_validator import MoveValidator
from logic.turn_controller import TurnController
from logic.win_detector import WinResult


class DrawnTicTacToe:
    """
    Main controller for drawn TicTacToe.

    Game flow:
    1. Player picks an empty cell (drawing gets unlocked)
    2. Player draws an O or an X
    3. Classifier recognizes the drawing
    4. Symbol is placed and the board is checked for a winner
    5. Repeat until someone wins or the board is full
    """

    def __init__(
        self,
        classifier=None,
        config: Optional[GameConfig] = None,
        renderer: Optional[BoardRenderer] = None
    ):
        """
        Initialize the game.

        Args:
            classifier: Anything with classify_symbol(pixels). Loads the
                TFLite classifier if not given.
            config: Game configuration.
            renderer: Board view. A BoardRenderer is created if not given.
        """
        self.config = config or GameConfig()
        self.classifier = classifier or DrawingClassifier(self.config)
        self.renderer = renderer or BoardRenderer(self.config)

        self.controller = TurnController(renderer=self.renderer)
        self.validator = MoveValidator()

    def pick_cell(self, index: int) -> bool:
        """
        Select a cell to draw in.

        Args:
            index: Cell index (0-8).

        Returns:
            True if drawing is unlocked for the cell, False if the pick was ignored.
        """
        validation = self.validator.validate_selection(self.controller, index)
        if not validation.is_valid:
            print(f"WARNING: {validation.error_message}")
            return False

        try:
            self.controller.select_cell(index)
        except (OutOfRangeError, CellUnavailableError) as e:
            print(f"WARNING: {e}")
            return False

        return True

    def recognize_drawing(self, pixels: Sequence[float]) -> Optional[WinResult]:
        """
        Classify the drawing for the selected cell and place it.

        Args:
            pixels: Downsampled drawing as intensities in [0, 1].

        Returns:
            WinResult after the placement, or None if the turn was aborted.
        """
        index = self.controller.active_cell
        if index is None:
            print("WARNING: Pick a cell before drawing!")
            return None

        if is_blank(pixels, self.config.BLANK_THRESHOLD):
            print("Nothing was drawn, pick a cell and try again.")
            self.controller.abort()
            return None

        try:
            symbol = self.classifier.classify_symbol(pixels)
        except (ValueError, RuntimeError) as e:
            print(f"ERROR: Could not classify drawing: {e}")
            self.controller.abort()
            return None

        print(f"\n>>> Recognized {symbol.value.upper()} in cell {index}")

        try:
            result = self.controller.submit_classification(index, symbol)
        except StateInconsistencyError as e:
            print("!" * 60)
            print(f"ERROR: Turn state is inconsistent: {e}")
            print("!" * 60)
            raise

        print(self.controller.board.get_grid_display())
        self._show_result(result)
        return result

    def play_turn(self, index: int, pixels: Sequence[float]) -> Optional[WinResult]:
        """Pick a cell and classify the drawing for it in one go."""
        if not self.pick_cell(index):
            return None
        return self.recognize_drawing(pixels)

    def _show_result(self, result: WinResult):
        if result.has_winner:
            print(f"\n🏆 {result.winner.value.upper()} WINS! Line: {list(result.winning_line)}")
        elif self.controller.win_detector.is_draw(self.controller.board):
            print("\n🤝 It's a DRAW!")

    def reset(self):
        """Reset the game for a new round."""
        self.controller.new_round()
        print("Game reset!")


def main():
    """Main entry point."""
    import argparse

    parser = argparse.ArgumentParser(description="Drawn TicTacToe")
    parser.add_argument(
        "--model",
        default=GameConfig.MODEL_PATH,
        help="Path to the TFLite drawing classifier"
    )
    parser.add_argument(
        "--show",
        action="store_true",
        help="Show the board in an OpenCV window (needs a GUI build of OpenCV)"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Print classifier output"
    )

    args = parser.parse_args()

    config = GameConfig()
    config.MODEL_PATH = args.model
    config.DEBUG_MODE = args.debug

    game = DrawnTicTacToe(config=config)
    if not game.classifier.is_loaded:
        return 1

    print("Enter '<cell 0-8> <drawing.npy>' to play, 'r' to reset, 'q' to quit.")

    try:
        while True:
            line = input("> ").strip()
            if line == "q":
                break
            if line == "r":
                game.reset()
                continue

            parts = line.split()
            if len(parts) != 2 or not parts[0].isdigit():
                print("WARNING: Expected '<cell> <drawing.npy>'")
                continue

            try:
                image = np.load(parts[1])
            except (OSError, ValueError) as e:
                print(f"ERROR: Could not read drawing: {e}")
                continue

            # uint8 images still need normalizing, float vectors are used as is
            pixels = image.reshape(-1) if image.dtype.kind == "f" else normalize_pixels(image)

            game.play_turn(int(parts[0]), pixels)

            if args.show:
                import cv2
                cv2.imshow("Drawn TicTacToe", game.renderer.get_image())
                cv2.waitKey(1)

            if game.controller.is_round_over:
                print("Round over. Enter 'r' for a new round.")
    except (KeyboardInterrupt, EOFError):
        print("\n\nGame interrupted by user.")
    finally:
        print("Goodbye!")

    return 0


if __name__ == "__main__":
    sys.exit(main())
