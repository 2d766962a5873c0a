"""
Move validator for drawn TicTacToe.
Lets the input surface check a click before unlocking the drawing area.
"""

from typing import Optional, List, Type
from dataclasses import dataclass

from .board_state import CELL_COUNT
from .errors import GameError, OutOfRangeError, CellUnavailableError
from .turn_controller import TurnController


@dataclass
class ValidationResult:
    """Result of move validation."""
    is_valid: bool
    error_message: Optional[str] = None
    error: Optional[Type[GameError]] = None  # what select_cell() would raise


class MoveValidator:
    """
    Validates cell selections without raising.

    Rules:
    1. The index must be on the board
    2. No other turn may be pending
    3. The cell must not be classified yet
    """

    def validate_selection(
        self,
        controller: TurnController,
        index: int
    ) -> ValidationResult:
        """
        Validate a cell selection.

        Args:
            controller: The controller the selection would go to.
            index: Cell index (0-8).

        Returns:
            ValidationResult with is_valid and error_message.
        """
        # Check if index is in valid range
        if isinstance(index, bool) or not isinstance(index, int) or not (0 <= index < CELL_COUNT):
            return ValidationResult(
                is_valid=False,
                error_message=f"Invalid cell index {index!r}. Must be 0-{CELL_COUNT - 1}.",
                error=OutOfRangeError
            )

        # Check if a turn is still pending
        if not controller.is_idle():
            return ValidationResult(
                is_valid=False,
                error_message=f"Cell {controller.active_cell} is still waiting for a classification",
                error=CellUnavailableError
            )

        # Check if cell is empty
        symbol = controller.board.get(index)
        if symbol is not None:
            return ValidationResult(
                is_valid=False,
                error_message=f"Cell {index} is already classified as {symbol.value}",
                error=CellUnavailableError
            )

        return ValidationResult(is_valid=True)

    def get_valid_cells(self, controller: TurnController) -> List[int]:
        """
        Get all cells that can be selected right now.

        Args:
            controller: The controller to check against.

        Returns:
            List of cell indices. Empty while a turn is pending.
        """
        if not controller.is_idle():
            return []

        return controller.board.get_empty_cells()


# Quick test
if __name__ == "__main__":
    from .board_state import Symbol

    print("Testing MoveValidator...")

    controller = TurnController()
    validator = MoveValidator()

    # Test valid selection
    result = validator.validate_selection(controller, 4)
    print(f"Cell 4: valid={result.is_valid}, error={result.error_message}")

    controller.select_cell(4)
    controller.submit_classification(4, Symbol.A)

    # Test invalid selection (same cell)
    result = validator.validate_selection(controller, 4)
    print(f"Cell 4 again: valid={result.is_valid}, error={result.error_message}")

    # Test out of range
    result = validator.validate_selection(controller, 12)
    print(f"Cell 12: valid={result.is_valid}, error={result.error_message}")

    print(f"Valid cells: {validator.get_valid_cells(controller)}")

    print("\nMoveValidator test done!")
