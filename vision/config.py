"""
Configuration for drawn TicTacToe.
All the settings for the board, the drawing classifier, and the board view.

Setup:
    pip install numpy opencv-python-headless

    For the classifier model: pip install tflite-runtime
"""


class GameConfig:
    """
    Configuration class for game and classifier settings.
    Loaded once at startup and only read after that.
    """

    # ==================== BOARD SETTINGS ====================
    # TicTacToe is a 3x3 grid
    BOARD_SIZE = 3

    # ==================== DRAWING SETTINGS ====================
    # Drawings are downsampled to DOWNSAMPLED_SIZE x DOWNSAMPLED_SIZE pixels
    # before they reach the classifier (white strokes on black)
    DOWNSAMPLED_SIZE = 24

    # A drawing whose brightest pixel is at or below this is treated as blank
    BLANK_THRESHOLD = 0.0

    # ==================== CLASSIFIER SETTINGS ====================
    # Path to the trained TFLite model
    MODEL_PATH = "models/drawing_classifier.tflite"
    NUM_THREADS = 2

    # Number of model outputs (must match your trained model!)
    OUTPUT_LAYER = 2  # confidence for O, confidence for X

    # ==================== BOARD VIEW SETTINGS ====================
    BOARD_OUTPUT_SIZE = 600
    CELL_OUTPUT_SIZE = BOARD_OUTPUT_SIZE // BOARD_SIZE  # 200 pixels per cell

    # BGR colours
    BACKGROUND_COLOR = (255, 255, 255)
    GRID_COLOR = (0, 0, 0)
    O_COLOR = (0, 0, 255)      # Red
    X_COLOR = (255, 0, 0)      # Blue
    WIN_LINE_COLOR = (0, 200, 0)  # Green
    HIGHLIGHT_COLOR = (200, 255, 200)  # Light green, selected cell
    MARKER_THICKNESS = 8

    # ==================== DEBUG SETTINGS ====================
    DEBUG_MODE = False

    def input_length(self) -> int:
        """Number of values in a classifier input vector."""
        return self.DOWNSAMPLED_SIZE * self.DOWNSAMPLED_SIZE
