"""
Vision module for drawn TicTacToe.
Handles the drawing classifier and the board view.
"""

from .config import GameConfig
from .drawing_classifier import DrawingClassifier
from .board_renderer import BoardRenderer
