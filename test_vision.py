"""
Tests for the vision module.
Covers the pixel calling convention, the TFLite classifier wrapper
(with a fake interpreter) and the board view.

Usage:
    pytest test_vision.py
    python test_vision.py
"""

import sys
from pathlib import Path

import numpy as np
import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent))

from logic.board_state import Symbol
from logic.win_detector import WinResult
from vision.config import GameConfig
from vision.board_renderer import BoardRenderer
from vision.drawing_classifier import (
    DrawingClassifier,
    confidences_to_symbol,
    is_blank,
    normalize_pixels,
    validate_pixels,
)


class FakeInterpreter:
    """
    Stands in for tflite Interpreter.
    Returns a fixed output and remembers the last input tensor.
    """

    def __init__(self, output, input_dtype=np.float32, quantization=(0.0, 0)):
        self.output = np.asarray(output)
        self.input_dtype = input_dtype
        self.quantization = quantization
        self.allocated = False
        self.last_input = None
        self.invocations = 0

    def allocate_tensors(self):
        self.allocated = True

    def get_input_details(self):
        scale, zero_point = self.quantization
        return [{
            'index': 0,
            'shape': np.array([1, GameConfig().input_length()]),
            'dtype': self.input_dtype,
            'quantization': (scale, zero_point),
            'quantization_parameters': {
                'scales': np.array([scale] if scale else []),
                'zero_points': np.array([zero_point] if scale else []),
            },
        }]

    def get_output_details(self):
        scale, zero_point = self.quantization
        return [{
            'index': 1,
            'shape': np.array([1, 2]),
            'dtype': self.output.dtype,
            'quantization': (scale, zero_point),
            'quantization_parameters': {
                'scales': np.array([scale] if scale else []),
                'zero_points': np.array([zero_point] if scale else []),
            },
        }]

    def set_tensor(self, index, value):
        assert index == 0
        self.last_input = value

    def invoke(self):
        self.invocations += 1

    def get_tensor(self, index):
        assert index == 1
        return self.output.reshape(1, -1)


def drawing(value: float = 1.0) -> np.ndarray:
    """A vector with one stroke across the middle row."""
    size = GameConfig.DOWNSAMPLED_SIZE
    pixels = np.zeros((size, size), dtype=np.float32)
    pixels[size // 2, 2:size - 2] = value
    return pixels.reshape(-1)


# ==================== PIXEL CONVENTION ====================

def test_normalize_uses_red_channel():
    image = np.zeros((24, 24, 4), dtype=np.uint8)
    image[0, 0] = (255, 0, 0, 255)
    image[1, 1] = (0, 255, 255, 255)

    pixels = normalize_pixels(image)

    assert pixels.shape == (576,)
    assert pixels.dtype == np.float32
    assert pixels[0] == pytest.approx(1.0)
    assert pixels[25] == pytest.approx(0.0)


def test_normalize_grey_image():
    image = np.full((24, 24), 51, dtype=np.uint8)
    pixels = normalize_pixels(image)
    assert np.allclose(pixels, 0.2)


def test_normalize_rejects_flat_input():
    with pytest.raises(ValueError):
        normalize_pixels(np.zeros(576, dtype=np.uint8))


def test_validate_pixels():
    vector = validate_pixels([0.0, 0.5, 1.0, 0.25], 4)
    assert vector.dtype == np.float32

    with pytest.raises(ValueError):
        validate_pixels([0.0, 0.5], 4)
    with pytest.raises(ValueError):
        validate_pixels([0.0, 0.5, 1.5, 0.0], 4)
    with pytest.raises(ValueError):
        validate_pixels([0.0, -0.1, 0.0, 0.0], 4)


def test_validate_pixels_rejects_nan():
    with pytest.raises(ValueError):
        validate_pixels(np.full(576, np.nan), 576)

    pixels = drawing()
    pixels[3] = np.nan
    with pytest.raises(ValueError):
        validate_pixels(pixels, 576)

    with pytest.raises(ValueError):
        validate_pixels(np.full(4, np.inf), 4)


def test_is_blank():
    assert is_blank(np.zeros(576))
    assert not is_blank(drawing())
    assert is_blank(drawing(0.05), threshold=0.1)
    assert is_blank(np.full(576, np.nan))


def test_confidences_to_symbol():
    assert confidences_to_symbol([0.9, 0.1]) == Symbol.A
    assert confidences_to_symbol([0.2, 0.8]) == Symbol.B
    assert confidences_to_symbol(np.array([[0.3, 0.7]])) == Symbol.B


def test_tied_confidences_go_to_a():
    assert confidences_to_symbol([0.5, 0.5]) == Symbol.A


def test_confidences_need_two_values():
    with pytest.raises(ValueError):
        confidences_to_symbol([0.1, 0.2, 0.7])


# ==================== DRAWING CLASSIFIER ====================

def test_classifier_float_model():
    interpreter = FakeInterpreter([0.1, 0.9])
    classifier = DrawingClassifier(interpreter=interpreter)

    assert classifier.is_loaded
    assert interpreter.allocated
    assert not classifier.is_quantized

    confidences = classifier.classify(drawing())
    assert np.allclose(confidences, [0.1, 0.9])
    assert interpreter.last_input.shape == (1, 576)
    assert interpreter.last_input.dtype == np.float32

    assert classifier.classify_symbol(drawing()) == Symbol.B
    assert interpreter.invocations == 2


def test_classifier_int8_model():
    # 0.0 -> -128, 1.0 -> 127 with scale 1/255 and zero point -128
    interpreter = FakeInterpreter(
        np.array([100, -100], dtype=np.int8),
        input_dtype=np.int8,
        quantization=(1.0 / 255.0, -128)
    )
    classifier = DrawingClassifier(interpreter=interpreter)
    assert classifier.is_quantized

    confidences = classifier.classify(drawing())

    assert interpreter.last_input.dtype == np.int8
    assert interpreter.last_input.min() == -128
    assert interpreter.last_input.max() == 127
    assert confidences[0] > confidences[1]
    assert confidences[0] == pytest.approx(228 / 255.0)
    assert classifier.classify_symbol(drawing()) == Symbol.A


def test_classifier_rejects_wrong_size():
    classifier = DrawingClassifier(interpreter=FakeInterpreter([0.5, 0.5]))
    with pytest.raises(ValueError):
        classifier.classify(np.zeros(100))


def test_classifier_rejects_nan_drawing():
    interpreter = FakeInterpreter([0.5, 0.5])
    classifier = DrawingClassifier(interpreter=interpreter)

    with pytest.raises(ValueError):
        classifier.classify(np.full(576, np.nan))
    assert interpreter.invocations == 0


def test_classifier_checks_output_size():
    config = GameConfig()
    config.DEBUG_MODE = True
    classifier = DrawingClassifier(config, interpreter=FakeInterpreter([0.7]))

    with pytest.raises(ValueError):
        classifier.classify(drawing())

    classifier = DrawingClassifier(config, interpreter=FakeInterpreter([0.1, 0.2, 0.7]))
    with pytest.raises(ValueError):
        classifier.classify_symbol(drawing())


def test_classifier_without_model():
    classifier = DrawingClassifier(interpreter=FakeInterpreter([0.5, 0.5]))
    classifier.interpreter = None

    with pytest.raises(RuntimeError):
        classifier.classify(drawing())


# ==================== BOARD RENDERER ====================

def test_renderer_starts_with_grid():
    renderer = BoardRenderer()
    image = renderer.get_image()
    size = GameConfig.BOARD_OUTPUT_SIZE
    cell = GameConfig.CELL_OUTPUT_SIZE

    assert image.shape == (size, size, 3)
    # Grid line pixel is black, cell center is white
    assert tuple(image[10, cell]) == (0, 0, 0)
    assert tuple(image[cell // 2, cell // 2]) == (255, 255, 255)


def test_renderer_draws_o_and_x():
    renderer = BoardRenderer()
    blank = renderer.get_image()
    cell = GameConfig.CELL_OUTPUT_SIZE

    renderer.on_placement(0, Symbol.A)
    renderer.on_placement(4, Symbol.B)
    image = renderer.get_image()

    # O leaves its center empty, X crosses through it
    assert tuple(image[cell // 2, cell // 2]) == (255, 255, 255)
    assert tuple(image[cell + cell // 2, cell + cell // 2]) == GameConfig.X_COLOR
    assert not np.array_equal(image[:cell, :cell], blank[:cell, :cell])
    assert renderer.placements == [(0, Symbol.A), (4, Symbol.B)]


def test_renderer_draws_winning_line_only_for_winner():
    renderer = BoardRenderer()
    renderer.on_result(WinResult())
    assert renderer.winning_line is None

    before = renderer.get_image()
    renderer.on_result(WinResult(winner=Symbol.A, winning_line=(0, 1, 2)))
    image = renderer.get_image()
    cell = GameConfig.CELL_OUTPUT_SIZE

    assert renderer.winning_line == (0, 1, 2)
    assert tuple(image[cell // 2, cell + cell // 2]) == GameConfig.WIN_LINE_COLOR
    assert not np.array_equal(image, before)


def test_renderer_highlights_selected_cell():
    renderer = BoardRenderer()
    blank = renderer.get_image()
    cell = GameConfig.CELL_OUTPUT_SIZE
    inside = (cell + 20, cell + 20)  # cell 4, away from the marker

    renderer.on_select(4)
    assert renderer.selected_cell == 4
    assert tuple(renderer.get_image()[inside]) == GameConfig.HIGHLIGHT_COLOR
    # Other cells and grid lines untouched
    assert tuple(renderer.get_image()[20, 20]) == GameConfig.BACKGROUND_COLOR
    assert tuple(renderer.get_image()[cell + 20, cell]) == GameConfig.GRID_COLOR

    renderer.on_abort()
    assert renderer.selected_cell is None
    assert np.array_equal(renderer.get_image(), blank)


def test_renderer_clears_highlight_on_placement():
    renderer = BoardRenderer()
    cell = GameConfig.CELL_OUTPUT_SIZE
    inside = (cell + 20, cell + 20)

    renderer.on_select(4)
    renderer.on_placement(4, Symbol.B)

    image = renderer.get_image()
    assert renderer.selected_cell is None
    assert tuple(image[inside]) == GameConfig.BACKGROUND_COLOR
    assert tuple(image[cell + cell // 2, cell + cell // 2]) == GameConfig.X_COLOR


def test_renderer_rejects_non_symbol():
    renderer = BoardRenderer()
    with pytest.raises(ValueError):
        renderer.on_placement(0, None)
    assert renderer.placements == []


def test_renderer_reset():
    renderer = BoardRenderer()
    blank = renderer.get_image()
    renderer.on_select(8)
    renderer.on_placement(8, Symbol.B)
    renderer.on_select(2)
    renderer.on_result(WinResult(winner=Symbol.B, winning_line=(2, 5, 8)))

    renderer.on_reset()

    assert renderer.placements == []
    assert renderer.winning_line is None
    assert renderer.selected_cell is None
    assert np.array_equal(renderer.get_image(), blank)


def test_get_image_is_a_copy():
    renderer = BoardRenderer()
    image = renderer.get_image()
    image[:] = 0
    assert renderer.get_image().max() == 255


if __name__ == "__main__":
    sys.exit(pytest.main([__file__, "-v"]))
