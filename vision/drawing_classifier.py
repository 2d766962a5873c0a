"""
Drawing classifier for drawn TicTacToe.
Uses a TFLite model to decide whether a drawing is an O or an X.

The model takes the downsampled drawing as a flat vector of pixel
intensities in [0, 1] and returns two confidences: [O, X].
"""

import numpy as np
from typing import Optional, Sequence

from logic.board_state import Symbol
from .config import GameConfig


def normalize_pixels(image: np.ndarray) -> np.ndarray:
    """
    Turn a downsampled drawing into a classifier input vector.

    Only the red channel is used - drawings are white on black, so R, G
    and B carry the same value.

    Args:
        image: HxW grey image or HxWxC image (channel 0 is red), uint8.

    Returns:
        Flat float32 vector with values in [0, 1].
    """
    image = np.asarray(image)
    if image.ndim == 3:
        image = image[:, :, 0]
    elif image.ndim != 2:
        raise ValueError(f"Expected a 2D or 3D image, got shape {image.shape}")

    return image.astype(np.float32).reshape(-1) * (1.0 / 255.0)


def validate_pixels(pixels: Sequence[float], expected_length: int) -> np.ndarray:
    """
    Check a pixel vector before it goes to the classifier.

    Args:
        pixels: Flat vector of intensities.
        expected_length: Downsample width x height.

    Returns:
        The pixels as a float32 numpy array.

    Raises:
        ValueError: wrong length, or values outside [0, 1] (NaN included).
    """
    vector = np.asarray(pixels, dtype=np.float32).reshape(-1)

    if vector.size != expected_length:
        raise ValueError(
            f"Expected {expected_length} pixel values, got {vector.size}"
        )

    # NaN fails both comparisons, so it is rejected here too
    if not np.all((vector >= 0.0) & (vector <= 1.0)):
        raise ValueError("Pixel values must be in [0.0, 1.0]")

    return vector


def is_blank(pixels: Sequence[float], threshold: float = 0.0) -> bool:
    """True if nothing was drawn (no pixel brighter than threshold)."""
    vector = np.asarray(pixels, dtype=np.float32)
    return not bool(np.any(vector > threshold))


def confidences_to_symbol(confidences: Sequence[float]) -> Symbol:
    """
    Map the classifier's two confidences to a symbol.

    Index 0 is O (Symbol.A), index 1 is X (Symbol.B). On a tie the first
    one wins, same as np.argmax.
    """
    scores = np.asarray(confidences, dtype=np.float32).reshape(-1)
    if scores.size != 2:
        raise ValueError(f"Expected 2 confidences, got {scores.size}")

    return Symbol.A if int(np.argmax(scores)) == 0 else Symbol.B


class DrawingClassifier:
    """
    Classifies drawings with a TFLite model.

    The interpreter can be injected (anything with the tflite Interpreter
    API), otherwise it is loaded from config.MODEL_PATH.
    """

    def __init__(self, config: Optional[GameConfig] = None, interpreter=None):
        """
        Initialize the classifier.

        Args:
            config: Game configuration.
            interpreter: Already created interpreter. Skips loading the model.
        """
        self.config = config or GameConfig()
        self.interpreter = interpreter
        self.input_details = None
        self.output_details = None
        self.input_scale = 1.0
        self.input_zero_point = 0
        self.output_scale = 1.0
        self.output_zero_point = 0
        self.is_quantized = False

        if self.interpreter is None:
            self._load_model()

        if self.interpreter is not None:
            self._read_details()

    @property
    def is_loaded(self) -> bool:
        return self.interpreter is not None

    def _load_model(self):
        """Load the TFLite model."""
        try:
            # Prefer tflite_runtime - much lighter than full TensorFlow
            import tflite_runtime.interpreter as tflite
        except ImportError:
            try:
                import tensorflow.lite as tflite
            except ImportError:
                print("ERROR: Neither tflite_runtime nor tensorflow found!")
                print("Install with: pip install tflite-runtime")
                return

        try:
            print(f"Loading TFLite model from {self.config.MODEL_PATH}...")
            self.interpreter = tflite.Interpreter(
                model_path=self.config.MODEL_PATH,
                num_threads=self.config.NUM_THREADS
            )
        except (OSError, ValueError) as e:
            print(f"ERROR: Could not load TFLite model: {e}")
            print("Drawings can't be classified without a trained model.")
            self.interpreter = None

    def _read_details(self):
        """Read tensor details and quantization parameters."""
        self.interpreter.allocate_tensors()

        self.input_details = self.interpreter.get_input_details()
        self.output_details = self.interpreter.get_output_details()

        input_dtype = self.input_details[0]['dtype']

        # Check if model is quantized (int8)
        if input_dtype == np.int8 or input_dtype == np.uint8:
            self.is_quantized = True
            self.input_scale, self.input_zero_point = self._quantization(self.input_details[0])
            self.output_scale, self.output_zero_point = self._quantization(self.output_details[0])

            if self.config.DEBUG_MODE:
                print("INT8 quantized model detected!")
                print(f"  Input: scale={self.input_scale}, zero_point={self.input_zero_point}")
                print(f"  Output: scale={self.output_scale}, zero_point={self.output_zero_point}")
        else:
            self.is_quantized = False

        if self.config.DEBUG_MODE:
            print(f"TFLite model ready! Input shape: {self.input_details[0]['shape']}, dtype: {input_dtype}")

    @staticmethod
    def _quantization(details: dict):
        quant = details.get('quantization_parameters', {})
        if quant and len(quant.get('scales', [])) > 0:
            return float(quant['scales'][0]), int(quant['zero_points'][0])

        # Fallback for older TFLite format
        scale, zero_point = details.get('quantization', (1.0, 0))
        return float(scale), int(zero_point)

    def _preprocess(self, pixels: np.ndarray) -> np.ndarray:
        """
        Shape the pixel vector into the model's input tensor.

        Args:
            pixels: Validated float32 vector in [0, 1].

        Returns:
            Input tensor.
        """
        input_shape = tuple(self.input_details[0]['shape'])
        input_dtype = self.input_details[0]['dtype']

        if self.is_quantized:
            quantized = pixels / self.input_scale + self.input_zero_point
            info = np.iinfo(input_dtype)
            tensor = np.clip(np.round(quantized), info.min, info.max).astype(input_dtype)
        else:
            tensor = pixels.astype(np.float32)

        return tensor.reshape(input_shape)

    def classify(self, pixels: Sequence[float]) -> np.ndarray:
        """
        Run the model on a drawing.

        Args:
            pixels: Flat vector of DOWNSAMPLED_SIZE^2 intensities in [0, 1].

        Returns:
            Float array of 2 confidences: [O, X].
        """
        if self.interpreter is None:
            raise RuntimeError("No TFLite model loaded, can't classify drawing")

        vector = validate_pixels(pixels, self.config.input_length())

        self.interpreter.set_tensor(self.input_details[0]['index'], self._preprocess(vector))
        self.interpreter.invoke()

        output = self.interpreter.get_tensor(self.output_details[0]['index'])

        # Dequantize output if model is quantized
        if self.is_quantized:
            output = (output.astype(np.float32) - self.output_zero_point) * self.output_scale

        confidences = np.asarray(output, dtype=np.float32).reshape(-1)

        if confidences.size != self.config.OUTPUT_LAYER:
            raise ValueError(
                f"Expected {self.config.OUTPUT_LAYER} model outputs, got {confidences.size}"
            )

        if self.config.DEBUG_MODE:
            print(f"  Classifier output: O={confidences[0]:.3f}, X={confidences[1]:.3f}")

        return confidences

    def classify_symbol(self, pixels: Sequence[float]) -> Symbol:
        """Classify a drawing and map it to a symbol."""
        return confidences_to_symbol(self.classify(pixels))


# Quick test
if __name__ == "__main__":
    print("Testing drawing classifier...")

    config = GameConfig()
    size = config.DOWNSAMPLED_SIZE

    # A ring, roughly what an O looks like after downsampling
    yy, xx = np.mgrid[0:size, 0:size]
    radius = np.hypot(yy - size / 2, xx - size / 2)
    image = ((np.abs(radius - size / 3) < 1.5) * 255).astype(np.uint8)

    pixels = normalize_pixels(image)
    print(f"Pixels: {pixels.size}, blank: {is_blank(pixels)}")

    classifier = DrawingClassifier(config)
    if classifier.is_loaded:
        confidences = classifier.classify(pixels)
        print(f"Confidences: {confidences}, symbol: {confidences_to_symbol(confidences)}")

    print("Drawing classifier test done!")
