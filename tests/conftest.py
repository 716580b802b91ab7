import io

import numpy as np
import pytest
import tensorflow as tf
from PIL import Image

from app.labels import DEFAULT_LABELS

# Tomato___Early_blight
WINNER = 29
WINNER_SCORE = 0.95


def fixed_scores(num_classes: int = len(DEFAULT_LABELS), winner: int = WINNER) -> np.ndarray:
    bias = np.full(num_classes, 0.001, dtype=np.float32)
    bias[winner] = WINNER_SCORE
    return bias


def build_keras_model(num_classes: int = len(DEFAULT_LABELS), winner: int = WINNER) -> tf.keras.Model:
    """Classifier whose output ignores the image: zero kernel, fixed bias."""
    model = tf.keras.Sequential(
        [
            tf.keras.Input(shape=(224, 224, 3)),
            tf.keras.layers.GlobalAveragePooling2D(),
            tf.keras.layers.Dense(num_classes),
        ]
    )
    dense = model.layers[-1]
    dense.set_weights([np.zeros((3, num_classes), dtype=np.float32), fixed_scores(num_classes, winner)])
    return model


class _FixedModule(tf.Module):
    def __init__(self, scores: np.ndarray):
        super().__init__()
        self.scores = tf.constant(scores)

    @tf.function(input_signature=[tf.TensorSpec([1, 224, 224, 3], tf.float32)])
    def __call__(self, x):
        brightness = tf.reduce_mean(x, axis=[1, 2, 3])[:, None]
        return self.scores[None, :] + 1e-6 * brightness


@pytest.fixture(scope="session")
def keras_model_path(tmp_path_factory):
    path = tmp_path_factory.mktemp("models") / "plant.keras"
    build_keras_model().save(str(path))
    return path


@pytest.fixture(scope="session")
def small_keras_model_path(tmp_path_factory):
    path = tmp_path_factory.mktemp("models") / "small.keras"
    build_keras_model(num_classes=5, winner=0).save(str(path))
    return path


@pytest.fixture(scope="session")
def tflite_model_path(tmp_path_factory):
    module = _FixedModule(fixed_scores())
    converter = tf.lite.TFLiteConverter.from_concrete_functions(
        [module.__call__.get_concrete_function()], module
    )
    path = tmp_path_factory.mktemp("models") / "plant.tflite"
    path.write_bytes(converter.convert())
    return path


@pytest.fixture
def make_image():
    def _make(size=(320, 240), mode="RGB", color=(10, 200, 30), fmt="PNG") -> bytes:
        if mode in ("L", "P"):
            img = Image.new("RGB", size, color).convert(mode)
        elif mode == "RGBA":
            img = Image.new(mode, size, color + (255,))
        else:
            img = Image.new(mode, size, color)
        buf = io.BytesIO()
        img.save(buf, format=fmt)
        return buf.getvalue()

    return _make
