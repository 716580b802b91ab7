import io
import logging
import shutil
import threading
from pathlib import Path

import numpy as np
import tensorflow as tf
from PIL import Image, UnidentifiedImageError

from app.errors import DecodeError, InferenceError, ModelLoadError

logger = logging.getLogger(__name__)

INPUT_SIZE = 224
NUM_CHANNELS = 3
TFLITE_SUFFIXES = (".tflite",)
KERAS_SUFFIXES = (".keras", ".h5")


def _is_lfs_pointer(path: Path) -> bool:
    try:
        with open(path, "rb") as f:
            first = f.read(100).decode("utf-8", errors="ignore")
    except OSError:
        return False
    return first.strip().startswith("version https://git-lfs.github.com")


def fetch_model_asset(
    path: str | Path,
    repo_id: str | None,
    filename: str,
    token: str | None = None,
) -> None:
    """Download the model from a Hugging Face repo if it's missing locally."""
    path = Path(path)
    if path.exists() and not _is_lfs_pointer(path):
        return
    if not repo_id:
        return
    try:
        from huggingface_hub import hf_hub_download

        logger.info("Model missing or LFS pointer; downloading %s from %s", filename, repo_id)
        downloaded = hf_hub_download(repo_id=repo_id, filename=filename, token=token)
        path.parent.mkdir(parents=True, exist_ok=True)
        if Path(downloaded).resolve() != path.resolve():
            shutil.copy2(downloaded, path)
    except Exception as e:
        logger.warning("Could not download model from Hub: %s", e)


def get_model_diagnostics(path: str | Path) -> dict:
    p = Path(path)
    out = {"model_path": str(p), "model_path_exists": p.exists()}
    if p.exists():
        out["model_path_size"] = p.stat().st_size
        out["model_path_is_lfs_pointer"] = _is_lfs_pointer(p)
    return out


class ModelHandle:
    """A loaded classifier. classify() and release() are serialised by a lock."""

    def __init__(self, runtime, backend: str, input_shape: tuple, num_classes: int, source: str):
        self._runtime = runtime
        self.backend = backend
        self.input_shape = input_shape
        self.num_classes = num_classes
        self.source = source
        self._lock = threading.Lock()

    @property
    def released(self) -> bool:
        return self._runtime is None

    @property
    def input_size(self) -> int:
        return int(self.input_shape[1] or self.input_shape[2] or INPUT_SIZE)

    @property
    def channels(self) -> int:
        return int(self.input_shape[-1] or NUM_CHANNELS)

    def _check_shape(self, tensor: np.ndarray) -> None:
        expected = self.input_shape
        ok = tensor.ndim == len(expected) and all(
            e is None or int(e) == int(t) for e, t in zip(expected, tensor.shape)
        )
        if not ok:
            raise InferenceError(
                f"Input shape {tuple(tensor.shape)} does not match model input {tuple(expected)}"
            )

    def classify(self, tensor: np.ndarray) -> np.ndarray:
        with self._lock:
            if self._runtime is None:
                raise InferenceError("Model has been released")
            tensor = np.asarray(tensor, dtype=np.float32)
            self._check_shape(tensor)
            try:
                if self.backend == "tflite":
                    inp = self._runtime.get_input_details()[0]
                    out = self._runtime.get_output_details()[0]
                    self._runtime.set_tensor(inp["index"], tensor)
                    self._runtime.invoke()
                    scores = self._runtime.get_tensor(out["index"])
                else:
                    scores = self._runtime(tensor, training=False)
                    if hasattr(scores, "numpy"):
                        scores = scores.numpy()
            except Exception as e:
                logger.exception("Inference failed")
                raise InferenceError(f"Inference failed: {e}") from e
            return np.asarray(scores, dtype=np.float32).reshape(-1)

    def release(self) -> None:
        with self._lock:
            if self._runtime is None:
                return
            self._runtime = None
            logger.info("Released %s model from %s", self.backend, self.source)


def _load_tflite(path: Path) -> ModelHandle:
    interpreter = tf.lite.Interpreter(model_path=str(path))
    interpreter.allocate_tensors()
    in_shape = tuple(int(d) for d in interpreter.get_input_details()[0]["shape"])
    out_shape = interpreter.get_output_details()[0]["shape"]
    return ModelHandle(interpreter, "tflite", in_shape, int(out_shape[-1]), str(path))


def _load_keras(path: Path) -> ModelHandle:
    model = tf.keras.models.load_model(str(path), compile=False)
    in_shape = tuple(None if d is None else int(d) for d in model.inputs[0].shape)
    num_classes = int(model.outputs[0].shape[-1])
    return ModelHandle(model, "keras", in_shape, num_classes, str(path))


def load_model(source: str | Path) -> ModelHandle:
    path = Path(source)
    logger.info("Loading model from %s (exists=%s)", path, path.exists())
    if not path.exists():
        raise ModelLoadError(f"Model not found at {path}")
    if _is_lfs_pointer(path):
        raise ModelLoadError(f"Model at {path} is a Git LFS pointer, not the model file")
    suffix = path.suffix.lower()
    try:
        if suffix in TFLITE_SUFFIXES:
            handle = _load_tflite(path)
        elif suffix in KERAS_SUFFIXES:
            handle = _load_keras(path)
        else:
            raise ModelLoadError(f"Unsupported model format {suffix!r} for {path}")
    except ModelLoadError:
        raise
    except Exception as e:
        raise ModelLoadError(f"Model load failed for {path}: {e}") from e
    if len(handle.input_shape) != 4:
        handle.release()
        raise ModelLoadError(f"Expected a 4-D image input, model takes {handle.input_shape}")
    height, width = handle.input_shape[1], handle.input_shape[2]
    if height is not None and width is not None and height != width:
        handle.release()
        raise ModelLoadError(f"Expected a square image input, model takes {height}x{width}")
    logger.info(
        "Loaded %s model: input %s, %d classes", handle.backend, handle.input_shape, handle.num_classes
    )
    return handle


def classify(handle: ModelHandle, tensor: np.ndarray) -> np.ndarray:
    return handle.classify(tensor)


def release(handle: ModelHandle) -> None:
    handle.release()


def preprocess_image(
    image_bytes: bytes,
    target_size: int = INPUT_SIZE,
    channels: int = NUM_CHANNELS,
) -> np.ndarray:
    """Decode image bytes into a [1, size, size, channels] float32 tensor in [0, 1].

    Channels are R, G, B; any channel past the third is zero-filled.
    """
    try:
        image = Image.open(io.BytesIO(image_bytes))
        image.load()
    except (
        UnidentifiedImageError, Image.DecompressionBombError, OSError, SyntaxError, ValueError
    ) as e:
        raise DecodeError(f"Could not decode image: {e}") from e
    if image.mode != "RGB":
        image = image.convert("RGB")
    img = np.array(image)
    img = tf.image.resize(img, (target_size, target_size), method="bilinear")
    img = tf.clip_by_value(tf.cast(img, tf.float32) / 255.0, 0.0, 1.0).numpy()
    if channels <= NUM_CHANNELS:
        img = img[..., :channels]
    else:
        pad = np.zeros((target_size, target_size, channels - NUM_CHANNELS), dtype=np.float32)
        img = np.concatenate([img, pad], axis=-1)
    return np.expand_dims(img, axis=0)
