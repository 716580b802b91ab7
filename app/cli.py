import argparse
import logging
import sys
from pathlib import Path

from app.config import settings
from app.diagnostics import LANGUAGES
from app.errors import PlantDocError
from app.pipeline import PlantDoctor
from app.results import confidence_message


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Diagnose plant disease from a leaf photo")
    parser.add_argument("image", help="Path to image file")
    parser.add_argument("--model", default=settings.model_path, help="Path to model file (.tflite, .keras or .h5)")
    parser.add_argument("--labels", default=settings.labels_path, help="Path to labels.txt")
    parser.add_argument("--lang", default=settings.language, choices=LANGUAGES)
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING)
    cfg = settings.model_copy(
        update={"model_path": args.model, "labels_path": args.labels, "language": args.lang}
    )
    try:
        raw = Path(args.image).read_bytes()
        with PlantDoctor.from_settings(cfg) as doctor:
            result = doctor.analyze(raw)
    except (OSError, PlantDocError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(result.diagnosis.display_name)
    print(f"{result.confidence:.1%} - {confidence_message(result.confidence, args.lang)}")
    print(result.diagnosis.description)
    print(result.diagnosis.remedy)
    return 0


if __name__ == "__main__":
    sys.exit(main())
