#!/usr/bin/env python3
"""
Command-line script to critique an outfit photo.

Sends the image to the analysis service, parses the response and prints the
structured critique as JSON.  With --visualize, also generates the "after"
picture from the Quick Updates.

Usage:
    python run_critique.py outfit.jpg
    python run_critique.py outfit.jpg --provider openai -o critique.json
    python run_critique.py outfit.jpg --visualize --image-out after.png
"""

import argparse
import json
import logging
import sys
from pathlib import Path

# Load .env file automatically
from dotenv import load_dotenv
load_dotenv()

from stylelens.exceptions import InvalidStateError, ServiceError
from stylelens.llm_client import LLMProvider
from stylelens.logger import setup_logger
from stylelens.main import StyleLens
from stylelens.schemas import AnalysisStatus, SourceImage, VisualizationStatus


def main():
    parser = argparse.ArgumentParser(
        description="Critique an outfit photo and optionally visualize the suggested updates"
    )
    parser.add_argument(
        "image",
        help="Image file to critique"
    )
    parser.add_argument(
        "--provider", "-p",
        choices=[p.value for p in LLMProvider],
        help="Service provider (default: LLM_PROVIDER env var, then gemini)"
    )
    parser.add_argument(
        "--visualize",
        action="store_true",
        help="Also generate an image with the Quick Updates applied"
    )
    parser.add_argument(
        "--image-out",
        default="visualized.png",
        help="Where to write the generated image (default: visualized.png)"
    )
    parser.add_argument(
        "--output", "-o",
        help="Output file for the critique JSON (default: print to stdout)"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose logging"
    )

    args = parser.parse_args()

    log_level = logging.DEBUG if args.verbose else logging.INFO
    setup_logger(level=log_level)

    try:
        lens = StyleLens(provider=LLMProvider(args.provider) if args.provider else None)
    except ServiceError as e:
        print(json.dumps(e.to_response(), indent=2))
        sys.exit(1)

    image_path = Path(args.image)
    print(f"Critiquing: {image_path.name}", file=sys.stderr)

    try:
        image = SourceImage.from_path(image_path)
    except OSError as e:
        print(f"  ✗ Error: {e}", file=sys.stderr)
        print(json.dumps({"file": str(image_path), "status": "error", "error": str(e)}, indent=2))
        sys.exit(1)

    state = lens.critique(image)
    if state.status != AnalysisStatus.COMPLETE:
        print(json.dumps({"file": str(image_path), "status": "error", "error": state.error}, indent=2))
        sys.exit(1)

    result = {
        "file": str(image_path),
        "status": "success",
        "document": state.document.model_dump(mode="json"),
    }

    if args.visualize:
        try:
            visualization = lens.visualize_sync()
        except InvalidStateError as e:
            print(f"  ✗ Cannot visualize: {e.message}", file=sys.stderr)
        else:
            if visualization.status == VisualizationStatus.READY:
                Path(args.image_out).write_bytes(visualization.image.data)
                result["visualization"] = args.image_out
                print(f"  ✓ Visualization saved to: {args.image_out}", file=sys.stderr)
            else:
                result["visualization_error"] = visualization.error
                print(f"  ✗ {visualization.error}", file=sys.stderr)

    output_json = json.dumps(result, indent=2, ensure_ascii=False)

    if args.output:
        Path(args.output).write_text(output_json, encoding="utf-8")
        print(f"\nCritique saved to: {args.output}", file=sys.stderr)
    else:
        print(output_json)


if __name__ == "__main__":
    main()
