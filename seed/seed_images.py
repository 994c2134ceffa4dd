#!/usr/bin/env python3
"""
Seed script that submits a directory of images as one JSON batch.

Run:
    python seed/seed_images.py \
      --api-id <API-ID> \
      --api-key <API-KEY> \
      --images-dir ./samples
"""

import argparse
import base64
from pathlib import Path
import sys
from typing import Any, cast

from aws_lambda_powertools import Logger
import requests

logger = Logger(service="seed")


UPLOAD_API_URL = "http://localhost:4566/restapis/{0}/snd/_user_request_/v1/images/from_json"
IMAGE_SUFFIXES = (".jpg", ".jpeg", ".png")


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Seed images via the image ingestion API")

    parser.add_argument(
        "--api-id",
        required=True,
        help="Base API ID (e.g. LocalStack API Gateway ID)",
    )
    parser.add_argument(
        "--api-key",
        default=None,
        help="API key for x-api-key header (optional for local)",
    )
    parser.add_argument(
        "--images-dir",
        type=Path,
        default=Path(__file__).parent / "images",
        help="Directory with .jpg/.png files to submit",
    )
    parser.add_argument(
        "--limit",
        type=int,
        default=4,
        help="Number of images to seed",
    )

    return parser.parse_args()


def build_batch(images_dir: Path, limit: int) -> list[dict[str, str]]:
    """Encode up to ``limit`` images of ``images_dir`` as JSON batch entries."""
    paths = sorted(
        path for path in images_dir.iterdir() if path.suffix.lower() in IMAGE_SUFFIXES
    )

    return [
        {
            "name": path.stem,
            "data": base64.b64encode(path.read_bytes()).decode("utf-8"),
        }
        for path in paths[:limit]
    ]


def seed_images() -> None:
    try:
        args = parse_args()

        headers: dict[str, str] = {
            "Content-Type": "application/json",
        }
        if args.api_key:
            headers["x-api-key"] = args.api_key

        upload_url = UPLOAD_API_URL.format(args.api_id)
        batch = build_batch(args.images_dir, args.limit)

        if not batch:
            logger.warning("No images found", extra={"path": str(args.images_dir)})
            return

        logger.info(
            "Starting seeding process",
            extra={"api_base_url": upload_url, "images": len(batch)},
        )

        response = requests.post(
            upload_url,
            headers=headers,
            json=batch,
            timeout=60,
        )

        if response.status_code != 200:
            logger.error(
                "Batch rejected",
                extra={"status": response.status_code, "response": response.text},
            )
            sys.exit(1)

        for entry, result in zip(batch, cast(list[dict[str, Any]], response.json())):
            if result.get("code") == 200:
                logger.info("Seeded image", extra={"image": entry["name"]})
            else:
                logger.error(
                    "Failed to seed image",
                    extra={"image": entry["name"], "result": result},
                )

        logger.info("Seeding completed")

    except Exception as exc:
        logger.exception("Seeding failed", exc_info=exc)
        sys.exit(1)


if __name__ == "__main__":
    seed_images()
