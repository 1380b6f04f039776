"""
Fetch the Kokoro ONNX model.

Usage:
    kokoro-tts-download                    # into ./models
    kokoro-tts-download --out-dir /opt/kokoro --force

The payload is streamed into a ``.part`` file next to the destination and
renamed into place once complete, so an interrupted run never leaves a
truncated model under the final name.
"""
from __future__ import annotations

import argparse
import hashlib
import logging
import os
import tempfile
from pathlib import Path
from typing import Dict, List, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from ..utils.logging import init_logging

logger = logging.getLogger(__name__)

SUBSYS = "tts.assets"
DEFAULT_OUT_DIR = Path("models")
DEFAULT_TIMEOUT = 120
CHUNK_BYTES = 1 << 20

RELEASE_URL = "https://github.com/tetratorus/kokoro-tts/releases/download/v1"
MODEL_NAME = "kokoro-v0_19.onnx"

# filename -> download URL
MODELS: Dict[str, str] = {
    MODEL_NAME: f"{RELEASE_URL}/{MODEL_NAME}",
}

RETRY_STATUSES = (429, 500, 502, 503, 504)


def build_session(retries: int = 3, backoff: float = 0.5) -> requests.Session:
    """HTTP session that retries idempotent GETs on throttling and 5xx."""
    adapter = HTTPAdapter(
        max_retries=Retry(
            total=retries,
            backoff_factor=backoff,
            status_forcelist=RETRY_STATUSES,
            allowed_methods=frozenset({"GET"}),
            raise_on_status=False,
        )
    )
    session = requests.Session()
    for prefix in ("https://", "http://"):
        session.mount(prefix, adapter)
    return session


def download_file(
    url: str, dest: Path, session: requests.Session, timeout: int = DEFAULT_TIMEOUT
) -> str:
    """Stream ``url`` to ``dest`` and return the payload's sha256 hex digest."""
    logger.info(
        f"Downloading {dest.name}...",
        extra={"subsys": SUBSYS, "event": "download_start", "detail": {"url": url, "dest": str(dest)}},
    )
    dest.parent.mkdir(parents=True, exist_ok=True)
    sha256 = hashlib.sha256()
    size = 0

    with session.get(url, stream=True, timeout=timeout) as response:
        response.raise_for_status()
        fd, part_name = tempfile.mkstemp(dir=dest.parent, prefix=f"{dest.name}.", suffix=".part")
        part = Path(part_name)
        try:
            with os.fdopen(fd, "wb") as fh:
                for block in response.iter_content(chunk_size=CHUNK_BYTES):
                    if block:
                        sha256.update(block)
                        fh.write(block)
                        size += len(block)
            os.replace(part, dest)
        except BaseException:
            part.unlink(missing_ok=True)
            raise

    digest = sha256.hexdigest()
    logger.info(
        f"Downloaded {dest.name} ({size} bytes)",
        extra={
            "subsys": SUBSYS,
            "event": "download_complete",
            "detail": {"url": url, "dest": str(dest), "bytes": size, "sha256": digest},
        },
    )
    return digest


def ensure_models(
    out_dir: Path = DEFAULT_OUT_DIR,
    force: bool = False,
    session: Optional[requests.Session] = None,
    timeout: int = DEFAULT_TIMEOUT,
) -> List[Path]:
    """Return the local path of every entry in MODELS, downloading what is missing."""
    session = session or build_session()
    paths: List[Path] = []
    for filename, url in MODELS.items():
        dest = out_dir / filename
        if force or not dest.exists():
            download_file(url, dest, session, timeout)
        else:
            logger.info(
                f"{filename} already present, skipping",
                extra={"subsys": SUBSYS, "event": "skip_exists", "detail": {"dest": str(dest)}},
            )
        paths.append(dest)
    return paths


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="kokoro-tts-download", description="Download the Kokoro ONNX model."
    )
    parser.add_argument("--out-dir", type=Path, default=DEFAULT_OUT_DIR, help="Destination directory (default: models)")
    parser.add_argument("--force", action="store_true", help="Download again even when the file exists")
    parser.add_argument("--timeout", type=int, default=DEFAULT_TIMEOUT, help="Per-request timeout in seconds")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    init_logging()

    try:
        paths = ensure_models(args.out_dir, force=args.force, timeout=args.timeout)
    except requests.HTTPError as e:
        status = e.response.status_code if e.response is not None else None
        logger.error(f"Download failed with HTTP status {status}", extra={"subsys": SUBSYS, "event": "http_error"})
        return 1
    except (requests.RequestException, OSError) as e:
        logger.error(f"Download failed: {e}", extra={"subsys": SUBSYS, "event": "error"})
        return 1

    print("\nAdd this to your .env:")
    for path in paths:
        print(f"KOKORO_MODEL_PATH={path.resolve()}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
