#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Command-line front end for Kokoro TTS.

Usage:
    kokoro-tts "Hello world"                    # writes output.wav
    kokoro-tts "Hello world" -o hello.wav       # writes hello.wav
    kokoro-tts "Hello world" --pipe | afplay -  # WAV bytes on stdout

Exit codes: 0 on success or help (a closed output pipe counts as success),
1 on any other failure.
"""
import argparse
import os
import sys
from pathlib import Path
from typing import List, Optional

from .config import load_config
from .tts.errors import TTSError
from .utils.logging import get_logger, init_logging

logger = get_logger(__name__)

EXAMPLES = """
Examples:
    kokoro-tts "Hello world"                    # Outputs to output.wav
    kokoro-tts "Hello world" -o hello.wav       # Outputs to hello.wav
    kokoro-tts "Hello world" --pipe | afplay -  # Pipes to afplay
"""


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str):
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="kokoro-tts",
        description="Generate speech audio from text with the Kokoro ONNX model",
        epilog=EXAMPLES,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("text", help="Text to synthesize")
    parser.add_argument("-o", "--output", default="output.wav", help="Output WAV file (default: output.wav)")
    parser.add_argument("-p", "--pipe", action="store_true", help="Write WAV to stdout for piping")
    parser.add_argument("-l", "--lang", default=None, help="Language (default: en-us)")
    parser.add_argument("-s", "--speed", type=float, default=None, help="Speech speed (default: 1.0)")
    parser.add_argument("-m", "--model", default=None, help="Path to ONNX model file")
    parser.add_argument("-v", "--voice", default=None, help="Path to voicepack .npy file")
    return parser


def _write_stdout(data: bytes) -> None:
    try:
        sys.stdout.buffer.write(data)
        sys.stdout.buffer.flush()
    except BrokenPipeError:
        # Reader went away; point stdout at devnull so interpreter shutdown stays quiet
        devnull = os.open(os.devnull, os.O_WRONLY)
        os.dup2(devnull, sys.stdout.fileno())
        raise


def main(argv: Optional[List[str]] = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    parser = build_parser()
    if not argv:
        parser.print_help()
        return 0
    args = parser.parse_args(argv)

    init_logging()

    try:
        config = load_config().with_overrides(
            model_path=args.model,
            voice_path=args.voice,
            language=args.lang,
            speed=args.speed,
        )

        from .tts.kokoro import KokoroTTS

        tts = KokoroTTS.from_config(config)
        if args.pipe:
            _write_stdout(tts.generate(args.text, config.language, config.speed))
        else:
            path = tts.generate_and_save(args.text, Path(args.output), config.language, config.speed)
            logger.info(f"Saved to: {path}", extra={"subsys": "cli", "event": "done"})
    except BrokenPipeError:
        return 0
    except TTSError as e:
        logger.error(f"{type(e).__name__}: {e}", extra={"subsys": "cli", "event": "error"})
        return 1
    except Exception as e:
        logger.error(f"Unexpected error: {e}", exc_info=True, extra={"subsys": "cli", "event": "error"})
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
