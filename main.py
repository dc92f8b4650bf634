import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from scoresynth import RenderSettings, ScoreCompiler, ScoreSynthError


def configure_logging() -> None:
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO"),
        format="[%(asctime)s] %(levelname)s:%(name)s: %(message)s",
        stream=sys.stderr,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="scoresynth", description="Render a text score to a WAV file.")
    parser.add_argument("score", type=str, help="score file, or - for stdin")
    parser.add_argument("-o", "--output", type=str, default="-", help="WAV file to write, or - for stdout")
    parser.add_argument("--sample-rate", type=int, default=None)
    parser.add_argument("--bit-depth", type=int, choices=[8, 16], default=None)
    parser.add_argument("--workers", type=int, default=None, help="threads used to render blocks")
    parser.add_argument("--strict", action="store_true", help="abort on the first bad command")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    load_dotenv()
    configure_logging()
    log = logging.getLogger("scoresynth")

    args = build_parser().parse_args(argv)
    log.info(
        "options: score=%s output=%s sample_rate=%s bit_depth=%s workers=%s strict=%s",
        args.score,
        args.output,
        args.sample_rate,
        args.bit_depth,
        args.workers,
        args.strict,
    )

    try:
        settings = RenderSettings.from_env().with_overrides(
            sample_rate=args.sample_rate,
            bit_depth=args.bit_depth,
            workers=args.workers,
        )
        compiler = ScoreCompiler(settings, strict=args.strict)
        if args.score == "-":
            lines = sys.stdin.read().splitlines()
        else:
            lines = Path(args.score).read_text(encoding="utf-8").splitlines()

        if args.output == "-":
            compiler.compile_stream(lines, sys.stdout.buffer)
        else:
            compiler.compile_to_path(lines, Path(args.output))
    except (OSError, ScoreSynthError) as exc:
        log.error("%s", exc)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
