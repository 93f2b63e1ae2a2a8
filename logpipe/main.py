"""Command line front end for the log parser, anomaly detector and log generator services."""

import argparse
import asyncio
import sys
from pathlib import Path

from logpipe.config.settings import Settings
from logpipe.exceptions import PipelineError
from logpipe.logging.logger import Log
from logpipe.pipeline.base import BasePipeline
from logpipe.pipeline.factory import PipelineFactory
from logpipe.pipeline.generator import LogGeneratorPipeline
from logpipe.pipeline.render import render_state
from logpipe.pipeline.state import Failed, PipelineState, StreamingResponse, Success
from logpipe.pipeline.upload import FileUploadPipeline
from logpipe.validation.models import InputFile, Rejected


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="logpipe", description=__doc__)
    commands = parser.add_subparsers(dest="command", required=True)

    parse = commands.add_parser("parse", help="Convert an access log into CSV")
    parse.add_argument("file", type=Path)
    parse.add_argument("-o", "--output", type=Path, default=None)

    detect = commands.add_parser("detect", help="Classify a dataset as normal or malicious access")
    detect.add_argument("file", type=Path)
    detect.add_argument("-o", "--output", type=Path, default=None)

    generate = commands.add_parser("generate", help="Generate a synthetic access log")
    generate.add_argument("--count", type=int, default=10_000)
    generate.add_argument("--ratio", type=float, default=0.5)
    generate.add_argument("-o", "--output", type=Path, default=None)
    return parser


def _print_state(state: PipelineState) -> None:
    # Per-chunk progress goes to the log only.
    if isinstance(state, StreamingResponse):
        Log.debug(render_state(state))
        return
    print(render_state(state))


async def run(args: argparse.Namespace, settings: Settings) -> int:
    kind = {"parse": "parser", "detect": "detector", "generate": "generator"}[args.command]
    pipeline: BasePipeline = PipelineFactory.create(kind, settings)
    pipeline.subscribe(_print_state)
    try:
        if isinstance(pipeline, FileUploadPipeline):
            if not args.file.is_file():
                print(f"Error: {args.file} does not exist")
                return 1
            if isinstance(pipeline.select(InputFile.from_path(args.file)), Rejected):
                return 1
            state = await pipeline.submit()
        elif isinstance(pipeline, LogGeneratorPipeline):
            state = await pipeline.submit(args.count, args.ratio)
        else:
            raise TypeError(f"Unsupported pipeline {pipeline!r}")

        if isinstance(state, Failed):
            return 1
        if isinstance(state, Success) and state.handle is not None:
            try:
                target = await pipeline.download(args.output)
            except PipelineError as exc:
                Log.warning(f"Download failed ({exc.reason.value}): {exc.message}")
                print(f"Error: {exc.message}")
                return 1
            except OSError as exc:
                Log.warning(f"Could not write download: {exc}")
                print(f"Error: Could not save the result to {args.output or 'the current directory'}.")
                return 1
            print(f"Saved {target}")
        return 0
    finally:
        await pipeline.aclose()


def main(argv: list[str] | None = None) -> int:
    """Entry point: load settings -> build the pipeline -> run one submission."""
    args = build_parser().parse_args(argv)
    settings = Settings()
    Log.configure(settings.log_level)
    try:
        return asyncio.run(run(args, settings))
    except KeyboardInterrupt:
        Log.info("Interrupted")
        return 130


if __name__ == "__main__":
    sys.exit(main())
