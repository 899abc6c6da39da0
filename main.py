"""loglines — emit structured JSON log lines and pretty-print them."""

import logging
import os
import signal
import sys
import threading
from argparse import ArgumentParser
from dataclasses import replace

from loglines.assembler import iter_lines, read_chunks
from loglines.config import Config
from loglines.emitter import Emitter
from loglines.generator import generate_logs
from loglines.levels import LOG_LEVELS
from loglines.output import LineWriter
from loglines.renderer import RecordRenderer

logger = logging.getLogger("loglines")


def build_parser() -> ArgumentParser:
    """Build the CLI argument parser."""
    parser = ArgumentParser(
        prog="loglines",
        description="Emit structured JSON log lines and pretty-print them.",
    )
    parser.add_argument(
        "--config",
        help="Path to a YAML config file",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Show debug diagnostics on stderr",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    pretty = commands.add_parser(
        "pretty",
        help="Read JSON log lines from stdin and print them human-readable",
    )
    pretty.add_argument(
        "--no-color",
        action="store_true",
        help="Disable ANSI colors",
    )
    pretty.add_argument(
        "--chunk-size",
        type=int,
        help="Bytes to read from stdin at a time",
    )

    generate = commands.add_parser(
        "generate",
        help="Write sample log records to stdout",
    )
    generate.add_argument(
        "--count",
        type=int,
        help="Stop after N records (default: run until interrupted)",
    )
    generate.add_argument(
        "--interval",
        type=float,
        help="Seconds between records",
    )
    generate.add_argument(
        "--namespace",
        help="Namespace for generated records",
    )
    generate.add_argument(
        "--min-level",
        choices=LOG_LEVELS,
        help="Minimum level to write",
    )
    generate.add_argument(
        "--no-timestamp",
        action="store_true",
        help="Leave the timestamp field out",
    )
    return parser


def run_pretty(args, config: Config, stdin=None, stdout=None) -> dict:
    """Stream stdin through the line assembler and renderer."""
    section = config["pretty"]
    color = section["color"] and not args.no_color
    chunk_size = args.chunk_size or section["chunk_size"]

    stdin = stdin if stdin is not None else sys.stdin.buffer
    writer = LineWriter(stdout)
    renderer = RecordRenderer(color=color)

    for line in iter_lines(read_chunks(stdin, chunk_size)):
        writer.write(renderer.render(line))

    stats = renderer.validator.get_stats()
    logger.debug("Rendered %d lines (%d records)", stats["checked"], stats["records"])
    return stats


def run_generate(args, config: Config, stdout=None, stop_event=None) -> int:
    """Run the sample generator until --count is reached or a signal arrives."""
    section = config["generator"]
    emitter_config = config.emitter_config()
    if args.min_level:
        emitter_config = replace(emitter_config, min_level=args.min_level)
    if args.no_timestamp:
        emitter_config = replace(emitter_config, include_timestamp=False)

    emitter = Emitter(emitter_config, writer=LineWriter(stdout))
    count = args.count if args.count is not None else section["count"]
    interval = args.interval if args.interval is not None else section["interval"]

    return generate_logs(
        emitter,
        args.namespace or section["namespace"],
        count=count,
        interval=interval,
        context_keys=section["context_keys"],
        stop_event=stop_event,
    )


def _install_stop_handlers(stop_event: threading.Event):
    def _signal_handler(sig, frame):
        logger.info("Shutdown signal received, stopping...")
        stop_event.set()

    signal.signal(signal.SIGINT, _signal_handler)
    signal.signal(signal.SIGTERM, _signal_handler)


def _silence_stdout():
    """Point stdout at devnull so the interpreter's final flush can't fail."""
    try:
        fd = sys.stdout.fileno()
        devnull = os.open(os.devnull, os.O_WRONLY)
        os.dup2(devnull, fd)
        os.close(devnull)
    except (OSError, ValueError):
        logger.debug("Could not redirect stdout after broken pipe", exc_info=True)


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    # Diagnostics go to stderr, never mixed with log lines on stdout
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [LOGLINES] %(levelname)s %(message)s",
        stream=sys.stderr,
    )

    try:
        config = Config(args.config)

        if args.command == "pretty":
            run_pretty(args, config)
        else:
            stop_event = threading.Event()
            _install_stop_handlers(stop_event)
            run_generate(args, config, stop_event=stop_event)
    except KeyboardInterrupt:
        return 0
    except BrokenPipeError:
        # Reader went away, e.g. piped into head
        _silence_stdout()
        return 0
    return 0


if __name__ == "__main__":
    sys.exit(main())
