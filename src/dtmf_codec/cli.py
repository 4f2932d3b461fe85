# src/dtmf_codec/cli.py
"""
Command line interface for the DTMF codec.
Detects tones in AU recordings and writes generated sequences to AU files.
"""

import argparse
import sys
from typing import List, Optional

from .core.dtmf_detector import DTMFDetector
from .core.dtmf_generator import GeneratorConfig, generate_sequence
from .core.interfaces import CodecError, SampleSource
from .sources.au_file import AUFileSource, write_au
from .utils.logger import DTMFLogger, LoggerConfig

DEFAULT_CHUNK_SIZE = 204


def _detect_source(source: SampleSource, chunk_size: int, progress: bool = False) -> str:
    detector = DTMFDetector()
    while True:
        chunk = source.read_samples(chunk_size)
        if chunk is None:
            break
        detector.process(chunk)
        if progress:
            print(f"{detector.result}'")
    return detector.result


def _detect(args: argparse.Namespace) -> int:
    try:
        source = AUFileSource(args.file)
    except OSError as e:
        print(f"{args.file}: {e.strerror or e}", file=sys.stderr)
        return 1
    except CodecError as e:
        print(f"{args.file}: {e}", file=sys.stderr)
        return 1

    with source:
        print(f"{args.file}: {source.header}")
        result = _detect_source(source, args.chunk_size, args.progress)

    print(result)
    return 0


def _generate(args: argparse.Namespace) -> int:
    config = GeneratorConfig(frame_size=args.frame_size,
                             tone_ms=args.tone_ms,
                             pause_ms=args.pause_ms)
    try:
        samples = generate_sequence(args.digits, config)
    except ValueError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    try:
        size = write_au(args.output, samples)
    except OSError as e:
        print(f"{args.output}: {e.strerror or e}", file=sys.stderr)
        return 1

    print(f"{args.output}: {len(samples)} samples, {size} bytes")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="dtmf-codec", description="DTMF detector and generator")
    parser.add_argument('-v', '--verbose', action='store_true', help="Show codec log output")
    commands = parser.add_subparsers(dest='command', required=True)

    detect = commands.add_parser('detect', help="Detect DTMF tones in an AU file")
    detect.add_argument('file', metavar='FILE')
    detect.add_argument('--chunk-size', type=int, default=DEFAULT_CHUNK_SIZE,
                        help="Samples read per chunk (default: %(default)s)")
    detect.add_argument('--progress', action='store_true',
                        help="Print the symbols detected so far after every chunk")
    detect.set_defaults(handler=_detect)

    generate = commands.add_parser('generate', help="Write DTMF tones to an AU file")
    generate.add_argument('digits', metavar='DIGITS')
    generate.add_argument('-o', '--output', required=True, metavar='OUT')
    generate.add_argument('--tone-ms', type=int, default=70)
    generate.add_argument('--pause-ms', type=int, default=50)
    generate.add_argument('--frame-size', type=int, default=160)
    generate.set_defaults(handler=_generate)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == 'detect' and args.chunk_size <= 0:
        parser.error("--chunk-size must be positive")

    DTMFLogger().configure(LoggerConfig(level="DEBUG" if args.verbose else "WARNING",
                                        format="console",
                                        stream=sys.stderr))
    return args.handler(args)


if __name__ == '__main__':
    sys.exit(main())
