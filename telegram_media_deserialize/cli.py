"""
Command line interface for deserializing Telegram Desktop streaming caches.

Telegram Desktop splits large media into several cache files (after
decryption, e.g. with telegram-cache-decryption). Only the first one is
serialized for streaming; the following ones are raw and can be appended,
but only after the first is cut at its last contiguous offset, since data
written after a forward seek leaves a hole in the stream.
"""

import argparse
import json
import logging
import os
import sys

from telegram_media_deserialize.configs import settings
from telegram_media_deserialize.const import LOG_LEVELS
from telegram_media_deserialize.deserializer import DeserializeError, build_report, reconstruct

logger = logging.getLogger(__name__)

_COPY_CHUNK_SIZE = 1024 * 1024


def build_parser() -> argparse.ArgumentParser:
    arg_parser = argparse.ArgumentParser(
        prog="telegram-media-deserialize",
        description="Rebuilds a media file from a decrypted Telegram Desktop streaming cache file.",
    )
    arg_parser.add_argument("serialized_file", help="Path to the decrypted, serialized cache file")
    arg_parser.add_argument("deserialized_file", help="Path to the output media file (must not exist)")
    arg_parser.add_argument(
        "--byte-order",
        choices=["little", "big"],
        default=settings.byte_order,
        help="Byte order of the slice and part header fields",
    )
    arg_parser.add_argument(
        "--truncate", action="store_true", help="Only write the gap-free prefix up to the last contiguous offset"
    )
    arg_parser.add_argument(
        "--append",
        action="append",
        default=[],
        metavar="FILE",
        help="Raw continuation cache file to append after the contiguous prefix (implies --truncate, repeatable)",
    )
    arg_parser.add_argument(
        "--strict-limits",
        action="store_true",
        help=(
            f"Stop parsing at slices with more than {settings.strict_max_parts_per_slice} parts "
            f"or parts larger than {settings.strict_max_part_size} bytes"
        ),
    )
    arg_parser.add_argument("--report", action="store_true", help="Print a JSON coverage report")
    arg_parser.add_argument(
        "--log-level", type=str.upper, choices=LOG_LEVELS, default=settings.log_level.upper(), help="Logging level"
    )
    return arg_parser


def cli(args: argparse.Namespace) -> int:
    """
    Deserialize ``args.serialized_file`` into ``args.deserialized_file``.

    Returns:
        int: Process exit status.
    """
    if os.path.exists(args.deserialized_file):
        print(f"Error: '{args.deserialized_file}' already exists")
        return 1

    limits = {}
    if args.strict_limits:
        limits = {
            "max_parts_per_slice": settings.strict_max_parts_per_slice,
            "max_part_size": settings.strict_max_part_size,
        }

    try:
        with open(args.serialized_file, "rb") as f:
            serialized = f.read()
        result = reconstruct(serialized, args.byte_order, **limits)
    except (OSError, DeserializeError) as e:
        print(f"Error: {e}")
        return 1

    truncate = args.truncate or bool(args.append)
    content = result.contiguous_bytes() if truncate else result.buffer

    try:
        with open(args.deserialized_file, "xb") as out:
            out.write(content)
            for continuation in args.append:
                with open(continuation, "rb") as f:
                    while chunk := f.read(_COPY_CHUNK_SIZE):
                        out.write(chunk)
                logger.info(f"Appended '{continuation}' to '{args.deserialized_file}'")
            written = out.tell()
    except OSError as e:
        print(f"Error: {e}")
        if not isinstance(e, FileExistsError) and os.path.exists(args.deserialized_file):
            os.remove(args.deserialized_file)
        return 1

    print(f"Last contiguous offset: {result.last_contiguous_offset}")
    print(f"Unparsed trailing bytes: {result.trailing_byte_count}")
    print(f"Written {written} bytes to {args.deserialized_file}")
    if args.report:
        print(json.dumps(build_report(result, args.byte_order).model_dump(), indent=2))
    return 0


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    return cli(args)


if __name__ == "__main__":
    sys.exit(main())
