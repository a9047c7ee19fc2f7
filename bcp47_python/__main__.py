"""BCP-47 language tag command line."""

import argparse
import importlib.resources
import json
import logging
import re
import sys
import traceback
from importlib.metadata import PackageNotFoundError, version
from logging.config import dictConfig
from typing import List, Optional, Sequence

import toml

from .config_file import FILTER_CHOICES, USE_CHOICES
from .download_registry import download_registry
from .exceptions import Bcp47Error
from .language_filter import filter_language_tags_with_details
from .language_tag import LanguageTag
from .match import MatchQuality, match
from .parser import parse
from .registry import Registry
from .status import TagNormalization, TagValidity
from .utils import get_locale_language, load_registry

try:
    __version__ = version("bcp47_python")
except PackageNotFoundError:  # running from a source checkout without installing
    __version__ = "unknown"


logger = logging.getLogger(__name__)
with (
    importlib.resources.as_file(
        importlib.resources.files("bcp47_python").joinpath("logging.toml")
    ) as config_path,
    open(config_path, "rb") as f,
):
    log_config = toml.loads(f.read().decode("utf-8"))
dictConfig(log_config)

VALIDITY_CHOICES = [v.label for v in TagValidity if v != TagValidity.UNKNOWN]
NORMALIZATION_CHOICES = [n.label for n in TagNormalization if n != TagNormalization.UNKNOWN]


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """
    Parse command line arguments.

    :return: parsed arguments
    :rtype: argparse.Namespace
    """
    parser = argparse.ArgumentParser(
        description=__doc__.strip() if __doc__ else None,
        prog="bcp47_python",
    )
    parser.add_argument(
        "--registry",
        metavar="PATH",
        help="IANA language subtag registry file to use instead of the cached or bundled copy",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
        help="show version",
    )
    parser.add_argument("--verbose", action="store_true", help="enable verbose output")

    commands = parser.add_subparsers(dest="command", required=True)

    parse_cmd = commands.add_parser("parse", help="print the subtags of each tag")
    parse_cmd.add_argument("tags", nargs="+", metavar="TAG")

    normalize_cmd = commands.add_parser("normalize", help="validate and normalize each tag")
    normalize_cmd.add_argument("tags", nargs="+", metavar="TAG")
    normalize_cmd.add_argument(
        "--validity",
        choices=VALIDITY_CHOICES,
        default=TagValidity.VALID.label,
        help="validity to require (default: %(default)s)",
    )
    normalize_cmd.add_argument(
        "--normalization",
        choices=NORMALIZATION_CHOICES,
        default=TagNormalization.PREFERRED.label,
        help="normalization to apply (default: %(default)s)",
    )

    match_cmd = commands.add_parser("match", help="print the similarity of two tags")
    match_cmd.add_argument("tag1", metavar="TAG1")
    match_cmd.add_argument("tag2", metavar="TAG2")
    match_cmd.add_argument(
        "--preferred",
        action="store_true",
        help="compare the preferred forms of the tags",
    )

    filter_cmd = commands.add_parser("filter", help="pick the best available languages")
    filter_cmd.add_argument(
        "desired",
        nargs="*",
        metavar="DESIRED",
        help="desired languages, most desired first (default: the system locale)",
    )
    filter_cmd.add_argument(
        "-a",
        "--available",
        metavar="TAGS",
        type=get_tags,
        required=True,
        help="list of available language tags",
    )
    filter_cmd.add_argument("--use", choices=USE_CHOICES, default=None)
    filter_cmd.add_argument("--filter", choices=FILTER_CHOICES, default=None)
    filter_cmd.add_argument("--fallback", metavar="TAG", help="tag to use when nothing matches")

    commands.add_parser("download", help="download the current IANA registries into the cache")

    args = parser.parse_args(argv)

    if args.command == "filter" and not args.desired:
        args.desired = [get_locale_language()]

    return args


def get_tags(tags: str) -> List[str]:
    """
    Parse a string of language tags separated by commas or whitespace.

    :param tags: A string such as ``'en-US, de-DE'``.
    :type tags: str
    :return: The individual tags.
    :rtype: List[str]
    """
    return re.findall(r"[\w\-]+", tags)


def print_exception(exc: Exception, debug: bool) -> None:
    """
    Print an exception message to stderr, optionally including a stack trace.

    :param exc: The exception to print.
    :type exc: Exception
    :param debug: Whether to include a stack trace.
    :type debug: bool
    """
    if debug:
        traceback.print_exc()
    else:
        print(exc, file=sys.stderr)


def run_parse(args: argparse.Namespace, registry: Registry) -> int:
    status = 0
    for tag in args.tags:
        try:
            parts = parse(tag, registry)
        except Bcp47Error as exception:
            print_exception(exception, args.verbose)
            status = 1
            continue
        print(f"{tag}: {json.dumps(parts.to_dict())}")
    return status


def run_normalize(args: argparse.Namespace, registry: Registry) -> int:
    status = 0
    for tag in args.tags:
        try:
            normalized = LanguageTag.create(
                tag,
                registry,
                validity=args.validity,
                normalization=args.normalization,
            )
        except Bcp47Error as exception:
            print_exception(exception, args.verbose)
            status = 1
            continue
        print(normalized)
    return status


def run_match(args: argparse.Namespace, registry: Registry) -> int:
    normalization = TagNormalization.PREFERRED if args.preferred else None
    quality = match(args.tag1, args.tag2, registry, normalization=normalization)
    print(f"{quality:g} ({MatchQuality.name_of(quality)})")
    return 0


def run_filter(args: argparse.Namespace, registry: Registry) -> int:
    matches = filter_language_tags_with_details(
        args.desired,
        args.available,
        registry,
        use=args.use,
        filter=args.filter,
        ultimate_fallback=args.fallback,
    )
    for m in matches:
        print(f"{m.tag}\t{m.quality:.3f}")
    return 0 if matches else 1


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Main function to parse arguments and run the requested command.

    :return: Exit status code
    :rtype: int
    """
    args = parse_args(argv)

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    if args.command == "download":
        try:
            for path in download_registry():
                print(path)
        except (Bcp47Error, TimeoutError) as exception:
            print_exception(exception, args.verbose)
            return 1
        return 0

    try:
        registry = load_registry(args.registry)
        if args.command == "parse":
            return run_parse(args, registry)
        if args.command == "normalize":
            return run_normalize(args, registry)
        if args.command == "match":
            return run_match(args, registry)
        return run_filter(args, registry)
    except Bcp47Error as exception:
        print_exception(exception, args.verbose)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
