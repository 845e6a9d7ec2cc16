"""
Scrydex Main Executor
"""

import argparse
import logging
import pathlib
import sys
from typing import List, Optional

from scrydex import constants, validate
from scrydex.arg_parser import parse_args
from scrydex.db import (
    CardStreamOptions,
    diff,
    has_filter_checks,
    load,
    load_all,
    log_config,
    save,
)
from scrydex.errors import CardStreamError, ScrydexError
from scrydex.utils import init_logger, is_valid_log_level

LOGGER: logging.Logger = logging.getLogger(__name__)


def command_filter(args: argparse.Namespace) -> None:
    """
    Filter a card database into a new file
    """
    output = pathlib.Path(args.output)
    if output.is_dir():
        raise ScrydexError(f"'output' option is an already existing directory: {output}")
    if not output.parent.is_dir():
        raise ScrydexError(f"'output' option path has an invalid directory: {output.parent}")

    config = validate.filter_options(vars(args))
    if not has_filter_checks(config):
        raise ScrydexError("Aborting as no filtering options provided.")

    source = load(args.input)
    LOGGER.info(f"Filtering card database: {source.filepath}")
    log_config(config, LOGGER)

    cards = list(source.stream(CardStreamOptions(filter=config)))
    if not cards:
        LOGGER.warning("No matching cards; no output file written.")
        return

    meta = source.meta.to_json()
    meta.pop("name", None)
    save(output, cards, meta)

    LOGGER.info(f"Finished filtering card database: {output}")
    LOGGER.info(f"Kept {len(cards)} card entries.")


def command_find(args: argparse.Namespace) -> None:
    """
    Print every matching card of every sorted card database in a directory
    """
    config = validate.filter_options(vars(args), args.regex)
    log_config(config, LOGGER, logging.DEBUG)

    card_streams = load_all(args.directory, db_type=("sorted", "sorted_format"), walk=True)
    LOGGER.info(f"Searching {len(card_streams)} card databases")

    options = CardStreamOptions(filter=config)
    for card_stream in card_streams:
        try:
            for card in card_stream.stream(options):
                print(
                    f"{card_stream.meta.name}: {card.get('name')}; "
                    f"quantity: {card.get('quantity')}; filename: {card.get('filename')}"
                )
        except CardStreamError as error:
            LOGGER.warning(f"Skipping rest of {card_stream.filepath}: {error}")


def command_diff(args: argparse.Namespace) -> None:
    """
    Print added, removed and changed identity keys between two card databases
    """
    baseline = load(args.baseline)
    comparison = load(args.comparison)

    options = CardStreamOptions() if args.include_groups else None
    result = diff(baseline, comparison, options)

    if result.is_empty():
        LOGGER.info("No differences found.")
        return

    for key in sorted(result.added):
        print(f"+ {key}")
    for key in sorted(result.removed):
        print(f"- {key}")
    for key, delta in result.changed.items():
        print(f"~ {key} {delta:+d}")


def command_formats(_: argparse.Namespace) -> None:
    """
    Print the supported game formats
    """
    print(", ".join(sorted(constants.SUPPORTED_FORMATS)))


COMMANDS = {
    "diff": command_diff,
    "filter": command_filter,
    "find": command_find,
    "formats": command_formats,
}


def main(argv: Optional[List[str]] = None) -> int:
    """
    Scrydex entry point
    :param argv: Command line arguments
    :return: Process exit code
    """
    args = parse_args(argv)

    if args.loglevel is not None and not is_valid_log_level(args.loglevel):
        print(f"[scrydex] 'loglevel' option is invalid: {args.loglevel}", file=sys.stderr)
        return 1

    init_logger(args.loglevel)

    try:
        COMMANDS[args.command](args)
    except (ScrydexError, ValueError) as error:
        LOGGER.debug("Command failed", exc_info=True)
        LOGGER.error(str(error))
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
