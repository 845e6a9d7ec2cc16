"""
Scrydex Arg Parser to determine what actions to take
"""

import argparse
from typing import List, Optional


def add_filter_arguments(parser: argparse.ArgumentParser) -> None:
    """
    Card property filter options shared by the filter and find commands
    :param parser: Parser to extend
    """
    group = parser.add_argument_group("card property filters")
    group.add_argument(
        "--border",
        metavar="BORDERS",
        help="Colon separated border colors: black, borderless, gold, silver, white, yellow.",
    )
    group.add_argument(
        "--color-identity",
        dest="color_identity",
        metavar="COLORS",
        help="Allowed color identity as WUBRG letters or mana symbols, e.g. {W}{U}.",
    )
    group.add_argument("--cmc", metavar="VALUE", help="Exact mana value.")
    group.add_argument(
        "--formats",
        metavar="FORMATS",
        help="Colon separated game formats the card must be legal in.",
    )
    group.add_argument(
        "--keywords",
        metavar="KEYWORDS",
        help="Colon separated keywords the card must have.",
    )
    group.add_argument(
        "--mana-cost", dest="mana_cost", metavar="COST", help="Exact mana cost, e.g. {1}{G}."
    )
    group.add_argument(
        "--price",
        metavar="EXPR",
        help='Price comparison such as ">10" or "<=0.5", or "null" for cards without a price.',
    )


def add_regex_arguments(parser: argparse.ArgumentParser) -> None:
    """
    Regex search modifiers used by the find command
    :param parser: Parser to extend
    """
    group = parser.add_argument_group("search options")
    group.add_argument("-b", action="store_true", help="Wrap the search in word boundaries.")
    group.add_argument("-i", action="store_true", help="Case insensitive search.")
    group.add_argument("--exact", action="store_true", help="Match the whole field.")
    group.add_argument("--name", action="store_true", help="Search card names (default).")
    group.add_argument("--oracle", action="store_true", help="Search oracle text.")
    group.add_argument("--type", action="store_true", help="Search type lines.")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse command line arguments from user to determine which command to run
    :param argv: Arguments, defaults to sys.argv
    :return: Namespace of requests
    """
    parser = argparse.ArgumentParser("scrydex")
    parser.add_argument(
        "--loglevel",
        metavar="LEVEL",
        help="Logging level: debug, info, warning, error.",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    filter_parser = subparsers.add_parser(
        "filter", help="Write a new card database holding only the matching cards."
    )
    filter_parser.add_argument("input", help="Card database file to filter.")
    filter_parser.add_argument(
        "--output", "-o", required=True, help="Card database file to write."
    )
    add_filter_arguments(filter_parser)

    find_parser = subparsers.add_parser(
        "find", help="Search every sorted card database under a directory."
    )
    find_parser.add_argument("regex", help="Regular expression to search for.")
    find_parser.add_argument("directory", help="Directory holding card databases.")
    add_regex_arguments(find_parser)
    add_filter_arguments(find_parser)

    diff_parser = subparsers.add_parser(
        "diff", help="Compare card quantities between two card databases."
    )
    diff_parser.add_argument("baseline", help="Older card database file.")
    diff_parser.add_argument("comparison", help="Newer card database file.")
    diff_parser.add_argument(
        "--include-groups",
        action="store_true",
        help="Also count cards from decks, external and proxy groups.",
    )

    subparsers.add_parser("formats", help="List the supported game formats.")

    return parser.parse_args(argv)
