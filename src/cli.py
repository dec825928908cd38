"""CLI entry point for the jars duplicate checker.

Commands:
    jars-dedup check CANDIDATES LEDGER   Flag candidates already in the ledger
        [--type spending|revenue] [--limit N] [--output FILE]
    jars-dedup compare DESC_A DESC_B     Show how two descriptions compare
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path

logger = logging.getLogger(__name__)


def _setup_logging() -> None:
    """Configure logging based on JARS_LOG_LEVEL env var."""
    level = os.environ.get("JARS_LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )


def _get_config():
    """Load application config, or None if no config directory exists.

    Without a config directory the built-in defaults apply.
    """
    from src.config import Config

    config_dir = os.environ.get("JARS_CONFIG_DIR", "config")
    if not Path(config_dir).is_dir():
        logger.debug("No config directory at %s, using defaults", config_dir)
        return None
    return Config(config_dir=config_dir)


def _get_checker(config):
    from src.dedup.engine import DuplicateChecker

    if config is None:
        return DuplicateChecker()
    return DuplicateChecker(stop_words=config.stop_words)


# ── Command handlers ─────────────────────────────────────


def cmd_check(args: argparse.Namespace) -> int:
    """Check a candidate batch against a reference ledger."""
    from src.config import DEFAULT_REFERENCE_LIMIT, LEDGER_DESCRIPTION_FIELDS
    from src.ledger import load_reference_ledger, load_transactions, most_recent

    try:
        config = _get_config()
        if config is not None:
            fields = config.description_fields(args.type)
            limit = config.reference_limit
        else:
            fields = LEDGER_DESCRIPTION_FIELDS[args.type]
            limit = DEFAULT_REFERENCE_LIMIT
        if args.limit is not None:
            limit = args.limit
        checker = _get_checker(config)
        candidates = load_transactions(args.candidates, fields)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    references = most_recent(load_reference_ledger(args.ledger, fields), limit)
    logger.info(
        "Checking %d %s candidates against %d reference rows",
        len(candidates), args.type, len(references),
    )
    result = checker.check_batch(candidates, references)

    payload = json.dumps(result.to_dict(), ensure_ascii=False, indent=2)
    if args.output:
        args.output.write_text(payload + "\n", encoding="utf-8")
    else:
        print(payload)

    counts = result.duplicate_counts
    print(
        f"{len(candidates)} checked: {result.duplicate_count} duplicates"
        f" (level 1={counts[1]}, level 2={counts[2]}, level 3={counts[3]})",
        file=sys.stderr,
    )
    return 0


def cmd_compare(args: argparse.Namespace) -> int:
    """Print the normalized forms and similarity of two descriptions."""
    from src.dedup.similarity import bigram_similarity, find_common_words
    from src.dedup.text import normalize_description, significant_words

    try:
        checker = _get_checker(_get_config())
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    norm_a = normalize_description(args.desc_a)
    norm_b = normalize_description(args.desc_b)
    words_a = significant_words(norm_a, checker.stop_words)
    words_b = significant_words(norm_b, checker.stop_words)
    common = find_common_words(words_a, words_b)

    print(f"A: {norm_a!r} words={sorted(words_a)}")
    print(f"B: {norm_b!r} words={sorted(words_b)}")
    print(f"Common words ({len(common)}): {', '.join(common) or '-'}")
    print(f"Bigram similarity: {bigram_similarity(norm_a, norm_b):.0%}")
    return 0


# ── Main entry point ─────────────────────────────────────


_COMMANDS = {
    "check": cmd_check,
    "compare": cmd_compare,
}


def main(argv: list[str] | None = None):
    _setup_logging()

    parser = argparse.ArgumentParser(
        prog="jars-dedup",
        description="6 Jars budget import duplicate checker",
    )
    subparsers = parser.add_subparsers(dest="command")

    # check
    check_p = subparsers.add_parser("check", help="Flag candidates already in the ledger")
    check_p.add_argument("candidates", type=Path, help="JSON file of imported transactions")
    check_p.add_argument("ledger", type=Path, help="JSON export of the ledger")
    check_p.add_argument(
        "--type", choices=("spending", "revenue"), default="spending",
        help="Ledger the candidates belong to (default: spending)",
    )
    check_p.add_argument(
        "--limit", type=int, default=None,
        help="Compare against the N most recent ledger rows",
    )
    check_p.add_argument("--output", type=Path, help="Write JSON result to FILE")

    # compare
    compare_p = subparsers.add_parser("compare", help="Show how two descriptions compare")
    compare_p.add_argument("desc_a", help="First description")
    compare_p.add_argument("desc_b", help="Second description")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    handler = _COMMANDS.get(args.command)
    if handler is None:
        print(f"Unknown command: {args.command}")
        sys.exit(1)

    sys.exit(handler(args))


if __name__ == "__main__":
    main()
