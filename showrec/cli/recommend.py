# =============================================================================
# showrec/cli/recommend.py — CLI Recommend Command
# =============================================================================
#
# Runs one recommendation pass over JSON files, bypassing the controller:
#
#   catalog.json    — [{"date": "Friday, March 14, 2025", "shows": [...]}, ...]
#   favorites.json  — [{"artist": ..., "venue": ..., "time": ...}, ...]
#
# Typical usage:
#   python -m showrec.cli.recommend catalog.json favorites.json
#   python -m showrec.cli.recommend catalog.json favorites.json --city austin
#   python -m showrec.cli.recommend catalog.json favorites.json --json -n 5
#
# Log lines always go to stderr; --quiet (implied by --json) raises the
# threshold to WARNING so stdout carries only the results.
# =============================================================================

"""Standalone CLI for computing recommendations from JSON files.

Usage::

    python -m showrec.cli.recommend catalog.json favorites.json
    python -m showrec.cli.recommend catalog.json favorites.json --json
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
import time
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from showrec.models.recommendation import Recommendation
from showrec.models.show import EventDay, Show

_CATALOG = TypeAdapter(list[EventDay])
_FAVORITES = TypeAdapter(list[Show])


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------


def _format_text_output(recommendations: list[Recommendation]) -> str:
    if not recommendations:
        return "No recommendations."

    lines: list[str] = []
    sep = "=" * 60
    lines.append(sep)
    lines.append("  showrec — Recommendations")
    lines.append(sep)

    current_date: str | None = None
    for rec in recommendations:
        if rec.event_date != current_date:
            current_date = rec.event_date
            lines.append("")
            lines.append(current_date or "(undated)")
            lines.append("-" * 40)
        show = rec.show
        when = f" @ {show.time}" if show.time else ""
        lines.append(f"  {rec.score:5.1f}  {show.artist} — {show.venue}{when}")
        lines.append(
            f"         {rec.explanation.explanation} "
            f"(confidence {rec.explanation.confidence:.0%})"
        )

    return "\n".join(lines)


def _format_json_output(recommendations: list[Recommendation]) -> str:
    output = [
        {**rec.model_dump(mode="json"), "ml_score": rec.ml_score}
        for rec in recommendations
    ]
    return json.dumps(output, indent=2, default=str)


# ---------------------------------------------------------------------------
# Runner
# ---------------------------------------------------------------------------


def _configure_cli_logging(quiet: bool) -> None:
    """Route all logging to stderr.  Must run before importing showrec.main."""
    import logging

    from showrec.utils.logging import configure_logging

    configure_logging(log_level="WARNING" if quiet else "INFO", stream=sys.stderr)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def _load(path: Path, adapter: TypeAdapter, label: str):  # noqa: ANN202
    if not path.exists():
        print(f"Error: {label} file not found: {path}", file=sys.stderr)
        return None
    try:
        return adapter.validate_json(path.read_bytes())
    except ValidationError as exc:
        print(f"Error: invalid {label} file {path}: {exc}", file=sys.stderr)
        return None


async def _run(
    catalog_path: Path,
    favorites_path: Path,
    limit: int | None,
    city: str,
    json_output: bool,
) -> int:
    """Load inputs, run one pass, print results.  Returns the exit code."""
    # Deferred: showrec.main reads settings and assembles providers.
    from showrec.main import run_recommendations

    catalog = _load(catalog_path, _CATALOG, "catalog")
    favorites = _load(favorites_path, _FAVORITES, "favorites")
    if catalog is None or favorites is None:
        return 1

    print(
        f"Scoring {sum(len(d.shows) for d in catalog)} shows "
        f"against {len(favorites)} favourites",
        file=sys.stderr,
    )
    start = time.monotonic()
    recommendations = await run_recommendations(catalog, favorites, limit=limit, locale=city)
    print(f"Done in {time.monotonic() - start:.1f}s", file=sys.stderr)

    if json_output:
        print(_format_json_output(recommendations))
    else:
        print(_format_text_output(recommendations))
    return 0


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m showrec.cli.recommend",
        description="Recommend upcoming shows from a catalog and a favourites list.",
    )
    parser.add_argument("catalog", type=str, help="Path to the catalog JSON (list of days).")
    parser.add_argument("favorites", type=str, help="Path to the favourites JSON (list of shows).")
    parser.add_argument(
        "--limit", "-n",
        type=int,
        default=None,
        help="Maximum number of recommendations (default from config).",
    )
    parser.add_argument(
        "--city",
        type=str,
        default="",
        help="City for description embeddings; omit to skip the two-tower signal.",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        dest="json_output",
        help="Output results as JSON instead of formatted text.",
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Only log warnings and errors (implied by --json).",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)

    _configure_cli_logging(quiet=args.quiet or args.json_output)

    exit_code = asyncio.run(
        _run(
            Path(args.catalog).resolve(),
            Path(args.favorites).resolve(),
            args.limit,
            args.city,
            args.json_output,
        )
    )
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
