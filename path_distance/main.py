"""Command line entry point comparing GPX tracks against a reference path.

Usage examples:

    path-distance --reference ref.gpx --track a.gpx,b.gpx

    python -m path_distance --reference ref.gpx --track a.gpx \
        --epsilon 2.5 --simplify both --export-track --output results.xlsx
"""

from __future__ import annotations

import argparse
import logging
from collections import defaultdict
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from .config import LOG_LEVEL, MAX_WORKERS, SIMPLIFY_EPSILON_M
from .errors import GpxFormatError, InvalidInputError
from .gpx_io import read_many, read_reference, write_simplified_gpx
from .models import SimplifyTarget, Track, TrackComparison
from .report import format_text_report, reports_to_json, write_report_table
from .services import ComparisonService, ComparisonSettings, prepare_reference
from .services.comparison_service import PreparedReference
from .visualization import create_comparison_map

LOGGER = logging.getLogger("path_distance")

EXIT_OK = 0
EXIT_INPUT_ERROR = 2


def _setup_logging(level: str) -> None:
    if not logging.getLogger().hasHandlers():
        logging.basicConfig(
            level=getattr(logging, level, logging.INFO),
            format="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
        )


def _split_paths(values: Sequence[str]) -> List[Path]:
    paths: List[Path] = []
    for value in values:
        paths.extend(Path(part.strip()) for part in value.split(",") if part.strip())
    return paths


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="path-distance",
        description=(
            "Compare one or more GPS tracks to a reference path and report the "
            "average closest-point distance, the Fréchet distance and the "
            "Hausdorff distance in metres."
        ),
    )
    parser.add_argument(
        "-r",
        "--reference",
        required=True,
        help="GPX file containing the reference path",
    )
    parser.add_argument(
        "-t",
        "--track",
        required=True,
        action="append",
        help="GPX file(s) to compare; separate several with commas or repeat the flag",
    )
    parser.add_argument(
        "-s",
        "--epsilon",
        type=float,
        default=SIMPLIFY_EPSILON_M,
        help=f"Simplification tolerance in metres (default {SIMPLIFY_EPSILON_M})",
    )
    parser.add_argument(
        "--simplify",
        choices=[target.value for target in SimplifyTarget],
        default=None,
        help="Which paths use their simplified form in the metrics",
    )
    parser.add_argument(
        "-e",
        "--export-track",
        action="store_true",
        help="Write simplified tracks next to each input as <name>.modified.gpx",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the reports as JSON instead of text",
    )
    parser.add_argument(
        "-o",
        "--output",
        help="Also write the reports to a .csv or .xlsx file",
    )
    parser.add_argument(
        "--map-dir",
        help="Directory receiving one HTML comparison map per track",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=MAX_WORKERS,
        help=f"Parallel track workers (default {MAX_WORKERS})",
    )
    parser.add_argument(
        "-d",
        "--debug",
        action="store_true",
        help="Shortcut for --log-level DEBUG",
    )
    parser.add_argument(
        "--log-level",
        default=LOG_LEVEL,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Python logging level",
    )
    return parser


def _export_tracks(comparisons: Sequence[TrackComparison]) -> List[Path]:
    by_source: Dict[str, List[Track]] = defaultdict(list)
    for comparison in comparisons:
        source = comparison.simplified.source
        if source:
            by_source[source].append(comparison.simplified)
    return [write_simplified_gpx(source, tracks) for source, tracks in by_source.items()]


def _write_maps(
    map_dir: Path,
    prepared: PreparedReference,
    tracks: Sequence[Track],
    comparisons: Sequence[TrackComparison],
) -> None:
    for index, (track, comparison) in enumerate(zip(tracks, comparisons), start=1):
        output = map_dir / f"track_{index:02d}.html"
        create_comparison_map(
            prepared.track,
            track,
            comparison,
            prepared.projector,
            output_html_path=output,
        )
        LOGGER.info("Wrote comparison map for '%s' to %s", track.label, output)


def run(argv: Optional[Sequence[str]] = None) -> int:
    """Parse ``argv``, compare the tracks and print the reports."""

    parser = _build_parser()
    args = parser.parse_args(argv)
    if args.output and Path(args.output).suffix.lower() not in {".csv", ".xlsx"}:
        parser.error("--output must end in .csv or .xlsx")
    _setup_logging("DEBUG" if args.debug else args.log_level)

    settings = ComparisonSettings(epsilon_m=args.epsilon, max_workers=args.workers)
    if args.simplify is not None:
        settings.simplify_target = SimplifyTarget(args.simplify)
    track_paths = _split_paths(args.track)
    LOGGER.debug("Reference path: %s", args.reference)
    LOGGER.debug("Track paths: %s", [str(path) for path in track_paths])
    LOGGER.debug("Simplify epsilon: %s m", settings.epsilon_m)

    try:
        reference = read_reference(args.reference)
        tracks = read_many(track_paths)
        prepared = prepare_reference(reference, settings.epsilon_m)
        comparisons = ComparisonService(settings).compare_prepared(prepared, tracks)
    except (FileNotFoundError, GpxFormatError, InvalidInputError) as exc:
        LOGGER.error("%s", exc)
        return EXIT_INPUT_ERROR

    reports = [comparison.report for comparison in comparisons]
    if args.json:
        print(reports_to_json(reports))
    else:
        print(format_text_report(reference.label, comparisons))

    if args.export_track:
        _export_tracks(comparisons)
    if args.output:
        write_report_table(args.output, reports)
    if args.map_dir:
        _write_maps(Path(args.map_dir), prepared, tracks, comparisons)
    return EXIT_OK


def main() -> None:
    raise SystemExit(run())


if __name__ == "__main__":
    main()
