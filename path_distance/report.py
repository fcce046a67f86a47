"""Text, JSON and tabular (CSV/Excel) formatting of distance reports."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Iterable, List, Sequence, Union

import pandas as pd
from openpyxl.styles import Font
from openpyxl.worksheet.worksheet import Worksheet

from .config import (
    EXCEL_AUTOSIZE_MAX_WIDTH,
    EXCEL_AUTOSIZE_MIN_WIDTH,
    EXCEL_AUTOSIZE_PADDING,
    UNNAMED_LABEL,
)
from .models import DistanceReport, TrackComparison

PathLike = Union[str, Path]

LOGGER = logging.getLogger(__name__)

REPORT_SHEET = "Distances"
REPORT_COLUMNS = {
    "label": "Track",
    "time_weighted_average_m": "Average Distance in Time (m)",
    "location_weighted_average_m": "Average Distance by Location (m)",
    "frechet_m": "Fréchet Distance (m)",
    "hausdorff_m": "Hausdorff Distance (m)",
    "point_count": "Points",
    "simplified_point_count": "Simplified Points",
    "source": "Source File",
}


def format_text_report(
    reference_label: str, comparisons: Sequence[TrackComparison]
) -> str:
    """Render a human readable summary, one block per track."""

    lines: List[str] = [
        f"Average distance between reference path ({reference_label or UNNAMED_LABEL}) "
        f"and {len(comparisons)} track(s):"
    ]
    for index, comparison in enumerate(comparisons, start=1):
        report = comparison.report
        lines.append(f"Track {index}: {report.label or UNNAMED_LABEL}")
        lines.append(
            f"  Average distance (in time): {report.time_weighted_average_m:.3f}m "
            "(counting every point)"
        )
        lines.append(
            f"  Average distance (location dependent): "
            f"{report.location_weighted_average_m:.3f}m "
            f"(counting only the {report.simplified_point_count} simplified of "
            f"{report.point_count} points)"
        )
        lines.append(f"  Fréchet distance: {report.frechet_m:.3f}m")
        lines.append(f"  Hausdorff distance: {report.hausdorff_m:.3f}m")
    return "\n".join(lines)


def reports_to_json(reports: Iterable[DistanceReport], *, indent: int = 2) -> str:
    return json.dumps(
        [report.as_dict() for report in reports], indent=indent, sort_keys=True
    )


def reports_to_frame(reports: Iterable[DistanceReport]) -> pd.DataFrame:
    """Tabulate reports with human readable column headings."""

    rows = [report.as_dict() for report in reports]
    df = pd.DataFrame(rows, columns=list(REPORT_COLUMNS))
    return df.rename(columns=REPORT_COLUMNS)


def _autosize(ws: Worksheet) -> None:
    for col_cells in ws.columns:
        max_len = 0
        col_letter = getattr(col_cells[0], "column_letter", None)
        for cell in col_cells:
            if cell.value is None:
                continue
            max_len = max(max_len, len(str(cell.value)))
        width = min(
            EXCEL_AUTOSIZE_MAX_WIDTH,
            max(EXCEL_AUTOSIZE_MIN_WIDTH, max_len + EXCEL_AUTOSIZE_PADDING),
        )
        if col_letter:
            ws.column_dimensions[col_letter].width = width


def write_report_table(path: PathLike, reports: Sequence[DistanceReport]) -> Path:
    """Write reports to ``.csv`` or ``.xlsx`` depending on the suffix.

    Raises:
        ValueError: If the suffix is neither ``.csv`` nor ``.xlsx``.
    """

    output_path = Path(path)
    suffix = output_path.suffix.lower()
    if suffix not in {".csv", ".xlsx"}:
        raise ValueError(f"Unsupported report format '{suffix}' (use .csv or .xlsx)")
    df = reports_to_frame(reports)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    if suffix == ".csv":
        df.to_csv(output_path, index=False, float_format="%.3f")
    else:
        with pd.ExcelWriter(output_path, engine="openpyxl") as writer:
            df.to_excel(writer, sheet_name=REPORT_SHEET, index=False)
            ws = writer.sheets[REPORT_SHEET]
            for cell in ws[1]:
                cell.font = Font(bold=True)
            _autosize(ws)
    LOGGER.info("Wrote %d report row(s) to %s", len(df), output_path)
    return output_path


__all__ = [
    "REPORT_COLUMNS",
    "format_text_report",
    "reports_to_frame",
    "reports_to_json",
    "write_report_table",
]
