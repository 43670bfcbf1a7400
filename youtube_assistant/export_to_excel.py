"""
Excel Exporter
Writes the search report (video rows + content analysis) to a workbook.

Tabs:
1. Search Results (one row per video, closing analysis block)
2. Content Analysis (distributions, gaps and trending videos)
"""

from pathlib import Path

from openpyxl import Workbook
from openpyxl.utils import get_column_letter

from youtube_assistant.analytics_engine import DAY_NAMES
from youtube_assistant.report_rows import (
    REPORT_HEADERS,
    build_summary_rows,
    build_video_row,
    sanitize_sheet_name,
    video_url,
)


def autosize_columns(worksheet, max_width=80):
    """Auto-size columns to content width with a reasonable cap."""
    widths = {}
    for row in worksheet.iter_rows():
        for cell in row:
            value = cell.value
            if value is None:
                continue
            widths[cell.column] = max(widths.get(cell.column, 0), len(str(value)))

    for col_idx, width in widths.items():
        worksheet.column_dimensions[get_column_letter(col_idx)].width = min(max(width + 2, 10), max_width)


def append_text_row(worksheet, row):
    """Append a row whose strings stay literal text, e.g. a title starting with '='."""
    worksheet.append(row)
    for cell in worksheet[worksheet.max_row]:
        if isinstance(cell.value, str) and cell.value.startswith("="):
            cell.data_type = "s"


class ExcelExporter:
    def __init__(self, query, videos, summary, zone=None):
        self.query = query
        self.videos = list(videos)
        self.summary = summary
        self.zone = zone

    def create_results_tab(self, workbook):
        ws = workbook.create_sheet("Search Results")
        ws.append([f"YouTube Search: {self.query}"])
        ws.append(REPORT_HEADERS)

        for video in self.videos:
            append_text_row(ws, build_video_row(video, use_formulas=False, zone=self.zone))

        ws.append([])
        for row in build_summary_rows(self.summary):
            append_text_row(ws, row)

        ws.freeze_panes = "A3"
        autosize_columns(ws, max_width=60)

    def create_analysis_tab(self, workbook):
        ws = workbook.create_sheet("Content Analysis")
        summary = self.summary
        durations = summary.duration_distribution

        rows = [
            ["CONTENT ANALYSIS"],
            [""],
            ["Upload Patterns", ""],
            ["Best Upload Day", summary.best_upload_day or "N/A"],
            ["Best Upload Time", summary.best_upload_hour or "N/A"],
        ]
        rows.extend([f"  {DAY_NAMES[day]}", count] for day, count in summary.day_distribution.items())
        rows.extend([f"  {hour}:00", count] for hour, count in summary.hour_distribution.items())

        rows += [
            [""],
            ["Duration Distribution", ""],
            ["Shorts", durations.shorts],
            ["Mid-form", durations.mid_form],
            ["Long-form", durations.long_form],
            [""],
            ["Category Distribution", ""],
        ]
        rows.extend([category, count] for category, count in summary.category_distribution.items())

        rows += [
            [""],
            ["Underrepresented Categories", ", ".join(summary.underrepresented_categories) or "None"],
            [""],
            ["Content Opportunities", ""],
        ]
        rows.extend([f"{idx}.", suggestion] for idx, suggestion in enumerate(summary.suggestions, 1))

        rows += [
            [""],
            ["Trending Videos", ""],
            ["Video URL", "Title", "Engagement Rate", "Views"],
        ]
        for video in summary.trending_videos:
            rows.append([
                video_url(video.video_id),
                video.record.title,
                round(video.engagement.engagement_rate, 2),
                video.view_count,
            ])

        for row in rows:
            ws.append(row)

        autosize_columns(ws, max_width=70)

    def export(self, output_path):
        output_path = Path(output_path)
        workbook = Workbook()
        default_sheet = workbook.active
        workbook.remove(default_sheet)

        self.create_results_tab(workbook)
        self.create_analysis_tab(workbook)
        workbook.properties.title = sanitize_sheet_name(self.query)

        output_path.parent.mkdir(parents=True, exist_ok=True)
        workbook.save(output_path)
        return output_path
