"""Output generation for scrape runs."""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import List

from ..models import ScrapedRecord
from ..pipeline import RunContext

logger = logging.getLogger(__name__)


class OutputGenerator:
    """Write the new records as JSON plus a human-readable run report."""

    def __init__(self, output_dir: Path):
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)

    def export_json(self, records: List[ScrapedRecord], filename: str = "") -> Path:
        """Export records in the site's JSON shape."""
        date_str = datetime.now().strftime("%Y-%m-%d")
        output_file = self.output_dir / (filename or f"scraped-movies_{date_str}.json")
        output_file.write_text(
            json.dumps([r.to_dict() for r in records], indent=2, ensure_ascii=False),
            encoding="utf-8",
        )
        logger.info(f"Exported {len(records)} records to {output_file}")
        return output_file

    def generate(self, context: RunContext) -> Path:
        """
        Generate the run report.

        Format:
        1. Header with date and counters
        2. New records (id, title, status, download count)
        3. Records whose status was updated
        """
        date_str = datetime.now().strftime("%Y-%m-%d")
        output_file = self.output_dir / f"scrape_report_{date_str}.txt"

        lines = []

        # Header
        lines.append(f"Scrape Report - {date_str}")
        lines.append(f"Last page: {context.current_page}")
        lines.append(f"New records: {context.cards_scraped}")
        lines.append(f"Duplicates skipped: {context.duplicates_skipped}")
        lines.append(f"Status updates: {context.updated_count}")
        lines.append(f"Errors: {context.errors}")
        if context.stop_requested:
            lines.append("Run was stopped before completion")
        lines.append("=" * 70)
        lines.append("")

        lines.append("=== NEW RECORDS ===")
        lines.append("")
        if not context.scraped_data:
            lines.append("  (none)")
        for record in context.scraped_data:
            downloads = sum(len(g.qualities) for g in record.download_groups)
            lines.append(f"  {record.id:>14}  {record.title}")
            lines.append(
                f"{'':16}[{record.content_type}] {record.status} • "
                f"{record.quality or 'N/A'} • {downloads} download link(s)"
            )
        lines.append("")

        if context.updated_records:
            lines.append("=" * 70)
            lines.append("=== STATUS UPDATES ===")
            lines.append("")
            for record in context.updated_records:
                lines.append(f"  {record.id:>14}  {record.title} -> {record.status}")
            lines.append("")

        content = "\n".join(lines)
        output_file.write_text(content, encoding="utf-8")

        logger.info(f"Report written to: {output_file}")
        return output_file
