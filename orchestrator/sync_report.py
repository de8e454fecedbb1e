"""
Sync report generator for summarizing a run on the console and as JSON.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from models import SyncResult


class SyncReport:
    """Builds and formats the report of a sync run."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger('notion_markdown_sync.orchestrator.sync_report')

    def generate_report(self, result: SyncResult, asset_stats: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Build a report dictionary from a sync result.

        Args:
            result: Result of ``SyncOrchestrator.run``
            asset_stats: Optional image download statistics
        """
        failed = result.failed
        discovered = result.pages_discovered

        summary = {
            'pages_discovered': discovered,
            'pages_exported': len(result.emitted),
            'pages_failed': len(failed),
            'success_rate': (len(result.emitted) / discovered) if discovered else 1.0,
            'changed': result.changed,
            'dry_run': result.dry_run,
            'duration': result.duration,
            'duration_formatted': self._format_duration(result.duration),
            'generated_at': datetime.now(timezone.utc).isoformat()
        }
        if asset_stats:
            summary['images_downloaded'] = asset_stats.get('downloaded', 0)
            summary['images_failed'] = asset_stats.get('failed', 0)

        return {
            'summary': summary,
            'pages': [status.to_dict() for status in result.statuses],
            'errors': [
                {'page_id': status.page_id, 'page_title': status.page_title, 'error': status.error_message}
                for status in failed
            ]
        }

    def format_console_report(self, report: Dict[str, Any]) -> str:
        summary = report.get('summary', {})
        sections = [
            "=" * 60,
            "SYNC REPORT",
            "=" * 60,
            f"  Pages found:    {summary.get('pages_discovered', 0)}",
            f"  Pages exported: {summary.get('pages_exported', 0)}",
            f"  Pages failed:   {summary.get('pages_failed', 0)}",
        ]

        if 'images_downloaded' in summary:
            sections.append(
                f"  Images:         {summary['images_downloaded']} downloaded, "
                f"{summary.get('images_failed', 0)} failed"
            )

        sections.append(f"  Duration:       {summary.get('duration_formatted', '0s')}")

        if summary.get('dry_run'):
            sections.append("  Mode:           dry run (nothing written)")
        else:
            sections.append(f"  Changed:        {'yes' if summary.get('changed') else 'no'}")

        errors = report.get('errors', [])
        if errors:
            sections.append("")
            sections.append("Failed pages:")
            sections.append("-" * 60)
            for error in errors:
                sections.append(f"  {error['page_title']} ({error['page_id']}): {error['error']}")

        sections.append("=" * 60)
        return "\n".join(sections)

    def export_json_report(self, report: Dict[str, Any], filepath: str) -> None:
        """Write the report as JSON. Failures are logged, not raised."""
        try:
            with open(filepath, 'w', encoding='utf-8') as f:
                json.dump(report, f, indent=2, ensure_ascii=False, default=str)

            self.logger.info(f"JSON report exported to {filepath}")

        except OSError as e:
            self.logger.error(f"Failed to export JSON report: {e}")

    @staticmethod
    def _format_duration(seconds: float) -> str:
        if seconds < 60:
            return f"{seconds:.1f}s"
        minutes, seconds = divmod(int(seconds), 60)
        return f"{minutes}m {seconds}s"


__all__ = ['SyncReport']
