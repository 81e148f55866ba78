"""
Reporting and export utilities.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, List

import pandas as pd

from .models import MaintenanceAssessment, Report, RiskTier


ROW_FORMAT = "{:<30} {:>6} {:<12} {:>15} {:>18} {:<12}"

HIGH_RISK_MARKER = "\u26a0"

COLUMNS = [
    "dependency",
    "score",
    "risk",
    "days_since_update",
    "recent_downloads",
    "max_version",
    "status",
    "error",
]


def risk_label(tier: RiskTier) -> str:
    """Display label for a tier; High carries a warning marker."""
    if tier is RiskTier.HIGH:
        return f"{HIGH_RISK_MARKER} {tier.value}"
    return tier.value


def format_report_table(report: Report) -> str:
    """Render the report as a plain-text table, riskiest first."""
    lines = [ROW_FORMAT.format("Crate", "Score", "Risk", "Days Inactive", "Recent DLs", "Version")]
    for entry in report.entries:
        outcome = entry.outcome
        if isinstance(outcome, MaintenanceAssessment):
            lines.append(ROW_FORMAT.format(
                entry.name,
                outcome.score,
                risk_label(outcome.risk_tier),
                f"{outcome.days_since_update} days",
                outcome.recent_downloads,
                outcome.max_version,
            ))
        else:
            lines.append(ROW_FORMAT.format(entry.name, "—", "Unknown", "-", "-", "-"))
    return "\n".join(lines)


def format_summary(report: Report) -> str:
    lines = [
        f"Fetched {report.total} crates in {report.elapsed_seconds:.1f}s",
        "",
        "Summary:",
        f"   {HIGH_RISK_MARKER} {report.high} High risk (potentially unmaintained)",
        f"   {report.medium} Medium risk",
        f"   {report.low} Low risk",
    ]
    failed = len(report.failures)
    if failed:
        lines.append(f"   {failed} could not be fetched")
    if report.high > 0:
        lines.append("")
        lines.append("Consider reviewing or replacing high-risk crates!")
    return "\n".join(lines)


def report_to_records(report: Report) -> List[Dict]:
    """One plain dict per entry, in report order."""
    records = []
    for entry in report.entries:
        outcome = entry.outcome
        if isinstance(outcome, MaintenanceAssessment):
            records.append({
                "dependency": entry.name,
                "score": outcome.score,
                "risk": outcome.risk_tier.value,
                "days_since_update": outcome.days_since_update,
                "recent_downloads": outcome.recent_downloads,
                "max_version": outcome.max_version,
                "status": "ok",
                "error": None,
            })
        else:
            records.append({
                "dependency": entry.name,
                "score": None,
                "risk": None,
                "days_since_update": None,
                "recent_downloads": None,
                "max_version": None,
                "status": "failed",
                "error": outcome.message,
            })
    return records


def report_to_frame(report: Report) -> pd.DataFrame:
    return pd.DataFrame(report_to_records(report), columns=COLUMNS)


def report_to_dict(report: Report) -> Dict:
    return {
        "dependencies": report_to_records(report),
        "summary": {
            "total": report.total,
            "high": report.high,
            "medium": report.medium,
            "low": report.low,
            "failed": len(report.failures),
            "elapsed_seconds": round(report.elapsed_seconds, 3),
        },
    }


def save_report_json(report: Report, output_dir: Path, stem: str) -> Path:
    output_dir.mkdir(parents=True, exist_ok=True)
    results_file = output_dir / f"{stem}_maintenance.json"
    with open(results_file, 'w') as f:
        json.dump(report_to_dict(report), f, indent=2, default=str)
    return results_file


def export_report_csv(report: Report, output_dir: Path, stem: str) -> Path:
    output_dir.mkdir(parents=True, exist_ok=True)
    csv_file = output_dir / f"{stem}_maintenance.csv"
    report_to_frame(report).to_csv(csv_file, index=False)
    return csv_file


def export_report_worksheet(report: Report, output_dir: Path, stem: str) -> Path:
    output_dir.mkdir(parents=True, exist_ok=True)
    excel_file = output_dir / f"{stem}_maintenance.xlsx"
    summary = pd.DataFrame([report_to_dict(report)["summary"]])
    with pd.ExcelWriter(excel_file, engine='openpyxl') as writer:
        report_to_frame(report).to_excel(writer, sheet_name="dependencies", index=False)
        summary.to_excel(writer, sheet_name="summary", index=False)
    return excel_file
