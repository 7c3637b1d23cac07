"""Text formatters for scan and placement reports."""

from __future__ import annotations

from openings.contracts.dtos import BatchOutcome, ScanReport
from openings.domain.value_objects import BoxSpec, IntersectionRecord


def _size_label(spec: BoxSpec) -> str:
    if spec.is_round:
        return f"Ø{spec.diameter:g}"
    return f"{spec.width:g} x {spec.height:g}"


class IntersectionTableFormatter:
    """Formats the clashes of a scan with the box each would receive."""

    def __init__(self, unit_label: str = "mm") -> None:
        self.unit_label = unit_label

    def format(self, report: ScanReport) -> str:
        if not report.records:
            return "No intersections found."

        lines = [
            "INTERSECTIONS",
            "=" * 70,
            f"{'Run':<22} {'Host':<22} {'Type':<6} "
            f"{'Box (' + self.unit_label + ')':<16} {'Thick'}",
            "-" * 70,
        ]
        for record, spec in zip(report.records, report.specs):
            lines.append(self._row(record, spec))
        lines.append("-" * 70)
        lines.append(f"Total: {len(report.records)} intersection(s)")

        stats = report.stats
        if stats is not None:
            lines.append(
                f"Pairs tested: {stats.pairs_tested}  "
                f"Skipped elements: {stats.skipped_elements}  "
                f"Kernel failures: {stats.boolean_failures}  "
                f"Surface contacts: {stats.degenerate_overlaps}"
            )
        return "\n".join(lines)

    def _row(self, record: IntersectionRecord, spec: BoxSpec) -> str:
        return (
            f"{record.run.identity:<22} {record.host.identity:<22} "
            f"{record.host_type.value:<6} {_size_label(spec):<16} "
            f"{spec.thickness:g}"
        )


class BatchSummaryFormatter:
    """Formats the outcome of one placement batch."""

    def format(self, outcome: BatchOutcome) -> str:
        if outcome.cancelled:
            return "Placement cancelled. No boxes were created."
        if not outcome.success:
            return f"Placement failed: {outcome.error_message}"

        lines = [
            "OPENING BOXES",
            "=" * 70,
            f"Intersections found: {outcome.intersections_found}",
            f"Boxes created:       {outcome.created_count}",
            f"Failed:              {outcome.failed_count}",
            f"Duplicates:          {len(outcome.duplicate_identities)}",
        ]
        if outcome.error_message:
            lines.append("")
            lines.append(outcome.error_message)

        failures = [result for result in outcome.results if result.error]
        if failures:
            lines.append("")
            lines.append("Failures:")
            lines.append("-" * 70)
            for result in failures:
                lines.append(f"  {result.record.identity_tag}: {result.error}")

        partial = [
            result
            for result in outcome.results
            if result.succeeded and result.failed_parameters
        ]
        if partial:
            lines.append("")
            lines.append("Parameters not written:")
            lines.append("-" * 70)
            for result in partial:
                names = ", ".join(result.failed_parameters)
                lines.append(f"  {result.instance_id}: {names}")

        return "\n".join(lines)


class DuplicateReportFormatter:
    """Lists boxes that already existed before the batch."""

    def format(self, outcome: BatchOutcome) -> str:
        if not outcome.has_duplicates:
            return ""

        lines = [
            "DUPLICATE OPENING BOXES",
            "=" * 70,
            "These clashes already had a box before this batch:",
            "",
        ]
        for identity in outcome.duplicate_identities:
            lines.append(f"  - {identity}")
        lines.append("")
        lines.append(
            f"{len(outcome.duplicate_identities)} duplicate(s). "
            "Delete the extra boxes manually."
        )
        return "\n".join(lines)
