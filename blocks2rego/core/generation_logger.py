"""Generation logger for Blocks2Rego

Tracks decisions taken while generating code (helpers emitted, names
changed, defaults substituted, blocks skipped) and provides summaries.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional


class GenerationKind(Enum):
    """Kinds of recorded generation events"""
    HELPER = "helper_function"
    PROCEDURE = "procedure"
    RENAME = "rename"
    DEFAULT_VALUE = "default_value"
    SKIPPED_BLOCK = "skipped_block"


@dataclass
class GenerationRecord:
    """Record of a single generation event"""
    kind: GenerationKind
    block_id: Optional[str]
    subject: str
    detail: str


class GenerationLogger:
    """Logs generation decisions and provides summaries"""

    def __init__(self) -> None:
        self.records: List[GenerationRecord] = []
        self.warnings: List[str] = []

    def log(self,
            kind: GenerationKind,
            subject: str,
            detail: str = "",
            block_id: Optional[str] = None) -> None:
        """Log a generation event

        Args:
            kind: Kind of event
            subject: Name the event is about (helper, variable, input slot)
            detail: Human readable explanation
            block_id: Id of the block being generated
        """
        self.records.append(GenerationRecord(
            kind=kind,
            block_id=block_id,
            subject=subject,
            detail=detail,
        ))

    def log_warning(self, message: str) -> None:
        """Log a warning message"""
        self.warnings.append(message)

    def get_records(self, kind: GenerationKind) -> List[GenerationRecord]:
        """Get all records of one kind"""
        return [r for r in self.records if r.kind == kind]

    def get_summary(self) -> Dict:
        """Get summary statistics

        Returns:
            Dictionary with event counts
        """
        by_kind: Dict[GenerationKind, int] = {}
        for record in self.records:
            by_kind[record.kind] = by_kind.get(record.kind, 0) + 1

        return {
            "total_events": len(self.records),
            "events_by_kind": by_kind,
            "total_warnings": len(self.warnings),
        }

    def print_summary(self) -> str:
        """Generate formatted summary string"""
        summary = self.get_summary()
        lines = ["=== Generation Summary ==="]
        lines.append(f"Total events: {summary['total_events']}")

        if summary['events_by_kind']:
            lines.append("")
            lines.append("Events by kind:")
            for kind, n in summary['events_by_kind'].items():
                lines.append(f"  {kind.value}: {n}")

        renames = self.get_records(GenerationKind.RENAME)
        if renames:
            lines.append("")
            lines.append("Renamed identifiers:")
            for record in renames:
                lines.append(f"  {record.subject} -> {record.detail}")

        lines.append("")
        lines.append(f"Warnings: {summary['total_warnings']}")
        for warning in self.warnings:
            lines.append(f"  {warning}")

        return "\n".join(lines)

    def clear(self) -> None:
        """Clear all logs"""
        self.records.clear()
        self.warnings.clear()
