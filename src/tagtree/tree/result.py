"""Parse result object: either a tree or the error that prevented one."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from tagtree.shared import (
    DiagnosticEntry,
    DiagnosticSeverity,
    PerformanceMetrics,
    TagTreeError,
)
from tagtree.tree.node import Node


@dataclass
class ParseResult:
    """Outcome of ``parse_text`` / ``parse_file``.

    On success ``root`` holds the synthetic document node and ``error`` is
    None. On failure ``root`` is None (no partial tree is ever returned) and
    ``error`` holds the exception that stopped the parse.
    """

    root: Optional[Node] = None
    success: bool = True
    error: Optional[TagTreeError] = None

    diagnostics: List[DiagnosticEntry] = field(default_factory=list)
    performance: PerformanceMetrics = field(default_factory=PerformanceMetrics)

    source: Optional[str] = None
    correlation_id: Optional[str] = None

    @property
    def element_count(self) -> int:
        """Number of elements in the tree, not counting the synthetic root."""
        if self.root is None:
            return 0
        return sum(1 for _ in self.root.iter()) - 1

    @property
    def attribute_count(self) -> int:
        if self.root is None:
            return 0
        return sum(len(node.attributes) for node in self.root.iter())

    @property
    def processing_time_ms(self) -> float:
        return self.performance.processing_time_ms

    def unwrap(self) -> Node:
        """Return the tree, or raise the error that prevented it."""
        if self.root is not None:
            return self.root
        if self.error is not None:
            raise self.error
        raise TagTreeError("Parse result holds no tree")

    def release_root(self) -> Optional[Node]:
        """Hand the tree over to the caller and forget it here."""
        root, self.root = self.root, None
        return root

    def add_diagnostic(
        self,
        severity: DiagnosticSeverity,
        message: str,
        component: str,
        position: Optional[Dict[str, int]] = None,
        details: Optional[Dict[str, Any]] = None
    ) -> None:
        """Add diagnostic entry to result."""
        self.diagnostics.append(
            DiagnosticEntry(
                severity=severity,
                message=message,
                component=component,
                position=position,
                details=details,
                correlation_id=self.correlation_id,
            )
        )

    def get_diagnostics_by_severity(
        self,
        severity: DiagnosticSeverity
    ) -> List[DiagnosticEntry]:
        return [diag for diag in self.diagnostics if diag.severity == severity]

    def has_errors(self) -> bool:
        """Check if result contains any error diagnostics."""
        return any(
            diag.severity in (DiagnosticSeverity.ERROR, DiagnosticSeverity.CRITICAL)
            for diag in self.diagnostics
        )

    def has_warnings(self) -> bool:
        return any(
            diag.severity == DiagnosticSeverity.WARNING for diag in self.diagnostics
        )

    def summary(self) -> Dict[str, Any]:
        """Summary statistics suitable for JSON output."""
        summary: Dict[str, Any] = {
            "success": self.success,
            "element_count": self.element_count,
            "attribute_count": self.attribute_count,
            "performance": self.performance.to_dict(),
            "diagnostics": [diag.to_dict() for diag in self.diagnostics],
        }
        if self.source is not None:
            summary["source"] = self.source
        if self.error is not None:
            summary["error"] = str(self.error)
        return summary
