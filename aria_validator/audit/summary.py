# Copyright 2025 Amazon.com, Inc. or its affiliates.
# SPDX-License-Identifier: Apache-2.0

"""
Aggregation of findings for a document and the frames it contains.
"""

from collections import Counter
from typing import Any, Dict, Iterable, List, Optional, Union

from aria_validator.audit.finding import Finding
from aria_validator.utils.logging_helper import setup_logger
from aria_validator.utils.report_models import CollapsedFinding, Level, SummaryReport

logger = setup_logger(__name__)


class Summary:
    """
    Findings, observed roles and frame counters for one document.

    Merging a child summary into a parent concatenates the findings, unions
    the roles and sums the frame counters.
    """

    def __init__(self, url: Optional[str] = None):
        self.url = url
        self.frames_total = 0
        self.frames_checked = 0
        self.frames: List["Summary"] = []
        self._results: List[Finding] = []
        self._roles: Dict[str, bool] = {}

    def add(self, findings: Union[Finding, Iterable[Finding], "Summary", None]) -> None:
        """Add a finding, several findings, or the findings of another summary."""
        if findings is None:
            return
        if isinstance(findings, Summary):
            findings = findings.get()
        elif isinstance(findings, Finding):
            findings = [findings]
        self._results.extend(findings)

    def add_roles(self, role: Union[str, Iterable[str], None]) -> None:
        if not role:
            return
        if isinstance(role, str):
            role = [role]
        for name in role:
            self._roles[name] = True

    def merge(self, summary: Optional["Summary"]) -> None:
        """Merge another summary into this one."""
        if summary is None:
            logger.warning("Tried to merge null summary")
            return
        self.frames_total += summary.frames_total
        self.frames_checked += summary.frames_checked
        self.add(summary)
        self.add_roles(summary.roles)

    def get(self, level: Optional[Level] = None) -> List[Finding]:
        """
        Retrieve the findings in this summary.

        Args:
            level: Only return findings at this severity level

        Returns:
            A copy of the findings, safe to modify
        """
        if level is None:
            return list(self._results)
        return [finding for finding in self._results if finding.level == level]

    @property
    def roles(self) -> List[str]:
        """Distinct roles observed, in the order they were first seen."""
        return list(self._roles)

    @property
    def errors(self) -> List[Finding]:
        return self.get(Level.ERROR)

    @property
    def warnings(self) -> List[Finding]:
        return self.get(Level.WARN)

    @property
    def passed(self) -> bool:
        return not self.errors

    def collapse(self, level: Optional[Level] = None) -> List[CollapsedFinding]:
        """Group identical messages, sorted by message, with a repeat count."""
        counts = Counter((finding.level, finding.message) for finding in self.get(level))
        return [
            CollapsedFinding(level=finding_level, message=message, count=count)
            for (finding_level, message), count in sorted(
                counts.items(), key=lambda item: (item[0][1], item[0][0].value)
            )
        ]

    def flatten(self) -> List["Summary"]:
        """This summary followed by the summaries of every checked frame, depth first."""
        result = [self]
        for frame in self.frames:
            result.extend(frame.flatten())
        return result

    def to_report(self) -> SummaryReport:
        errors = [finding.to_report() for finding in self.errors]
        warnings = [finding.to_report() for finding in self.warnings]
        return SummaryReport(
            url=self.url,
            passed=not errors,
            frames_total=self.frames_total,
            frames_checked=self.frames_checked,
            roles=self.roles,
            errors=errors,
            warnings=warnings,
            counts={Level.ERROR.value: len(errors), Level.WARN.value: len(warnings)},
            frames=[frame.to_report() for frame in self.frames],
        )

    def to_dict(self) -> Dict[str, Any]:
        return self.to_report().model_dump(mode="json")

    def __repr__(self) -> str:
        return (
            f"Summary(url={self.url!r}, errors={len(self.errors)}, "
            f"warnings={len(self.warnings)}, roles={self.roles!r})"
        )
