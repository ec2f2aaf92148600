# Copyright 2025 Amazon.com, Inc. or its affiliates.
# SPDX-License-Identifier: Apache-2.0

"""
Diagnostics channel for internal invariant violations.

Conditions that should never occur while checking a document (for example an
``aria-owns`` id that resolves to no owner at all) are not conformance findings.
They are recorded here, logged, and optionally raised in strict mode so tests can
assert that these paths are never taken.
"""

import threading
from dataclasses import dataclass, field
from typing import Any, Dict, List

from aria_validator.utils.logging_helper import setup_logger, InvariantViolationError

logger = setup_logger(__name__)


@dataclass(frozen=True)
class InvariantViolation:
    """A single recorded invariant violation."""

    message: str
    context: Dict[str, Any] = field(default_factory=dict)


class DiagnosticsChannel:
    """Collects invariant violations separately from conformance findings."""

    def __init__(self, strict: bool = False):
        self.strict = strict
        self._violations: List[InvariantViolation] = []
        self._lock = threading.Lock()

    def report(self, message: str, **context: Any) -> InvariantViolation:
        """
        Record an invariant violation.

        Args:
            message: What went wrong
            **context: Extra values that help to identify the offending input

        Returns:
            The recorded violation

        Raises:
            InvariantViolationError: When the channel is in strict mode
        """
        violation = InvariantViolation(message, dict(context))
        with self._lock:
            self._violations.append(violation)
        logger.error("Invariant violation: %s %s", message, context or "")
        if self.strict:
            raise InvariantViolationError(message)
        return violation

    @property
    def violations(self) -> List[InvariantViolation]:
        with self._lock:
            return list(self._violations)

    def clear(self) -> None:
        with self._lock:
            self._violations.clear()


# Global instance shared by the engine
diagnostics = DiagnosticsChannel()
