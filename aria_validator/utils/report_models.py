# Copyright 2025 Amazon.com, Inc. or its affiliates.
# SPDX-License-Identifier: Apache-2.0

"""
Pydantic models for ARIA validation reports.
"""

from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class Level(str, Enum):
    """Enum for finding severity levels."""

    WARN = "warn"
    ERROR = "error"


class FindingReport(BaseModel):
    """Serializable form of a single finding."""

    model_config = ConfigDict(use_enum_values=True)

    key: str
    level: Union[Level, str]
    message: str
    role: Optional[str] = None
    roles: List[str] = Field(default_factory=list)
    attr: Optional[str] = None
    id: Optional[str] = None
    tag: Optional[str] = None
    elements: List[str] = Field(default_factory=list)
    spec_links: List[str] = Field(default_factory=list)


class CollapsedFinding(BaseModel):
    """A distinct message and how many times it was repeated."""

    level: Union[Level, str]
    message: str
    count: int = 1

    model_config = ConfigDict(use_enum_values=True)


class SummaryReport(BaseModel):
    """Serializable form of the summary for one document and its frames."""

    url: Optional[str] = None
    passed: bool = True
    frames_total: int = 0
    frames_checked: int = 0
    roles: List[str] = Field(default_factory=list)
    errors: List[FindingReport] = Field(default_factory=list)
    warnings: List[FindingReport] = Field(default_factory=list)
    counts: Dict[str, int] = Field(
        default_factory=lambda: {Level.ERROR.value: 0, Level.WARN.value: 0}
    )
    frames: List["SummaryReport"] = Field(default_factory=list)
    generated_at: datetime = Field(default_factory=datetime.now)


SummaryReport.model_rebuild()
