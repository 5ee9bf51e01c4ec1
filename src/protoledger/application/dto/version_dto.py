"""Version history DTOs."""

from dataclasses import dataclass

from protoledger.domain.entities import VersionSummary


@dataclass
class VersionPage:
    """One page of version history, newest first."""

    items: list[VersionSummary]
    total: int
    page: int
    limit: int


@dataclass
class ComparisonSide:
    """Text representation of one side of a comparison."""

    version_number: int | str  # snapshot number or "current"
    text_blob: str | None


@dataclass
class VersionComparison:
    """Two text blobs for client-side diffing."""

    a: ComparisonSide
    b: ComparisonSide
