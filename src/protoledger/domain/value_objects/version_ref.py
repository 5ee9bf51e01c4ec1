"""Reference to a snapshot version number or to the live document."""

from dataclasses import dataclass

CURRENT = "current"


@dataclass(frozen=True)
class VersionRef:
    """Either a snapshot version number or the document's current state."""

    number: int | None = None

    @property
    def is_current(self) -> bool:
        return self.number is None

    @classmethod
    def current(cls) -> "VersionRef":
        return cls(None)

    @classmethod
    def parse(cls, raw: str | int) -> "VersionRef":
        """Parse ``"current"`` or a positive version number."""
        if isinstance(raw, str) and raw.strip().lower() == CURRENT:
            return cls.current()
        try:
            number = int(raw)
        except (TypeError, ValueError):
            raise ValueError(f"Invalid version reference: {raw!r}") from None
        if number < 1:
            raise ValueError(f"Invalid version reference: {raw!r}")
        return cls(number)

    def to_json(self) -> int | str:
        return CURRENT if self.number is None else self.number
