"""Email value object"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Email:
    """Email address, compared exactly as stored."""

    value: str

    def __post_init__(self):
        if not isinstance(self.value, str) or "@" not in self.value.strip():
            raise ValueError("Invalid email address")

    def __str__(self) -> str:
        return self.value
