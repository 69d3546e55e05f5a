"""Filename derivation for dashboard backup files."""

from typing import Optional

from grafanabackup.constants import (
    BACKUP_FILE_SUFFIX,
    DEFAULT_FILENAME_RULES,
    FILENAME_RULES,
    UNTITLED_DASHBOARD,
)
from grafanabackup.errors import ValidationError


class FilenameSanitizer:
    """Replaces each configured illegal character with an underscore."""

    REPLACEMENT = "_"

    def __init__(self, illegal_chars: str):
        self.illegal_chars = frozenset(illegal_chars)

    @classmethod
    def from_rules(cls, rules: str = DEFAULT_FILENAME_RULES, illegal_chars: Optional[str] = None):
        if illegal_chars is not None:
            return cls(illegal_chars)
        if rules not in FILENAME_RULES:
            supported = ", ".join(sorted(FILENAME_RULES))
            raise ValidationError(f"Unknown filename rules '{rules}'. Supported: {supported}")
        return cls(FILENAME_RULES[rules])

    def sanitize(self, name: str) -> str:
        return "".join(self.REPLACEMENT if char in self.illegal_chars else char for char in name)

    def backup_filename(self, title: Optional[str]) -> str:
        return f"{self.sanitize(title or UNTITLED_DASHBOARD)}{BACKUP_FILE_SUFFIX}"
