from __future__ import annotations

from dataclasses import dataclass, field

"""ValidationResult: accumulated errors and warnings of a validation pass."""

__all__ = [
    "ValidationResult",
]


@dataclass
class ValidationResult:
    is_valid: bool = True
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @staticmethod
    def success() -> ValidationResult:
        return ValidationResult()

    @staticmethod
    def failure(error: str) -> ValidationResult:
        result = ValidationResult()
        result.add_error(error)
        return result

    def add_error(self, error: str | None) -> None:
        """Record an error and mark the result invalid. Blank text is ignored."""
        if error is None or not error.strip():
            return
        self.errors.append(error)
        self.is_valid = False

    def add_warning(self, warning: str | None) -> None:
        if warning is None or not warning.strip():
            return
        self.warnings.append(warning)

    def merge(self, other: ValidationResult) -> ValidationResult:
        """Fold ``other`` into this result (union of both lists) and return self."""
        self.errors.extend(other.errors)
        self.warnings.extend(other.warnings)
        self.is_valid = self.is_valid and other.is_valid
        return self

    @property
    def has_warnings(self) -> bool:
        return len(self.warnings) > 0

    @property
    def error_message(self) -> str:
        return "; ".join(self.errors)

    @property
    def warning_message(self) -> str:
        return "; ".join(self.warnings)
