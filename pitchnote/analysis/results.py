"""Result types for edit operations that can be refused."""

from dataclasses import dataclass, field


@dataclass
class EditError:
    """Represents a reason an edit was refused."""

    code: str
    message: str


@dataclass
class EditResult:
    """
    Result of an edit check.

    Attributes:
        is_valid: Whether the check passed.
        errors: List of errors (empty if valid).
    """

    is_valid: bool
    errors: list[EditError] = field(default_factory=list)

    @classmethod
    def ok(cls) -> "EditResult":
        return cls(is_valid=True)

    @classmethod
    def fail(cls, code: str, message: str) -> "EditResult":
        return cls(is_valid=False, errors=[EditError(code=code, message=message)])
