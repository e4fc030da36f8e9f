"""Settings passed explicitly to diff and patch operations."""

from dataclasses import dataclass, replace


@dataclass(frozen=True)
class DiffSettings:
    """Settings for unified diff generation and parsing."""

    # Number of unchanged lines shown around each change
    context_size: int = 3

    def __post_init__(self) -> None:
        if self.context_size < 0:
            raise ValueError(f"context_size must not be negative: {self.context_size}")

    def with_context_size(self, context_size: int) -> 'DiffSettings':
        """
        Get a copy of these settings with a different context size.

        Args:
            context_size: New number of context lines.  Negative values are ignored.

        Returns:
            Updated settings
        """
        if context_size < 0:
            return self

        return replace(self, context_size=context_size)


@dataclass(frozen=True)
class PatchSettings:
    """Fuzz policy for patch parsing."""

    # Added to the fuzz when "*** End of File" context is found away from the end of the file
    eof_fuzz_penalty: int = 10000

    # Maximum accumulated fuzz accepted, or None for no limit
    max_fuzz: int | None = None

    def __post_init__(self) -> None:
        if self.eof_fuzz_penalty < 0:
            raise ValueError(f"eof_fuzz_penalty must not be negative: {self.eof_fuzz_penalty}")

        if self.max_fuzz is not None and self.max_fuzz < 0:
            raise ValueError(f"max_fuzz must not be negative: {self.max_fuzz}")
