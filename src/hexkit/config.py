"""
hexkit Configuration
====================

Parser configuration. Values come from:
- Default values (defined here)
- Environment variables (ParserConfig.from_env)
- Explicit construction by the caller

The defaults accept the widest range of real-world files: comment lines
are skipped and record checksums are decoded but not verified. Strict
mode disables comment skipping, so every line must be a record.
"""

from dataclasses import dataclass, field
from typing import Optional
import os


DEFAULT_COMMENT_MARKERS: tuple[str, ...] = (";", "//")

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass
class ParserConfig:
    """
    Configuration for HEX decoding and assembly.

    Attributes:
        comment_markers: Line prefixes that mark a comment line
        allow_comments: Skip comment lines (False = strict mode)
        verify_checksums: Reject records whose checksum byte does not match
    """
    comment_markers: tuple[str, ...] = field(
        default_factory=lambda: DEFAULT_COMMENT_MARKERS
    )
    allow_comments: bool = True
    verify_checksums: bool = False

    def is_comment(self, line: str) -> bool:
        """Return True if the line should be skipped as a comment."""
        if not self.allow_comments:
            return False
        return any(line.startswith(marker) for marker in self.comment_markers)

    @classmethod
    def strict(cls) -> "ParserConfig":
        """Configuration with comment skipping turned off."""
        return cls(allow_comments=False)

    @classmethod
    def from_env(cls) -> "ParserConfig":
        """
        Create ParserConfig from environment variables.

        Environment variables (all optional):
            HEXKIT_VERIFY_CHECKSUMS: Verify record checksums (1/0, true/false)
            HEXKIT_STRICT: Disable comment skipping (1/0, true/false)
            HEXKIT_COMMENT_MARKERS: Comma-separated comment prefixes

        Returns:
            ParserConfig with values from environment variables
        """
        config = cls()

        if (verify := _env_flag("HEXKIT_VERIFY_CHECKSUMS")) is not None:
            config.verify_checksums = verify

        if (strict := _env_flag("HEXKIT_STRICT")) is not None:
            config.allow_comments = not strict

        if markers := os.environ.get("HEXKIT_COMMENT_MARKERS"):
            parsed = tuple(m.strip() for m in markers.split(",") if m.strip())
            if parsed:
                config.comment_markers = parsed

        return config


def _env_flag(name: str) -> Optional[bool]:
    """Read a boolean environment variable, ignoring invalid values."""
    value = os.environ.get(name)
    if value is None:
        return None
    value = value.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    return None


# =============================================================================
# Default Configuration
# =============================================================================

_default_config: Optional[ParserConfig] = None


def get_default_config() -> ParserConfig:
    """
    Get the default parser configuration.

    Created from environment variables on first use.
    """
    global _default_config
    if _default_config is None:
        _default_config = ParserConfig.from_env()
    return _default_config


def set_default_config(config: Optional[ParserConfig]) -> None:
    """
    Set the default parser configuration.

    Passing None resets it, so the next get_default_config() call reads
    the environment again.
    """
    global _default_config
    _default_config = config
