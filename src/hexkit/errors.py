"""
hexkit Error Hierarchy
======================

This module defines the exception hierarchy for the hexkit package.
All exceptions inherit from HexError, allowing callers to catch every
decoding, assembly, or view error with a single except clause.

Exception Hierarchy
-------------------
HexError (base)
├── DecodeError - a single record line cannot be decoded
│   └── ChecksumError - record checksum mismatch (verification enabled)
├── HexFileError (file-level errors, carry line position)
│   ├── HexSyntaxError - empty line, missing ':', undecodable record
│   ├── MissingTerminatorError - no End Of File record
│   ├── UnsupportedRecordError - record type outside 00, 01, 04
│   └── ExtendedAddressPresentError - 32-bit image fed to a 16-bit view
└── InvalidRangeError - end address below start address

Positions
---------
File-level errors carry the 1-based position of the offending record
among non-comment lines. When the physical line number in the source is
known it is reported too, so messages look like:

    firmware.hex:12: error: record 10 cannot be decoded: ...
        :0500300002337A1E
    hint: byte count declares 5 payload bytes
"""

from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class HexError(Exception):
    """
    Base exception for all hexkit errors.

        try:
            image = HexFile.from_file("firmware.hex")
        except HexError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Record Decoding Exceptions
# =============================================================================

class DecodeError(HexError):
    """
    A single record line cannot be decoded.

    Raised by the record decoder when:
    - The line is shorter than the minimum record width
    - The line does not start with ':'
    - A fixed-width field contains non-hexadecimal characters
    - The declared byte count reads past the end of the line

    Attributes:
        line: The offending line text
    """

    def __init__(self, message: str, line: Optional[str] = None):
        self.message = message
        self.line = line
        super().__init__(message)


class ChecksumError(DecodeError):
    """
    Record checksum does not match its contents.

    Only raised when checksum verification is enabled in ParserConfig;
    by default the checksum byte is decoded but never checked.
    """

    def __init__(self, expected: int, actual: int, line: Optional[str] = None):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"checksum mismatch: expected {expected:02X}, got {actual:02X}",
            line=line,
        )


# =============================================================================
# File-Level Exceptions
# =============================================================================

class HexFileError(HexError):
    """
    Base exception for errors tied to a position in a HEX file.

    Attributes:
        message: The error description
        position: 1-based index among non-comment lines (optional)
        line_number: 1-based physical line number in the source (optional)
        source: Name of the input ("<input>" for in-memory text)
        source_line: The text of the offending line (optional)
        hint: A suggestion for fixing the error (optional)
    """

    def __init__(
        self,
        message: str,
        position: Optional[int] = None,
        line_number: Optional[int] = None,
        source: str = "<input>",
        source_line: Optional[str] = None,
        hint: Optional[str] = None,
    ):
        self.message = message
        self.position = position
        self.line_number = line_number
        self.source = source
        self.source_line = source_line
        self.hint = hint
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        parts = []

        if self.line_number is not None:
            parts.append(f"{self.source}:{self.line_number}: error: {self.message}")
        else:
            parts.append(f"{self.source}: error: {self.message}")

        if self.source_line is not None:
            parts.append(f"    {self.source_line}")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)


class HexSyntaxError(HexFileError):
    """
    File-level syntax error.

    Raised when a non-comment line is empty, has no ':' start marker, or
    cannot be decoded as a record. Decode failures are chained, so the
    underlying DecodeError is available as __cause__.
    """
    pass


class MissingTerminatorError(HexFileError):
    """No End Of File (type 01) record was found before input ran out."""

    def __init__(self, source: str = "<input>"):
        super().__init__(
            "there is no End Of File record",
            source=source,
            hint="a HEX image must end with ':00000001FF'",
        )


class UnsupportedRecordError(HexFileError):
    """
    The file contains a record type other than 00, 01 or 04.

    Checked only after the whole file has been decoded, so any syntax
    error earlier in the file is reported first.
    """

    def __init__(
        self,
        type_code: int,
        position: Optional[int] = None,
        line_number: Optional[int] = None,
        source: str = "<input>",
        source_line: Optional[str] = None,
    ):
        self.type_code = type_code
        super().__init__(
            f"unsupported record type {type_code:02X} at record {position}",
            position=position,
            line_number=line_number,
            source=source,
            source_line=source_line,
            hint="only record types 00, 01 and 04 are supported",
        )


class ExtendedAddressPresentError(HexFileError):
    """
    An Extended Linear Address record (type 04) was found where only
    16-bit images are accepted.
    """

    def __init__(self, position: int, source: str = "<input>",
                 source_line: Optional[str] = None):
        super().__init__(
            f"Extended Linear Address record (04) at record {position}",
            position=position,
            source=source,
            source_line=source_line,
            hint="use the segmented view for 32-bit images",
        )


# =============================================================================
# Address Range Exceptions
# =============================================================================

class InvalidRangeError(HexError):
    """
    Invalid inclusive address range.

    Raised when the end address is below the start address, or a bound
    falls outside the addressable space of the view being queried.
    """

    def __init__(self, start: int, end: int, message: str = ""):
        self.start = start
        self.end = end
        if not message:
            message = (
                f"invalid address range: end 0x{end:X} "
                f"is less than start 0x{start:X}"
            )
        super().__init__(message)
