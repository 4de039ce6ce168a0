"""
Intel HEX File Assembler
========================

This module turns the lines of an Intel HEX file into a validated,
ordered sequence of records (a HexFile).

File Rules
----------
- Lines starting with a comment marker (';' or '//') are skipped
- Empty lines are rejected
- Every other line must contain the start code ':'; anything before the
  first ':' is discarded
- Reading stops at the first End Of File record; later lines are ignored
- A file without an End Of File record is rejected
- Unsupported record types are rejected after the whole file is read,
  so a syntax error earlier in the file is always reported first

Positions in error messages count non-comment lines, starting at 1.

Usage Examples
--------------
Reading a file:
    >>> from hexkit.ihex import HexFile
    >>> image = HexFile.from_file("firmware.hex")
    >>> print(f"{len(image)} records, 32-bit: {image.has_extended_addressing()}")

Assembling lines already in memory:
    >>> from hexkit.ihex import assemble_file
    >>> image = assemble_file([":0300300002337A1E", ":00000001FF"])
    >>> image[0].payload.hex()
    '02337a'
"""

from dataclasses import dataclass
from pathlib import Path
from typing import IO, Iterable, Iterator, Optional, Union
import io
import logging

from hexkit.config import ParserConfig, get_default_config
from hexkit.errors import (
    DecodeError,
    HexSyntaxError,
    MissingTerminatorError,
    UnsupportedRecordError,
)
from hexkit.ihex.records import START_CODE, HexRecord, RecordType, decode_record

# Logger for this module
logger = logging.getLogger(__name__)


# =============================================================================
# Assembled Sequence
# =============================================================================

@dataclass(frozen=True)
class HexFile:
    """
    Validated records of one Intel HEX file, in file order.

    The last record is the End Of File record and no record has an
    unsupported type. Instances are immutable and behave as a read-only
    sequence of HexRecord.

    Attributes:
        records: Records in file order, ending with the EOF record
        source: Name of the input used in diagnostics
        line_numbers: Physical line number of each record in the source
    """
    records: tuple[HexRecord, ...]
    source: str = "<input>"
    line_numbers: tuple[int, ...] = ()

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[HexRecord]:
        return iter(self.records)

    def __getitem__(self, index: int) -> HexRecord:
        return self.records[index]

    # =========================================================================
    # Constructors
    # =========================================================================

    @classmethod
    def from_lines(
        cls,
        lines: Iterable[str],
        config: Optional[ParserConfig] = None,
        source: str = "<input>",
    ) -> "HexFile":
        """Assemble a HexFile from lines of text."""
        return assemble_file(lines, config=config, source=source)

    @classmethod
    def from_text(
        cls,
        text: str,
        config: Optional[ParserConfig] = None,
        source: str = "<input>",
    ) -> "HexFile":
        """
        Assemble a HexFile from the full text of a file.

        Example:
            >>> image = HexFile.from_text(":0300300002337A1E\\n:00000001FF\\n")
            >>> len(image)
            2
        """
        # Only CR, LF and CRLF end a line; other control characters stay in
        # the record text
        lines = io.StringIO(text, newline=None)
        return assemble_file(lines, config=config, source=source)

    @classmethod
    def from_stream(
        cls,
        stream: Union[IO[str], IO[bytes]],
        config: Optional[ParserConfig] = None,
        source: Optional[str] = None,
    ) -> "HexFile":
        """
        Assemble a HexFile from an open text or binary stream.

        Binary streams are decoded as ASCII. The stream is read to the end
        but not closed.

        Args:
            stream: Open stream positioned at the start of the HEX text
            config: Parser configuration
            source: Name for diagnostics (defaults to the stream's name)
        """
        if source is None:
            source = str(getattr(stream, "name", "<stream>"))

        data = stream.read()
        if isinstance(data, bytes):
            try:
                data = data.decode("ascii")
            except UnicodeDecodeError as e:
                raise HexSyntaxError(
                    f"input is not ASCII text (byte 0x{data[e.start]:02X} "
                    f"at offset {e.start})",
                    source=source,
                ) from e

        return cls.from_text(data, config=config, source=source)

    @classmethod
    def from_file(
        cls,
        filepath: Union[str, Path],
        config: Optional[ParserConfig] = None,
    ) -> "HexFile":
        """
        Read and assemble a HEX file from disk.

        Raises:
            FileNotFoundError: If the file doesn't exist
            HexFileError: If the file is not a valid HEX image
        """
        filepath = Path(filepath)
        with filepath.open("rb") as stream:
            return cls.from_stream(stream, config=config, source=str(filepath))

    # =========================================================================
    # Queries
    # =========================================================================

    def data_records(self) -> list[HexRecord]:
        """Data records in file order."""
        return [record for record in self.records if record.is_data]

    def has_extended_addressing(self) -> bool:
        """True if any Extended Linear Address record is present."""
        return any(record.is_extended_address for record in self.records)

    def get_line_number(self, index: int) -> Optional[int]:
        """Physical source line of the record at index, if known."""
        if 0 <= index < len(self.line_numbers):
            return self.line_numbers[index]
        return None

    def get_info(self) -> dict:
        """
        Get summary information about the image.

        Returns:
            Dictionary with record counts and payload size
        """
        data = self.data_records()
        return {
            "source": self.source,
            "total_records": len(self.records),
            "data_records": len(data),
            "extended_address_records": sum(
                1 for record in self.records if record.is_extended_address
            ),
            "payload_bytes": sum(record.payload_length for record in data),
            "extended_addressing": self.has_extended_addressing(),
        }


# =============================================================================
# Assembler
# =============================================================================

def assemble_file(
    lines: Iterable[str],
    config: Optional[ParserConfig] = None,
    source: str = "<input>",
) -> HexFile:
    """
    Decode and validate the lines of a HEX file.

    Args:
        lines: Lines of the file, already split (terminators are stripped)
        config: Parser configuration (defaults to get_default_config())
        source: Name of the input used in diagnostics

    Returns:
        A HexFile with the records in file order

    Raises:
        HexSyntaxError: Empty line, missing ':', or undecodable record
        MissingTerminatorError: No End Of File record
        UnsupportedRecordError: Record type other than 00, 01 or 04
    """
    if config is None:
        config = get_default_config()

    records: list[HexRecord] = []
    line_numbers: list[int] = []
    found_eof = False

    for line_number, line in enumerate(lines, start=1):
        line = line.rstrip("\r\n")
        position = len(records) + 1

        if not line:
            raise HexSyntaxError(
                f"empty line at record {position}",
                position=position,
                line_number=line_number,
                source=source,
            )

        if config.is_comment(line):
            logger.debug(f"Skipping comment at line {line_number}")
            continue

        start = line.find(START_CODE)
        if start < 0:
            raise HexSyntaxError(
                f"record {position} does not contain start code {START_CODE!r}",
                position=position,
                line_number=line_number,
                source=source,
                source_line=line,
            )

        try:
            record = decode_record(line[start:], config)
        except DecodeError as e:
            raise HexSyntaxError(
                f"record {position} cannot be decoded: {e.message}",
                position=position,
                line_number=line_number,
                source=source,
                source_line=line,
            ) from e

        records.append(record)
        line_numbers.append(line_number)

        if record.record_type == RecordType.EOF:
            found_eof = True
            logger.debug(f"End Of File record at line {line_number}")
            break

    if not found_eof:
        raise MissingTerminatorError(source=source)

    for index, record in enumerate(records):
        if record.record_type == RecordType.UNSUPPORTED:
            raise UnsupportedRecordError(
                record.type_code,
                position=index + 1,
                line_number=line_numbers[index],
                source=source,
                source_line=record.raw_text,
            )

    logger.info(f"Assembled {len(records)} records from {source}")
    return HexFile(
        records=tuple(records),
        source=source,
        line_numbers=tuple(line_numbers),
    )


# =============================================================================
# Convenience Functions
# =============================================================================

def parse_hex(text: str, config: Optional[ParserConfig] = None) -> HexFile:
    """Assemble a HexFile from in-memory text."""
    return HexFile.from_text(text, config=config)


def parse_hex_file(
    filepath: Union[str, Path], config: Optional[ParserConfig] = None
) -> HexFile:
    """Read and assemble a HEX file from disk."""
    return HexFile.from_file(filepath, config=config)
