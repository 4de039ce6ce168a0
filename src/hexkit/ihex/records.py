"""
Intel HEX Record Definitions
============================

This module defines the record data structure and the decoder that turns
one line of an Intel HEX file into a HexRecord.

Record Format
-------------
Every record is a single line of ASCII hexadecimal text:

    :BBAAAATT[DD...]CC

    Offset  Width   Field
    ------  -----   -----
    0       1       Start code ':'
    1       2       Byte count (BB), number of payload bytes
    3       4       Address (AAAA), 16-bit local address, big-endian
    7       2       Record type (TT)
    9       2*BB    Payload (DD...)
    9+2*BB  2       Checksum (CC)

Record Types
------------
- 00: Data
- 01: End Of File
- 04: Extended Linear Address (upper 16 bits of a 32-bit address)

Any other type decodes as UNSUPPORTED. The decoder does not reject it;
the file assembler does, after the whole file has been read.

Reference
---------
- Intel Hexadecimal Object File Format Specification, Revision A
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Optional
import logging
import string

from hexkit.config import ParserConfig
from hexkit.errors import ChecksumError, DecodeError
from hexkit.ihex.checksum import calculate_record_checksum

logger = logging.getLogger(__name__)


START_CODE = ":"

# Start code + byte count + address + type + checksum
MIN_RECORD_LENGTH = 11

# Character offsets of the fixed-width fields
_COUNT_OFFSET = 1
_ADDRESS_OFFSET = 3
_TYPE_OFFSET = 7
_PAYLOAD_OFFSET = 9

_HEX_DIGITS = frozenset(string.hexdigits)


# =============================================================================
# Enumeration Types
# =============================================================================

class RecordType(IntEnum):
    """
    Supported record types.

    UNSUPPORTED stands for any type code outside the supported set; the
    raw code is kept on HexRecord.type_code.
    """
    DATA = 0x00
    EOF = 0x01
    EXTENDED_LINEAR_ADDRESS = 0x04
    UNSUPPORTED = 0xFF

    @classmethod
    def from_code(cls, code: int) -> "RecordType":
        """Map a record type field to a RecordType."""
        if code in (cls.DATA, cls.EOF, cls.EXTENDED_LINEAR_ADDRESS):
            return cls(code)
        return cls.UNSUPPORTED

    def get_description(self) -> str:
        """Get a human-readable name for the record type."""
        descriptions = {
            RecordType.DATA: "Data",
            RecordType.EOF: "End Of File",
            RecordType.EXTENDED_LINEAR_ADDRESS: "Extended Linear Address",
            RecordType.UNSUPPORTED: "Unsupported",
        }
        return descriptions[self]


# =============================================================================
# Record
# =============================================================================

@dataclass(frozen=True)
class HexRecord:
    """
    One decoded line of an Intel HEX file.

    Attributes:
        record_type: Decoded record type
        type_code: Raw record type field (differs from record_type only
            for unsupported records)
        address: 16-bit local address field
        payload_length: Byte count declared by the record header
        payload: Payload bytes, exactly payload_length long
        checksum: Trailing checksum byte (decoded, not verified)
        raw_text: Original line text
    """
    record_type: RecordType
    type_code: int
    address: int
    payload_length: int
    payload: bytes
    checksum: int
    raw_text: str = ""

    @property
    def is_data(self) -> bool:
        return self.record_type == RecordType.DATA

    @property
    def is_eof(self) -> bool:
        return self.record_type == RecordType.EOF

    @property
    def is_extended_address(self) -> bool:
        return self.record_type == RecordType.EXTENDED_LINEAR_ADDRESS

    @property
    def extended_address(self) -> int:
        """
        Upper 16 bits announced by an Extended Linear Address record.

        Raises:
            ValueError: If this is not an Extended Linear Address record
        """
        if not self.is_extended_address:
            raise ValueError(
                f"{self.record_type.get_description()} record has no extended address"
            )
        return int.from_bytes(self.payload, "big")

    @property
    def segment_key(self) -> int:
        """Segment base (extended address shifted into the upper 16 bits)."""
        return self.extended_address << 16

    @property
    def end_address(self) -> int:
        """Local address of the last payload byte (address for empty records)."""
        return self.address + max(self.payload_length - 1, 0)

    @property
    def data_hex(self) -> str:
        """Payload as uppercase hex text, as it appears in the file."""
        return self.payload.hex().upper()

    def calculate_checksum(self) -> int:
        """Checksum byte this record should carry."""
        return calculate_record_checksum(
            self.payload_length, self.address, self.type_code, self.payload
        )

    def has_valid_checksum(self) -> bool:
        return self.checksum == self.calculate_checksum()


# =============================================================================
# Record Decoder
# =============================================================================

def _parse_hex_field(line: str, offset: int, width: int, name: str) -> int:
    """Parse a fixed-width hexadecimal field, rejecting anything but hex digits."""
    text = line[offset:offset + width]
    if len(text) != width or not _HEX_DIGITS.issuperset(text):
        raise DecodeError(
            f"{name} field at offset {offset} is not {width} hex digits: {text!r}",
            line=line,
        )
    return int(text, 16)


def decode_record(line: str, config: Optional[ParserConfig] = None) -> HexRecord:
    """
    Decode one record line.

    Line terminators are stripped before decoding. The line must start
    with ':'; text after the checksum is ignored.

    Args:
        line: Record text, e.g. ':0300300002337A1E'
        config: Parser configuration (checksums verified only if
            config.verify_checksums is set)

    Returns:
        The decoded HexRecord

    Raises:
        DecodeError: If the line is truncated or contains invalid fields
        ChecksumError: If verification is enabled and the checksum is wrong

    Example:
        >>> record = decode_record(":0300300002337A1E")
        >>> record.record_type, hex(record.address), record.payload.hex()
        (<RecordType.DATA: 0>, '0x30', '02337a')
    """
    text = line.rstrip("\r\n")

    if not text.startswith(START_CODE):
        raise DecodeError(f"record does not start with {START_CODE!r}", line=text)

    if len(text) < MIN_RECORD_LENGTH:
        raise DecodeError(
            f"record too short: {len(text)} characters, minimum {MIN_RECORD_LENGTH}",
            line=text,
        )

    payload_length = _parse_hex_field(text, _COUNT_OFFSET, 2, "byte count")
    address = _parse_hex_field(text, _ADDRESS_OFFSET, 4, "address")
    type_code = _parse_hex_field(text, _TYPE_OFFSET, 2, "record type")

    checksum_offset = _PAYLOAD_OFFSET + 2 * payload_length
    if checksum_offset + 2 > len(text):
        raise DecodeError(
            f"byte count declares {payload_length} payload bytes but the record "
            f"has room for {max(len(text) - _PAYLOAD_OFFSET - 2, 0) // 2}",
            line=text,
        )

    payload_text = text[_PAYLOAD_OFFSET:checksum_offset]
    if not _HEX_DIGITS.issuperset(payload_text):
        raise DecodeError(f"payload is not hexadecimal: {payload_text!r}", line=text)
    payload = bytes.fromhex(payload_text)

    checksum = _parse_hex_field(text, checksum_offset, 2, "checksum")

    if checksum_offset + 2 < len(text):
        logger.debug(f"Ignoring trailing text after checksum: {text[checksum_offset + 2:]!r}")

    record_type = RecordType.from_code(type_code)

    if record_type == RecordType.EXTENDED_LINEAR_ADDRESS and payload_length != 2:
        raise DecodeError(
            f"Extended Linear Address record must carry 2 bytes, not {payload_length}",
            line=text,
        )

    record = HexRecord(
        record_type=record_type,
        type_code=type_code,
        address=address,
        payload_length=payload_length,
        payload=payload,
        checksum=checksum,
        raw_text=text,
    )

    if config is not None and config.verify_checksums:
        expected = record.calculate_checksum()
        if expected != checksum:
            raise ChecksumError(expected, checksum, line=text)

    return record
