"""
Intel HEX Record Checksums
==========================

Every record ends with a one-byte checksum. It is the two's complement
of the low byte of the sum of all preceding record bytes:

    byte count + address high + address low + record type + payload bytes

Adding the checksum to that sum therefore gives 0x00 (mod 256).

The decoder does not verify checksums unless ParserConfig.verify_checksums
is set, so files produced by tools that write placeholder checksums still
load. The CLI `validate --verify-checksums` command reports mismatches.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from hexkit.ihex.records import HexRecord


def calculate_record_checksum(
    payload_length: int, address: int, type_code: int, payload: bytes
) -> int:
    """
    Calculate the checksum byte for a record.

    Args:
        payload_length: Declared byte count
        address: 16-bit local address
        type_code: Record type field
        payload: Payload bytes

    Returns:
        Checksum byte (0-255)

    Example:
        >>> calculate_record_checksum(0, 0x0000, 0x01, b"")
        255
        >>> calculate_record_checksum(2, 0x0000, 0x04, bytes([0x00, 0x12]))
        232
    """
    total = payload_length + (address >> 8) + (address & 0xFF) + type_code
    total += sum(payload)
    return (-total) & 0xFF


def verify_record_checksum(record: "HexRecord") -> bool:
    """Return True if the record's stored checksum matches its contents."""
    return record.checksum == calculate_record_checksum(
        record.payload_length, record.address, record.type_code, record.payload
    )
