"""
Intel HEX Handling
==================

This module provides decoding of Intel HEX firmware images and
address-indexed views of their contents.

Overview
--------
- **decode_record**: Decode one record line into a HexRecord
- **assemble_file / HexFile**: Validate a whole file into ordered records
- **build_linear_view**: Address-ordered Data records of a 16-bit image
- **build_segmented_view**: Data records grouped by extended address
- **query_range**: Records within an inclusive 32-bit address range
- **Checksum utilities**: Calculate and verify record checksums

Quick Start
-----------
    >>> from hexkit.ihex import HexFile, build_segmented_view, query_range
    >>> image = HexFile.from_file("firmware.hex")
    >>> view = build_segmented_view(image)
    >>> for key, records in query_range(view, (0x1D001000, 0x1D031100)).items():
    ...     print(f"{key:08X}: {len(records)} records")

Supported Record Types
----------------------
- 00: Data
- 01: End Of File
- 04: Extended Linear Address
"""

# =============================================================================
# Public API Exports
# =============================================================================

from hexkit.ihex.records import (
    RecordType,
    HexRecord,
    decode_record,
    START_CODE,
    MIN_RECORD_LENGTH,
)

from hexkit.ihex.checksum import (
    calculate_record_checksum,
    verify_record_checksum,
)

from hexkit.ihex.parser import (
    HexFile,
    assemble_file,
    parse_hex,
    parse_hex_file,
)

from hexkit.ihex.views import (
    SegmentedView,
    AddressRange,
    build_linear_view,
    build_segmented_view,
    query_range,
    MAX_LOCAL_ADDRESS,
    MAX_ABSOLUTE_ADDRESS,
)

__all__ = [
    # Records
    "RecordType",
    "HexRecord",
    "decode_record",
    "START_CODE",
    "MIN_RECORD_LENGTH",
    # Checksum
    "calculate_record_checksum",
    "verify_record_checksum",
    # Assembler
    "HexFile",
    "assemble_file",
    "parse_hex",
    "parse_hex_file",
    # Views
    "SegmentedView",
    "AddressRange",
    "build_linear_view",
    "build_segmented_view",
    "query_range",
    "MAX_LOCAL_ADDRESS",
    "MAX_ABSOLUTE_ADDRESS",
]
