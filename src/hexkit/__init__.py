"""
hexkit - Intel HEX Firmware Image Toolkit
=========================================

This package decodes Intel HEX firmware images into structured records,
validates them, and reorganizes them by memory address for tools that
inspect, segment, or slice an image before writing it to a device.

Main Components
---------------
- **ihex**: Record decoder, file assembler, linear and segmented views,
  inclusive address-range queries
- **config**: Parser configuration (comment handling, checksum checks)
- **cli**: The `hexkit` command-line tool

Quick Start
-----------
Read a 16-bit image:
    >>> from hexkit import HexFile, build_linear_view
    >>> image = HexFile.from_file("boot.hex")
    >>> for record in build_linear_view(image):
    ...     print(f"{record.address:04X} {record.data_hex}")

Slice a 32-bit image:
    >>> from hexkit import HexFile, build_segmented_view, query_range
    >>> view = build_segmented_view(HexFile.from_file("app.hex"))
    >>> part = query_range(view, (0x1D001000, 0x1D031100))

Or use the command-line tool:
    $ hexkit segments app.hex
    $ hexkit range app.hex 0x1D001000 0x1D031100

Version History
---------------
1.0.0 - Initial release with decoder, views and range queries
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from hexkit.config import ParserConfig, get_default_config, set_default_config
from hexkit.errors import (
    HexError,
    DecodeError,
    ChecksumError,
    HexFileError,
    HexSyntaxError,
    MissingTerminatorError,
    UnsupportedRecordError,
    ExtendedAddressPresentError,
    InvalidRangeError,
)
from hexkit.ihex import (
    RecordType,
    HexRecord,
    HexFile,
    SegmentedView,
    decode_record,
    assemble_file,
    parse_hex,
    parse_hex_file,
    build_linear_view,
    build_segmented_view,
    query_range,
    calculate_record_checksum,
    verify_record_checksum,
)

__all__ = [
    # Version info
    "__version__",
    # Configuration
    "ParserConfig",
    "get_default_config",
    "set_default_config",
    # Exception hierarchy
    "HexError",
    "DecodeError",
    "ChecksumError",
    "HexFileError",
    "HexSyntaxError",
    "MissingTerminatorError",
    "UnsupportedRecordError",
    "ExtendedAddressPresentError",
    "InvalidRangeError",
    # Records and views
    "RecordType",
    "HexRecord",
    "HexFile",
    "SegmentedView",
    "decode_record",
    "assemble_file",
    "parse_hex",
    "parse_hex_file",
    "build_linear_view",
    "build_segmented_view",
    "query_range",
    "calculate_record_checksum",
    "verify_record_checksum",
]
