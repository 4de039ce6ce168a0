"""
Address-Indexed Views
=====================

This module reorganizes an assembled HexFile by memory address.

Linear View (16-bit)
--------------------
For images without Extended Linear Address records: the Data records
sorted by local address, optionally restricted to an inclusive range.
A 32-bit image is rejected rather than silently flattened.

Segmented View (32-bit)
-----------------------
Each Extended Linear Address record (type 04) announces a segment whose
base is its 16-bit payload shifted into the upper half of the address:

    segment key = extended address << 16
    absolute address = segment key + local address

Data records belong to the segment announced most recently (segment 0
before the first type 04 record). The view maps each segment key, in
ascending order, to its Data records sorted by local address. Segments
that are announced but never populated appear with no records.

Range Query
-----------
query_range() selects the Data records whose absolute address lies in
an inclusive range. Only a record's start address is compared, and
segments left without records are omitted from the result.

Example:
    >>> view = build_segmented_view(HexFile.from_file("firmware.hex"))
    >>> for key, records in query_range(view, (0x1D001000, 0x1D031100)).items():
    ...     print(f"{key:08X}: {len(records)} records")
"""

from collections.abc import Mapping
from typing import Iterator, Optional, Sequence
import logging

from hexkit.errors import ExtendedAddressPresentError, InvalidRangeError
from hexkit.ihex.records import HexRecord, RecordType

logger = logging.getLogger(__name__)


MAX_LOCAL_ADDRESS = 0xFFFF
MAX_ABSOLUTE_ADDRESS = 0xFFFFFFFF

AddressRange = tuple[int, int]


def _validate_range(address_range: AddressRange, maximum: int) -> AddressRange:
    """Check an inclusive (start, end) range against the address space."""
    start, end = address_range
    if end < start:
        raise InvalidRangeError(start, end)
    if start < 0 or end > maximum:
        raise InvalidRangeError(
            start, end,
            f"address range 0x{start:X}-0x{end:X} is outside "
            f"0x0-0x{maximum:X}",
        )
    return start, end


def _sorted_by_address(records: Sequence[HexRecord]) -> tuple[HexRecord, ...]:
    # sorted() is stable, so records sharing an address keep file order
    return tuple(sorted(records, key=lambda record: record.address))


# =============================================================================
# Linear (16-bit) View
# =============================================================================

def build_linear_view(
    records: Sequence[HexRecord],
    address_range: Optional[AddressRange] = None,
) -> tuple[HexRecord, ...]:
    """
    Order the Data records of a 16-bit image by address.

    Args:
        records: Assembled records (a HexFile)
        address_range: Optional inclusive (start, end) 16-bit range

    Returns:
        Data records sorted by local address (EOF is dropped)

    Raises:
        ExtendedAddressPresentError: If any Extended Linear Address
            record is present (position is 1-based)
        InvalidRangeError: If end < start or a bound is not 16-bit
    """
    for index, record in enumerate(records):
        if record.record_type == RecordType.EXTENDED_LINEAR_ADDRESS:
            raise ExtendedAddressPresentError(
                index + 1,
                source=getattr(records, "source", "<input>"),
                source_line=record.raw_text,
            )

    data = [record for record in records if record.record_type == RecordType.DATA]

    if address_range is not None:
        start, end = _validate_range(address_range, MAX_LOCAL_ADDRESS)
        data = [record for record in data if start <= record.address <= end]

    return _sorted_by_address(data)


# =============================================================================
# Segmented (32-bit) View
# =============================================================================

class SegmentedView(Mapping):
    """
    Read-only mapping of segment key to address-ordered Data records.

    Keys iterate in ascending order. Each value is a tuple of HexRecord
    sorted by local address. A view never changes after construction, so
    it can be queried repeatedly and from several threads.
    """

    __slots__ = ("_segments",)

    def __init__(self, segments: Optional[Mapping[int, Sequence[HexRecord]]] = None):
        items = sorted((segments or {}).items())
        self._segments: dict[int, tuple[HexRecord, ...]] = {
            key: tuple(records) for key, records in items
        }

    def __getitem__(self, key: int) -> tuple[HexRecord, ...]:
        return self._segments[key]

    def __iter__(self) -> Iterator[int]:
        return iter(self._segments)

    def __len__(self) -> int:
        return len(self._segments)

    def __repr__(self) -> str:
        summary = ", ".join(
            f"0x{key:08X}: {len(records)}" for key, records in self._segments.items()
        )
        return f"SegmentedView({{{summary}}})"

    def record_count(self) -> int:
        """Total number of Data records across all segments."""
        return sum(len(records) for records in self._segments.values())

    def iter_absolute(self) -> Iterator[tuple[int, HexRecord]]:
        """Yield (absolute address, record) in ascending address order."""
        for key, records in self._segments.items():
            for record in records:
                yield key + record.address, record

    def query(self, start: int, end: int) -> "SegmentedView":
        """Shorthand for query_range(self, (start, end))."""
        return query_range(self, (start, end))


class _SegmentAccumulator:
    """
    State carried through one segmentation pass.

    Attributes:
        current: Key of the segment Data records are added to
        segments: Segment key to Data records, in creation order
    """

    def __init__(self) -> None:
        self.current = 0
        self.segments: dict[int, list[HexRecord]] = {}

    def add(self, index: int, record: HexRecord) -> bool:
        """Fold one record into the state. Returns False once EOF is reached."""
        if record.record_type == RecordType.DATA:
            if index == 0:
                self.segments.setdefault(0, [])
            self.segments[self.current].append(record)
            return True

        elif record.record_type == RecordType.EXTENDED_LINEAR_ADDRESS:
            key = record.segment_key
            self.segments.setdefault(key, [])
            self.current = key
            logger.debug(f"Segment 0x{key:08X} starts at record {index + 1}")
            return True

        elif record.record_type == RecordType.EOF:
            return False

        else:
            raise ValueError(
                f"cannot segment {record.record_type.get_description()} "
                f"record {index + 1} (type {record.type_code:02X})"
            )


def build_segmented_view(records: Sequence[HexRecord]) -> SegmentedView:
    """
    Partition the Data records of an image by extended address.

    Args:
        records: Assembled records (a HexFile)

    Returns:
        SegmentedView with ascending segment keys and address-sorted
        records within each segment
    """
    accumulator = _SegmentAccumulator()
    for index, record in enumerate(records):
        if not accumulator.add(index, record):
            break

    view = SegmentedView({
        key: _sorted_by_address(group)
        for key, group in accumulator.segments.items()
    })
    logger.debug(f"Built segmented view: {len(view)} segments, {view.record_count()} records")
    return view


# =============================================================================
# Range Query
# =============================================================================

def query_range(view: Mapping[int, Sequence[HexRecord]],
                address_range: AddressRange) -> SegmentedView:
    """
    Select the Data records whose absolute address is in an inclusive range.

    Args:
        view: A SegmentedView
        address_range: Inclusive (start, end) 32-bit absolute addresses

    Returns:
        A new SegmentedView holding only matching records; segments with
        no matching records are omitted

    Raises:
        InvalidRangeError: If end < start or a bound is not 32-bit

    Example:
        >>> result = query_range(view, (0x00120010, 0x00120010))
        >>> list(result)
        [1179648]
    """
    start, end = _validate_range(address_range, MAX_ABSOLUTE_ADDRESS)

    start_segment, start_local = start & 0xFFFF0000, start & 0xFFFF
    end_segment, end_local = end & 0xFFFF0000, end & 0xFFFF

    selected: dict[int, tuple[HexRecord, ...]] = {}

    for key, records in view.items():
        if key < start_segment or key > end_segment:
            continue

        low = start_local if key == start_segment else 0
        high = end_local if key == end_segment else MAX_LOCAL_ADDRESS

        if low == 0 and high == MAX_LOCAL_ADDRESS:
            matching = tuple(records)
        else:
            matching = tuple(r for r in records if low <= r.address <= high)

        if matching:
            selected[key] = matching

    return SegmentedView(selected)
