"""
hexkit - Intel HEX Inspection Command-Line Interface
====================================================

This module implements the `hexkit` command-line tool. It decodes an
Intel HEX file and prints its records in file order, by address, or
grouped by extended-address segment.

Commands
--------
- **records**: List decoded records in file order
- **linear**: Data records of a 16-bit image, sorted by address
- **segments**: Per-segment summary of a 32-bit image
- **range**: Data records within an inclusive 32-bit address range
- **validate**: Validate a HEX file

Usage Examples
--------------
List the records of a file:
    $ hexkit records firmware.hex

Show a 16-bit image between two addresses:
    $ hexkit linear boot.hex --start 0x0100 --end 0x01FF

Summarize segments:
    $ hexkit segments app.hex

Slice a 32-bit image:
    $ hexkit range app.hex 0x1D001000 0x1D031100

Validate with checksum verification:
    $ hexkit --verify-checksums validate app.hex
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import click

from hexkit import __version__
from hexkit.cli.errors import ExitCode, handle_cli_exception
from hexkit.config import ParserConfig
from hexkit.errors import HexError
from hexkit.ihex import (
    HexFile,
    HexRecord,
    SegmentedView,
    build_linear_view,
    build_segmented_view,
    query_range,
    verify_record_checksum,
)

logger = logging.getLogger(__name__)


# =============================================================================
# CLI Context and Parameter Types
# =============================================================================

class Context:
    """
    Shared context for CLI commands.

    Stores the parser configuration and verbosity chosen on the group.
    """

    def __init__(self) -> None:
        self.config: ParserConfig = ParserConfig.from_env()
        self.verbose: bool = False

    def setup_logging(self) -> None:
        """Configure logging based on verbosity."""
        level = logging.DEBUG if self.verbose else logging.WARNING
        logging.basicConfig(
            level=level,
            format="%(levelname)s: %(message)s",
        )

    def load(self, hex_file: Path) -> HexFile:
        """Assemble a HEX file with the configured options."""
        return HexFile.from_file(hex_file, config=self.config)


pass_context = click.make_pass_decorator(Context, ensure=True)


class AddressType(click.ParamType):
    """
    Click parameter type for addresses.

    Accepts hex with a 0x or $ prefix (0x1D000000, $8000) or decimal.
    """
    name = "address"

    def convert(self, value, param: Optional[click.Parameter],
                ctx: Optional[click.Context]) -> int:
        """Convert string to an integer address."""
        if isinstance(value, int):
            return value

        text = value.strip()
        try:
            if text.lower().startswith("0x"):
                address = int(text[2:], 16)
            elif text.startswith("$"):
                address = int(text[1:], 16)
            else:
                address = int(text, 10)
        except ValueError:
            self.fail(f"Invalid address '{value}'", param, ctx)

        if address < 0:
            self.fail(f"Address must not be negative: '{value}'", param, ctx)
        return address


ADDRESS = AddressType()

HEX_FILE = click.Path(exists=True, dir_okay=False, path_type=Path)


def _format_record(record: HexRecord, address: Optional[int] = None) -> str:
    """Format one Data record as 'ADDRESS  LEN  DATA'."""
    if address is None:
        address_str = f"0x{record.address:04X}"
    else:
        address_str = f"0x{address:08X}"
    return f"{address_str}  {record.payload_length:3d}  {record.data_hex}"


def _print_segments(view: SegmentedView) -> None:
    for key, records in view.items():
        click.echo(f"Segment 0x{key:08X}:")
        for record in records:
            click.echo(f"  {_format_record(record, key + record.address)}")


# =============================================================================
# Main CLI Group
# =============================================================================

@click.group()
@click.version_option(__version__, "--version", "-V", prog_name="hexkit")
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output (debug logging)",
)
@click.option(
    "--strict",
    is_flag=True,
    help="Treat comment lines as errors",
)
@click.option(
    "--verify-checksums",
    is_flag=True,
    help="Reject records with a wrong checksum byte",
)
@pass_context
def main(ctx: Context, verbose: bool, strict: bool, verify_checksums: bool) -> None:
    """
    Intel HEX firmware image inspector.

    Decode a HEX file and view its records by address or segment.

    \b
    Commands:
      records   List records in file order
      linear    Data records of a 16-bit image by address
      segments  Per-segment summary of a 32-bit image
      range     Data records within an address range
      validate  Validate HEX file format

    \b
    Examples:
      hexkit records firmware.hex
      hexkit linear boot.hex --start 0x0100 --end 0x01FF
      hexkit range app.hex 0x1D001000 0x1D031100
    """
    ctx.verbose = verbose
    if strict:
        ctx.config.allow_comments = False
    if verify_checksums:
        ctx.config.verify_checksums = True
    ctx.setup_logging()


# =============================================================================
# Records Command
# =============================================================================

@main.command("records")
@click.argument("hex_file", type=HEX_FILE)
@pass_context
def cmd_records(ctx: Context, hex_file: Path) -> None:
    """
    List the records of a HEX file in file order.

    \b
    Example:
      hexkit records firmware.hex
    """
    try:
        image = ctx.load(hex_file)

        click.echo(f"{'#':>5} {'Line':>5}  {'Type':<24} {'Addr':<6} {'Len':>3}  Data")
        click.echo("-" * 60)
        for index, record in enumerate(image):
            line = image.get_line_number(index)
            click.echo(
                f"{index + 1:>5} {line:>5}  "
                f"{record.record_type.get_description():<24} "
                f"{record.address:04X}   {record.payload_length:>3}  {record.data_hex}"
            )

    except Exception as e:
        handle_cli_exception(e, verbose=ctx.verbose)


# =============================================================================
# Linear Command
# =============================================================================

@main.command("linear")
@click.argument("hex_file", type=HEX_FILE)
@click.option("--start", type=ADDRESS, default=None, help="Inclusive start address")
@click.option("--end", type=ADDRESS, default=None, help="Inclusive end address")
@pass_context
def cmd_linear(ctx: Context, hex_file: Path,
               start: Optional[int], end: Optional[int]) -> None:
    """
    Show the Data records of a 16-bit image sorted by address.

    Fails if the image contains Extended Linear Address records.

    \b
    Examples:
      hexkit linear boot.hex
      hexkit linear boot.hex --start 0x0100 --end 0x01FF
    """
    try:
        image = ctx.load(hex_file)

        address_range = None
        if start is not None or end is not None:
            address_range = (
                start if start is not None else 0,
                end if end is not None else 0xFFFF,
            )

        records = build_linear_view(image, address_range)
        for record in records:
            click.echo(_format_record(record))

        if ctx.verbose:
            click.echo(f"{len(records)} records")

    except Exception as e:
        handle_cli_exception(e, verbose=ctx.verbose)


# =============================================================================
# Segments Command
# =============================================================================

@main.command("segments")
@click.argument("hex_file", type=HEX_FILE)
@click.option("-d", "--dump", is_flag=True, help="List the records of each segment")
@pass_context
def cmd_segments(ctx: Context, hex_file: Path, dump: bool) -> None:
    """
    Summarize the segments of a HEX image.

    \b
    Output format:
      Segment     Records  Bytes  Range
      0x00000000        2     32  0x00000000-0x0000001F
    """
    try:
        view = build_segmented_view(ctx.load(hex_file))

        if dump:
            _print_segments(view)
            return

        click.echo(f"{'Segment':<11} {'Records':>7} {'Bytes':>6}  Range")
        click.echo("-" * 50)
        for key, records in view.items():
            size = sum(record.payload_length for record in records)
            if records:
                low = key + records[0].address
                high = key + max(record.end_address for record in records)
                span = f"0x{low:08X}-0x{high:08X}"
            else:
                span = "(empty)"
            click.echo(f"0x{key:08X} {len(records):>7} {size:>6}  {span}")

    except Exception as e:
        handle_cli_exception(e, verbose=ctx.verbose)


# =============================================================================
# Range Command
# =============================================================================

@main.command("range")
@click.argument("hex_file", type=HEX_FILE)
@click.argument("start", type=ADDRESS)
@click.argument("end", type=ADDRESS)
@pass_context
def cmd_range(ctx: Context, hex_file: Path, start: int, end: int) -> None:
    """
    List Data records whose address is between START and END (inclusive).

    \b
    Example:
      hexkit range app.hex 0x1D001000 0x1D031100
    """
    try:
        view = build_segmented_view(ctx.load(hex_file))
        result = query_range(view, (start, end))

        if not result:
            click.echo("No records in range")
            return

        _print_segments(result)

    except Exception as e:
        handle_cli_exception(e, verbose=ctx.verbose, error_type="Range")


# =============================================================================
# Validate Command
# =============================================================================

@main.command("validate")
@click.argument("hex_file", type=HEX_FILE)
@pass_context
def cmd_validate(ctx: Context, hex_file: Path) -> None:
    """
    Validate a HEX file.

    Checks:
    - Record syntax and field widths
    - End Of File record
    - Supported record types
    - Record checksums (errors with --verify-checksums, warnings otherwise)

    \b
    Example:
      hexkit validate firmware.hex
    """
    strict_checksums = ctx.config.verify_checksums
    errors = []
    warnings = []

    try:
        config = ParserConfig(
            comment_markers=ctx.config.comment_markers,
            allow_comments=ctx.config.allow_comments,
            verify_checksums=False,
        )
        image = HexFile.from_file(hex_file, config=config)

        for index, record in enumerate(image):
            if not verify_record_checksum(record):
                message = (
                    f"line {image.get_line_number(index)}: checksum "
                    f"{record.checksum:02X}, expected {record.calculate_checksum():02X}"
                )
                (errors if strict_checksums else warnings).append(message)

    except HexError as e:
        errors.append(str(e))
    except Exception as e:
        handle_cli_exception(e, verbose=ctx.verbose)

    if errors:
        click.echo("Validation FAILED:")
        for error in errors:
            click.echo(f"  ERROR: {error}")
        sys.exit(ExitCode.FORMAT_ERROR)
    elif warnings:
        click.echo("Validation passed with warnings:")
        for warning in warnings:
            click.echo(f"  WARNING: {warning}")
    else:
        click.echo(f"Validation PASSED: {hex_file}")
        if ctx.verbose:
            info = image.get_info()
            click.echo(f"  Records:       {info['total_records']}")
            click.echo(f"  Data records:  {info['data_records']}")
            click.echo(f"  Payload bytes: {info['payload_bytes']}")
            click.echo(f"  32-bit:        {'yes' if info['extended_addressing'] else 'no'}")


# =============================================================================
# Entry Point
# =============================================================================

if __name__ == "__main__":
    main()
