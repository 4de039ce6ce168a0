"""
hexkit CLI Tests
================

Tests for the `hexkit` command-line tool, run through click's CliRunner.
"""

import pytest
from click.testing import CliRunner

from hexkit import __version__
from hexkit.cli.errors import ExitCode, handle_cli_exception
from hexkit.cli.main import main
from hexkit.errors import (
    ExtendedAddressPresentError,
    InvalidRangeError,
    MissingTerminatorError,
)


# =============================================================================
# Test Fixtures
# =============================================================================

LINEAR_HEX = "; 16-bit image\n:0300300002337A1E\n:00000001FF\n"

SEGMENTED_HEX = (
    ":020000040000FA\n"
    ":020000040012E8\n"
    ":03001000010203E7\n"
    ":00000001FF\n"
)

BAD_CHECKSUM_HEX = ":0300300002337A00\n:00000001FF\n"

NO_EOF_HEX = ":0300300002337A1E\n"


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def write_hex(tmp_path):
    """Write HEX text to a file and return its path as a string."""
    def _write(text: str, name: str = "image.hex") -> str:
        path = tmp_path / name
        path.write_text(text)
        return str(path)
    return _write


# =============================================================================
# General Options
# =============================================================================

class TestCLIGeneral:
    """Tests for the command group."""

    def test_help(self, runner: CliRunner):
        result = runner.invoke(main, ["--help"])

        assert result.exit_code == 0
        assert "Intel HEX firmware image inspector" in result.output

    def test_version(self, runner: CliRunner):
        result = runner.invoke(main, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_missing_file(self, runner: CliRunner, tmp_path):
        result = runner.invoke(main, ["records", str(tmp_path / "missing.hex")])
        assert result.exit_code == 2


# =============================================================================
# Commands
# =============================================================================

class TestCLICommands:
    """Tests for the individual commands."""

    def test_records(self, runner: CliRunner, write_hex):
        result = runner.invoke(main, ["records", write_hex(LINEAR_HEX)])

        assert result.exit_code == 0
        assert "Data" in result.output
        assert "End Of File" in result.output
        assert "02337A" in result.output

    def test_linear(self, runner: CliRunner, write_hex):
        result = runner.invoke(main, ["linear", write_hex(LINEAR_HEX)])

        assert result.exit_code == 0
        assert "0x0030" in result.output
        assert "02337A" in result.output

    def test_linear_range_excludes(self, runner: CliRunner, write_hex):
        result = runner.invoke(
            main, ["linear", write_hex(LINEAR_HEX), "--start", "0x0040"]
        )

        assert result.exit_code == 0
        assert "0x0030" not in result.output

    def test_linear_rejects_segmented_image(self, runner: CliRunner, write_hex):
        result = runner.invoke(main, ["linear", write_hex(SEGMENTED_HEX)])

        assert result.exit_code == 1
        assert "Extended Linear Address" in result.output

    def test_linear_invalid_range(self, runner: CliRunner, write_hex):
        result = runner.invoke(
            main, ["linear", write_hex(LINEAR_HEX), "--start", "0x40", "--end", "0x20"]
        )

        assert result.exit_code == 1
        assert "invalid address range" in result.output

    def test_segments(self, runner: CliRunner, write_hex):
        result = runner.invoke(main, ["segments", write_hex(SEGMENTED_HEX)])

        assert result.exit_code == 0
        assert "0x00000000" in result.output
        assert "(empty)" in result.output
        assert "0x00120010-0x00120012" in result.output

    def test_segments_dump(self, runner: CliRunner, write_hex):
        result = runner.invoke(main, ["segments", "--dump", write_hex(SEGMENTED_HEX)])

        assert result.exit_code == 0
        assert "Segment 0x00120000:" in result.output
        assert "010203" in result.output

    def test_range(self, runner: CliRunner, write_hex):
        result = runner.invoke(
            main, ["range", write_hex(SEGMENTED_HEX), "0x00120010", "0x00120010"]
        )

        assert result.exit_code == 0
        assert "Segment 0x00120000:" in result.output
        assert "0x00120010" in result.output

    def test_range_no_records(self, runner: CliRunner, write_hex):
        result = runner.invoke(main, ["range", write_hex(SEGMENTED_HEX), "0", "16"])

        assert result.exit_code == 0
        assert "No records in range" in result.output

    def test_range_invalid(self, runner: CliRunner, write_hex):
        result = runner.invoke(main, ["range", write_hex(SEGMENTED_HEX), "$20", "$10"])

        assert result.exit_code == 1
        assert "Range error" in result.output

    def test_range_bad_address(self, runner: CliRunner, write_hex):
        result = runner.invoke(main, ["range", write_hex(SEGMENTED_HEX), "zz", "0x10"])

        assert result.exit_code == 2
        assert "Invalid address" in result.output


# =============================================================================
# Validate Command
# =============================================================================

class TestCLIValidate:
    """Tests for the validate command."""

    def test_valid_file(self, runner: CliRunner, write_hex):
        result = runner.invoke(main, ["validate", write_hex(LINEAR_HEX)])

        assert result.exit_code == 0
        assert "Validation PASSED" in result.output

    def test_verbose_summary(self, runner: CliRunner, write_hex):
        result = runner.invoke(main, ["-v", "validate", write_hex(SEGMENTED_HEX)])

        assert result.exit_code == 0
        assert "Data records:  1" in result.output

    def test_bad_checksum_warning(self, runner: CliRunner, write_hex):
        result = runner.invoke(main, ["validate", write_hex(BAD_CHECKSUM_HEX)])

        assert result.exit_code == 0
        assert "WARNING" in result.output
        assert "expected 1E" in result.output

    def test_bad_checksum_strict(self, runner: CliRunner, write_hex):
        result = runner.invoke(
            main, ["--verify-checksums", "validate", write_hex(BAD_CHECKSUM_HEX)]
        )

        assert result.exit_code == 1
        assert "Validation FAILED" in result.output

    def test_missing_eof(self, runner: CliRunner, write_hex):
        result = runner.invoke(main, ["validate", write_hex(NO_EOF_HEX)])

        assert result.exit_code == 1
        assert "End Of File" in result.output

    def test_strict_rejects_comments(self, runner: CliRunner, write_hex):
        result = runner.invoke(main, ["--strict", "validate", write_hex(LINEAR_HEX)])

        assert result.exit_code == 1
        assert "Validation FAILED" in result.output

    def test_verify_checksums_applies_to_commands(self, runner: CliRunner, write_hex):
        result = runner.invoke(
            main, ["--verify-checksums", "records", write_hex(BAD_CHECKSUM_HEX)]
        )

        assert result.exit_code == 1
        assert "checksum mismatch" in result.output


# =============================================================================
# Error Handling
# =============================================================================

class TestHandleCliException:
    """Tests for the exception to exit code mapping."""

    @pytest.mark.parametrize("error", [
        MissingTerminatorError(source="fw.hex"),
        ExtendedAddressPresentError(position=2, source="fw.hex"),
        InvalidRangeError(0x20, 0x10),
    ])
    def test_hex_errors_are_format_errors(self, error, capsys):
        with pytest.raises(SystemExit) as exc_info:
            handle_cli_exception(error)

        assert exc_info.value.code == ExitCode.FORMAT_ERROR
        assert capsys.readouterr().err.startswith("Error: ")

    def test_error_type_label(self, capsys):
        with pytest.raises(SystemExit):
            handle_cli_exception(InvalidRangeError(0x20, 0x10), error_type="Range")

        assert capsys.readouterr().err.startswith("Range error: ")

    def test_missing_file_is_invalid_args(self):
        with pytest.raises(SystemExit) as exc_info:
            handle_cli_exception(FileNotFoundError("fw.hex"))

        assert exc_info.value.code == ExitCode.INVALID_ARGS

    def test_unexpected_error_is_internal(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            handle_cli_exception(RuntimeError("boom"))

        assert exc_info.value.code == ExitCode.INTERNAL_ERROR
        assert "Internal error: boom" in capsys.readouterr().err
