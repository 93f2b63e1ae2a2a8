from datetime import datetime, timezone
from pathlib import Path

import pytest

from logpipe.exceptions import FailureReason
from logpipe.validation.models import Accepted, InputFile, Rejected, ValidationRule
from logpipe.validation.validator import (
    describe_extensions,
    format_limit,
    validate,
    validate_generation,
)

_MB = 1024 * 1024


def _log_rule(max_bytes: int = 5 * _MB) -> ValidationRule:
    return ValidationRule(extensions=frozenset({".log"}), max_bytes=max_bytes)


def _file(name: str, size: int) -> InputFile:
    return InputFile(name=name, size=size, content=b"")


class TestExtensionCheck:
    def test_accepts_matching_extension(self) -> None:
        assert validate(_file("access.log", 10), _log_rule()) == Accepted()

    def test_match_is_case_insensitive(self) -> None:
        assert isinstance(validate(_file("ACCESS.LOG", 10), _log_rule()), Accepted)

    def test_rule_extensions_are_normalized(self) -> None:
        rule = ValidationRule(extensions=frozenset({"CSV", ".XLSX"}), max_bytes=_MB)
        assert rule.extensions == frozenset({".csv", ".xlsx"})
        assert isinstance(validate(_file("data.xlsx", 10), rule), Accepted)

    def test_rejects_other_extension(self) -> None:
        outcome = validate(_file("data.exe", 10), _log_rule())

        assert isinstance(outcome, Rejected)
        assert outcome.reason is FailureReason.INVALID_TYPE
        assert outcome.message == "Invalid file type. Please select a .log file."

    def test_suffix_must_be_at_the_end(self) -> None:
        outcome = validate(_file("access.log.exe", 10), _log_rule())
        assert isinstance(outcome, Rejected)

    def test_type_is_checked_before_size(self) -> None:
        outcome = validate(_file("huge.exe", 10 * _MB), _log_rule())
        assert isinstance(outcome, Rejected)
        assert outcome.reason is FailureReason.INVALID_TYPE


class TestSizeCheck:
    def test_accepts_file_at_limit(self) -> None:
        assert isinstance(validate(_file("a.log", 5 * _MB), _log_rule()), Accepted)

    def test_rejects_file_over_limit(self) -> None:
        outcome = validate(_file("a.log", 5 * _MB + 1), _log_rule())

        assert isinstance(outcome, Rejected)
        assert outcome.reason is FailureReason.TOO_LARGE
        assert outcome.message == "File size exceeds 5MB. Please upload a smaller file."


class TestValidationRule:
    def test_requires_extensions(self) -> None:
        with pytest.raises(ValueError, match="extension"):
            ValidationRule(extensions=frozenset(), max_bytes=1)

    def test_requires_positive_limit(self) -> None:
        with pytest.raises(ValueError, match="max_bytes"):
            ValidationRule(extensions=frozenset({".log"}), max_bytes=0)


class TestGenerationParameters:
    def test_accepts_valid_parameters(self) -> None:
        assert isinstance(validate_generation(10_000, 0.5), Accepted)

    @pytest.mark.parametrize("ratio", [0.0, 1.0])
    def test_accepts_ratio_bounds(self, ratio: float) -> None:
        assert isinstance(validate_generation(1, ratio), Accepted)

    def test_rejects_zero_count(self) -> None:
        outcome = validate_generation(0, 0.5)
        assert isinstance(outcome, Rejected)
        assert outcome.reason is FailureReason.INVALID_PARAMETERS
        assert outcome.message == "Total entries must be greater than zero."

    @pytest.mark.parametrize("ratio", [-0.1, 1.5])
    def test_rejects_ratio_out_of_range(self, ratio: float) -> None:
        outcome = validate_generation(100, ratio)
        assert isinstance(outcome, Rejected)
        assert outcome.message == "Malicious ratio must be between 0 and 1."


class TestDescriptions:
    def test_describes_several_extensions(self) -> None:
        rule = ValidationRule(extensions=frozenset({".csv", ".xls", ".xlsx"}), max_bytes=_MB)
        assert describe_extensions(rule) == ".csv, .xls or .xlsx"

    @pytest.mark.parametrize(
        ("max_bytes", "expected"),
        [(300 * _MB, "300MB"), (int(1.5 * _MB), "1.5MB"), (2048, "2KB"), (500, "500 bytes")],
    )
    def test_formats_limit(self, max_bytes: int, expected: str) -> None:
        assert format_limit(max_bytes) == expected


class TestInputFile:
    def test_from_path_reads_metadata(self, tmp_path: Path) -> None:
        path = tmp_path / "access.log"
        path.write_bytes(b"127.0.0.1 - - [10/Oct/2000:13:55:36 -0700]")

        file = InputFile.from_path(path)

        assert file.name == "access.log"
        assert file.size == path.stat().st_size
        assert file.last_modified is not None
        assert file.read_bytes() == path.read_bytes()

    def test_from_bytes(self) -> None:
        stamp = datetime(2024, 10, 10, tzinfo=timezone.utc)
        file = InputFile.from_bytes("data.csv", b"a,b\n1,2\n", last_modified=stamp)

        assert file.size == 8
        assert file.read_bytes() == b"a,b\n1,2\n"

    def test_missing_path_raises(self, tmp_path: Path) -> None:
        file = InputFile(name="gone.log", size=1, path=tmp_path / "gone.log")
        with pytest.raises(FileNotFoundError):
            file.read_bytes()
