"""Tests for identifier formatting and pattern checks."""

import pytest

from scorectl.domain.ids import (
    format_employee_id,
    format_identifier,
    format_registration_number,
    validate_id,
)


class TestFormatting:
    def test_employee_id_padding(self) -> None:
        assert format_employee_id(2024, 7) == "SUP-2024-007"

    def test_employee_id_grows_past_padding(self) -> None:
        assert format_employee_id(2024, 1234) == "SUP-2024-1234"

    def test_registration_number_padding(self) -> None:
        assert format_registration_number(2024, 42) == "2024-0042"

    def test_format_identifier_dispatch(self) -> None:
        assert format_identifier("supervisor", 2024, 1) == "SUP-2024-001"
        assert format_identifier("contestant", 2024, 1) == "2024-0001"

    def test_format_identifier_unknown_kind(self) -> None:
        with pytest.raises(ValueError, match="No generated identifier"):
            format_identifier("score", 2024, 1)


class TestValidateId:
    @pytest.mark.parametrize(
        ("identifier", "kind", "expected"),
        [
            ("SUP-2024-001", "supervisor", True),
            ("SUP-24-001", "supervisor", False),
            ("2024-0001", "contestant", True),
            ("2024-01", "contestant", False),
            ("2024-0001", "competition", False),
        ],
    )
    def test_patterns(self, identifier: str, kind: str, expected: bool) -> None:
        assert validate_id(identifier, kind) is expected
