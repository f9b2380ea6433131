"""
Unit tests for CodeGenerator.
"""

from unittest.mock import patch

from src.domain.code_generator import CodeGenerator


class TestCodeGenerator:
    """Test verification code generation."""

    def test_generate_creates_six_digit_code(self) -> None:
        """Test that generate() returns a 6-digit numeric string in range."""
        code = CodeGenerator().generate()

        assert len(code) == 6
        assert code.isdigit()
        assert 100000 <= int(code) <= 999999

    def test_generate_covers_range_bounds(self) -> None:
        """Test that the lowest and highest draws map to the range bounds."""
        generator = CodeGenerator()

        with patch("src.domain.code_generator.secrets.randbelow", return_value=0):
            assert generator.generate() == "100000"

        with patch("src.domain.code_generator.secrets.randbelow", return_value=899999):
            assert generator.generate() == "999999"

    def test_generate_uses_full_range(self) -> None:
        """Test that randbelow is asked for the whole inclusive range."""
        with patch("src.domain.code_generator.secrets.randbelow", return_value=5) as randbelow:
            CodeGenerator().generate()

        randbelow.assert_called_once_with(900000)

    def test_generate_is_not_constant(self) -> None:
        """Test that repeated calls don't return one fixed value."""
        generator = CodeGenerator()
        codes = {generator.generate() for _ in range(50)}

        assert len(codes) > 1
