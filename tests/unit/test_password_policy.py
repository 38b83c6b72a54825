"""Tests for inline password policies."""

from __future__ import annotations

import pytest

from vault_config_operator.models.password_policy import CharsetRule, PasswordPolicy, parse_password_policy
from vault_config_operator.utils.errors import ValidationError

POLICY = """
length = 16
rule "charset" {
  charset = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
  min-chars = 2
}
rule "charset" {
  charset = "!#%"
  min-chars = 1
}
"""


class TestParsePasswordPolicy:
    """Test cases for parse_password_policy."""

    def test_rules(self):
        """Test length and charset rules are decoded."""
        policy = parse_password_policy(POLICY)

        assert policy.length == 16
        assert policy.rules == (
            CharsetRule("ABCDEFGHIJKLMNOPQRSTUVWXYZ", 2),
            CharsetRule("!#%", 1),
        )

    def test_min_chars_defaults_to_zero(self):
        """Test a rule without min-chars only widens the alphabet."""
        policy = parse_password_policy('length = 8\nrule "charset" {\n  charset = "xyz"\n}\n')

        assert policy.rules == (CharsetRule("xyz", 0),)

    def test_invalid_hcl(self):
        """Test text that is not HCL is a validation error."""
        with pytest.raises(ValidationError, match="not valid HCL"):
            parse_password_policy("length = = 20 {")

    def test_missing_charset_rule(self):
        """Test a policy without charset rules is rejected."""
        with pytest.raises(ValidationError, match="charset rule"):
            parse_password_policy("length = 20\n")

    def test_missing_length(self):
        """Test the length is required."""
        with pytest.raises(ValidationError, match="length"):
            parse_password_policy('rule "charset" {\n  charset = "abc"\n}\n')


class TestGenerate:
    """Test cases for password generation."""

    def test_minimums_honoured(self):
        """Test every generated password meets each rule's minimum."""
        policy = parse_password_policy(POLICY)

        for _ in range(50):
            password = policy.generate()
            assert len(password) == 16
            assert sum(c.isupper() for c in password) >= 2
            assert sum(c in "!#%" for c in password) >= 1
            assert set(password) <= set(policy.alphabet)

    def test_alphabet_is_union_of_charsets(self):
        """Test overlapping charsets are merged without duplicates."""
        policy = PasswordPolicy(4, (CharsetRule("abc", 0), CharsetRule("cde", 0)))

        assert policy.alphabet == "abcde"
