"""Inline password policies written in Vault's password policy HCL syntax.

Example::

    length = 20
    rule "charset" {
      charset = "abcdefghijklmnopqrstuvwxyz"
      min-chars = 1
    }
"""

from __future__ import annotations

import secrets
from dataclasses import dataclass
from typing import Any

import hcl2

from ..utils.errors import ValidationError


@dataclass(frozen=True)
class CharsetRule:
    charset: str
    min_chars: int = 0


@dataclass(frozen=True)
class PasswordPolicy:
    """Length plus the charset rules a generated password must satisfy."""

    length: int
    rules: tuple[CharsetRule, ...]

    @property
    def alphabet(self) -> str:
        """Union of all rule charsets, in first-seen order."""
        return "".join(dict.fromkeys("".join(rule.charset for rule in self.rules)))

    def generate(self) -> str:
        """Generate a password honouring every rule's ``min-chars``."""
        chars = [secrets.choice(rule.charset) for rule in self.rules for _ in range(rule.min_chars)]
        alphabet = self.alphabet
        chars.extend(secrets.choice(alphabet) for _ in range(self.length - len(chars)))
        secrets.SystemRandom().shuffle(chars)
        return "".join(chars)


def _unquote(value: Any) -> Any:
    # Some hcl2 releases keep the quotes around strings and block labels
    if isinstance(value, str) and len(value) >= 2 and value[0] == value[-1] == '"':
        return value[1:-1]
    return value


def _blocks(value: Any) -> list[dict[str, Any]]:
    if isinstance(value, dict):
        return [value]
    return [block for block in value or [] if isinstance(block, dict)]


def _int(value: Any, field: str) -> int:
    try:
        return int(_unquote(value))
    except (TypeError, ValueError) as e:
        raise ValidationError(f"inlinePasswordPolicy: {field} must be an integer") from e


def parse_password_policy(text: str) -> PasswordPolicy:
    """Decode an inline password policy.

    Only ``charset`` rules are honoured, other rule types are ignored.

    Raises:
        ValidationError: If the policy cannot be decoded or can never be satisfied
    """
    try:
        document = hcl2.loads(text)
    except Exception as e:
        raise ValidationError(f"inlinePasswordPolicy is not valid HCL: {e}") from e

    length = _int(document.get("length"), "length")
    rules = []
    for block in _blocks(document.get("rule")):
        for label, bodies in block.items():
            if _unquote(label) != "charset":
                continue
            for body in _blocks(bodies):
                charset = str(_unquote(body.get("charset") or ""))
                if not charset:
                    raise ValidationError("inlinePasswordPolicy: charset rules need a non-empty charset")
                rules.append(CharsetRule(charset, _int(body.get("min-chars", 0), "min-chars")))

    if length <= 0:
        raise ValidationError("inlinePasswordPolicy: length must be positive")
    if not rules:
        raise ValidationError("inlinePasswordPolicy: at least one charset rule is required")
    if sum(rule.min_chars for rule in rules) > length:
        raise ValidationError("inlinePasswordPolicy: min-chars of all rules exceed the length")
    return PasswordPolicy(length, tuple(rules))
