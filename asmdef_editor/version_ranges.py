"""Version range expressions used by version defines.

Expressions use interval notation:
    1.0          x >= 1.0
    [1.0]        x = 1.0
    [1.0,2.0)    1.0 <= x < 2.0
    (,3.0]       x <= 3.0
"""

import re
from dataclasses import dataclass

_VERSION_RE = re.compile(
    r'^(\d+)(?:\.(\d+))?(?:\.(\d+))?(?:-([0-9A-Za-z.-]+))?(?:\+[0-9A-Za-z.-]+)?$'
)


class ExpressionError(ValueError):
    """The version expression is not valid interval notation."""


def parse_version(text: str) -> tuple:
    """Turn a version string into a sortable key.

    Raises:
        ExpressionError: If text is not a version.
    """
    match = _VERSION_RE.match(text.strip())
    if not match:
        raise ExpressionError(f"Invalid version '{text}'")
    major, minor, patch, prerelease = match.groups()
    numbers = (int(major), int(minor or 0), int(patch or 0))
    # Release versions sort after any prerelease of the same number.
    if prerelease is None:
        return numbers + ((1,),)
    parts = tuple((0, int(p), '') if p.isdigit() else (1, 0, p) for p in prerelease.split('.'))
    return numbers + ((0,) + parts,)


@dataclass(frozen=True)
class VersionRange:
    """A parsed version range expression."""
    expression: str
    min_version: str | None
    max_version: str | None
    min_inclusive: bool
    max_inclusive: bool

    @property
    def applied_rule(self) -> str:
        """Human readable description of the range, e.g. '1.0 <= x < 2.0'."""
        if self.min_version is not None and self.min_version == self.max_version:
            return f"x = {self.min_version}"

        lower_op = '<=' if self.min_inclusive else '<'
        upper_op = '<=' if self.max_inclusive else '<'
        if self.min_version is not None and self.max_version is not None:
            return f"{self.min_version} {lower_op} x {upper_op} {self.max_version}"
        if self.min_version is not None:
            return f"x {'>=' if self.min_inclusive else '>'} {self.min_version}"
        return f"x {upper_op} {self.max_version}"


class SemVersionRanges:
    """Parses version range expressions, caching results."""

    def __init__(self):
        self._cache: dict[str, VersionRange] = {}

    def get_expression(self, expression: str) -> VersionRange:
        """Parse an expression.

        Raises:
            ExpressionError: If the expression is invalid.
        """
        if expression not in self._cache:
            self._cache[expression] = self._parse(expression)
        return self._cache[expression]

    def evaluate(self, expression: str) -> str:
        """Return the applied rule for an expression."""
        return self.get_expression(expression).applied_rule

    @staticmethod
    def _parse(expression: str) -> VersionRange:
        text = (expression or '').strip()
        if not text:
            raise ExpressionError("Expression is empty")

        if text[0] not in '[(':
            parse_version(text)
            return VersionRange(text, text, None, True, False)

        if text[-1] not in '])':
            raise ExpressionError(f"Missing closing bracket in '{expression}'")

        min_inclusive = text[0] == '['
        max_inclusive = text[-1] == ']'
        body = text[1:-1]

        if ',' not in body:
            # Exact version must use [x]
            if not (min_inclusive and max_inclusive) or not body.strip():
                raise ExpressionError(f"Invalid exact version expression '{expression}'")
            version = body.strip()
            parse_version(version)
            return VersionRange(text, version, version, True, True)

        lower, _, upper = body.partition(',')
        if ',' in upper:
            raise ExpressionError(f"Too many versions in '{expression}'")
        lower = lower.strip() or None
        upper = upper.strip() or None

        if lower is None and upper is None:
            raise ExpressionError(f"No versions in '{expression}'")
        if lower is None and min_inclusive:
            raise ExpressionError(f"Unbounded minimum must be exclusive in '{expression}'")
        if upper is None and max_inclusive:
            raise ExpressionError(f"Unbounded maximum must be exclusive in '{expression}'")

        if lower is not None and upper is not None:
            low_key = parse_version(lower)
            high_key = parse_version(upper)
            if low_key > high_key:
                raise ExpressionError(f"Minimum is greater than maximum in '{expression}'")
            if low_key == high_key and not (min_inclusive and max_inclusive):
                raise ExpressionError(f"Empty range '{expression}'")
        elif lower is not None:
            parse_version(lower)
        else:
            parse_version(upper)

        return VersionRange(text, lower, upper, min_inclusive, max_inclusive)
