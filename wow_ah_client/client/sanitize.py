"""
Pre-decode payload repair.

The auction listings payload regularly carries invalid text in the ``owner``
field of individual auctions, which breaks JSON decoding of the entire
multi-megabyte document.  ``owner`` is not needed downstream, so its value
is blanked with a fixed placeholder before decoding.

The repair is scoped to a single named field and is only passed to the
listings fetch; other endpoints decode their bodies untouched.
"""

from __future__ import annotations

import re

DEFAULT_PLACEHOLDER = "_"


class FieldSanitizer:
    """Replace every string value of one JSON key with a placeholder.

    Matches ``"<field>":"<value>"`` (whitespace allowed around the colon)
    without parsing the document, since the document may not be parseable
    until the repair has been applied. The value runs to the first unescaped
    quote, so ``\\"`` inside it does not end the match; any other character after a
    backslash is swallowed too, valid escape or not.

    Args:
        field_name:  JSON key whose values are replaced.
        placeholder: Replacement string value (must not contain ``"``).
    """

    def __init__(self, field_name: str, placeholder: str = DEFAULT_PLACEHOLDER) -> None:
        if '"' in placeholder or "\\" in placeholder:
            raise ValueError("placeholder must not contain quotes or backslashes.")
        self.field_name  = field_name
        self.placeholder = placeholder
        self._pattern = re.compile(
            r'"%s"(\s*):(\s*)"(?:[^"\\]|\\.)+"' % re.escape(field_name), re.DOTALL
        )

    def __call__(self, text: str) -> str:
        return self._pattern.sub(
            lambda m: f'"{self.field_name}"{m.group(1)}:{m.group(2)}"{self.placeholder}"',
            text,
        )

    def __repr__(self) -> str:
        return f"FieldSanitizer({self.field_name!r}, placeholder={self.placeholder!r})"


OWNER_SANITIZER = FieldSanitizer("owner")
