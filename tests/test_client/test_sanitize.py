"""
Tests for client/sanitize.py - field-scoped payload repair.
"""

from __future__ import annotations

import json

import pytest

from wow_ah_client.client.sanitize import OWNER_SANITIZER, FieldSanitizer


class TestFieldSanitizer:
    def test_replaces_owner_values(self):
        text = '{"auctions":[{"auc":1,"item":25,"owner":"Bob","buyout":10},{"owner":"Al\\qice"}]}'
        assert OWNER_SANITIZER(text) == (
            '{"auctions":[{"auc":1,"item":25,"owner":"_","buyout":10},{"owner":"_"}]}'
        )

    def test_leaves_other_fields_alone(self):
        text = '{"ownerRealm":"Area52","name":"Bob"}'
        assert OWNER_SANITIZER(text) == text

    def test_tolerates_whitespace_around_colon(self):
        text = '{"owner" : "Bob"}'
        assert json.loads(OWNER_SANITIZER(text)) == {"owner": "_"}

    def test_custom_field_and_placeholder(self):
        s = FieldSanitizer("seller", placeholder="redacted")
        assert s('{"seller":"x","owner":"y"}') == '{"seller":"redacted","owner":"y"}'

    def test_no_match_returns_input(self):
        text = '{"id": 25, "name": "Worn Shortsword"}'
        assert OWNER_SANITIZER(text) == text

    def test_empty_owner_untouched(self):
        assert OWNER_SANITIZER('{"owner":""}') == '{"owner":""}'

    def test_escaped_quote_inside_owner(self):
        text = '{"owner":"a\\"b","item":1}'
        assert json.loads(OWNER_SANITIZER(text)) == {"owner": "_", "item": 1}

    def test_escaped_backslash_before_closing_quote(self):
        text = '{"owner":"a\\\\","item":1,"note":"x"}'
        assert json.loads(OWNER_SANITIZER(text)) == {"owner": "_", "item": 1, "note": "x"}

    def test_backslash_newline_inside_owner(self):
        text = '{"owner":"Bo\\\nb","item":1}'
        assert json.loads(OWNER_SANITIZER(text)) == {"owner": "_", "item": 1}

    def test_field_name_is_escaped(self):
        s = FieldSanitizer("a.b")
        assert s('{"axb":"v","a.b":"w"}') == '{"axb":"v","a.b":"_"}'

    @pytest.mark.parametrize("placeholder", ['"', "\\"])
    def test_rejects_placeholder_breaking_json(self, placeholder):
        with pytest.raises(ValueError):
            FieldSanitizer("owner", placeholder=placeholder)
