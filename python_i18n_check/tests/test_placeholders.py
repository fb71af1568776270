"""
Tests for placeholder parsing.
"""
import pytest

from python_i18n_check.utils.placeholders import parse_placeholders, placeholders_match


def test_named_printf_placeholders():
    signature = parse_placeholders("Hello %(name)s, you have %(count)d messages")
    assert signature.named == frozenset({"name", "count"})
    assert signature.positional == ()
    assert not signature.mixes_named_and_positional


def test_positional_printf_placeholders_keep_order():
    assert parse_placeholders("%s of %d (%.1f%%)").positional == ("s", "d", "f")


def test_percent_sign_in_text_is_not_a_placeholder():
    assert parse_placeholders("100% done").positional == ()
    assert parse_placeholders("50%% off").positional == ()


def test_brace_fields():
    signature = parse_placeholders("{user.name} sent {0} files to {}")
    assert signature.fields == ("", "0", "user")


def test_escaped_and_malformed_braces():
    assert parse_placeholders("Use {{braces}}").fields == ()
    assert parse_placeholders("Broken {").fields == ()


def test_mixed_placeholders_are_detected():
    assert parse_placeholders("%(name)s has %d items").mixes_named_and_positional


@pytest.mark.parametrize("source,translation,expected", [
    ("Hello %(name)s", "Bonjour %(name)s", True),
    ("Hello %(name)s", "Bonjour %(nom)s", False),
    ("%(a)s and %(b)s", "%(b)s et %(a)s", True),
    ("%s of %d", "%s sur %d", True),
    ("%s of %d", "%d sur %s", False),
    ("Hello {name}", "Bonjour {name}", True),
    ("Hello {name}", "Bonjour", False),
    ("Plain text", "Texte simple", True),
])
def test_placeholders_match(source, translation, expected):
    assert placeholders_match(source, translation) is expected
