import pytest
from core.placeholder_filter import PlaceholderFilter, is_placeholder_only


@pytest.mark.parametrize("text", [
    "",
    "   ",
    "{{ userName }}",
    "{0}",
    "{0} / {1}",
    "%s",
    "%1$s: %2$d",
    "%.2f%%",
    "${count}",
    "&nbsp;",
    "123 - 456",
    "{VAR_PLURAL}",
])
def test_placeholder_only(text):
    assert is_placeholder_only(text)


@pytest.mark.parametrize("text", [
    "Hello",
    "Hello {0}",
    "{{ count }} items",
    "%s files deleted",
    "Ünïcödé",
    "日本語",
])
def test_human_readable(text):
    assert not is_placeholder_only(text)


def test_none_is_placeholder_only():
    assert is_placeholder_only(None)


def test_custom_patterns_replace_defaults():
    f = PlaceholderFilter([r"<<\w+>>"])
    assert f.is_placeholder_only("<<user>>")
    # Default brace placeholders are no longer recognized
    assert not f.is_placeholder_only("{name}")


def test_empty_pattern_set_recognizes_nothing():
    f = PlaceholderFilter([])
    assert f.strip("{name}") == "{name}"
    assert not f.is_placeholder_only("{name}")


def test_strip_keeps_surrounding_text():
    f = PlaceholderFilter()
    assert f.strip("Hi {{ name }}, you have %d messages") == "Hi , you have  messages"


def test_nested_icu_select_is_not_a_placeholder():
    # Only flat {VAR_...} names are placeholders; select branches hold real text
    assert is_placeholder_only("{VAR_PH_1}")
    assert not is_placeholder_only("{VAR_SELECT, select, male {he} female {she}}")
