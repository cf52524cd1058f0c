"""
Unit tests for agent_actions/attributes.py
"""

from agent_actions.attributes import (
    decode_entities,
    extract_attr,
    extract_bool_attr,
    extract_int_attr,
    extract_list_attr,
    find_blocks,
    find_tags,
    first_attr,
    is_self_closing,
)


class TestExtractAttr:
    """Tests for extract_attr."""

    def test_double_quoted(self):
        assert extract_attr('<read path="src/app.py"/>', "path") == "src/app.py"

    def test_single_quoted(self):
        assert extract_attr("<read path='src/app.py'/>", "path") == "src/app.py"

    def test_unquoted_before_self_close(self):
        assert extract_attr('<read path="a.py" limit=10/>', "limit") == "10"

    def test_unquoted_before_space(self):
        assert extract_attr("<read limit=10 path=a.py>", "limit") == "10"

    def test_any_order(self):
        tag = '<grep path="src" pattern="def main"/>'
        assert extract_attr(tag, "pattern") == "def main"
        assert extract_attr(tag, "path") == "src"

    def test_case_insensitive_name(self):
        assert extract_attr('<read PATH="a.py"/>', "path") == "a.py"

    def test_spaces_around_equals(self):
        assert extract_attr('<read path = "a.py"/>', "path") == "a.py"

    def test_missing(self):
        assert extract_attr('<read path="a.py"/>', "offset") is None

    def test_blank_name(self):
        assert extract_attr('<read path="a.py"/>', "  ") is None

    def test_name_is_regex_escaped(self):
        assert extract_attr('<x a.b="1" axb="2"/>', "a.b") == "1"

    def test_does_not_match_suffix_of_longer_name(self):
        assert extract_attr('<x filepath="wrong" path="right"/>', "path") == "right"

    def test_empty_value(self):
        assert extract_attr('<edit path=""/>', "path") == ""


class TestTypedAttrs:
    """Tests for the bool/int/list helpers."""

    def test_bool_true_spellings(self):
        for value in ("true", "TRUE", "1", "yes", " Yes "):
            assert extract_bool_attr(f'<x flag="{value}"/>', "flag") is True

    def test_bool_false(self):
        assert extract_bool_attr('<x flag="false"/>', "flag") is False
        assert extract_bool_attr('<x flag="no"/>', "flag") is False
        assert extract_bool_attr("<x/>", "flag") is False

    def test_int(self):
        assert extract_int_attr('<x n="42"/>', "n") == 42

    def test_int_leading_digits(self):
        assert extract_int_attr('<x timeout="5000ms"/>', "timeout") == 5000

    def test_int_invalid(self):
        assert extract_int_attr('<x n="abc"/>', "n") is None
        assert extract_int_attr("<x/>", "n") is None

    def test_list(self):
        assert extract_list_attr('<x ignore="a, b,,c "/>', "ignore") == ("a", "b", "c")

    def test_list_empty(self):
        assert extract_list_attr('<x ignore=""/>', "ignore") is None
        assert extract_list_attr('<x ignore=" , "/>', "ignore") is None

    def test_first_attr(self):
        tag = '<kill pid="123"/>'
        assert first_attr(tag, "target", "pid") == "123"
        assert first_attr(tag, "target", "id") is None

    def test_first_attr_skips_empty(self):
        assert first_attr('<x to="" target="telegram"/>', "to", "target") == "telegram"


class TestTagScanning:
    """Tests for find_tags, find_blocks and is_self_closing."""

    def test_find_tags(self):
        content = 'a <read path="1"/> b <read path="2"/> <reader/>'
        assert find_tags(content, "read") == ['<read path="1"/>', '<read path="2"/>']

    def test_find_tags_quoted_gt(self):
        content = '<grep pattern="a>b" path="src"/>'
        assert find_tags(content, "grep") == [content]

    def test_find_tags_ignores_closers(self):
        assert find_tags("</say>", "say") == []

    def test_is_self_closing(self):
        assert is_self_closing('<read path="a"/>')
        assert is_self_closing('<read path="a" / >')
        assert not is_self_closing('<write path="a">')

    def test_find_blocks(self):
        content = '<say>one</say> text <say to="x">two</say>'
        assert find_blocks(content, "say") == [("<say>", "one"), ('<say to="x">', "two")]

    def test_find_blocks_skips_self_closing(self):
        content = '<end message="done"/> <end>bye</end>'
        assert find_blocks(content, "end") == [("<end>", "bye")]

    def test_find_blocks_unterminated(self):
        assert find_blocks("<say>never closed", "say") == []

    def test_find_blocks_case_insensitive(self):
        assert find_blocks("<SAY>hi</Say>", "say") == [("<SAY>", "hi")]


class TestDecodeEntities:
    """Tests for decode_entities."""

    def test_basic(self):
        assert decode_entities("&lt;div class=&quot;a&quot;&gt;&#39;x&#39;") == "<div class=\"a\">'x'"

    def test_amp_decoded_last(self):
        assert decode_entities("&amp;lt;") == "&lt;"

    def test_plain_text_untouched(self):
        assert decode_entities("a < b && c") == "a < b && c"
