"""Unit tests for thinking-tag splitting."""
from hypothesis import given
from hypothesis import strategies as st

from facade.streaming import ThinkTagParser, split_thinking

no_markers = st.text().filter(lambda s: "<think>" not in s)


class TestSplitThinking:
    """Tests for the pure split_thinking function."""

    def test_no_tags(self):
        result = split_thinking("no tags here")
        assert result.thinking == ""
        assert result.response == "no tags here"

    def test_closed_region(self):
        result = split_thinking("<think>step one</think>Hello")
        assert result.thinking == "step one"
        assert result.response == "Hello"

    def test_unclosed_region_left_in_response(self):
        """An opening tag without a closing tag is not reported as thinking."""
        result = split_thinking("<think>partial")
        assert result.thinking == ""
        assert result.response == "<think>partial"

    def test_empty_region(self):
        result = split_thinking("<think></think>  answer ")
        assert result.thinking == ""
        assert result.response == "answer"

    def test_multiline_region_is_trimmed(self):
        text = "<think>\n1. read\n2. answer\n</think>\n\nFour."
        result = split_thinking(text)
        assert result.thinking == "1. read\n2. answer"
        assert result.response == "Four."

    def test_text_before_region_is_kept(self):
        result = split_thinking("Sure. <think>hmm</think> It is 4.")
        assert result.thinking == "hmm"
        assert result.response == "Sure.  It is 4."

    def test_only_first_region_is_honoured(self):
        result = split_thinking("<think>a</think>mid<think>b</think>end")
        assert result.thinking == "a"
        assert result.response == "mid<think>b</think>end"

    def test_closing_tag_before_opening_is_ignored(self):
        result = split_thinking("</think>x<think>y")
        assert result.thinking == ""
        assert result.response == "</think>x<think>y"

    @given(st.text())
    def test_idempotent(self, text: str):
        """Property test: splitting the same buffer twice gives the same result."""
        assert split_thinking(text) == split_thinking(text)

    @given(no_markers)
    def test_text_without_markers_is_trimmed_only(self, text: str):
        """Property test: text without markers passes through trimmed."""
        assert split_thinking(text).response == text.strip()
        assert split_thinking(text).thinking == ""


class TestThinkTagParser:
    """Tests for the incremental parser."""

    def test_thinking_empty_until_closed(self):
        parser = ThinkTagParser()
        for delta in ["<think>", "working", " it out"]:
            parser.feed(delta)
            assert parser.thinking == ""
        assert not parser.closed

        parser.feed("</think>")
        assert parser.closed
        assert parser.thinking == "working it out"

    def test_tags_split_across_deltas(self):
        parser = ThinkTagParser()
        for delta in ["<th", "ink>abc</", "thi", "nk>Hi"]:
            parser.feed(delta)

        result = parser.result()
        assert result.thinking == "abc"
        assert result.response == "Hi"

    def test_thinking_fixed_after_first_region(self):
        parser = ThinkTagParser()
        parser.feed("<think>one</think>")
        parser.feed("<think>two</think>")
        assert parser.thinking == "one"
        assert parser.result().response == "<think>two</think>"

    def test_empty_delta_is_ignored(self):
        parser = ThinkTagParser()
        parser.feed("")
        assert parser.text == ""
        assert parser.result().response == ""

    @given(st.lists(st.sampled_from(["<think>", "</think>", "<th", "ink>", "</th", "a", " ", "\n", "b<"]), max_size=30))
    def test_matches_pure_split(self, deltas: list[str]):
        """Property test: feeding deltas equals splitting the joined text."""
        parser = ThinkTagParser()
        for delta in deltas:
            parser.feed(delta)
        assert parser.result() == split_thinking("".join(deltas))

    @given(st.text(), st.integers(min_value=1, max_value=7))
    def test_matches_pure_split_for_any_chunking(self, text: str, size: int):
        """Property test: arbitrary chunk sizes give the same result."""
        text = f"pre<think>{text}</think>post"
        parser = ThinkTagParser()
        for i in range(0, len(text), size):
            parser.feed(text[i:i + size])
        assert parser.result() == split_thinking(text)
