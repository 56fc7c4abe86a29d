"""Property-based tests for the content safety check."""

from hypothesis import given
from hypothesis import strategies as st

from storyfeed.models import Verdict
from storyfeed.safety import EVENT_HANDLERS, classify


def random_case(word: str):
    """Strategy producing the word with arbitrary per-letter casing."""
    return st.lists(st.booleans(), min_size=len(word), max_size=len(word)).map(
        lambda flags: "".join(
            ch.upper() if flag else ch.lower() for ch, flag in zip(word, flags)
        )
    )


surrounding_text = st.text(max_size=50)


class TestSafetyProperties:
    """Property-based tests for classify."""

    @given(surrounding_text, random_case("script"), st.sampled_from([" ", ">", "\t", "\n"]), surrounding_text)
    def test_script_tag_rejected_property(self, prefix, tag, boundary, suffix):
        """
        For all content containing an opening script tag in any case,
        the verdict is REJECTED.
        """
        content = f"{prefix}<{tag}{boundary}{suffix}"
        assert classify(content) is Verdict.REJECTED

    @given(surrounding_text, random_case("javascript:"), surrounding_text)
    def test_javascript_scheme_rejected_property(self, prefix, scheme, suffix):
        """For all content containing the javascript: scheme, the verdict is REJECTED."""
        assert classify(f"{prefix}{scheme}{suffix}") is Verdict.REJECTED

    @given(
        st.sampled_from(EVENT_HANDLERS),
        st.sampled_from(["", " ", "  ", "\t"]),
        st.sampled_from(["<img ", "<a ", " ", "<div\n"]),
    )
    def test_event_handler_rejected_property(self, handler, spacing, lead):
        """
        For all enumerated event handlers, with or without whitespace before
        '=', the verdict is REJECTED.
        """
        content = f'{lead}{handler}{spacing}="doSomething()">'
        assert classify(content) is Verdict.REJECTED
        assert classify(content.upper()) is Verdict.REJECTED

    @given(
        st.sampled_from(["eval", "setTimeout", "setInterval"]),
        st.sampled_from(["", " ", "\n"]),
        surrounding_text.map(lambda s: s + " "),
    )
    def test_code_invocation_rejected_property(self, call, spacing, prefix):
        """For all eval/setTimeout/setInterval invocations, the verdict is REJECTED."""
        assert classify(f"{prefix}{call}{spacing}(1)") is Verdict.REJECTED
        assert classify(f"{prefix}{call.upper()}{spacing}(1)") is Verdict.REJECTED

    @given(st.text(alphabet=st.characters(blacklist_characters="<:=(")))
    def test_markup_free_text_is_safe_property(self, content):
        """
        Text with no '<', ':', '=' or '(' cannot match any rule and is SAFE.
        """
        assert classify(content) is Verdict.SAFE

    @given(st.text())
    def test_classify_is_total_property(self, content):
        """classify never raises and always returns a verdict."""
        assert classify(content) in (Verdict.SAFE, Verdict.REJECTED)

    @given(
        st.characters(min_codepoint=0x80, whitelist_categories=("Lu", "Ll", "Lo", "Nd")),
        st.sampled_from(EVENT_HANDLERS),
    )
    def test_non_ascii_letter_before_handler_property(self, letter, handler):
        """
        Word boundaries are ASCII-only: a non-ASCII letter directly before a
        handler name still leaves a boundary, so the verdict is REJECTED.
        """
        assert classify(f"<p {letter}{handler}=x>") is Verdict.REJECTED
