from __future__ import annotations

import io
import string

from hypothesis import given
from hypothesis import strategies as st

from corg.constants import FUNCTION_BEGIN, RUN_DOC_LABEL
from corg.events import End, FootnoteReference, Start, Tag, TagKind, Text
from corg.indent import indent_code
from corg.parser import parse_markdown
from corg.slugify import function_slug
from corg.transpiler import ShellWriter, push_shell

title_strategy = st.text(
    alphabet=string.ascii_letters + string.digits + " _-",
    min_size=1,
    max_size=32,
)

heading_strategy = st.lists(
    st.tuples(st.integers(min_value=1, max_value=4), title_strategy), max_size=20
)


def _events(headings) -> list:
    events = []
    for level, title in headings:
        tag = Tag.heading(level)
        paragraph = Tag.of(TagKind.PARAGRAPH)
        events.extend([Start(tag), Text(title), End(tag)])
        events.extend([Start(paragraph), Text("note"), End(paragraph)])
    return events


@given(st.text())
def test_function_slug_replaces_every_space(title: str):
    slug = function_slug(title)
    assert " " not in slug
    assert slug.count("-") == title.lower().count("-") + title.lower().count(" ")
    assert len(slug) == len(title.lower())


@given(st.text())
def test_indent_preserves_line_count(text: str):
    assert indent_code(text).count("\n") == text.count("\n")


@given(st.lists(st.text(alphabet=string.ascii_letters + " ", max_size=20), max_size=10))
def test_indent_prefixes_every_non_empty_line(lines: list[str]):
    indented = indent_code("\n".join(lines)).split("\n")
    for original, result in zip(lines, indented):
        assert result == (f"\t{original}" if original else "")


@given(heading_strategy)
def test_one_function_per_level_two_heading(headings):
    output = push_shell(_events(headings))
    expected = [function_slug(title) for level, title in headings if level == 2]

    assert output.count(FUNCTION_BEGIN) == len(expected)
    assert output.endswith(RUN_DOC_LABEL + "\n".join(expected))


@given(heading_strategy)
def test_transpile_is_deterministic(headings):
    events = _events(headings)
    assert push_shell(events) == push_shell(events)


@given(st.text())
def test_any_markdown_transpiles(content: str):
    output = push_shell(parse_markdown(content))
    assert RUN_DOC_LABEL in output


@given(st.lists(st.sampled_from(["a", "b", "c", "d"]), max_size=30))
def test_footnote_numbers_are_stable_and_dense(names: list[str]):
    events = [FootnoteReference(name) for name in names]

    state = ShellWriter(io.StringIO()).run(events)

    first_seen = list(dict.fromkeys(names))
    assert state.footnotes.numbers == {name: index + 1 for index, name in enumerate(first_seen)}
