from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from corg.events import (
    Alignment,
    Code,
    End,
    FootnoteReference,
    Html,
    LinkType,
    SoftBreak,
    Start,
    Tag,
    TagKind,
    TaskListMarker,
    Text,
)
from corg.parser import ParseFileError, parse_file, parse_markdown
from corg.transpiler import push_shell


def _parse(content: str):
    return parse_markdown(textwrap.dedent(content).lstrip())


def _kinds(events) -> list[tuple[str, TagKind]]:
    return [
        (type(event).__name__, event.tag.kind)
        for event in events
        if isinstance(event, (Start, End))
    ]


def test_heading_events():
    assert _parse("## Setup\n") == [Start(Tag.heading(2)), Text("Setup"), End(Tag.heading(2))]


def test_fenced_code_keeps_info_and_content():
    events = _parse(
        """
        ```bash extra
        make
        ```
        """
    )

    tag = Tag.code_block("bash extra")
    assert events == [Start(tag), Text("make\n"), End(tag)]


def test_indented_code_has_empty_info():
    events = parse_markdown("    make\n")
    assert events == [Start(Tag.code_block()), Text("make\n"), End(Tag.code_block())]


def test_paragraph_with_soft_break_and_inline_code():
    paragraph = Tag.of(TagKind.PARAGRAPH)
    events = parse_markdown("run `make`\nnow\n")

    assert events == [
        Start(paragraph),
        Text("run "),
        Code("make"),
        SoftBreak(),
        Text("now"),
        End(paragraph),
    ]


def test_tight_list_hides_paragraphs():
    bullets = Tag.list_block()
    item = Tag.of(TagKind.ITEM)

    assert parse_markdown("- a\n- b\n") == [
        Start(bullets),
        Start(item),
        Text("a"),
        End(item),
        Start(item),
        Text("b"),
        End(item),
        End(bullets),
    ]


@pytest.mark.parametrize(("content", "start"), [("1. a\n", 1), ("3. a\n", 3)])
def test_ordered_list_start(content, start):
    assert parse_markdown(content)[0] == Start(Tag.list_block(start))


def test_task_list_markers():
    events = parse_markdown("- [x] done\n- [ ] todo\n")

    markers = [event for event in events if isinstance(event, TaskListMarker)]
    texts = [event.text for event in events if isinstance(event, Text)]
    assert markers == [TaskListMarker(True), TaskListMarker(False)]
    assert texts == ["done", "todo"]


def test_rule_and_block_quote():
    events = parse_markdown("---\n\n> hi\n")

    assert _kinds(events) == [
        ("Start", TagKind.RULE),
        ("End", TagKind.RULE),
        ("Start", TagKind.BLOCK_QUOTE),
        ("Start", TagKind.PARAGRAPH),
        ("End", TagKind.PARAGRAPH),
        ("End", TagKind.BLOCK_QUOTE),
    ]


def test_html_block_is_kept_verbatim():
    events = parse_markdown("<div>\nhi\n</div>\n")
    html_block = Tag.of(TagKind.HTML_BLOCK)

    assert events == [Start(html_block), Html("<div>\nhi\n</div>\n"), End(html_block)]


def test_footnotes_reference_and_definition():
    events = _parse(
        """
        Note[^a].

        [^a]: Detail.
        """
    )

    assert FootnoteReference("a") in events
    definition = Tag.footnote_definition("a")
    start = events.index(Start(definition))
    assert events.index(FootnoteReference("a")) < start
    assert Text("Detail.") in events[start:]
    assert events[-1] == End(definition)


def test_table_alignments_and_sections():
    events = _parse(
        """
        | A | B |
        |:--|--:|
        | 1 | 2 |
        """
    )

    assert events[0] == Start(Tag.table((Alignment.LEFT, Alignment.RIGHT)))
    kinds = _kinds(events)
    assert kinds[1] == ("Start", TagKind.TABLE_HEAD)
    assert kinds.count(("Start", TagKind.TABLE_CELL)) == 4
    assert kinds.count(("Start", TagKind.TABLE_ROW)) == 1
    assert [event.text for event in events if isinstance(event, Text)] == ["A", "B", "1", "2"]


def test_links_and_images():
    events = parse_markdown("[site](https://example.org) ![logo](logo.png) <https://x.org>\n")

    assert Start(Tag.link("https://example.org")) in events
    assert Start(Tag.image("logo.png")) in events
    assert Text("logo") in events
    assert Start(Tag.link("https://x.org", link_type=LinkType.AUTOLINK)) in events


def test_inline_containers():
    kinds = _kinds(parse_markdown("*a* **b** ~~c~~\n"))

    assert ("Start", TagKind.EMPHASIS) in kinds
    assert ("Start", TagKind.STRONG) in kinds
    assert ("Start", TagKind.STRIKETHROUGH) in kinds


def test_parsed_document_transpiles():
    events = _parse(
        """
        # Title

        Intro text.

        ## Build

        ```bash
        make
        ```

        ## Ship

        Ship it.
        """
    )

    assert push_shell(events) == (
        'corg_announce "Running Document: Title"\n\n'
        '\n# - paragraph:\ncorg_debug "Intro text."\n\n'
        "\n# - begin function:\nfunction build {\n"
        "# - begin code:\n\tmake\n"
        "}\n# - end function\n"
        "\n# - begin function:\nfunction ship {\n"
        '\n# - paragraph:\ncorg_debug "Ship it."\n\n'
        "\n}\n"
        "\n# - run doc: \nbuild\nship"
    )


def test_parse_file_reads_document(tmp_path: Path):
    target = tmp_path / "doc.md"
    target.write_text("## Setup\n", encoding="utf-8")

    assert parse_file(target)[1] == Text("Setup")


def test_parse_file_rejects_invalid_utf8(tmp_path: Path):
    target = tmp_path / "bad.md"
    target.write_bytes(b"## \xff\xfe\n")

    with pytest.raises(ParseFileError, match="Invalid UTF-8"):
        parse_file(target)


def test_parse_file_reports_missing_file(tmp_path: Path):
    with pytest.raises(ParseFileError, match="Error accessing"):
        parse_file(tmp_path / "missing.md")


def test_footnote_definitions_close_with_their_own_label():
    events = _parse(
        """
        One[^first] two[^second].

        [^first]: A.

        [^second]: B.
        """
    )

    definitions = [
        event
        for event in events
        if isinstance(event, (Start, End)) and event.tag.kind is TagKind.FOOTNOTE_DEFINITION
    ]
    assert definitions == [
        Start(Tag.footnote_definition("first")),
        End(Tag.footnote_definition("first")),
        Start(Tag.footnote_definition("second")),
        End(Tag.footnote_definition("second")),
    ]


def test_inline_footnotes_do_not_collide_with_numeric_labels():
    events = _parse(
        """
        Note^[inline text] and[^1].

        [^1]: Numbered.
        """
    )

    references = [event.name for event in events if isinstance(event, FootnoteReference)]
    assert references == ["inline-1", "1"]


def test_footnote_in_heading_keeps_function_opener_intact():
    events = _parse(
        """
        ## Setup[^1]

        ```bash
        make
        ```

        [^1]: note
        """
    )

    output = push_shell(events)

    assert "\nfunction setup {\n# -- note:\n# 1 #1\n# - begin code:\n" in output
    assert output.endswith("\n# - run doc: \nsetup")
