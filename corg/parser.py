"""Markdown parsing into the event stream consumed by the transpiler."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from pathlib import Path

from markdown_it import MarkdownIt
from markdown_it.token import Token
from mdit_py_plugins.footnote import footnote_plugin
from mdit_py_plugins.tasklists import tasklists_plugin

from .events import (
    Alignment,
    Code,
    End,
    Event,
    FootnoteReference,
    HardBreak,
    Html,
    InlineHtml,
    LinkType,
    SoftBreak,
    Start,
    Tag,
    TagKind,
    TaskListMarker,
    Text,
)
from .filesystem import safe_read

TASK_CHECKBOX_PREFIX = '<input class="task-list-item-checkbox"'

# Token types that map one-to-one onto a container kind
_BLOCK_CONTAINERS = {
    "blockquote": TagKind.BLOCK_QUOTE,
    "list_item": TagKind.ITEM,
}
_INLINE_CONTAINERS = {
    "em": TagKind.EMPHASIS,
    "strong": TagKind.STRONG,
    "s": TagKind.STRIKETHROUGH,
}
_ALIGNMENTS = {
    "text-align:left": Alignment.LEFT,
    "text-align:center": Alignment.CENTER,
    "text-align:right": Alignment.RIGHT,
}


def create_markdown_parser() -> MarkdownIt:
    """Build a CommonMark parser with tables, footnotes, strikethrough, and task lists."""
    md = MarkdownIt("commonmark")
    md.enable(["table", "strikethrough"])
    footnote_plugin(md)
    tasklists_plugin(md)
    return md


def _split_type(token_type: str) -> tuple[str, str]:
    """Split ``"paragraph_open"`` into ``("paragraph", "open")``."""
    for suffix in ("_open", "_close"):
        if token_type.endswith(suffix):
            return token_type[: -len(suffix)], suffix[1:]
    return token_type, ""


def _paired(tag: Tag, nesting: str) -> Event:
    return Start(tag) if nesting == "open" else End(tag)


def _table_alignments(tokens: Sequence[Token], index: int) -> tuple[Alignment, ...]:
    """Read column alignments from the header cells of the table opened at `index`."""
    alignments = []
    for token in tokens[index + 1 :]:
        if token.type == "thead_close":
            break
        if token.type == "th_open":
            style = str(token.attrGet("style") or "")
            alignments.append(_ALIGNMENTS.get(style, Alignment.NONE))
    return tuple(alignments)


def _link_tag(token: Token, kind: TagKind) -> Tag:
    destination = str(token.attrGet("href" if kind is TagKind.LINK else "src") or "")
    title = str(token.attrGet("title") or "")
    link_type = LinkType.INLINE
    if token.markup == "autolink":
        link_type = LinkType.EMAIL if destination.startswith("mailto:") else LinkType.AUTOLINK
    return Tag(kind=kind, destination=destination, title=title, link_type=link_type)


def _footnote_label(token: Token) -> str:
    meta = token.meta or {}
    label = meta.get("label")
    if label:
        return str(label)
    # Inline footnotes have no label; the prefix keeps them apart from `[^2]`
    return f"inline-{meta.get('id', 0) + 1}"


def _inline_events(children: Sequence[Token]) -> Iterator[Event]:
    after_task_marker = False
    for token in children:
        name, nesting = _split_type(token.type)
        content = token.content

        if token.type == "text":
            # The task list plugin leaves the space that followed `[ ]`
            if after_task_marker and content.startswith(" "):
                content = content[1:]
            if content:
                yield Text(content)
        elif token.type == "code_inline":
            yield Code(token.content)
        elif token.type == "softbreak":
            yield SoftBreak()
        elif token.type == "hardbreak":
            yield HardBreak()
        elif token.type == "html_inline":
            if token.content.startswith(TASK_CHECKBOX_PREFIX):
                yield TaskListMarker('checked="checked"' in token.content)
            else:
                yield InlineHtml(token.content)
        elif token.type == "footnote_ref":
            yield FootnoteReference(_footnote_label(token))
        elif token.type == "image":
            tag = _link_tag(token, TagKind.IMAGE)
            yield Start(tag)
            if token.content:
                yield Text(token.content)
            yield End(tag)
        elif name == "link" and nesting:
            yield _paired(_link_tag(token, TagKind.LINK), nesting)
        elif name in _INLINE_CONTAINERS and nesting:
            yield _paired(Tag.of(_INLINE_CONTAINERS[name]), nesting)
        # Anything else (footnote anchors, unknown plugin tokens) is dropped

        after_task_marker = token.type == "html_inline" and content.startswith(
            TASK_CHECKBOX_PREFIX
        )


def _block_events(tokens: Sequence[Token]) -> Iterator[Event]:
    list_tags: list[Tag] = []
    table_tags: list[Tag] = []
    footnote_tags: list[Tag] = []
    in_table_head = False

    for index, token in enumerate(tokens):
        name, nesting = _split_type(token.type)

        if token.type == "inline":
            yield from _inline_events(token.children or [])
        elif name == "heading" and nesting:
            yield _paired(Tag.heading(int(token.tag[1:])), nesting)
        elif name == "paragraph" and nesting:
            # Tight lists hide their paragraphs
            if not token.hidden:
                yield _paired(Tag.of(TagKind.PARAGRAPH), nesting)
        elif token.type in ("fence", "code_block"):
            tag = Tag.code_block(token.info.strip() if token.type == "fence" else "")
            yield Start(tag)
            yield Text(token.content)
            yield End(tag)
        elif token.type == "hr":
            yield Start(Tag.of(TagKind.RULE))
            yield End(Tag.of(TagKind.RULE))
        elif token.type == "html_block":
            yield Start(Tag.of(TagKind.HTML_BLOCK))
            yield Html(token.content)
            yield End(Tag.of(TagKind.HTML_BLOCK))
        elif name in ("bullet_list", "ordered_list") and nesting:
            if nesting == "open":
                start = None
                if name == "ordered_list":
                    start = int(token.attrGet("start") or 1)
                list_tags.append(Tag.list_block(start))
                yield Start(list_tags[-1])
            elif list_tags:
                yield End(list_tags.pop())
        elif name == "table" and nesting:
            if nesting == "open":
                table_tags.append(Tag.table(_table_alignments(tokens, index)))
                yield Start(table_tags[-1])
            elif table_tags:
                yield End(table_tags.pop())
        elif name == "thead" and nesting:
            in_table_head = nesting == "open"
            yield _paired(Tag.of(TagKind.TABLE_HEAD), nesting)
        elif name == "tr" and nesting:
            # Header cells sit directly inside the table head
            if not in_table_head:
                yield _paired(Tag.of(TagKind.TABLE_ROW), nesting)
        elif name in ("th", "td") and nesting:
            yield _paired(Tag.of(TagKind.TABLE_CELL), nesting)
        elif name == "footnote" and nesting:
            # Closing tokens carry no label
            if nesting == "open":
                footnote_tags.append(Tag.footnote_definition(_footnote_label(token)))
                yield Start(footnote_tags[-1])
            elif footnote_tags:
                yield End(footnote_tags.pop())
        elif name in _BLOCK_CONTAINERS and nesting:
            yield _paired(Tag.of(_BLOCK_CONTAINERS[name]), nesting)
        # tbody, footnote_block and footnote_anchor only carry HTML layout


def parse_markdown(content: str, parser: MarkdownIt | None = None) -> list[Event]:
    """Parse Markdown content into an ordered list of events.

    Args:
        content: The Markdown document.
        parser: Parser to use; defaults to `create_markdown_parser()`.

    Returns:
        list[Event]: Start/End pairs around containers and leaf events between
            them, in document order. Footnote definitions follow the body.

    Examples:
        parse_markdown("## Setup\\n\\n```bash\\nmake\\n```\\n")
    """
    parser = parser or create_markdown_parser()
    tokens = parser.parse(content)
    return list(_block_events(tokens))


class ParseFileError(Exception):
    """Raised when reading or parsing a Markdown file fails."""


def parse_file(filepath: Path, parser: MarkdownIt | None = None) -> list[Event]:
    """Read a Markdown file and parse it into events.

    Args:
        filepath: Path to the Markdown document.
        parser: Parser to use; defaults to `create_markdown_parser()`.

    Returns:
        list[Event]: Events of the document.

    Raises:
        ParseFileError: If the file cannot be read or is not valid UTF-8.

    Examples:
        events = parse_file(Path("runbooks/deploy.md"))
    """
    try:
        with safe_read(filepath) as file:
            content = file.read()
    except UnicodeDecodeError as error:
        error_message = f"Invalid UTF-8 sequence in {filepath}: {error}"
        raise ParseFileError(error_message) from error
    except IOError as error:
        raise ParseFileError(str(error)) from error

    return parse_markdown(content, parser)
