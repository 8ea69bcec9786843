"""Single-pass conversion of Markdown events into a shell script.

Level-2 headings become shell functions, paragraphs become logging calls,
code blocks are indented into the enclosing function, and a trailer calls
every generated function in document order.
"""

from __future__ import annotations

import io
from collections.abc import Iterable
from typing import TextIO

from .config import CorgConfig
from .constants import (
    BLOCK_QUOTE,
    BLOCK_QUOTE_CALL,
    BULLET_LIST,
    FINAL_FUNCTION_CLOSE,
    FOOTNOTE_NOTE,
    ITEM,
    LIST_FROM_ONE,
    LIST_FROM_ONE_AFTER_TEXT,
    LIST_FROM_OTHER,
    RULE,
    RUN_DOC_LABEL,
)
from .events import (
    Code,
    End,
    Event,
    FootnoteReference,
    HardBreak,
    Html,
    InlineHtml,
    SoftBreak,
    Start,
    Tag,
    TagKind,
    Text,
)
from .models import (
    CodeBlockRenderer,
    Heading,
    HeadingRenderer,
    ParagraphRenderer,
    TranspileState,
)
from .slugify import unique_slug


class ShellWriter:
    """Drive one transpile pass, writing shell text to `sink` as events arrive.

    Args:
        sink: Text stream receiving the script. Write failures propagate.
        config: Options for the pass; defaults to a new `CorgConfig`.

    Examples:
        writer = ShellWriter(io.StringIO())
        state = writer.run(events)
        state.function_names
    """

    def __init__(self, sink: TextIO, config: CorgConfig | None = None):
        self.sink = sink
        self.config = config or CorgConfig()
        self.state = TranspileState()

    def write(self, text: str) -> None:
        """Write `text` and remember whether it ended with a newline."""
        self.sink.write(text)
        if text:
            self.state.end_with_newline = text.endswith("\n")

    def write_newline(self) -> None:
        self.sink.write("\n")
        self.state.end_with_newline = True

    def run(self, events: Iterable[Event]) -> TranspileState:
        """Consume `events` once, then close the last function and write the trailer.

        Returns:
            TranspileState: Final state of the pass.

        Raises:
            OSError: If the sink fails; the pass stops at the failing write.
        """
        for event in events:
            if isinstance(event, Start):
                self.start_tag(event.tag)
            elif isinstance(event, End):
                self.end_tag(event.tag)
            elif isinstance(event, (Text, Code)):
                self.text(event.text)
            elif isinstance(event, (Html, InlineHtml)):
                self.emit(event.html)
            elif isinstance(event, SoftBreak):
                self.line_break("\n")
            elif isinstance(event, HardBreak):
                self.line_break("\n\n")
            elif isinstance(event, FootnoteReference):
                self.footnote_reference(event.name)
            # Task list markers render nothing

        # The last function is closed even when none was opened
        self.write(FINAL_FUNCTION_CLOSE)
        self.write(RUN_DOC_LABEL + "\n".join(self.state.function_names))
        return self.state

    def text(self, text: str) -> None:
        renderer = self.state.active_renderer
        if isinstance(renderer, HeadingRenderer):
            self.state.heading_text.append(text)
            return
        self.write(renderer.render(text) if renderer is not None else text)

    def emit(self, text: str) -> None:
        """Write `text`, or hold it until the open heading has been rendered."""
        if isinstance(self.state.active_renderer, HeadingRenderer):
            self.state.heading_pending.append(text)
        else:
            self.write(text)

    def line_break(self, text: str) -> None:
        if isinstance(self.state.active_renderer, HeadingRenderer):
            self.state.heading_text.append(" ")
        elif text == "\n":
            self.write_newline()
        else:
            self.write(text)

    def footnote_reference(self, name: str) -> None:
        number = self.state.footnotes.number(name)
        self.emit(f"{FOOTNOTE_NOTE}{name} #{number}")

    def start_tag(self, tag: Tag) -> None:
        kind = tag.kind
        state = self.state

        if kind is TagKind.HEADING:
            self.start_heading(tag.level)
        elif kind is TagKind.PARAGRAPH:
            renderer = ParagraphRenderer()
            state.active_renderer = renderer
            self.write(renderer.start())
        elif kind is TagKind.CODE_BLOCK:
            if not state.end_with_newline:
                self.write_newline()
            renderer = CodeBlockRenderer(lang=tag.info.split(" ")[0])
            state.active_renderer = renderer
            self.write(renderer.start())
        elif kind is TagKind.RULE:
            after_newline = state.end_with_newline
            self.write(RULE)
            if not after_newline:
                self.write("\n")
        elif kind is TagKind.BLOCK_QUOTE:
            after_newline = state.end_with_newline
            self.write(BLOCK_QUOTE)
            self.write(BLOCK_QUOTE_CALL if after_newline else "\n" + BLOCK_QUOTE_CALL)
        elif kind is TagKind.LIST:
            if tag.start == 1:
                self.write(LIST_FROM_ONE if state.end_with_newline else LIST_FROM_ONE_AFTER_TEXT)
            elif tag.start is not None:
                self.write(LIST_FROM_OTHER)
            else:
                self.write(BULLET_LIST if state.end_with_newline else "\n" + BULLET_LIST)
        elif kind is TagKind.ITEM:
            self.write(ITEM if state.end_with_newline else "\n" + ITEM)
        elif kind is TagKind.FOOTNOTE_DEFINITION:
            self.write("# " if state.end_with_newline else "\n# ")
            self.write(tag.name)
            self.write(" - ")
            self.write(str(state.footnotes.number(tag.name)))
            self.write("\n")
        elif kind is TagKind.TABLE:
            state.table.start_table(tag.alignments)
        elif kind is TagKind.TABLE_HEAD:
            state.table.start_head()
        elif kind is TagKind.TABLE_ROW:
            state.table.start_row()
        # Other tags render nothing

    def end_tag(self, tag: Tag) -> None:
        kind = tag.kind
        state = self.state

        if kind is TagKind.HEADING:
            self.end_heading()
        elif kind in (TagKind.PARAGRAPH, TagKind.CODE_BLOCK):
            renderer = state.active_renderer
            if isinstance(renderer, (ParagraphRenderer, CodeBlockRenderer)):
                self.write(renderer.end())
                state.active_renderer = None
        elif kind is TagKind.TABLE_HEAD:
            state.table.end_head()
        elif kind is TagKind.TABLE_CELL:
            state.table.end_cell()

    def start_heading(self, level: int) -> None:
        state = self.state
        heading = Heading.follow(level, state.current_heading)
        renderer = HeadingRenderer(heading)

        state.current_heading = heading
        state.current_function_name = None
        state.heading_text = []
        state.heading_pending = []
        state.active_renderer = renderer
        self.write(renderer.start())

    def end_heading(self) -> None:
        state = self.state
        renderer = state.active_renderer
        if not isinstance(renderer, HeadingRenderer):
            return

        heading = renderer.heading
        heading.text = "".join(state.heading_text)
        body = heading.text
        if state.needs_function_name():
            body = self.record_function_name(heading)

        self.write(renderer.render(body))
        self.write(renderer.end())
        state.active_renderer = None
        self.write("".join(state.heading_pending))
        state.heading_pending = []

    def record_function_name(self, heading: Heading) -> str:
        name = heading.function_slug()
        if self.config.unique_function_names:
            name = unique_slug(name, self.state.used_slugs, self.state.slug_counters)
        self.state.current_function_name = name
        self.state.function_names.append(name)
        return name


def transpile(events: Iterable[Event], sink: TextIO, config: CorgConfig | None = None) -> None:
    """Write the shell script for `events` to `sink`.

    Args:
        events: Event stream of one document, consumed exactly once.
        sink: Text stream receiving the script.
        config: Options for the pass.

    Returns:
        None.

    Raises:
        OSError: If writing to `sink` fails. Partial output should be discarded.

    Examples:
        with open("scripts/setup.sh", "w", encoding="UTF-8") as stream:
            transpile(parse_markdown(text), stream)
    """
    ShellWriter(sink, config).run(events)


def push_shell(events: Iterable[Event], config: CorgConfig | None = None) -> str:
    """Return the shell script for `events` as a string.

    Examples:
        push_shell([])  # "\\n}\\n\\n# - run doc: \\n"
    """
    buffer = io.StringIO()
    transpile(events, buffer, config)
    return buffer.getvalue()
