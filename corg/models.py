"""Data models for corg."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Union

from .constants import (
    ANNOUNCE_CLOSE,
    ANNOUNCE_OPEN,
    CODE_BEGIN,
    FUNCTION_BEGIN,
    FUNCTION_CLOSE,
    PARAGRAPH_CLOSE,
    PARAGRAPH_OPEN,
    SECTION_BEGIN,
)
from .events import Alignment
from .indent import indent_code
from .slugify import function_slug


@dataclass
class Heading:
    """A document heading and its effect on the enclosing function scope.

    Attributes:
        level: Heading depth, starting at 1.
        close_before_start: Whether the previous function must be closed
            before this heading opens.
        text: Heading text once known.
    """

    level: int
    close_before_start: bool = False
    text: str | None = None

    @classmethod
    def follow(cls, level: int, previous: Heading | None) -> Heading:
        """Create the heading that comes after `previous`.

        Only a level-2 heading directly following another level-2 heading
        closes the open function. A level-2 heading after a deeper subsection
        leaves it open.

        Examples:
            Heading.follow(2, Heading(2)).close_before_start  # True
            Heading.follow(2, Heading(3)).close_before_start  # False
        """
        close_before_start = level == 2 and previous is not None and previous.level == 2
        return cls(level=level, close_before_start=close_before_start)

    def function_slug(self) -> str:
        return function_slug(self.text) if self.text is not None else ""


@dataclass
class HeadingRenderer:
    heading: Heading

    def start(self) -> str:
        output = FUNCTION_CLOSE if self.heading.close_before_start else ""

        if self.heading.level == 1:
            return output + ANNOUNCE_OPEN
        if self.heading.level == 2:
            return output + FUNCTION_BEGIN
        return output + SECTION_BEGIN

    def render(self, body: str) -> str:
        """Close the announce statement or open the function.

        `body` is the heading text for level 1 and the function name for
        level 2. Deeper headings render nothing.
        """
        if self.heading.level == 1:
            return f"{body}{ANNOUNCE_CLOSE}"
        if self.heading.level == 2:
            return f"function {body} {{\n"
        return ""

    def end(self) -> str:
        return ""


@dataclass
class ParagraphRenderer:
    def start(self) -> str:
        return PARAGRAPH_OPEN

    def render(self, body: str) -> str:
        return body

    def end(self) -> str:
        return PARAGRAPH_CLOSE


@dataclass
class CodeBlockRenderer:
    """Renderer for fenced and indented code blocks.

    Attributes:
        lang: First word of the info string. Kept for callers; it does not
            change the output.
    """

    lang: str = ""

    def start(self) -> str:
        return CODE_BEGIN

    def render(self, body: str) -> str:
        return indent_code(body)

    def end(self) -> str:
        return ""


Renderer = Union[HeadingRenderer, ParagraphRenderer, CodeBlockRenderer]


@dataclass
class FootnoteNumbers:
    """Stable sequence numbers for footnote names in first-seen order.

    Attributes:
        numbers: Name to number mapping; insertion order is first-seen order.
    """

    numbers: dict[str, int] = field(default_factory=dict)

    def number(self, name: str) -> int:
        """Return the number of `name`, assigning the next one on first use.

        Examples:
            footnotes = FootnoteNumbers()
            footnotes.number("x"), footnotes.number("y"), footnotes.number("x")  # 1, 2, 1
        """
        if name not in self.numbers:
            self.numbers[name] = len(self.numbers) + 1
        return self.numbers[name]


class TableState(Enum):
    """Section of the table currently being walked."""

    HEAD = auto()
    BODY = auto()


@dataclass
class TableTracker:
    """Position inside the current table.

    Attributes:
        alignments: Column alignments of the table. Not used for rendering yet.
        section: Whether cells belong to the header or to a body row.
        cell_index: Zero-based index of the current cell within its row.
    """

    alignments: tuple[Alignment, ...] = ()
    section: TableState = TableState.HEAD
    cell_index: int = 0

    def start_table(self, alignments: tuple[Alignment, ...]) -> None:
        self.alignments = alignments

    def start_head(self) -> None:
        self.section = TableState.HEAD
        self.cell_index = 0

    def end_head(self) -> None:
        self.section = TableState.BODY

    def start_row(self) -> None:
        self.cell_index = 0

    def end_cell(self) -> None:
        self.cell_index += 1

    def current_alignment(self) -> Alignment | None:
        if self.cell_index < len(self.alignments):
            return self.alignments[self.cell_index]
        return None


@dataclass
class TranspileState:
    """Mutable context of a single transpile pass.

    Attributes:
        current_heading: Most recent heading, kept to decide scope closing.
        current_function_name: Name of the function opened by the current
            level-2 heading, or None until its text is known.
        function_names: One name per level-2 heading, in document order.
        active_renderer: Renderer whose container is currently open.
        heading_text: Text collected while a heading is open.
        heading_pending: Output of leaf events inside the open heading, written
            after the heading itself.
        footnotes: Footnote numbering.
        table: Table position.
        end_with_newline: Whether the last non-empty write ended with a newline.
        used_slugs: Names issued so far, for de-duplication.
        slug_counters: Next suffix per base name, for de-duplication.
    """

    current_heading: Heading | None = None
    current_function_name: str | None = None
    function_names: list[str] = field(default_factory=list)
    active_renderer: Renderer | None = None
    heading_text: list[str] = field(default_factory=list)
    heading_pending: list[str] = field(default_factory=list)
    footnotes: FootnoteNumbers = field(default_factory=FootnoteNumbers)
    table: TableTracker = field(default_factory=TableTracker)
    end_with_newline: bool = True
    used_slugs: set[str] = field(default_factory=set)
    slug_counters: dict[str, int] = field(default_factory=dict)

    def needs_function_name(self) -> bool:
        return (
            self.current_heading is not None
            and self.current_heading.level == 2
            and self.current_function_name is None
        )
