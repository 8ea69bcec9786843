"""Structural events consumed by the transpiler.

The event stream mirrors a pull-parser view of an extended Markdown document:
block and inline containers open with `Start` and close with `End`, and leaf
events carry text in between.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Union


class TagKind(Enum):
    """Container kinds that can open and close in the event stream."""

    PARAGRAPH = auto()
    RULE = auto()
    HEADING = auto()
    BLOCK_QUOTE = auto()
    CODE_BLOCK = auto()
    LIST = auto()
    ITEM = auto()
    FOOTNOTE_DEFINITION = auto()
    HTML_BLOCK = auto()
    TABLE = auto()
    TABLE_HEAD = auto()
    TABLE_ROW = auto()
    TABLE_CELL = auto()
    EMPHASIS = auto()
    STRONG = auto()
    STRIKETHROUGH = auto()
    LINK = auto()
    IMAGE = auto()


class Alignment(Enum):
    """Column alignment hint of a table."""

    NONE = auto()
    LEFT = auto()
    CENTER = auto()
    RIGHT = auto()


class LinkType(Enum):
    """How a link or image was written in the source document."""

    INLINE = auto()
    REFERENCE = auto()
    AUTOLINK = auto()
    EMAIL = auto()


@dataclass(frozen=True)
class Tag:
    """A container tag together with the attributes of its kind.

    Attributes:
        kind: Container kind.
        level: Heading level (1-6); zero for other kinds.
        info: Info string of a code block.
        start: First number of an ordered list; None for bullet lists.
        name: Label of a footnote definition.
        alignments: Column alignments of a table.
        link_type: Discriminator for links and images.
        destination: Link or image target.
        title: Link or image title.

    Examples:
        Tag.heading(2)
        Tag.code_block("bash")
        Tag.of(TagKind.PARAGRAPH)
    """

    kind: TagKind
    level: int = 0
    info: str = ""
    start: int | None = None
    name: str = ""
    alignments: tuple[Alignment, ...] = ()
    link_type: LinkType | None = None
    destination: str = ""
    title: str = ""

    @classmethod
    def of(cls, kind: TagKind) -> Tag:
        return cls(kind=kind)

    @classmethod
    def heading(cls, level: int) -> Tag:
        return cls(kind=TagKind.HEADING, level=level)

    @classmethod
    def code_block(cls, info: str = "") -> Tag:
        return cls(kind=TagKind.CODE_BLOCK, info=info)

    @classmethod
    def list_block(cls, start: int | None = None) -> Tag:
        return cls(kind=TagKind.LIST, start=start)

    @classmethod
    def footnote_definition(cls, name: str) -> Tag:
        return cls(kind=TagKind.FOOTNOTE_DEFINITION, name=name)

    @classmethod
    def table(cls, alignments: tuple[Alignment, ...] = ()) -> Tag:
        return cls(kind=TagKind.TABLE, alignments=tuple(alignments))

    @classmethod
    def link(
        cls, destination: str, title: str = "", link_type: LinkType = LinkType.INLINE
    ) -> Tag:
        return cls(
            kind=TagKind.LINK, destination=destination, title=title, link_type=link_type
        )

    @classmethod
    def image(
        cls, destination: str, title: str = "", link_type: LinkType = LinkType.INLINE
    ) -> Tag:
        return cls(
            kind=TagKind.IMAGE, destination=destination, title=title, link_type=link_type
        )


@dataclass(frozen=True)
class Start:
    tag: Tag


@dataclass(frozen=True)
class End:
    tag: Tag


@dataclass(frozen=True)
class Text:
    text: str


@dataclass(frozen=True)
class Code:
    """Inline code span."""

    text: str


@dataclass(frozen=True)
class Html:
    """Raw markup belonging to an HTML block."""

    html: str


@dataclass(frozen=True)
class InlineHtml:
    html: str


@dataclass(frozen=True)
class SoftBreak:
    pass


@dataclass(frozen=True)
class HardBreak:
    pass


@dataclass(frozen=True)
class FootnoteReference:
    name: str


@dataclass(frozen=True)
class TaskListMarker:
    checked: bool


Event = Union[
    Start,
    End,
    Text,
    Code,
    Html,
    InlineHtml,
    SoftBreak,
    HardBreak,
    FootnoteReference,
    TaskListMarker,
]
