"""Re-indentation of code block bodies placed inside shell functions."""

from __future__ import annotations

from .constants import HEREDOC_PATTERN


def pad_heredoc_delimiter(line: str) -> str:
    """Embed a tab at the start of every quoted heredoc delimiter on a line.

    A quoted delimiter disables leading-whitespace stripping, so the terminator
    line must equal the delimiter exactly. Once the body is indented by one tab
    the terminator reads ``\\tEOF``; the declaration is rewritten to match.

    Args:
        line: A single line of shell code.

    Returns:
        str: The line with each ``<< "NAME"`` or ``<< 'NAME'`` opener rewritten
            to ``<< "\\tNAME"``. Spacing around ``<<`` is preserved.

    Examples:
        pad_heredoc_delimiter('cat << "EOF"')  # 'cat << "\\tEOF"'
        pad_heredoc_delimiter("cat <<< 'EOF'")  # unchanged
    """
    return HEREDOC_PATTERN.sub(
        lambda match: (
            f"<<{match.group('space')}{match.group('quote')}"
            f"\t{match.group('delimiter')}{match.group('quote')}"
        ),
        line,
    )


def indent_code(text: str) -> str:
    """Indent a code block by one tab and align its quoted heredocs.

    Lines are split on line feeds. Non-empty lines gain a leading tab, heredoc
    openers are padded with `pad_heredoc_delimiter`, and the lines are joined
    back without adding a trailing line feed.

    Args:
        text: Raw code block contents.

    Returns:
        str: Indented code.

    Examples:
        indent_code("foo\\ncat << \\"EOF\\"\\nhello\\nEOF\\n")
        # '\\tfoo\\n\\tcat << "\\tEOF"\\n\\thello\\n\\tEOF\\n'
    """
    lines = []
    for line in text.split("\n"):
        prefix = "\t" if line else ""
        lines.append(prefix + pad_heredoc_delimiter(line))
    return "\n".join(lines)
