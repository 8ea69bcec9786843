"""
corg: Markdown runbook to shell script transpiler.

This package can be used both as a CLI tool and as a library.

CLI Usage:
    corg convert runbooks/deploy.md
    corg run scripts/deploy.sh

Library Usage:
    from corg import parse_markdown, push_shell

    events = parse_markdown("## Setup\\n\\n```bash\\nmake\\n```\\n")
    script = push_shell(events)
"""

from .config import CorgConfig
from .events import Event, Start, End, Tag, TagKind, Text
from .exceptions import DocumentNotFoundError, ScriptRunError
from .indent import indent_code
from .models import TranspileState
from .parser import parse_file, parse_markdown
from .slugify import function_slug
from .transpiler import ShellWriter, push_shell, transpile

__version__ = "0.1.0"

__all__ = [
    # Core functionality
    "parse_markdown",
    "parse_file",
    "transpile",
    "push_shell",
    "indent_code",
    "function_slug",
    "ShellWriter",
    # Data models
    "CorgConfig",
    "TranspileState",
    "Event",
    "Start",
    "End",
    "Tag",
    "TagKind",
    "Text",
    # Exceptions
    "DocumentNotFoundError",
    "ScriptRunError",
    # Version
    "__version__",
]
