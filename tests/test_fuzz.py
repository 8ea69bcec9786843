from __future__ import annotations

import os

import pytest

from corg.constants import RUN_DOC_LABEL
from corg.indent import indent_code
from corg.parser import parse_markdown
from corg.transpiler import push_shell

atheris = pytest.importorskip("atheris")


def test_indent_code_with_fuzzed_input():
    data = os.urandom(4096)
    provider = atheris.FuzzedDataProvider(data)
    checked = 0

    for _ in range(128):
        if provider.remaining_bytes() == 0:
            break
        text = provider.ConsumeUnicodeNoSurrogates(64)
        assert indent_code(text).count("\n") == text.count("\n")
        checked += 1

    assert checked  # ensure we exercised the loop


def test_transpile_fuzzed_documents():
    data = os.urandom(4096)
    provider = atheris.FuzzedDataProvider(data)
    lines: list[str] = []

    while provider.remaining_bytes() > 0 and len(lines) < 32:
        prefix = provider.PickValueInList(["", "# ", "## ", "### ", "- ", "> ", "```\n"])
        lines.append(prefix + provider.ConsumeUnicodeNoSurrogates(32))

    output = push_shell(parse_markdown("\n".join(lines)))
    assert RUN_DOC_LABEL in output
