"""Constants used across the corg package."""

from __future__ import annotations

import re

from .config import CorgConfig

DEFAULT_CONFIG = CorgConfig()

DEFAULT_MAX_FILE_SIZE = DEFAULT_CONFIG.max_file_size
DOCUMENT_EXTENSIONS = (".md", ".markdown")
SCRIPT_EXTENSION = ".sh"

# Function scopes
FUNCTION_CLOSE = "}\n# - end function\n"
FINAL_FUNCTION_CLOSE = "\n}\n"
RUN_DOC_LABEL = "\n# - run doc: \n"

# Heading openers by level; level 1 is completed by the heading text
ANNOUNCE_OPEN = 'corg_announce "Running Document: '
ANNOUNCE_CLOSE = '"\n\n'
FUNCTION_BEGIN = "\n# - begin function:\n"
SECTION_BEGIN = "\n# - start section:\n"

# Block renderers
PARAGRAPH_OPEN = '\n# - paragraph:\ncorg_debug "'
PARAGRAPH_CLOSE = '"\n\n'
CODE_BEGIN = "# - begin code:\n"

# Passthrough markers
RULE = "# " + "*" * 76 + " #"
BLOCK_QUOTE = "# block quote"
BLOCK_QUOTE_CALL = "corg_info \n"
LIST_FROM_ONE = "# List \n"
LIST_FROM_ONE_AFTER_TEXT = "\n# List\n"
LIST_FROM_OTHER = "#"
BULLET_LIST = "# List (None)\n"
ITEM = "# -"
FOOTNOTE_NOTE = "# -- note:\n# "

# Heredoc openers with a quoted delimiter: `<< "EOF"`, `<<'END'`. The
# lookarounds keep here-strings (`<<<`) and tab-stripping heredocs (`<<-`) out.
HEREDOC_PATTERN = re.compile(
    r"(?<!<)<<(?![<-])"
    r"(?P<space>[ \t]*)"
    r"(?P<quote>[\"'])(?P<delimiter>[^\"'\s]+)(?P=quote)"
)
