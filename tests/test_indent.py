from __future__ import annotations

from corg.indent import indent_code, pad_heredoc_delimiter


def test_heredoc_terminator_matches_padded_delimiter():
    result = indent_code('foo\ncat << "EOF"\nhello\nEOF\n')

    assert result == '\tfoo\n\tcat << "\tEOF"\n\thello\n\tEOF\n'
    lines = result.split("\n")
    declared = lines[1].split('"')[1]
    assert lines[3] == declared


def test_single_quoted_delimiter_is_padded():
    assert pad_heredoc_delimiter("cat <<'END'") == "cat <<'\tEND'"


def test_spacing_around_operator_is_preserved():
    assert pad_heredoc_delimiter('cat <<  "EOF" > out') == 'cat <<  "\tEOF" > out'


def test_unquoted_heredoc_is_left_alone():
    assert pad_heredoc_delimiter("cat << EOF") == "cat << EOF"


def test_tab_stripping_heredoc_is_left_alone():
    assert pad_heredoc_delimiter('cat <<- "EOF"') == 'cat <<- "EOF"'


def test_here_string_is_left_alone():
    assert pad_heredoc_delimiter("cat <<< 'EOF'") == "cat <<< 'EOF'"


def test_every_opener_on_a_line_is_padded():
    line = 'paste <<"A" <<"B"'
    assert pad_heredoc_delimiter(line) == 'paste <<"\tA" <<"\tB"'


def test_empty_lines_stay_empty():
    assert indent_code("a\n\nb") == "\ta\n\n\tb"


def test_no_trailing_line_feed_is_added():
    assert indent_code("make") == "\tmake"


def test_empty_text_is_empty():
    assert indent_code("") == ""
