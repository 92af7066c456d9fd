from pdptw.parsing.tokenizer import split_lines, token_and_value


def test_split_lines_handles_crlf():
    assert split_lines("NAME : a\r\nSIZE : 3\nEOF") == ["NAME : a", "SIZE : 3", "EOF"]


def test_token_and_value_splits_on_first_colon_only():
    assert token_and_value("COMMENT : see http://example.org") == ["COMMENT", "see http://example.org"]


def test_token_and_value_strips_tabs_and_whitespace():
    assert token_and_value("\tSIZE\t:   25  ") == ["SIZE", "25"]


def test_token_without_colon_yields_single_part():
    assert token_and_value("NODES") == ["NODES"]


def test_blank_line_yields_empty_token():
    assert token_and_value("   ") == [""]
    assert token_and_value("") == [""]
