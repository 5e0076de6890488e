import codecs

import pytest

from tabread.delimited import detect_separator, parse_delimited, read_delimited, split_lines, tokenize_line
from tabread.rules import CANDIDATE_SEPARATORS


# --- separator detection ---

def test_single_candidate_in_first_line():
    assert detect_separator(["a\tb\tc", "1\t2\t3"]) == "\t"


def test_no_candidate_in_first_line_returns_fallback():
    assert detect_separator(["abc", "a,b"]) == ","
    assert detect_separator(["abc", "a,b"], fallback="|") == "|"


def test_empty_input_returns_fallback():
    assert detect_separator([]) == ","
    assert detect_separator(["a,b"], candidates=[]) == ","


def test_stable_count_wins_over_priority_order():
    # comma count changes, semicolon count repeats
    lines = ["a;b,c", "1;2", "3;4"]
    assert detect_separator(lines) == ";"


def test_priority_order_breaks_ties():
    lines = ["a,b;c", "1,2;3;4"]
    assert detect_separator(lines) == ","


def test_quoted_separators_are_not_counted():
    lines = ['a;"x,y,z";c', '1;"p";3', 'u,v;w;x']
    # comma: 0 -> 0 outside quotes
    assert detect_separator(lines) == ","
    lines = ['a;"x,y";c', '1;"p,q,r";3']
    assert detect_separator(lines, candidates=[";", ","]) == ";"


def test_no_stable_candidate_returns_fallback():
    lines = ["a,b;c", "1,2,3;4;5"]
    assert detect_separator(lines, fallback="|") == "|"


def test_duplicate_candidates_are_ignored():
    assert detect_separator(["a;b", "c;d"], candidates=[";", ";", ","]) == ";"


@pytest.mark.parametrize("lines", [
    ["a,b;c\td", "1,2;3\t4", "x"],
    ["a;b", "1;2;3", "1;2;3;4"],
    ['"a,b";c', '"d";e'],
    ["plain"],
])
def test_result_is_candidate_or_fallback(lines):
    assert detect_separator(lines, fallback="|") in CANDIDATE_SEPARATORS + ("|",)


# --- tokenizer ---

def test_simple_split():
    assert tokenize_line("a,b,c", ",") == ["a", "b", "c"]


def test_empty_fields():
    assert tokenize_line("a,,c", ",") == ["a", "", "c"]
    assert tokenize_line("a,b,", ",") == ["a", "b", ""]
    assert tokenize_line("", ",") == [""]


def test_quoted_field_keeps_separator():
    assert tokenize_line('A2,"B2, extra",C2', ",") == ["A2", "B2, extra", "C2"]


def test_quotes_are_stripped():
    assert tokenize_line('"a","b","c"', ",") == ["a", "b", "c"]
    assert tokenize_line('a,""', ",") == ["a", ""]
    assert tokenize_line('"",b', ",") == ["", "b"]


def test_doubled_quote_is_literal():
    assert tokenize_line('"say ""hi""",x', ",") == ['say "hi"', "x"]
    assert tokenize_line('"a""b";c', ";") == ['a"b', "c"]


def test_unterminated_quote_drops_open_field():
    assert tokenize_line('a,"b,c', ",") == ["a"]


def test_tab_separator():
    assert tokenize_line('x\t"y\tz"', "\t") == ["x", "y\tz"]


# --- assembler ---

def test_split_lines_drops_empty_lines():
    assert split_lines("a\r\nb\n\nc\r") == ["a", "b", "c"]


def test_basic_csv():
    ds = read_delimited(b"A,B,C\nA1,B1,C1\nA2,B2,C2\n")
    assert ds.names() == ["Sheet1"]
    t = ds["Sheet1"]
    assert t.column_names() == ["A", "B", "C"]
    # no header row: every line is data
    assert t.rows == (("A", "B", "C"), ("A1", "B1", "C1"), ("A2", "B2", "C2"))


def test_quoted_comma_is_not_split():
    t = read_delimited(b'A,B,C\nA1,"B2, extra",C2\n')["Sheet1"]
    assert len(t.columns) == 3
    assert t.rows[1] == ("A1", "B2, extra", "C2")


def test_european_csv():
    res = parse_delimited(b"a;b;c\r\n1,5;2,5;3\r\n")
    assert res.separator == ";"
    assert res.lines == 2
    assert res.dataset["Sheet1"].rows[1] == ("1,5", "2,5", "3")


def test_schema_grows_and_rows_are_not_padded():
    t = read_delimited(b"a,b\n1,2,3,4\nx\n")["Sheet1"]
    assert t.column_names() == ["A", "B", "C", "D"]
    assert t.rows[0] == ("a", "b")
    assert t.rows[2] == ("x",)
    assert t.cell(0, 3) is None
    assert t.cell(1, 3) == "4"


def test_schema_grows_more_than_once():
    t = read_delimited(b"a,b\n1,2,3\n1,2,3,4,5,6,7\n")["Sheet1"]
    assert len(t.columns) == 7
    assert [len(r) for r in t.rows] == [2, 3, 7]


def test_empty_input():
    ds = read_delimited(b"")
    assert len(ds) == 1
    t = ds["Sheet1"]
    assert t.columns == ()
    assert t.rows == ()


def test_custom_table_name():
    assert read_delimited(b"a,b\n", table_name="Data").names() == ["Data"]


def test_utf16_bom_file():
    raw = codecs.BOM_UTF16_LE + "x;y\n1;2\n".encode("utf-16-le")
    res = parse_delimited(raw)
    assert res.encoding.name == "utf-16-le"
    assert res.dataset["Sheet1"].rows == (("x", "y"), ("1", "2"))


def test_cp1252_file_without_bom():
    t = read_delimited("name,city\nPaul,Montréal\n".encode("cp1252"))["Sheet1"]
    assert t.rows[1] == ("Paul", "Montréal")


def test_empty_cells_are_counted():
    raw = b"A1,B1,,D1,E1\nA2,,,,E2\nA3,,,,E3\n"
    t = read_delimited(raw)["Sheet1"]
    empty = sum(
        1
        for r in range(len(t.rows))
        for c in range(len(t.columns))
        if t.cell(r, c) in ("", None)
    )
    assert empty == 7
