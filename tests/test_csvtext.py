from libsearch.csvtext import normalize_header, parse_csv, rows_to_records


def test_quoted_comma_stays_in_one_field():
    assert parse_csv('"Doe, Jane",Title,Pub') == [["Doe, Jane", "Title", "Pub"]]


def test_doubled_quote_is_literal():
    rows = parse_csv('"He said ""hi""",A,B')
    assert rows[0][0] == 'He said "hi"'
    assert rows[0][1:] == ["A", "B"]


def test_blank_and_comma_only_lines_are_dropped():
    text = "a,b\n\n , \n   \nc,d\n"
    assert parse_csv(text) == [["a", "b"], ["c", "d"]]


def test_crlf_and_lf_parse_the_same():
    assert parse_csv("a,b\r\nc,d") == [["a", "b"], ["c", "d"]]
    assert parse_csv("a,b\nc,d") == [["a", "b"], ["c", "d"]]


def test_lone_cr_ends_a_row():
    assert parse_csv("a,b\rc,d") == [["a", "b"], ["c", "d"]]


def test_newline_inside_quotes_is_kept():
    assert parse_csv('"line one\nline two",x\r\ny,z') == [
        ["line one\nline two", "x"],
        ["y", "z"],
    ]


def test_unterminated_quote_is_accepted():
    assert parse_csv('a,"open field\nstill open') == [["a", "open field\nstill open"]]


def test_empty_input():
    assert parse_csv("") == []
    assert rows_to_records([]) == []


def test_header_normalization_removes_internal_whitespace():
    assert normalize_header(" Title Name ") == "TitleName"
    assert normalize_header("\ufeff서 명") == "서명"
    assert normalize_header(None) == ""


def test_records_from_rows():
    rows = parse_csv("\ufeff서명, 저자 ,출판사\n 어린 왕자 ,생텍쥐페리,열린책들\n데미안,헤세\n")
    records = rows_to_records(rows)

    assert [r.id for r in records] == ["0", "1"]
    assert records[0].fields == {"서명": "어린 왕자", "저자": "생텍쥐페리", "출판사": "열린책들"}
    # short row padded
    assert records[1].get("출판사") == ""
    assert records[1].get("ISBN") is None


def test_empty_headers_get_positional_placeholders():
    records = rows_to_records([["title", "", "  "], ["a", "b", "c", "extra"]])
    assert records[0].fields == {"title": "a", "__col_1": "b", "__col_2": "c"}


def test_placeholder_never_collides_with_a_real_header():
    records = rows_to_records([["__col_1", ""], ["real", "blank header"]])
    assert records[0].fields == {"__col_1": "real", "___col_1": "blank header"}


def test_every_record_has_the_header_key_set():
    records = rows_to_records(parse_csv("a,b,c\n1\n1,2\n1,2,3\n"))
    assert all(list(r.fields) == ["a", "b", "c"] for r in records)
