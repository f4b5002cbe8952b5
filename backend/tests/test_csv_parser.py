from studio_dashboard.services.csv_parser import parse_csv, parse_csv_frame, parse_csv_line


def test_quoted_delimiter_stays_in_one_field() -> None:
    assert parse_csv_line('"a,b",c') == ["a,b", "c"]


def test_unbalanced_quote_carries_to_end_of_line() -> None:
    assert parse_csv_line('a,"b,c') == ["a", "b,c"]


def test_row_count_and_keys_follow_header() -> None:
    text = '"Name","Email","Join date"\n"Ann","ann@example.com","2025-09-01T08:00:00Z"\n\n"Bo","bo@example.com",""\n'
    rows = parse_csv(text)

    assert len(rows) == 2
    assert all(list(row.keys()) == ["Name", "Email", "Join date"] for row in rows)
    assert rows[0]["Email"] == "ann@example.com"
    assert rows[1]["Join date"] == ""


def test_short_lines_pad_missing_fields_with_empty_strings() -> None:
    rows = parse_csv("a,b,c\n1\n2,3\n")

    assert rows == [{"a": "1", "b": "", "c": ""}, {"a": "2", "b": "3", "c": ""}]


def test_windows_line_endings_and_whitespace_are_trimmed() -> None:
    rows = parse_csv('"Category", "Item"\r\n "Pack" , "10 Class Package"\r\n')

    assert rows == [{"Category": "Pack", "Item": "10 Class Package"}]


def test_empty_text_yields_no_rows() -> None:
    assert parse_csv("") == []
    assert parse_csv("only,headers") == []
    assert parse_csv_frame("").empty


def test_frame_keeps_string_values() -> None:
    frame = parse_csv_frame('"Sale value","Payment status"\n"99.00","Succeeded"\n"280.00","Failed"')

    assert list(frame.columns) == ["Sale value", "Payment status"]
    assert frame["Sale value"].tolist() == ["99.00", "280.00"]


def test_leading_byte_order_mark_is_dropped() -> None:
    rows = parse_csv('\ufeff"Category","Item"\n"Pack","10 Class Package"')

    assert list(rows[0].keys()) == ["Category", "Item"]
    assert rows[0]["Category"] == "Pack"
