from __future__ import annotations

import pandas as pd


CsvRow = dict[str, str]


def parse_csv_line(line: str) -> list[str]:
    """Split one line on commas that sit outside double quotes.

    Quote characters only toggle the quoted state; an unbalanced quote leaves
    the rest of the line quoted rather than raising.
    """
    fields: list[str] = []
    current: list[str] = []
    in_quotes = False

    for char in line:
        if char == '"':
            in_quotes = not in_quotes
        elif char == "," and not in_quotes:
            fields.append("".join(current).strip())
            current = []
        else:
            current.append(char)

    fields.append("".join(current).strip())
    return fields


def _clean_value(value: str) -> str:
    return value.replace('"', "").strip()


def parse_csv(text: str) -> list[CsvRow]:
    text = (text or "").removeprefix("\ufeff")
    if not text:
        return []

    lines = [line.rstrip("\r") for line in text.split("\n")]
    headers = [_clean_value(header) for header in parse_csv_line(lines[0])]

    rows: list[CsvRow] = []
    for line in lines[1:]:
        if not line.strip():
            continue
        values = [_clean_value(value) for value in parse_csv_line(line)]
        rows.append({header: values[index] if index < len(values) else "" for index, header in enumerate(headers)})
    return rows


def rows_to_frame(rows: list[CsvRow]) -> pd.DataFrame:
    if not rows:
        return pd.DataFrame()
    return pd.DataFrame(rows, columns=list(rows[0].keys()), dtype=str)


def parse_csv_frame(text: str) -> pd.DataFrame:
    return rows_to_frame(parse_csv(text))
