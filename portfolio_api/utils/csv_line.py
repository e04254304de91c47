def parse_csv_line(line: str) -> list[str]:
    """Split one CSV line into fields.

    Double-quoted fields may contain commas and ``""`` escapes. An unclosed
    quote keeps the rest of the line inside the current field.
    """
    out: list[str] = []
    cur: list[str] = []
    in_quotes = False
    i = 0
    n = len(line)
    while i < n:
        ch = line[i]
        if ch == '"':
            if in_quotes and i + 1 < n and line[i + 1] == '"':
                cur.append('"')
                i += 2
                continue
            in_quotes = not in_quotes
        elif ch == "," and not in_quotes:
            out.append("".join(cur))
            cur = []
        else:
            cur.append(ch)
        i += 1
    out.append("".join(cur))
    return out
