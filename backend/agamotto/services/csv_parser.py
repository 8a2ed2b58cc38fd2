"""
CSV Parser

Line-based tokenizer for session CSV files. Produces rows of string cells
without interpreting headers or types.
"""

from typing import List


def parse_csv(content: str) -> List[List[str]]:
    """
    Split CSV text into rows of cells.
    
    - Lines are split first; fields cannot span lines.
    - Blank (whitespace-only) lines are dropped.
    - Double quotes toggle quoting, "" inside quotes is a literal quote.
    - Empty interior and trailing cells are preserved.
    
    Unbalanced quotes never raise: the line is split as far as the quote
    state allows and the validator reports the resulting shape.
    """
    rows: List[List[str]] = []
    
    for line in content.splitlines():
        if not line.strip():
            continue
        rows.append(_split_line(line))
    
    return rows


def _split_line(line: str) -> List[str]:
    cells: List[str] = []
    current: List[str] = []
    inside_quotes = False
    i = 0
    
    while i < len(line):
        char = line[i]
        if char == '"':
            # Escaped quote
            if inside_quotes and i + 1 < len(line) and line[i + 1] == '"':
                current.append('"')
                i += 1
            else:
                inside_quotes = not inside_quotes
        elif char == ',' and not inside_quotes:
            cells.append(''.join(current))
            current = []
        else:
            current.append(char)
        i += 1
    
    cells.append(''.join(current))
    return cells


def quote_cell(value) -> str:
    """Wrap a value in double quotes, doubling embedded quotes"""
    return '"' + str(value).replace('"', '""') + '"'
