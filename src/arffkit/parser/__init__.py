from .lexer import (
    Field as Field,
    Line as Line,
    iter_lines as iter_lines,
    tokenize_row as tokenize_row,
)
