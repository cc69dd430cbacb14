from .helpers import (
    MISSING_TOKEN as MISSING_TOKEN,
    format_number as format_number,
    needs_quoting as needs_quoting,
    quote as quote,
    quote_if_needed as quote_if_needed,
    unescape_char as unescape_char,
)
