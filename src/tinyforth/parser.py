## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import re

import lark

from .types import Node, NumberLiteral, WordReference, DefinitionStart, DefinitionEnd
from .errors import MalformedNumber


GRAMMAR = r"""start: WORD*

// Any run of non-whitespace characters is a token; there are no comments or strings.
WORD: /\S+/

%ignore /\s+/
"""

_LEXER = lark.Lark(GRAMMAR, parser="lalr")

HAS_DIGIT = re.compile(r"\d")
HAS_COLON = re.compile(r":")
HAS_SEMICOLON = re.compile(r";")
INTEGER = re.compile(r"[+-]?[0-9]+")


def tokenize(source: str) -> list[lark.Token]:
    """Split source on whitespace.  Tokens are `str` instances that also carry `line` and `column`."""
    return list(_LEXER.parse(source).children)


def _token_meta(token, filename) -> dict:
    if not hasattr(token, 'line'): return {'filename': filename}
    return {'filename': filename, 'line': token.line, 'column': token.column}


def classify(token: str, meta: dict | None = None) -> Node:
    # First match wins.  Any digit means the token was meant as a number, e.g. `a1` fails.
    if HAS_DIGIT.search(token):
        if not INTEGER.fullmatch(token):
            raise MalformedNumber(f"Token `{token}` contains a digit but is not an integer.",
                                  forth_token=str(token), forth_meta=meta)
        return NumberLiteral(int(token), meta)
    if HAS_COLON.search(token):
        return DefinitionStart(meta)
    if HAS_SEMICOLON.search(token):
        return DefinitionEnd(meta)
    return WordReference(str(token), meta)


def parse(source: str, filename: str | None = None) -> list[Node]:
    return [classify(tok, _token_meta(tok, filename)) for tok in tokenize(source)]


def format_source_context(source: str, meta: dict | None, token: str | None) -> str:
    if not meta or source is None or 'line' not in meta: return ""
    line, column, token = meta['line'], meta.get('column', 0), token or ''
    lines = source.splitlines()
    start_line, end_line = max(0, line - 3), min(len(lines), line + 2)
    result = [f"\033[97m  File \"{meta.get('filename') or '<INPUT>'}\", line {line}\033[0m"]

    for i in range(start_line, end_line):
        line_content = lines[i]
        line_color = '\033[90m'
        if i+1 == line:
            line_color = '\033[97m'
            if column > 0 and column <= len(line_content):
                line_content = (
                    line_content[:column-1] +
                    f"\033[48;5;30m\033[1;97m{line_content[column-1:column+len(token)-1]}\033[0m" +
                    line_content[column+len(token)-1:]
                )
        result.append(f"{line_color}{i+1:>5} |\033[0m {line_content}")
    return '\n' + '\n'.join(result) + '\n'
