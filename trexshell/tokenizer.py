"""Split a command line into tokens and expand quotes, variables and ``~``."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum

from .state import Shell

_SINGLE_QUOTE = "'"
_DOUBLE_QUOTE = '"'
_SPECIAL_CHARS = "|<>"


class TokenType(IntEnum):
    """Kinds of token a command line is made of."""

    UNDEFINED = 0
    WORD = 1
    PIPE = 2
    IREDIRECT = 3
    OREDIRECT = 4
    HERE_DOC = 5
    OAPPEND = 6


_OPERATORS = {
    ">": TokenType.OREDIRECT,
    "<": TokenType.IREDIRECT,
    ">>": TokenType.OAPPEND,
    "<<": TokenType.HERE_DOC,
    "|": TokenType.PIPE,
}


class _State(Enum):
    GENERAL = "general"
    SQUOTE = _SINGLE_QUOTE
    DQUOTE = _DOUBLE_QUOTE


@dataclass
class Token:
    """One token of a command line."""

    value: str
    type: TokenType = TokenType.UNDEFINED


def check_is_closed(text: str, quote: str) -> bool:
    """Tell whether the quote opening ``text`` is closed later in it."""
    return quote in text[1:]


def expand_word(key: str, shell: Shell) -> str | None:
    """Expand ``$NAME`` or ``$?``; return None for an unknown variable."""
    if not key.startswith("$"):
        raise ValueError(f"not a variable reference: {key!r}")
    if key[1:2] == "?":
        return str(shell.status)
    return shell.lookup(key[1:])


def _variable_span(text: str) -> str:
    """Cut a ``$?`` reference down to its two characters."""
    if text[1:2] == "?":
        return text[:2]
    return text


def _expand_double_quoted(content: str, shell: Shell) -> str:
    parts: list[str] = []
    position = 0
    while position < len(content):
        char = content[position]
        if char == "$":
            end = content.find(" ", position)
            if end == -1:
                end = len(content)
            span = _variable_span(content[position:end])
            parts.append(expand_word(span, shell) or "")
            position += len(span)
        else:
            parts.append(char)
            position += 1
    return "".join(parts)


def _expand_word_token(text: str, shell: Shell) -> str:
    parts: list[str] = []
    position = 0
    while position < len(text):
        char = text[position]
        rest = text[position:]
        if char in (_DOUBLE_QUOTE, _SINGLE_QUOTE) and check_is_closed(rest, char):
            end = text.index(char, position + 1)
            inner = text[position + 1:end]
            if char == _DOUBLE_QUOTE:
                parts.append(_expand_double_quoted(inner, shell))
            else:
                parts.append(inner)
            position = end + 1
        elif char == "$":
            # Outside quotes the variable name runs to the end of the word.
            span = _variable_span(rest)
            parts.append(expand_word(span, shell) or "")
            position += len(span)
        elif position == 0 and text == "~":
            parts = [shell.env.search("HOME") or ""]
            position += 1
        else:
            parts.append(char)
            position += 1
    return "".join(parts)


def lex(token: Token, shell: Shell) -> Token:
    """Give ``token`` its type and, for a word, its expanded value."""
    operator = _OPERATORS.get(token.value)
    if operator is not None:
        token.type = operator
    else:
        token.value = _expand_word_token(token.value, shell)
        token.type = TokenType.WORD
    return token


def tokenize(line: str, shell: Shell) -> list[Token]:
    """Split ``line`` into lexed tokens."""
    tokens: list[Token] = []
    buffer: list[str] = []
    state = _State.GENERAL

    def flush() -> None:
        if buffer:
            tokens.append(lex(Token("".join(buffer)), shell))
            buffer.clear()

    position = 0
    while position < len(line):
        char = line[position]
        if state is _State.GENERAL:
            if char in (_SINGLE_QUOTE, _DOUBLE_QUOTE):
                state = _State(char)
                buffer.append(char)
            elif char in _SPECIAL_CHARS:
                flush()
                buffer.append(char)
                if char in "<>" and line[position + 1:position + 2] == char:
                    buffer.append(char)
                    position += 1
                flush()
            elif char == " ":
                flush()
            else:
                buffer.append(char)
        else:
            buffer.append(char)
            if char == state.value:
                state = _State.GENERAL
        position += 1
    flush()
    return tokens