from datetime import date, datetime
from typing import Any, Mapping, Sequence

import sqlglot.errors
from sqlglot.tokens import Token, Tokenizer, TokenType

from ..errors import ProgrammingError


def _tokenize(query: str) -> list[Token]:
    try:
        return Tokenizer().tokenize(query)
    except sqlglot.errors.TokenError as e:
        raise ProgrammingError(f"unable to read query {query!r}: {e}") from None


def select_columns(query: str) -> list[str]:
    """
    Returns the field names of an AWQL query's SELECT list.

    Used when the service is asked to omit the column header row.

    Raises:
        ProgrammingError: The query has no SELECT list.
    """
    tokens = _tokenize(query)
    if not tokens or tokens[0].token_type != TokenType.SELECT:
        raise ProgrammingError(f"not a SELECT query: {query!r}")

    columns: list[str] = []
    current: list[Token] = []
    for token in tokens[1:]:
        if token.token_type in (TokenType.FROM, TokenType.SEMICOLON):
            break
        if token.token_type == TokenType.COMMA:
            if current:
                columns.append(current[-1].text)
            current = []
            continue
        current.append(token)
    if current:
        columns.append(current[-1].text)

    if not columns:
        raise ProgrammingError(f"empty SELECT list in query {query!r}")
    return columns


def report_name(query: str) -> str | None:
    """Returns the report named after FROM, if any."""
    try:
        tokens = _tokenize(query)
    except ProgrammingError:
        return None
    for token, following in zip(tokens, tokens[1:]):
        if token.token_type == TokenType.FROM:
            return following.text
    return None


def quote(value: Any) -> str:
    """Renders a Python value as an AWQL literal."""
    if value is None:
        raise ProgrammingError("AWQL has no NULL literal")
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, (date, datetime)):
        return value.strftime("%Y%m%d")
    if isinstance(value, str):
        escaped = value.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'
    if isinstance(value, (list, tuple, set, frozenset)):
        return "[" + ",".join(quote(v) for v in value) + "]"
    raise ProgrammingError(f"unsupported parameter type {type(value).__name__}")


def bind_params(
    command: str,
    params: Sequence[Any] | Mapping[str, Any] | None = None,
) -> str:
    """Substitutes ``pyformat`` parameters into the query text."""
    if not params:
        return command
    try:
        if isinstance(params, Mapping):
            return command % {k: quote(v) for k, v in params.items()}
        return command % tuple(quote(v) for v in params)
    except (TypeError, KeyError, ValueError) as e:
        raise ProgrammingError(f"unable to bind parameters: {e}") from None
