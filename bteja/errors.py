from typing import Optional

from bteja.tokens import Token


class BtejaError(Exception):
    """Base class for every error raised while lexing, parsing or running."""
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class LexError(BtejaError):
    """Raised on an unrecognized character or an unterminated literal."""
    def __init__(self, message: str, position: int, character: str, line: int = 1):
        super().__init__(f"{message} at line {line} (position {position})")
        self.position = position
        self.character = character
        self.line = line


class ParseError(BtejaError):
    """Raised when the token stream does not match the grammar."""
    def __init__(self, message: str, token: Optional[Token] = None):
        where = f" at line {token.line}" if token is not None else ''
        super().__init__(f"{message}{where}")
        self.token = token


class BtejaRuntimeError(BtejaError):
    """Exception type used to propagate Bteja runtime errors.

    `name` classifies the failure (`TypeError`, `NameError`,
    `RedeclarationError`, ...) in the way the language reports it.
    """
    def __init__(self, name: str, message: str):
        super().__init__(f"{name}: {message}")
        self.name = name
        self.detail = message
