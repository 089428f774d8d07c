"""Parser for the subset of Ruby used by gem dependency files.

A dependency file is a sequence of statements such as::

    source "https://rubygems.org"

    gem "rake", "~> 13.0"

    group :test, :development do
      gem "minitest", require: false
    end

Each statement is a method name followed by positional arguments, optional
trailing keyword options and an optional `do ... end` or `{ ... }` block.
Nothing is evaluated here; `GemDependencyAPI` executes the resulting
`Statement` nodes.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .errors import DslSyntaxError

TOKEN_MATCH = re.compile(
    r"""
    (?P<NEWLINE>\n|;)
    |(?P<SKIP>[ \t\r]+|\\\r?\n)
    |(?P<COMMENT>\#[^\n]*)
    |(?P<ARROW>=>)
    |(?P<WORDS>%[wi](?:\[[^\]]*\]|\([^)]*\)|\{[^}]*\}))
    |(?P<LABEL>[A-Za-z_][A-Za-z0-9_]*:(?!:))
    |(?P<SYMBOL>:(?:[A-Za-z_][A-Za-z0-9_]*[?!]?|"(?:[^"\\]|\\.)*"|'(?:[^'\\]|\\.)*'))
    |(?P<STRING>'(?:[^'\\]|\\.)*'|"(?:[^"\\]|\\.)*")
    |(?P<NUMBER>-?\d+(?:\.\d+)?)
    |(?P<IDENT>[A-Za-z_][A-Za-z0-9_]*[?!]?)
    |(?P<PUNCT>[(),\[\]{}])
    """,
    re.VERBOSE,
)

DOUBLE_QUOTE_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "s": " ", "0": "\0", "e": "\x1b"}

KEYWORD_VALUES: dict[str, Any] = {"true": True, "false": False, "nil": None}

# `#{` not escaped by an odd number of backslashes
INTERPOLATION_MATCH = re.compile(r"(?<!\\)(?:\\\\)*#\{")


class StatementKind(Enum):
    """The statements a gem dependency file may contain."""

    GEM = "gem"
    GROUP = "group"
    PLATFORM = "platform"
    PLATFORMS = "platforms"
    RUBY = "ruby"
    SOURCE = "source"


@dataclass(frozen=True)
class Token:
    kind: str
    value: str
    line: int


@dataclass(frozen=True)
class Statement:
    """A single call in a dependency file."""

    name: str
    args: tuple[Any, ...] = ()
    options: dict[str, Any] = field(default_factory=dict)
    body: tuple[Statement, ...] | None = None
    line: int = 0

    @property
    def kind(self) -> StatementKind:
        """The statement kind; raises `ValueError` for names that are not statements."""
        return StatementKind(self.name)


def _unquote(literal: str, path: str, line: int) -> str:
    quote, body = literal[0], literal[1:-1]
    if quote == "'":
        return re.sub(r"\\([\\'])", r"\1", body)
    if INTERPOLATION_MATCH.search(body):
        msg = "string interpolation is not supported"
        raise DslSyntaxError(msg, path, line)

    def unescape(m: re.Match[str]) -> str:
        return DOUBLE_QUOTE_ESCAPES.get(m.group(1), m.group(1))

    return re.sub(r"\\(.)", unescape, body, flags=re.DOTALL)


def tokenize(text: str, path: str = "<string>") -> list[Token]:
    """Split the dependency file `text` into tokens, dropping whitespace and comments."""
    tokens: list[Token] = []
    line = 1
    pos = 0
    while pos < len(text):
        m = TOKEN_MATCH.match(text, pos)
        if m is None:
            msg = f"unexpected character {text[pos]!r}"
            raise DslSyntaxError(msg, path, line)
        kind = m.lastgroup
        value = m.group()
        if kind not in ("SKIP", "COMMENT"):
            tokens.append(Token(kind, value, line))  # type: ignore[arg-type]
        line += value.count("\n")
        pos = m.end()
    tokens.append(Token("EOF", "", line))
    return tokens


class Parser:
    """Recursive descent parser producing `Statement` nodes from tokens."""

    def __init__(self, tokens: list[Token], path: str = "<string>") -> None:
        """Initialize the parser over the output of `tokenize`."""
        self.tokens = tokens
        self.path = path
        self.pos = 0

    def parse(self) -> tuple[Statement, ...]:
        """Parse every statement up to the end of the file."""
        return tuple(self._statements(None))

    @property
    def _peek(self) -> Token:
        return self.tokens[self.pos]

    def _advance(self) -> Token:
        token = self.tokens[self.pos]
        self.pos += 1
        return token

    def _error(self, message: str, token: Token | None = None) -> DslSyntaxError:
        if token is None:
            token = self._peek
        return DslSyntaxError(message, self.path, token.line)

    def _at(self, kind: str, value: str | None = None) -> bool:
        token = self._peek
        return token.kind == kind and (value is None or token.value == value)

    def _expect(self, kind: str, value: str) -> Token:
        if not self._at(kind, value):
            token = self._peek
            found = "end of file" if token.kind == "EOF" else repr(token.value)
            msg = f"expected {value!r} but found {found}"
            raise self._error(msg)
        return self._advance()

    def _skip_newlines(self) -> None:
        while self._at("NEWLINE"):
            self._advance()

    def _statements(self, terminator: tuple[str, str] | None) -> list[Statement]:
        statements: list[Statement] = []
        while True:
            self._skip_newlines()
            if terminator is not None and self._at(*terminator):
                return statements
            if self._at("EOF"):
                if terminator is not None:
                    msg = f"missing {terminator[1]!r}"
                    raise self._error(msg)
                return statements
            statements.append(self._statement())
            if not (self._at("NEWLINE") or self._at("EOF") or (terminator is not None and self._at(*terminator))):
                msg = f"unexpected {self._peek.value!r}"
                raise self._error(msg)

    def _statement(self) -> Statement:
        token = self._peek
        if token.kind != "IDENT" or token.value in ("do", "end") or token.value in KEYWORD_VALUES:
            msg = f"expected a statement but found {token.value!r}"
            raise self._error(msg)
        self._advance()
        args: list[Any] = []
        options: dict[str, Any] = {}
        parenthesised = self._at("PUNCT", "(")
        if parenthesised:
            self._advance()
            self._arguments(args, options, closing=")")
        elif self._starts_value():
            self._arguments(args, options, closing=None)

        body: tuple[Statement, ...] | None = None
        if self._at("IDENT", "do"):
            self._advance()
            body = tuple(self._statements(("IDENT", "end")))
            self._advance()
        elif self._at("PUNCT", "{") and (parenthesised or not (args or options)):
            self._advance()
            body = tuple(self._statements(("PUNCT", "}")))
            self._advance()
        return Statement(name=token.value, args=tuple(args), options=options, body=body, line=token.line)

    def _starts_value(self) -> bool:
        token = self._peek
        if token.kind in ("STRING", "SYMBOL", "NUMBER", "LABEL", "WORDS"):
            return True
        if token.kind == "PUNCT":
            return token.value == "["
        return token.kind == "IDENT" and token.value in KEYWORD_VALUES

    def _arguments(self, args: list[Any], options: dict[str, Any], closing: str | None) -> None:
        if closing is not None:
            self._skip_newlines()
            if self._at("PUNCT", closing):
                self._advance()
                return
        while True:
            self._argument(args, options)
            if closing is not None:
                self._skip_newlines()
            if not self._at("PUNCT", ","):
                break
            self._advance()
            self._skip_newlines()
        if closing is not None:
            self._expect("PUNCT", closing)
        # a trailing hash literal is the options hash
        if args and not options and isinstance(args[-1], dict):
            options.update(args.pop())

    def _argument(self, args: list[Any], options: dict[str, Any]) -> None:
        if self._at("LABEL"):
            key = self._advance().value[:-1]
            self._skip_newlines()
            options[key] = self._value()
            return
        token = self._peek
        value = self._value()
        if self._at("ARROW"):
            self._advance()
            self._skip_newlines()
            options[self._key(value, token)] = self._value()
        elif options:
            msg = "positional argument after keyword options"
            raise self._error(msg, token)
        else:
            args.append(value)

    def _key(self, value: Any, token: Token) -> str:
        if not isinstance(value, str):
            msg = f"unsupported option key {token.value!r}"
            raise self._error(msg, token)
        return value

    def _value(self) -> Any:  # noqa: PLR0911
        token = self._advance()
        if token.kind == "STRING":
            return _unquote(token.value, self.path, token.line)
        if token.kind == "SYMBOL":
            name = token.value[1:]
            if name[0] in "'\"":
                return _unquote(name, self.path, token.line)
            return name
        if token.kind == "NUMBER":
            return float(token.value) if "." in token.value else int(token.value)
        if token.kind == "WORDS":
            return token.value[3:-1].split()
        if token.kind == "IDENT" and token.value in KEYWORD_VALUES:
            return KEYWORD_VALUES[token.value]
        if token.kind == "PUNCT" and token.value == "[":
            return self._array()
        if token.kind == "PUNCT" and token.value == "{":
            return self._hash()
        found = "end of file" if token.kind == "EOF" else repr(token.value)
        msg = f"unsupported expression {found}"
        raise self._error(msg, token)

    def _array(self) -> list[Any]:
        items: list[Any] = []
        self._skip_newlines()
        while not self._at("PUNCT", "]"):
            items.append(self._value())
            self._skip_newlines()
            if not self._at("PUNCT", ","):
                break
            self._advance()
            self._skip_newlines()
        self._expect("PUNCT", "]")
        return items

    def _hash(self) -> dict[str, Any]:
        items: dict[str, Any] = {}
        self._skip_newlines()
        while not self._at("PUNCT", "}"):
            if self._at("LABEL"):
                key = self._advance().value[:-1]
            else:
                token = self._peek
                key = self._key(self._value(), token)
                self._expect("ARROW", "=>")
            self._skip_newlines()
            items[key] = self._value()
            self._skip_newlines()
            if not self._at("PUNCT", ","):
                break
            self._advance()
            self._skip_newlines()
        self._expect("PUNCT", "}")
        return items


def parse(text: str, path: str = "<string>") -> tuple[Statement, ...]:
    """Parse the contents of a gem dependency file."""
    return Parser(tokenize(text, path), path).parse()
