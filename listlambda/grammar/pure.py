"""listlambda recursive-descent parser.

Formally, the grammar can be defined as

```
<expr>        ::= <builtin>                      ; tried before <identifier>, no word boundary check (*)
                | <identifier>
                | "(" <paren-body> ")"
                | "{" <list-body> "}"
<builtin>     ::= "hd" | "tl" | "eval"
<identifier>  ::= <letter>+                      ; ASCII letters only
<paren-body>  ::= <identifier> "." <expr>        ; lambda, tried first
                | <expr> (<ws> <expr>)+          ; application, at least 2 items
<list-body>   ::= (<expr> (<ws> <expr>)*)?       ; list, may be empty
<ws>          ::= (" " | "\t" | "\r" | "\n")+
```

There are no grouping parentheses: `(x)` and `()` are both invalid, and a lambda body that is an application has to
be parenthesized itself, as in `(x.(x x))`. Whitespace is only allowed between items.

------------------------------------------------------------------------------------------------------------------------

(*) Keywords are matched as literal prefixes, so `hdx` is read as `hd` followed by `x` and is rejected, and `(hd.hd)`
is a lambda whose body is the builtin, not its parameter.
"""

import string

from listlambda.lang.error import GenericException
from listlambda.pure.lexical import Application, Builtin, Constant, Lambda, List


class ErrorKind:
    ALT = "alt"              # no alternative matched, including a missing closing delimiter
    ARITY = "arity"          # parenthesized body is neither a lambda nor an application of 2+ items
    NON_EMPTY = "non-empty"  # complete expression followed by more input


class ParseError(GenericException):
    """Parse failure. remaining is the unconsumed input at the point of failure."""
    MESSAGES = {
        ErrorKind.ALT: "'{}' is not valid listlambda grammar",
        ErrorKind.ARITY: "'{}' has parentheses around something that is neither a lambda nor an application",
        ErrorKind.NON_EMPTY: "'{}' has trailing input after a complete expression",
    }

    def __init__(self, kind, source, pos):
        self.kind = kind
        self.source = source
        self.remaining = source[pos:]
        super().__init__(ParseError.MESSAGES[kind], source, start=pos, end=pos + 1)

    def __repr__(self):
        return f"ParseError(kind='{self.kind}', remaining='{self.remaining}')"


class Parser:
    """One method per nonterminal. Each method takes a position in self.source and returns (Expression, position after
    it), raising ParseError if it does not match.
    """
    TOKENS = {
        "<open_paren>": "(",
        "<close_paren>": ")",
        "<open_brace>": "{",
        "<close_brace>": "}",
        "<period>": ".",
    }
    LETTERS = frozenset(string.ascii_letters)
    WHITESPACE = frozenset(" \t\r\n")

    def __init__(self, source):
        self.source = source

    def parse(self):
        """Parses all of self.source."""
        expr, pos = self.expr(0)
        if pos != len(self.source):
            raise ParseError(ErrorKind.NON_EMPTY, self.source, pos)
        return expr

    def expr(self, pos):
        for keyword in Builtin.KEYWORDS:
            if self.source.startswith(keyword, pos):
                return Builtin(keyword), pos + len(keyword)

        if self._peek(pos) in Parser.LETTERS:
            return self.identifier(pos)
        elif self._peek(pos) == Parser.TOKENS["<open_paren>"]:
            return self.paren(pos)
        elif self._peek(pos) == Parser.TOKENS["<open_brace>"]:
            return self.list_literal(pos)

        raise ParseError(ErrorKind.ALT, self.source, pos)

    def identifier(self, pos):
        end = pos
        while self._peek(end) in Parser.LETTERS:
            end += 1
        if end == pos:
            raise ParseError(ErrorKind.ALT, self.source, pos)
        return Constant(self.source[pos:end]), end

    def paren(self, pos):
        """Lambda is tried first. Once it matches, a missing ')' is an error: there is no falling back to application."""
        inner = self._expect("<open_paren>", pos)

        try:
            lambda_expr, end = self.lambda_form(inner)
        except ParseError:
            lambda_expr = None

        if lambda_expr is not None:
            return lambda_expr, self._expect("<close_paren>", end)

        items, end = self.sequence(inner)
        if len(items) < 2:
            raise ParseError(ErrorKind.ARITY, self.source, pos)
        return Application(items), self._expect("<close_paren>", end)

    def lambda_form(self, pos):
        param, pos = self.identifier(pos)
        pos = self._expect("<period>", pos)
        body, pos = self.expr(pos)
        return Lambda(param.name, body), pos

    def list_literal(self, pos):
        items, end = self.sequence(self._expect("<open_brace>", pos))
        return List.from_source(items), self._expect("<close_brace>", end)

    def sequence(self, pos):
        """Zero or more whitespace-separated expressions. Stops (without consuming the separator) at the first item
        that cannot start an expression; errors from inside a started item propagate.
        """
        items = []
        try:
            item, pos = self.expr(pos)
        except ParseError as error:
            if self._is_no_match(error, pos):
                return items, pos
            raise
        items.append(item)

        while True:
            after_ws = self.whitespace(pos)
            if after_ws == pos:
                break
            try:
                item, end = self.expr(after_ws)
            except ParseError as error:
                if self._is_no_match(error, after_ws):
                    break
                raise
            items.append(item)
            pos = end

        return items, pos

    def whitespace(self, pos):
        while self._peek(pos) in Parser.WHITESPACE:
            pos += 1
        return pos

    def _peek(self, pos):
        return self.source[pos] if pos < len(self.source) else ""

    def _expect(self, token, pos):
        if self._peek(pos) != Parser.TOKENS[token]:
            raise ParseError(ErrorKind.ALT, self.source, pos)
        return pos + 1

    @staticmethod
    def _is_no_match(error, pos):
        return error.kind == ErrorKind.ALT and error.start == pos


def parse(source):
    """Converts source to an Expression, raises ParseError if source is not exactly one valid expression."""
    return Parser(source).parse()
