# -*- coding: utf-8 -*-
"""
Line-numbered integer BASIC: token source.

The whole program text is lexed once with lark's basic lexer; the interpreter
then walks the token list through a cursor (current token, one-token advance,
rewind to start, raw character peek after the current token).
필요 패키지: pip install lark
"""

from typing import List
from lark import Lark, Token
from lark.exceptions import UnexpectedInput

# ----- Grammar (lexer only: start rule just lists every terminal) -----
GRAMMAR = r"""
start: _item*

_item: NUMBER | LETTER | STRING
     | REM | PRINT | IF | THEN | GOTO | LET
     | PLUS | MINUS | ASTERISK | SLASH | LEFT_PAREN | RIGHT_PAREN
     | LT_EQ | GT_EQ | NOT_EQUAL | LT | GT | EQUAL
     | SEPARATOR | EOL

// 순서 주의: keywords must win over single-letter variables
REM.3: /rem(?![a-z])[^\r\n]*/i
PRINT.2: /print(?![a-z])/i
IF.2: /if(?![a-z])/i
THEN.2: /then(?![a-z])/i
GOTO.2: /goto(?![a-z])/i
LET.2: /let(?![a-z])/i

NUMBER: /\d+/
LETTER: /[a-z]/i
STRING: /"[^"\r\n]*"/

PLUS: "+"
MINUS: "-"
ASTERISK: "*"
SLASH: "/"
LEFT_PAREN: "("
RIGHT_PAREN: ")"
LT_EQ: "<="
GT_EQ: ">="
NOT_EQUAL: "<>"
LT: "<"
GT: ">"
EQUAL: "="
SEPARATOR: ","
EOL: /\r\n|\r|\n/

%import common.WS_INLINE
%ignore WS_INLINE
"""

TOKEN_NAMES = {
    'NUMBER': 'number', 'LETTER': 'variable', 'STRING': 'string',
    'REM': 'REM', 'PRINT': 'PRINT', 'IF': 'IF', 'THEN': 'THEN',
    'GOTO': 'GOTO', 'LET': 'LET',
    'PLUS': '+', 'MINUS': '-', 'ASTERISK': '*', 'SLASH': '/',
    'LEFT_PAREN': '(', 'RIGHT_PAREN': ')',
    'LT_EQ': '<=', 'GT_EQ': '>=', 'NOT_EQUAL': '<>',
    'LT': '<', 'GT': '>', 'EQUAL': '=',
    'SEPARATOR': ',', 'EOL': 'end of line', 'EOF': 'end of input',
}

_LEXER = Lark(GRAMMAR, parser="lalr", start="start", lexer="basic")


class BasicError(RuntimeError):
    """Fatal interpreter error; aborts the run."""


class BasicSyntaxError(BasicError):
    pass


def _lex_window(text, pos, width=60):
    a = max(0, pos - width // 2); b = min(len(text), pos + width // 2)
    line_start = text.rfind('\n', a, pos) + 1
    a = max(a, line_start)
    line_end = text.find('\n', pos, b)
    if line_end != -1:
        b = line_end
    caret = ' ' * (pos - a) + '^'
    return text[a:b] + "\n" + caret


def normalize_source(text):
    # last statement always ends in EOL before EOF
    if text and not text.endswith(('\n', '\r')):
        return text + '\n'
    return text


def tokenize(text) -> List[Token]:
    """Lex `text` into a token list terminated by a synthetic EOF token."""
    text = normalize_source(text)
    try:
        tokens = list(_LEXER.lex(text))
    except UnexpectedInput as e:
        raise BasicSyntaxError(
            f"Syntax Error: unexpected character at line {e.line}, column {e.column}\n"
            + _lex_window(text, e.pos_in_stream)) from e
    tokens.append(Token('EOF', '', start_pos=len(text), end_pos=len(text)))
    return tokens


class TokenStream:
    def __init__(self, text):
        self.text = normalize_source(text)
        self.tokens = tokenize(self.text)
        self.i = 0

    def __repr__(self):
        return f"TokenStream(at {self.i}/{len(self.tokens)}: {self.tokens[self.i]!r})"

    # ----- cursor -----
    def current_token(self): return self.tokens[self.i].type
    def finished(self): return self.tokens[self.i].type == 'EOF'
    def reset(self): self.i = 0

    def next_token(self):
        if not self.finished():
            self.i += 1

    def peek_char(self):
        """Raw source character right after the current token ('' at end of input)."""
        end = self.tokens[self.i].end_pos
        return self.text[end] if end < len(self.text) else ''

    def skip_to_eol(self):
        """Advance past every token up to and including the next EOL."""
        while not self.finished() and self.current_token() != 'EOL':
            self.next_token()
        if self.current_token() == 'EOL':
            self.next_token()

    # ----- payload accessors -----
    def _expect_kind(self, kind):
        t = self.tokens[self.i]
        if t.type != kind:
            raise BasicSyntaxError(
                f"Syntax Error: unexpected `{self.token_to_string(t.type)}` "
                f"expected `{self.token_to_string(kind)}`")
        return t

    def get_num(self): return int(self._expect_kind('NUMBER').value)
    def get_string(self): return self._expect_kind('STRING').value[1:-1]

    def get_token_data(self):
        t = self.tokens[self.i]
        if t.type == 'NUMBER': return int(t.value)
        if t.type == 'STRING': return t.value[1:-1]
        return str(t.value)

    def line_of_current(self):
        return self.tokens[self.i].line

    @staticmethod
    def token_to_string(kind):
        return TOKEN_NAMES.get(kind, kind)
