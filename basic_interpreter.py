# -*- coding: utf-8 -*-
"""
Line-numbered integer BASIC: direct-execution interpreter.

There is no parse tree. Statements are executed straight off the token
stream, and every jump rewinds the stream and scans forward for the
target line number.

    10 LET a = 1
    20 PRINT "a is", a
    30 IF a < 5 THEN 50
    40 GOTO 70
    50 LET a = a + 1
    60 GOTO 20
    70 REM done
"""

import logging
import string
import sys

from basic_lexer import TokenStream, BasicError, BasicSyntaxError

log = logging.getLogger(__name__)


class LineNotFoundError(BasicError):
    pass


class InternalError(BasicError):
    pass


class StepLimitExceeded(BasicError):
    pass


RELOPS = {
    'EQUAL': lambda a, b: a == b,
    'LT': lambda a, b: a < b,
    'GT': lambda a, b: a > b,
    'LT_EQ': lambda a, b: a <= b,
    'GT_EQ': lambda a, b: a >= b,
    'NOT_EQUAL': lambda a, b: a != b,
}

# control transfer modes
RESCAN = 'RESCAN'      # reset to the start, scan to the target, resume now
DEFERRED = 'DEFERRED'  # main loop skips forward line by line until the target


def looks_like_line_number(value, next_char):
    """
    A number is taken as a leading line number when it is a round multiple of
    ten (10 or more) followed by blank, line break or end of input. The lexer
    cannot tell `20` in `LET a = 20` from the label of line 20; this is the
    only rule that does.
    """
    return value >= 10 and value % 10 == 0 and next_char in (' ', '\t', '\n', '\r', '')


def safe_divide(numerator, denominator):
    if denominator == 0:
        log.warning("divide by zero")
        return 0
    # C-style: truncate toward zero
    q = abs(numerator) // abs(denominator)
    return -q if (numerator < 0) != (denominator < 0) else q


# =========================
# Variable store / line index
# =========================
class VariableStore:
    """26 integer slots, one per letter, all starting at 0."""

    def __init__(self):
        self._slots = {c: 0 for c in string.ascii_lowercase}

    def __getitem__(self, letter): return self._slots[letter.lower()]

    def __setitem__(self, letter, value):
        key = letter.lower()
        if key not in self._slots:
            raise InternalError(f"Internal Error: no variable slot for {letter!r}")
        self._slots[key] = value

    def __len__(self): return len(self._slots)

    def as_dict(self): return dict(self._slots)


class LineIndex:
    def __init__(self):
        self._lines = {}

    def __contains__(self, line): return line in self._lines
    def __len__(self): return len(self._lines)
    def __iter__(self): return iter(sorted(self._lines))

    def build(self, tokens):
        """One forward pass over the whole stream; leaves the stream rewound."""
        self._lines.clear()
        tokens.reset()
        while not tokens.finished():
            if tokens.current_token() == 'NUMBER':
                value = tokens.get_num()
                if looks_like_line_number(value, tokens.peek_char()):
                    self._lines[value] = True
            tokens.next_token()
        tokens.reset()
        log.debug("line index: %s", " ".join(str(n) for n in self))


# =========================
# Expression evaluator (recursive descent)
# =========================
class ExpressionEvaluator:
    def __init__(self, tokens, variables):
        self.tokens = tokens
        self.variables = variables

    def at_line_number(self):
        t = self.tokens
        if t.current_token() != 'NUMBER':
            return False
        return looks_like_line_number(t.get_num(), t.peek_char())

    def accept(self, kind):
        t = self.tokens
        if t.current_token() != kind:
            raise BasicSyntaxError(
                f"Syntax Error: unexpected `{t.token_to_string(t.current_token())}` "
                f"expected `{t.token_to_string(kind)}`")
        t.next_token()

    def relation(self):
        left = self.expression()
        op = self.tokens.current_token()
        if op not in RELOPS:
            # no comparison: non-zero is true
            return 1 if left != 0 else 0
        self.tokens.next_token()
        right = self.expression()
        log.debug("relation %s %s %s", left, self.tokens.token_to_string(op), right)
        return 1 if RELOPS[op](left, right) else 0

    def expression(self):
        result = self.term()
        # `5 20 PRINT a`: the 20 starts the next statement, stop here
        if self.at_line_number():
            return result
        op = self.tokens.current_token()
        while op in ('PLUS', 'MINUS'):
            self.tokens.next_token()
            value = self.term()
            result = result + value if op == 'PLUS' else result - value
            op = self.tokens.current_token()
        return result

    def term(self):
        result = self.factor()
        op = self.tokens.current_token()
        while op in ('ASTERISK', 'SLASH'):
            self.tokens.next_token()
            value = self.factor()
            result = result * value if op == 'ASTERISK' else safe_divide(result, value)
            op = self.tokens.current_token()
        return result

    def factor(self):
        t = self.tokens
        kind = t.current_token()
        if kind == 'NUMBER':
            value = t.get_num()
            t.next_token()
            return value
        if kind == 'LETTER':
            value = self.variables[t.get_token_data()]
            t.next_token()
            return value
        if kind == 'LEFT_PAREN':
            t.next_token()
            value = self.expression()
            self.accept('RIGHT_PAREN')
            return value
        raise BasicSyntaxError(
            f"Syntax Error: unexpected token in factor: {t.token_to_string(kind)}")


# =========================
# Interpreter
# =========================
class BasicInterpreter:
    def __init__(self, source, out=None):
        self.tokens = TokenStream(source)
        self.out = out if out is not None else sys.stdout
        self.variables = VariableStore()
        self.line_index = LineIndex()
        self.evaluator = ExpressionEvaluator(self.tokens, self.variables)
        self.pending = None   # (DEFERRED, target) while searching forward
        self.finished = False
        self.steps = 0
        self.max_steps = None

    @classmethod
    def from_file(cls, path, out=None):
        with open(path, "r", encoding="utf-8") as f:
            return cls(f.read(), out=out)

    # ----- main loop -----
    def run(self, max_steps=None, start_line=None):
        self.max_steps = max_steps
        try:
            if len(self.line_index) == 0:
                self.line_index.build(self.tokens)
            if start_line is not None:
                self.jump(start_line, deferred=True)
            while not self.finished:
                if self.tokens.finished():
                    self.finished = True
                    break
                if self.pending is not None:
                    self.seek_pending()
                else:
                    self.line_statement()
        except BasicError as e:
            log.error("%s", e)
            raise
        log.debug("program finished after %d statements", self.steps)

    def line_statement(self):
        t = self.tokens
        while t.current_token() == 'EOL':
            t.next_token()
        if t.current_token() == 'EOF':
            self.finished = True
            return
        if t.current_token() == 'NUMBER':
            t.next_token()
        self.statement()

    # ----- control transfer -----
    def jump(self, target, deferred=False):
        """
        Issue a control transfer to `target`. Both modes check the line index
        first and fail on an unknown line; a RESCAN moves the cursor right
        away, a DEFERRED request is serviced by the main loop.
        """
        mode = DEFERRED if deferred else RESCAN
        if len(self.line_index) == 0:
            self.line_index.build(self.tokens)
        if target not in self.line_index:
            raise LineNotFoundError(f"Runtime Error: line {target} not found")
        log.debug("jump %s -> %d", mode, target)
        if mode == DEFERRED:
            self.pending = (DEFERRED, target)
            return
        self.tokens.reset()
        if not self.find_target_line(target):
            raise InternalError(
                f"Runtime Error: line {target} not found (indexed, but no line starts with it)")

    def find_target_line(self, target):
        """Scan from the current position for a line led by `target`; True if found."""
        t = self.tokens
        while not t.finished():
            if t.current_token() == 'NUMBER' and t.get_num() == target:
                t.next_token()
                return True
            t.skip_to_eol()
        return False

    def seek_pending(self):
        """One step of the forward skip-to-line search."""
        t = self.tokens
        _, target = self.pending
        if t.current_token() == 'NUMBER' and t.get_num() == target:
            self.pending = None
            t.next_token()
            self.statement()
        else:
            t.skip_to_eol()

    # ----- statements -----
    def statement(self):
        # a true IF asks for the statement at its target to run right away
        while self.dispatch():
            pass

    def dispatch(self):
        t = self.tokens
        kind = t.current_token()
        self.steps += 1
        if self.max_steps is not None and self.steps > self.max_steps:
            raise StepLimitExceeded(f"step limit of {self.max_steps} statements exceeded")
        log.debug("statement %s (line %s)", t.token_to_string(kind), t.line_of_current())

        if kind == 'REM':
            t.skip_to_eol()
        elif kind == 'PRINT':
            self.print_statement()
        elif kind == 'IF':
            return self.if_statement()
        elif kind == 'GOTO':
            self.goto_statement()
        elif kind == 'LET':
            t.next_token()
            self.let_statement()
        elif kind == 'LETTER':
            self.let_statement()
        else:
            raise BasicSyntaxError(
                f"Syntax Error: unrecognized statement at `{t.token_to_string(kind)}`")
        return False

    def let_statement(self):
        t = self.tokens
        if t.current_token() != 'LETTER':
            raise BasicSyntaxError("Syntax Error: expected variable name")
        name = t.get_token_data().lower()
        t.next_token()
        self.evaluator.accept('EQUAL')
        self.variables[name] = self.evaluator.expression()

    def print_statement(self):
        t = self.tokens
        ev = self.evaluator
        ev.accept('PRINT')
        need_space = False
        while not t.finished():
            kind = t.current_token()
            if kind in ('EOL', 'EOF') or ev.at_line_number():
                break
            if kind == 'STRING':
                if need_space:
                    self.out.write(' ')
                self.out.write(t.get_string())
                need_space = True
                t.next_token()
            elif kind == 'SEPARATOR':
                self.out.write(' ')
                need_space = False
                t.next_token()
            elif kind in ('LETTER', 'NUMBER', 'LEFT_PAREN'):
                if need_space:
                    self.out.write(' ')
                self.out.write(str(ev.expression()))
                need_space = True
            else:
                break
        self.out.write('\n')

        if ev.at_line_number():
            return
        if t.current_token() == 'EOF':
            self.finished = True
        elif t.current_token() == 'EOL':
            t.next_token()

    def if_statement(self):
        t = self.tokens
        self.evaluator.accept('IF')
        condition = self.evaluator.relation()
        self.evaluator.accept('THEN')
        if t.current_token() != 'NUMBER':
            raise BasicSyntaxError("Syntax Error: expected line number after THEN")
        target = t.get_num()
        t.next_token()
        if condition:
            self.jump(target)
            return True
        if t.current_token() == 'EOL':
            t.next_token()
        return False

    def goto_statement(self):
        t = self.tokens
        self.evaluator.accept('GOTO')
        target = t.get_num()
        t.next_token()
        self.evaluator.accept('EOL')
        self.jump(target)


def run_basic(text, out=None, max_steps=None):
    interp = BasicInterpreter(text, out=out)
    interp.run(max_steps=max_steps)
    return interp
