"""
Tests for the lark-backed token source.
"""

import pytest

from basic_lexer import TokenStream, BasicSyntaxError, tokenize


def kinds(text):
    return [t.type for t in tokenize(text)]


def test_statement_tokens():
    assert kinds('10 LET a = (b+3)*4/2\n') == [
        'NUMBER', 'LET', 'LETTER', 'EQUAL', 'LEFT_PAREN', 'LETTER', 'PLUS',
        'NUMBER', 'RIGHT_PAREN', 'ASTERISK', 'NUMBER', 'SLASH', 'NUMBER',
        'EOL', 'EOF']


def test_keywords_are_case_insensitive():
    assert kinds('print Print PRINT\n') == ['PRINT', 'PRINT', 'PRINT', 'EOL', 'EOF']


def test_relational_operators_prefer_two_characters():
    assert kinds('<= >= <> < > =\n') == [
        'LT_EQ', 'GT_EQ', 'NOT_EQUAL', 'LT', 'GT', 'EQUAL', 'EOL', 'EOF']


def test_keyword_must_not_run_into_a_letter():
    # "ifx" is three variables, not IF followed by x
    assert kinds('ifx\n') == ['LETTER', 'LETTER', 'LETTER', 'EOL', 'EOF']


def test_rem_swallows_rest_of_line():
    toks = tokenize('10 REM anything goes: !@#$ 20\n20 PRINT\n')
    assert [t.type for t in toks] == ['NUMBER', 'REM', 'EOL', 'NUMBER', 'PRINT', 'EOL', 'EOF']


def test_missing_final_newline_gets_one():
    assert kinds('10 GOTO 10') == ['NUMBER', 'GOTO', 'NUMBER', 'EOL', 'EOF']


def test_crlf_is_one_eol():
    assert kinds('10 PRINT\r\n20 PRINT\r\n') == ['NUMBER', 'PRINT', 'EOL', 'NUMBER', 'PRINT', 'EOL', 'EOF']


def test_empty_source_is_just_eof():
    assert kinds('') == ['EOF']


def test_bad_character_is_a_syntax_error():
    with pytest.raises(BasicSyntaxError) as err:
        tokenize('10 PRINT a\n20 LET b = 3 % 2\n')
    msg = str(err.value)
    assert 'line 2' in msg
    assert '^' in msg


def test_cursor_and_payloads():
    ts = TokenStream('10 PRINT "hi", x\n')
    assert ts.current_token() == 'NUMBER'
    assert ts.get_num() == 10
    assert ts.peek_char() == ' '
    ts.next_token()
    ts.next_token()
    assert ts.get_string() == 'hi'
    assert ts.get_token_data() == 'hi'
    ts.next_token()
    assert ts.current_token() == 'SEPARATOR'
    ts.next_token()
    assert ts.get_token_data() == 'x'
    assert ts.peek_char() == '\n'
    ts.next_token()
    ts.next_token()
    assert ts.finished()
    assert ts.peek_char() == ''
    ts.next_token()      # stays on EOF
    assert ts.finished()
    ts.reset()
    assert ts.get_num() == 10


def test_payload_of_wrong_kind_is_fatal():
    ts = TokenStream('PRINT\n')
    with pytest.raises(BasicSyntaxError, match="expected `number`"):
        ts.get_num()


def test_skip_to_eol_consumes_the_eol():
    ts = TokenStream('10 PRINT a\n20 GOTO 10\n')
    ts.skip_to_eol()
    assert ts.get_num() == 20
    ts.skip_to_eol()
    assert ts.finished()
    ts.skip_to_eol()
    assert ts.finished()


def test_token_to_string():
    assert TokenStream.token_to_string('EOL') == 'end of line'
    assert TokenStream.token_to_string('LT_EQ') == '<='
    assert TokenStream.token_to_string('WHATEVER') == 'WHATEVER'
