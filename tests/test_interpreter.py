import io
import math
import sys

import pytest

from ruistic.ast import Grouping, Literal, Print
from ruistic.environment import Environment
from ruistic.interpreter import Interpreter, interpret, run_program
from ruistic.parser import parse_program
from ruistic.types import NIL, format_number, is_truthy, to_string, values_equal


def run(source):
    """Run `source` and return (stdout lines, stderr text, interpreter)."""
    out, err = io.StringIO(), io.StringIO()
    interp = run_program(source, out=out, err=err)
    return out.getvalue().splitlines(), err.getvalue(), interp


def test_precedence():
    assert run('print 1 + 2 * 3;')[0] == ['7']


def test_string_concatenation():
    assert run('print "a" + "b";')[0] == ['ab']


def test_adding_string_and_number_fails():
    lines, err, _ = run('print "a" + 1;')
    assert lines == []
    assert err.startswith('Runtime error: [line 1] TypeError:')


def test_division_by_zero_is_an_error():
    lines, err, _ = run('print 1 / 0;\nprint -1 / -0;')
    assert lines == []
    assert err.count('ZeroDivisionError: division by zero') == 2


def test_division():
    assert run('print 7 / 2;')[0] == ['3.5']


def test_shadowing_is_block_scoped():
    lines, _, _ = run('var x = 1; { var x = 2; print x; } print x;')
    assert lines == ['2', '1']


def test_assigning_undefined_variable_fails_quietly():
    lines, err, interp = run('x = 5; print "next";')
    assert lines == ['next']
    assert err == ''
    assert not interp.globals.is_defined('x')


def test_failed_expression_statement_is_logged(tmp_path):
    log = tmp_path / 'debug.txt'
    interp = Interpreter(out=io.StringIO(), err=io.StringIO(), debug_level=1, debug_file=str(log))
    interp.interpret(parse_program('"a" - 1;'))
    interp.close()
    assert 'expression statement failed' in log.read_text()


def test_long_operator_chain():
    source = 'print ' + ' + '.join(['1'] * 5000) + '; print "after";'
    lines, err, _ = run(source)
    assert lines == ['5000', 'after']
    assert err == ''


def test_long_chain_evaluates_left_to_right():
    lines, err, _ = run('print ' + ' - '.join(['1'] * 3000) + ';')
    assert lines == ['-2998']
    lines, err, _ = run('print "a" + 1 + ' + ' + '.join(['2'] * 3000) + ';')
    assert lines == []
    assert err.count('TypeError') == 1


def test_too_deep_expression_is_a_runtime_error():
    expr = Literal(1.0)
    for _ in range(sys.getrecursionlimit() * 2):
        expr = Grouping(expr)
    out, err = io.StringIO(), io.StringIO()
    Interpreter(out=out, err=err).interpret([Print(expr), Print(Literal('after'))])
    assert out.getvalue() == 'after\n'
    assert err.getvalue().strip() == 'Runtime error: RecursionError: expression nesting too deep'


def test_reading_undefined_variable_fails():
    lines, err, _ = run('print y;')
    assert lines == []
    assert "undefined variable 'y'" in err


def test_for_loop_prints_in_order():
    assert run('for (var i = 0; i < 3; i = i + 1) print i;')[0] == ['0', '1', '2']


def test_for_loop_variable_does_not_leak():
    lines, err, interp = run('for (var i = 0; i < 1; i = i + 1) {} print i;')
    assert "undefined variable 'i'" in err
    assert not interp.globals.is_defined('i')


def test_bad_statement_does_not_abort_program():
    out, err = io.StringIO(), io.StringIO()
    run_program('var ;\nprint 1;', out=out, err=err)
    assert out.getvalue() == '1\n'
    assert 'Expect variable name.' in err.getvalue()


def test_equality_across_types_is_false_not_error():
    lines, err, _ = run('print 1 == "1"; print 1 != "1"; print true == 1; print nil == false;')
    assert lines == ['false', 'true', 'false', 'false']
    assert err == ''


def test_structural_equality():
    lines, _, _ = run('print "ab" == "a" + "b"; print nil == nil; print 0.5 == 1 / 2;')
    assert lines == ['true', 'true', 'true']


def test_comparisons_require_numbers():
    lines, err, _ = run('print 1 < 2; print 2 <= 2; print 3 > 4; print 4 >= 5; print "a" < "b";')
    assert lines == ['true', 'true', 'false', 'false']
    assert "operands of '<' must be numbers" in err


def test_unary_operators():
    lines, err, _ = run('print -3; print !true; print !nil; print !0; print -"x";')
    assert lines == ['-3', 'false', 'true', 'false']
    assert "operand of '-' must be a number" in err


def test_truthiness():
    lines, _, _ = run('if (0) print "zero"; if ("") print "empty"; if (nil) print "nil"; else print "no";')
    assert lines == ['zero', 'empty', 'no']


def test_print_formats():
    lines, _, _ = run('print 1.5; print 100; print true; print false; print nil; print "raw";')
    assert lines == ['1.5', '100', 'true', 'false', 'nil', 'raw']


def test_failed_print_produces_no_output():
    lines, err, _ = run('print nope; print "next";')
    assert lines == ['next']
    assert err.count('Runtime error') == 1


def test_failed_if_condition_runs_neither_branch():
    lines, err, _ = run('if (-"x") print "then"; else print "else"; print "after";')
    assert lines == ['after']
    assert err.startswith('Runtime error in if statement:')


def test_failed_var_initializer_defaults_to_nil():
    lines, err, interp = run('var x = 1 / 0; print x;')
    assert lines == ['nil']
    assert err == ''
    assert interp.globals.get('x') is NIL


def test_var_without_initializer_is_nil():
    assert run('var x; print x;')[0] == ['nil']


def test_failed_while_condition_ends_loop_silently():
    lines, err, _ = run('var i = 0; while (i < "3") { print i; i = i + 1; } print "done";')
    assert lines == ['done']
    assert err == ''


def test_while_loop():
    lines, _, _ = run('var i = 3; while (i > 0) { print i; i = i - 1; }')
    assert lines == ['3', '2', '1']


def test_assignment_is_an_expression():
    lines, _, _ = run('var a; var b; a = b = 4; print a; print b;')
    assert lines == ['4', '4']


def test_assignment_reaches_enclosing_scope():
    lines, _, interp = run('var total = 0; { { total = total + 2; } }')
    assert interp.globals.get('total') == 2.0


def test_environment_restored_after_block():
    interp = Interpreter(out=io.StringIO(), err=io.StringIO())
    interp.interpret(parse_program('{ var a = 1; print nope; }'))
    assert interp.environment is interp.globals


def test_environment_restored_when_block_raises(monkeypatch):
    interp = Interpreter(out=io.StringIO(), err=io.StringIO())
    statements = parse_program('{ print 1; }')

    def explode(*args):
        raise RuntimeError('host failure')

    monkeypatch.setattr(interp, 'evaluate', explode)
    with pytest.raises(RuntimeError):
        interp.interpret(statements)
    assert interp.environment is interp.globals


def test_interpret_mutates_given_environment():
    env = Environment()
    out = io.StringIO()
    interpret(parse_program('var a = 1;'), env, out=out)
    interpret(parse_program('a = a + 1; print a;'), env, out=out)
    assert env.get('a') == 2.0
    assert out.getvalue() == '2\n'


def test_interpreter_reused_across_batches(capsys):
    interp = Interpreter()
    interp.interpret(parse_program('var greeting = "hi";'))
    interp.interpret(parse_program('print greeting;'))
    assert capsys.readouterr().out == 'hi\n'


def test_debug_log_records_swallowed_errors(tmp_path):
    log = tmp_path / 'debug.txt'
    interp = Interpreter(out=io.StringIO(), err=io.StringIO(), debug_level=3, debug_file=str(log))
    interp.interpret(parse_program('var x = 1 / 0; var i = 0; while (i < nil) {} if (true) { x = 2; }'))
    interp.close()
    text = log.read_text()
    assert 'initializer of x failed' in text
    assert 'while condition failed' in text
    assert 'declare i: Number = 0' in text
    assert 'if condition true -> True' in text
    assert 'assign x = 2' in text
    assert 'enter scope depth 1' in text


def test_format_number():
    assert format_number(7.0) == '7'
    assert format_number(-0.0) == '-0'
    assert format_number(2.5) == '2.5'
    assert format_number(0.1 + 0.2) == '0.30000000000000004'
    assert format_number(1e21) == '1000000000000000000000'
    assert format_number(1e-7) == '0.0000001'
    assert format_number(math.inf) == 'inf'
    assert format_number(-math.inf) == '-inf'
    assert format_number(math.nan) == 'NaN'


def test_value_helpers():
    assert to_string(NIL) == 'nil'
    assert not is_truthy(NIL) and not is_truthy(False)
    assert is_truthy(0.0) and is_truthy('')
    assert not values_equal(1.0, True)
    assert values_equal(NIL, NIL)
