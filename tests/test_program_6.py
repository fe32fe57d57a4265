from pathlib import Path
from ruistic.parser import parse_program
from ruistic.interpreter import Interpreter

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_6_recovers_from_errors(capsys):
    """Test program 6: one bad statement must not stop the rest.

    The first line fails to parse and two prints fail at runtime. Each
    problem is reported on stderr while the valid statements still run.
    """
    with open(EXAMPLES / 'program_6.rui', 'r', encoding='utf-8') as f:
        source = f.read()
    statements = parse_program(source)
    interp = Interpreter()
    interp.interpret(statements)
    captured = capsys.readouterr()
    assert captured.out.strip().split('\n') == ['1', 'after']
    errors = captured.err.strip().split('\n')
    assert errors[0] == "[line 1] Error at ';': Expect variable name."
    assert 'TypeError' in errors[1]
    assert errors[2] == 'Runtime error: [line 4] ZeroDivisionError: division by zero'
