from pathlib import Path
from ruistic.parser import parse_program
from ruistic.interpreter import Interpreter

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_2_precedence(capsys):
    with open(EXAMPLES / 'program_2.rui', 'r', encoding='utf-8') as f:
        source = f.read()
    statements = parse_program(source)
    interp = Interpreter()
    interp.interpret(statements)
    out = capsys.readouterr().out.strip()
    assert out.split('\n') == ['7', '9', '2.5', '-1', '4', '0.30000000000000004']
