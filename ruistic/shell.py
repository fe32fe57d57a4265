"""Interactive prompt for Ruistic. Uses cmd as backend."""

import cmd

from .interpreter import Interpreter
from .parser import parse
from .scanner import scan


class Shell(cmd.Cmd):
    """Read-eval-print loop sharing one interpreter across inputs."""
    intro = "Ruistic interpreter\nType 'exit' or 'quit' to leave."
    prompt = "> "

    def __init__(self, interpreter: Interpreter, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.interpreter = interpreter

    def onecmd(self, line):
        # Ruistic statements are not shell commands, so command dispatch is bypassed.
        command = line.strip()
        if command == 'EOF':
            print()
            return True
        if command in ('exit', 'quit'):
            return True
        if command:
            self.run_source(line)
        return False

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return False

    def run_source(self, source: str):
        statements = parse(scan(source, self.interpreter.err), self.interpreter.err)
        self.interpreter.interpret(statements)
