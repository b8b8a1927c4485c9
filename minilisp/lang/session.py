"""Session control for minilisp. Keeps one Environment alive across several forms, either typed at the command line
or read from a source file, and keeps the error handler's traceback pointed at the form being processed.
"""

from minilisp.lang.environment import standard_environment
from minilisp.lang.error import LispError
from minilisp.lang.evaluator import evaluate
from minilisp.reader.parser import read_form
from minilisp.reader.tokens import Lexer


class Session:
    """Governs a minilisp session, with control over the environment forms are evaluated in."""
    SH_FILE = "<in>"  # command-line interpreter filename
    COMMENT = ";"

    def __init__(self, error_handler, path=SH_FILE, cmd_line=True):
        self.error_handler = error_handler
        self.error_handler.register_file(path)

        self.path = path          # used for error messages
        self.cmd_line = cmd_line  # whether or not in command-line mode

        self.env = standard_environment()
        self.to_eval = {}  # dict of line num: (source text, Expression) to evaluate
        self.results = []  # evaluated Expressions, oldest first

        if self.cmd_line:
            self.error_handler.fatal = False

        if path != Session.SH_FILE:
            exprs = []
            add_to_prev = False

            try:
                with open(path, "r") as file:
                    for line_num, line in enumerate(file):
                        add_to_prev = Session.preprocess_line(line, line_num + 1, add_to_prev, exprs)[1]
            except OSError:
                raise LispError("'{}' could not be opened", path, diagnosis=False)

            for expr, line_num in exprs:
                self.add(expr, line_num)

    @staticmethod
    def preprocess_line(line, line_num=None, add_to_prev=False, exprs=None):
        """Preprocesses a line from a file or command-line: strips comments and trailing whitespace. In command-line
        mode, exprs can be ignored (used to keep track of a file's forms as (text, first line num) pairs). Returns
        the updated line and whether it leaves parentheses open, so that the next line continues it.
        """
        if Session.COMMENT in line:
            line = line[:line.index(Session.COMMENT)]  # get rid of comments

        line = line.rstrip()
        if exprs is not None:
            if add_to_prev:
                prev, prev_line_num = exprs.pop()
                line = f"{prev} {line.strip()}".rstrip()
                exprs.append((line, prev_line_num))
            elif line.strip():
                exprs.append((line.strip(), line_num))

        return line, line.count("(") > line.count(")")

    def add(self, expr, line_num=1):
        """Parses a form and adds it to the current session. Evaluation is delayed until run is called. Input after
        the first complete form is ignored with a warning.
        """
        self.error_handler.register_line(self.path, expr, line_num)  # in case error is raised

        lexer = Lexer(expr)
        tree = read_form(lexer)

        trailing = lexer.remaining()
        if trailing:
            start = expr.index(trailing, lexer.pos)
            self.error_handler.warn("ignoring input after first form in '{}'", expr, start=start)

        self.to_eval[line_num] = (expr, tree)
        self.error_handler.remove_line(self.path)  # error was not raised

    def run(self):
        """Evaluates this session's pending forms in order. Will raise any errors that are encountered."""
        for line_num, (expr, tree) in list(self.to_eval.items()):
            self.error_handler.register_line(self.path, expr, line_num)

            try:
                self.results.append(evaluate(tree, self.env, self.error_handler))
            finally:
                del self.to_eval[line_num]

            self.error_handler.remove_line(self.path)

    def pop(self):
        """Removes and returns the most recent result."""
        return self.results.pop()
