"""Handles interactive/command-line mode for minilisp. Uses cmd as backend."""

import cmd

from minilisp.lang.session import Session
from minilisp.reader.parser import parse


class Shell(cmd.Cmd):
    """minilisp interpreter shell."""
    intro = "minilisp interpreter :: Python backend\nType '?' or 'help' for more information."
    prompt = "> "
    secondary_prompt = ". "  # used for line continuations
    _tmp_prompt = "> "       # also used for prompt swapping in line continuations

    def __init__(self, sess, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.sess = sess

        self._tmp_line = ""
        self.line_num = 0

    def default(self, line):
        """Evaluates arbitrary minilisp form."""
        with self.sess.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            self.line_num += 1
            line = f"{self._tmp_line} {line}" if self._tmp_line else line
            line, add_to_prev = Session.preprocess_line(line)

            if add_to_prev:
                self._tmp_line = line
                self.prompt = self.secondary_prompt
                return

            self._tmp_line = ""
            self.prompt = self._tmp_prompt

            if not line.strip():
                return  # only a comment

            self.sess.add(line, self.line_num)
            self.sess.run()

            if self.sess.results:
                print(self.sess.pop())

    def do_tree(self, arg):
        """Displays the syntax tree of a form without evaluating it: tree (+ 1 2)"""
        with self.sess.error_handler:
            print(parse(Session.preprocess_line(arg)[0]).display())

    def do_env(self, arg):
        """Lists the current bindings."""
        for name, value in sorted(self.sess.env.items()):
            print(f"{name} = {value}")

    def do_help(self, arg):
        """Prints a short intro rather than the command docs."""
        print("Welcome to the minilisp interpreter!\n\n"
              "minilisp is a tiny Lisp: every form is a parenthesized prefix expression over \n"
              "floating-point numbers. It supports 'define', 'if', 'lambda', arithmetic, \n"
              "comparisons and a handful of math functions.\n\n"
              "Try it out by typing '(define sq (lambda r (* r r)))'. This will bind a procedure \n"
              "to the name 'sq'. Next, try typing '(sq 4)', giving '16.0' as the result.\n\n"
              "Shell commands: 'tree FORM' shows how FORM is parsed, 'env' lists bindings, \n"
              "'exit' quits.")

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return ""

    def do_EOF(self, arg):
        """Exits interpreter."""
        print()
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Exits interpreter."""
        return True
