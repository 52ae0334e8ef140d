""" sxrd read lisp programs

Usage:
    sxrd parse [options] [<path>...]

Options:
    -p --print     print forms as text instead of as ast nodes
    -s --strict    malformed numbers are errors instead of symbols
    --fuzz
    -d --debug
"""

import pathlib
import clifn
from sxrd import sxrd as sxrdmod
from sxrd._exports import *

parse_default = configure(**conf_default)
parse_strict = configure(**conf_strict)
print_short = configure_print(shorthand=True)


def readFromStdIn(stdin=None):
    from select import select
    if stdin is None:
        from sys import stdin
    if select([stdin], [], [], 0.0)[0]:
        return stdin


class Options(clifn.Options):

    @property
    def path(self):
        return [pathlib.Path(path).expanduser() for path in self._args['<path>']]


class Main(clifn.Dispatcher):

    def default(self):
        raise NotImplementedError('oops')

    def parse(self):
        sxrdmod.debug = self.options.debug  # FIXME sigh naming imports etc

        parse = parse_strict if self.options.strict else parse_default
        if not self.options.path:
            stdin = readFromStdIn()
            source_gen = (stdin,) if stdin is not None else ()
        else:
            source_gen = self.options.path

        parse_path = make_do_path(parse)

        asts, ast_fail = [], []
        for path in source_gen:
            try:
                ast = list(parse_path(path))
                asts.append(ast)
            except (ParseError, UnicodeDecodeError) as e:
                ast_fail.append((path, e))
                continue

            for expression in ast:
                print(print_short(expression) if self.options.print else repr(expression))

        for path, e in ast_fail:
            if isinstance(e, ParseError):
                print(f'{path}:{e.line}:{e.line_point}: {e.kind} expected {" ".join(e.expected)}')
            else:
                print(f'{path}: {e}')

        return asts, ast_fail


def main():
    options, *ad = Options.setup(__doc__, version=f'sxrd {sxrdmod.__version__}')

    main = Main(options)

    if main.options.debug:
        print(main.options)

    if options.fuzz:
        import os
        import afl
        while afl.loop(55555):
            out = main()

        os._exit(0)
    else:
        out = main()


if __name__ == '__main__':
    main()
