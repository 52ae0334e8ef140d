# classify
# read
# print

# TODO dotted pairs, (a . b) currently reads as a three element list
# with the symbol . in the middle

__version__ = '0.0.1'

import re
from io import TextIOBase
from json import dumps
from types import MappingProxyType
from sxrd.char import (
    make_classifier,
    whitespace,
    open_list,
    close_list,
    open_vector,
    close_vector,
    string_delimiter,
    comment_start,
    quote_prefix,
    constituent,
    closers,
    unp,
    cee_base,
    cee_print,
    char_from_name,
    char_to_name,)

debug = False


class SxrdError(Exception): pass
class ConfigurationError(SxrdError, ValueError): pass


class ParseError(SxrdError, SyntaxError):
    """ The first syntax error in a source text.

    line is 1-based, column is the absolute byte offset into the
    utf-8 encoding of the source (not a line relative column, older
    consumers depend on this), point is the charachter offset and
    line_point is the 0-based charachter column within the line.
    expected holds the names of the productions that would have been
    accepted at the failure point. """

    def __init__(self, line, column, expected, filename=None,
                 point=None, line_point=None):
        self.line = line
        self.column = column
        self.expected = tuple(expected)
        self.point = point
        self.line_point = line_point
        exp = ' '.join(repr(e) for e in self.expected)
        msg = (f'{self.kind} at line {line} col {line_point} '
               f'(byte {column}), expected one of: {exp}')
        super().__init__(msg, (filename, line, None, None))

    @property
    def kind(self):
        return self.__class__.__name__


class UnterminatedString(ParseError): pass
class UnterminatedList(ParseError): pass
class UnterminatedVector(ParseError): pass
class MismatchedDelimiter(ParseError): pass
class UnexpectedClosingDelimiter(ParseError): pass
class DanglingQuotePrefix(ParseError): pass
class MalformedNumericLiteral(ParseError): pass
class MalformedCharacterLiteral(ParseError): pass
class UnexpectedEndOfInput(ParseError): pass


class _m:
    """ helper methods"""

    def eq_value(self, other):
        return type(self) == type(other) and self.value == other.value

    def eq_typed_value(self, other):
        # 1 == 1.0 == True in python, not here
        return (type(self) == type(other) and
                type(self.value) == type(other.value) and
                self.value == other.value)

    def eq_collect(self, other):
        return type(self) == type(other) and self.collect == other.collect


# abstract syntax tree node types

class Ast:

    _point_beg = None
    _point_end = None

    def _set_bounds(self, beg=None, end=None):
        self._point_beg = beg
        self._point_end = end
        return self

    def __repr__(self):
        pb, pe = self._point_beg, self._point_end
        pts = f' ::{pb}:{pe}' if debug else ''
        return f'<{self.__class__.__name__[:3]} {self.value!r}{pts}>'

    def __hash__(self):
        return hash((self.__class__, self.value))

    def caste(self, typef):
        """ Recursively caste all nested forms. """
        return typef(self.value)


class Symbol(Ast):
    """ Identifiers, verbatim and case preserving. """

    __eq__ = _m.eq_value
    __hash__ = Ast.__hash__  # https://bugs.python.org/issue1549

    def __init__(self, value):
        self.value = value


class Number(Ast):

    __eq__ = _m.eq_typed_value
    __hash__ = Ast.__hash__

    def __init__(self, value, lexeme=None):
        self.value = value
        self.lexeme = lexeme


class String(str, Ast):
    """ Ast for plain strings so that we can
        do things like track start/end """

    @property
    def value(self):
        return str(self)

    def __repr__(self):
        return dumps(self)


class Boolean(Ast):

    __eq__ = _m.eq_typed_value
    __hash__ = Ast.__hash__

    def __init__(self, value):
        self.value = value


class Nil(Ast):

    __eq__ = _m.eq_value
    __hash__ = Ast.__hash__

    value = None

    def __repr__(self):
        return '<Nil>'


class Char(Ast):
    """ the char literal fully processed down
    to a single charachter """

    __eq__ = _m.eq_value
    __hash__ = Ast.__hash__

    def __init__(self, value):
        self.value = value


class ListAbstract(Ast):

    __eq__ = _m.eq_collect
    __hash__ = None

    @classmethod
    def from_elements(cls, *elements):
        return cls(list(elements))

    def __init__(self, collect):
        self.collect = collect

    def __repr__(self):
        return f'<{self._o} {repr(self.collect)[1:-1]} {self._c}>'

    def __len__(self):
        return len(self.collect)

    def __iter__(self):
        return iter(self.collect)

    def __getitem__(self, index):
        return self.collect[index]

    @property
    def value(self):
        return self

    def caste(self, typef):
        # descend first then caste
        return typef(self.__class__([ast.caste(typef) for ast in self.collect]))


class List(ListAbstract):
    """ Proper list, quoted forms are also read as these. """
    _o, _c = '()'


class Vector(ListAbstract):
    _o, _c = '[]'


def to_python(thing):
    """ default typef for Ast.caste """
    if isinstance(thing, Vector):
        return tuple(thing.collect)
    elif isinstance(thing, List):
        return list(thing.collect)
    else:
        return thing


# position tracking

class Cursor:
    """ Read position in a single source text.

    line and line_point are maintained as the point advances so
    that reporting an error never has to rescan the source. """

    def __init__(self, source, filename=None):
        self.source = source
        self.filename = filename
        self.end = len(source)
        self.point = 0
        self.line = 1
        self.line_point = 0

    def __repr__(self):
        return f'<Cursor {self.filename} {self.line}:{self.line_point} @{self.point}>'

    def at_eof(self):
        return self.point >= self.end

    def peek(self, offset=0):
        point = self.point + offset
        if point < self.end:
            return self.source[point]

    def advance(self, n=1):
        source, beg = self.source, self.point
        stop = min(beg + n, self.end)
        newlines = source.count('\n', beg, stop)
        if newlines:
            self.line += newlines
            self.line_point = stop - (source.rfind('\n', beg, stop) + 1)
        else:
            self.line_point += stop - beg

        self.point = stop

    def position(self):
        return self.line, self.line_point, self.point

    def byte_offset(self):
        return len(self.source[:self.point].encode('utf-8', 'surrogatepass'))


def error_at(error_class, cursor, expected):
    """ snapshot the cursor into a detached error """
    line, line_point, point = cursor.position()
    error = error_class(line, cursor.byte_offset(), expected,
                        filename=cursor.filename,
                        point=point, line_point=line_point)
    if debug:
        print('fail:', error)

    return error


# reader tables

number_re = re.compile(r'[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?\Z')
integer_re = re.compile(r'[+-]?[0-9]+\Z')
number_like_re = re.compile(r'[+-]?\.?[0-9]')

reserved_literals = MappingProxyType({
    'nil': (Nil,),
    'true': (Boolean, True),
    '#t': (Boolean, True),
    'false': (Boolean, False),
    '#f': (Boolean, False),
})

expected_top = 'expression',
expected_char = 'character',
expected_number = 'number',

# dialect configuration

conf_default = {}

conf_strict = {
    'strict_numbers': True,
}

conf_clj_ws = {
    'additional_whitespace': ',',
    't_to_unquote': '~',
}


def configure(additional_whitespace='',
              strict_numbers=False,  # MalformedNumericLiteral instead of Symbol
              char_literals=True,

              ## tokens

              # the naming conventions for tokens
              # are to use beg end when a form must end with a specific token
              # and to use to for forms that have multiple possible ends

              t_beg_list='(',
              t_end_list=')',
              t_beg_vect='[',
              t_end_vect=']',
              t_beg_end_str='"',
              t_to_comment=';',
              t_to_quote="'",
              t_to_quasi='`',
              t_to_unquote=',',
              t_to_splc_in_unq='@',
              t_to_esc_in_str='\\',
              t_to_char='#\\',):
    """ Build a parser for one dialect.

    Everything the returned parse function closes over is read only
    so a single configured parser can be used from many threads. """

    quote_names = {t: name for t, name in ((t_to_quote, 'quote'),
                                           (t_to_quasi, 'quasiquote'),
                                           (t_to_unquote, 'unquote'))
                   if t is not unp}
    quote_names = MappingProxyType(quote_names)

    try:
        classify = make_classifier(
            t_beg_list=t_beg_list,
            t_end_list=t_end_list,
            t_beg_vect=t_beg_vect,
            t_end_vect=t_end_vect,
            t_beg_end_str=t_beg_end_str,
            t_to_comment=t_to_comment,
            quote_prefixes=tuple(quote_names),
            additional_whitespace=additional_whitespace)
    except ValueError as e:
        raise ConfigurationError(str(e)) from e

    if char_literals and (not t_to_char or classify(t_to_char[0]) is not constituent):
        raise ConfigurationError(f'char literal prefix {t_to_char!r} must start with a symbol charachter')

    expected_list = 'expression', t_end_list
    expected_vect = 'expression', t_end_vect
    expected_str = 'character', t_beg_end_str

    def skip_atmosphere(cursor):
        """ whitespace and line comments """
        source, end = cursor.source, cursor.end
        point = cursor.point
        while point < end:
            category = classify(source[point])
            if category is whitespace:
                point += 1
            elif category is comment_start:
                newline = source.find('\n', point)
                point = end if newline == -1 else newline + 1
            else:
                break

        cursor.advance(point - cursor.point)

    def read_string(cursor):
        source, end = cursor.source, cursor.end
        point_beg = cursor.point
        point = point_beg + 1
        collect = []
        while point < end:
            char = source[point]
            if char == t_beg_end_str:
                cursor.advance(point + 1 - point_beg)
                return String(''.join(collect))._set_bounds(point_beg, cursor.point)
            elif char == t_to_esc_in_str:
                point += 1
                if point >= end:
                    break

                escaped = source[point]
                collect.append(cee_base.get(escaped, escaped))
            else:
                collect.append(char)

            point += 1

        cursor.advance(end - point_beg)
        raise error_at(UnterminatedString, cursor, expected_str)

    def scan_run(source, point, end):
        while point < end and classify(source[point]) is constituent:
            point += 1

        return point

    def caste_atom(lexeme):
        if lexeme in reserved_literals:
            cls, *args = reserved_literals[lexeme]
            return cls(*args)
        elif number_re.match(lexeme):
            if integer_re.match(lexeme):
                try:
                    return Number(int(lexeme), lexeme)
                except ValueError:
                    # past the interpreter limit on int digits
                    return None
            else:
                return Number(float(lexeme), lexeme)
        elif strict_numbers and number_like_re.match(lexeme):
            return None
        else:
            return Symbol(lexeme)

    def read_char(cursor):
        source, end = cursor.source, cursor.end
        point_beg = cursor.point
        point = point_beg + len(t_to_char)
        if point >= end:
            cursor.advance(end - point_beg)
            raise error_at(UnexpectedEndOfInput, cursor, expected_char)

        # the first charachter is always taken, even if it is a delimiter
        point = scan_run(source, point + 1, end)
        value = char_from_name(source[point_beg + len(t_to_char):point])
        if value is None:
            raise error_at(MalformedCharacterLiteral, cursor, expected_char)

        cursor.advance(point - point_beg)
        return Char(value)._set_bounds(point_beg, point)

    def read_atom(cursor):
        source, point_beg = cursor.source, cursor.point
        if char_literals and source.startswith(t_to_char, point_beg):
            return read_char(cursor)

        point = scan_run(source, point_beg, cursor.end)
        thing = caste_atom(source[point_beg:point])
        if thing is None:
            raise error_at(MalformedNumericLiteral, cursor, expected_number)

        cursor.advance(point - point_beg)
        return thing._set_bounds(point_beg, point)

    def expand_quote(cursor):
        """ 'x -> (quote x) and friends """
        point_beg = cursor.point
        char = cursor.peek()
        if char == t_to_unquote and cursor.peek(1) == t_to_splc_in_unq:
            name, width = 'unquote-splicing', 2
        else:
            name, width = quote_names[char], 1

        cursor.advance(width)
        head = Symbol(name)._set_bounds(point_beg, cursor.point)

        skip_atmosphere(cursor)
        if cursor.at_eof() or classify(cursor.peek()) in closers:
            raise error_at(DanglingQuotePrefix, cursor, expected_top)

        value = parse_expr(cursor, expected_top)
        return List([head, value])._set_bounds(point_beg, cursor.point)

    def parse_seq(cursor, cls, closer, unterminated, expected):
        point_beg = cursor.point
        cursor.advance()
        collect = []
        while True:
            skip_atmosphere(cursor)
            if cursor.at_eof():
                raise error_at(unterminated, cursor, expected)

            category = classify(cursor.peek())
            if category is closer:
                cursor.advance()
                return cls(collect)._set_bounds(point_beg, cursor.point)
            elif category in closers:
                raise error_at(MismatchedDelimiter, cursor, expected)

            collect.append(parse_expr(cursor, expected))

    def parse_expr(cursor, expected):
        """ Read exactly one expression, the next charachter picks
        the production so there is never any backtracking. """
        skip_atmosphere(cursor)
        if cursor.at_eof():
            raise error_at(UnexpectedEndOfInput, cursor, expected)

        category = classify(cursor.peek())
        if category is open_list:
            return parse_seq(cursor, List, close_list, UnterminatedList, expected_list)
        elif category is open_vector:
            return parse_seq(cursor, Vector, close_vector, UnterminatedVector, expected_vect)
        elif category in closers:
            raise error_at(UnexpectedClosingDelimiter, cursor, expected)
        elif category is quote_prefix:
            return expand_quote(cursor)
        elif category is string_delimiter:
            return read_string(cursor)
        else:
            return read_atom(cursor)

    def parse(source, filename=None):
        """ Yield the top level forms of source in order.

        Stops at the first syntax error by raising a ParseError. """
        if isinstance(source, (bytes, bytearray)):
            source = source.decode('utf-8')

        cursor = Cursor(source, filename)
        while True:
            skip_atmosphere(cursor)
            if cursor.at_eof():
                return

            expression = parse_expr(cursor, expected_top)
            if debug:
                print('read:', expression)

            yield expression

    parse.classify = classify
    return parse


parse = configure(**conf_default)


def parse_program(source_text, filename='<string>'):
    """ The whole program as a list of top level forms. """
    return list(parse(source_text, filename))


def make_do_path(do):
    """ along the way to load """
    def do_path(path_or_fd):
        if isinstance(path_or_fd, TextIOBase):  # stdin probably
            return do(path_or_fd.read(), getattr(path_or_fd, 'name', None))
        else:
            with open(path_or_fd, 'rt', encoding='utf-8') as f:
                source = f.read()

            return do(source, str(path_or_fd))

    return do_path


# print

def configure_print(shorthand=False,
                    t_beg_list='(',
                    t_end_list=')',
                    t_beg_vect='[',
                    t_end_vect=']',
                    t_beg_end_str='"',
                    t_to_quote="'",
                    t_to_quasi='`',
                    t_to_unquote=',',
                    t_to_splc_in_unq='@',
                    t_to_char='#\\',):
    """ print function for asts, shorthand=True
    prints (quote x) as 'x and so on """

    prefixes = {
        'quote': t_to_quote,
        'quasiquote': t_to_quasi,
        'unquote': t_to_unquote,
        'unquote-splicing': t_to_unquote + t_to_splc_in_unq,
    }

    def print_sexp(ast):
        if isinstance(ast, List):
            if (shorthand and len(ast) == 2 and
                isinstance(ast[0], Symbol) and ast[0].value in prefixes):
                value = print_sexp(ast[1])
                if ast[0].value == 'unquote' and value.startswith(t_to_splc_in_unq):
                    # ,@x would read back as unquote-splicing
                    value = ' ' + value

                return prefixes[ast[0].value] + value

            return t_beg_list + ' '.join(print_sexp(a) for a in ast) + t_end_list
        elif isinstance(ast, Vector):
            return t_beg_vect + ' '.join(print_sexp(a) for a in ast) + t_end_vect
        elif isinstance(ast, String):
            return (t_beg_end_str +
                    ''.join(cee_print.get(c, c) for c in ast) +
                    t_beg_end_str)
        elif isinstance(ast, Symbol):
            return ast.value
        elif isinstance(ast, Number):
            return ast.lexeme if ast.lexeme is not None else repr(ast.value)
        elif isinstance(ast, Boolean):
            return '#t' if ast.value else '#f'
        elif isinstance(ast, Nil):
            return 'nil'
        elif isinstance(ast, Char):
            return t_to_char + char_to_name(ast.value)
        else:
            raise TypeError(f'not an ast node {ast!r}')

    return print_sexp


print_sexp = configure_print()
