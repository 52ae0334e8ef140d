# classify
# escapes
# char names

from types import MappingProxyType


class Category:
    """ What a single charachter means to the reader. """

    category_names = {}

    def __init__(self, index):
        self.index = index

    def __repr__(self):
        return f'<category {self.category_names[self]}>'


categories = [whitespace, open_list, close_list, open_vector,
              close_vector, string_delimiter, comment_start,
              quote_prefix, constituent] = [Category(i) for i in range(9)]

Category.category_names.update({
    whitespace: 'whitespace',
    open_list: 'open-list',
    close_list: 'close-list',
    open_vector: 'open-vector',
    close_vector: 'close-vector',
    string_delimiter: 'string-delimiter',
    comment_start: 'comment-start',
    quote_prefix: 'quote-prefix',
    constituent: 'constituent',
})

closers = close_list, close_vector

# the unparsable char, assign it to a token to turn the token off
unp = object()

standard_whitespace = ' \t\n\r\f\v'


def make_classifier(t_beg_list='(',
                    t_end_list=')',
                    t_beg_vect='[',
                    t_end_vect=']',
                    t_beg_end_str='"',
                    t_to_comment=';',
                    quote_prefixes=("'", '`', ','),
                    additional_whitespace=''):
    """ Build the charachter -> category table for one configuration.

    The table is read only once built so one classifier can be shared
    by any number of concurrent parses. """

    table = {c: whitespace for c in standard_whitespace + additional_whitespace}
    for char, category in ((t_beg_list, open_list),
                           (t_end_list, close_list),
                           (t_beg_vect, open_vector),
                           (t_end_vect, close_vector),
                           (t_beg_end_str, string_delimiter),
                           (t_to_comment, comment_start),
                           *((q, quote_prefix) for q in quote_prefixes)):
        if char is unp:
            continue
        if char in table:
            raise ValueError(f'{char!r} is both {table[char]} and {category}')
        table[char] = category

    table = MappingProxyType(table)

    def classify(char):
        return table.get(char, constituent)

    classify.table = table
    return classify


classify = make_classifier()


# string escapes, the common subset of cee_base that every dialect
# agrees on, anything not listed here stands for itself
cee_base = MappingProxyType({
    'n': '\n',
    't': '\t',
    'r': '\r',
    '0': '\0',
    '"': '"',
    '\\': '\\',
})

cee_print = MappingProxyType({
    '\\': '\\\\',
    '"': '\\"',
    '\n': '\\n',
    '\t': '\\t',
    '\r': '\\r',
    '\0': '\\0',
})


known_multi = MappingProxyType({
    # racket has a closed set of valid multichar charachter names
    # which makes it possible to know where a char literal ends
    'backspace': '\x08',  # aka '\b'
    'newline': '\x0a',    # ala '\n'
    'linefeed': '\x0a',   # ala '\n'
    'nul': '\x00',
    'null': '\x00',
    'page': '\x0c',       # \f
    'return': '\x0d',     # \r
    'rubout': '\x7f',     # aka delete
    'delete': '\x7f',
    'escape': '\x1b',
    'altmode': '\x1b',
    'space': '\x20',
    'tab': '\x09',        # \t
    'vtab': '\x0b',       # \v
    'alarm': '\x07',
})

known_multi_print = MappingProxyType({
    # one name per char when printing, the first listed above wins
    v: k for k, v in reversed(tuple(known_multi.items()))})


def char_from_name(name):
    """ Resolve the text after #\\ to a single charachter.

    Returns None if the name does not denote a charachter. """

    if len(name) == 1:
        return name
    elif name in known_multi:
        return known_multi[name]
    elif name.lower() in known_multi:
        return known_multi[name.lower()]
    elif name[0] in 'xuU' and len(name) > 1:
        try:
            return chr(int(name[1:], base=16))
        except (ValueError, OverflowError):
            return None


def char_to_name(char):
    if char in known_multi_print:
        return known_multi_print[char]
    elif char.isprintable() and not char.isspace():
        return char
    else:
        return f'x{ord(char):x}'
