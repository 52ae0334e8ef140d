from .sxrd import (
    configure,
    configure_print,
    make_do_path,
    __version__)

# ast nodes
from .sxrd import (
    Ast,
    ListAbstract,
    Symbol,
    Number,
    String,
    Boolean,
    Nil,
    Char,
    List,
    Vector,)

# errors
from .sxrd import (
    SxrdError,
    ConfigurationError,
    ParseError,
    UnterminatedString,
    UnterminatedList,
    UnterminatedVector,
    MismatchedDelimiter,
    UnexpectedClosingDelimiter,
    DanglingQuotePrefix,
    MalformedNumericLiteral,
    MalformedCharacterLiteral,
    UnexpectedEndOfInput,)

# dialect configs
from .sxrd import (
    conf_default,
    conf_strict,
    conf_clj_ws,)
