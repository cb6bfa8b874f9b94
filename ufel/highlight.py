"""
Pygments lexer for Ufel source, used by the REPL for syntax colouring.
"""
import re

from pygments.lexer import RegexLexer
from pygments.token import Keyword, Name, Number, Operator, Punctuation, Text, Whitespace

from ufel.voc import Dyadic, DyModifier, Modifier, Monadic

def _glyphs(*tables) -> str:
    return '[' + ''.join(re.escape(p.glyph) for t in tables for p in t) + ']'

class UfelLexer(RegexLexer):
    name = 'Ufel'
    aliases = ['ufel']
    filenames = ['*.fel']

    tokens = {
        'root': [
            (r'\n', Whitespace),
            (r'[ \t\r]+', Whitespace),
            (r'`?[0-9]+(\.[0-9]*)?([eE]`?[0-9]+)?', Number),
            (_glyphs(Modifier, DyModifier), Keyword),
            (_glyphs(Dyadic), Operator),
            (_glyphs(Monadic), Name.Function),
            (r'[()\[\]|]', Punctuation),
            (r'.', Text),
        ],
    }
