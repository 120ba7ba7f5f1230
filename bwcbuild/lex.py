"""
Lexer definitions for constant declarations in Java sources.

Only a tiny subset of Java is of interest here, namely lines like

    public static final Version V_5_0_0 = new Version(V_5_0_0_ID, ...);

Anything that is not an identifier, a number or a string literal comes out as
a single-character PUNCT token.
"""

import logging

import ply.lex

logger = logging.getLogger(__name__)


class DeclarationLexer(object):

    reserved = {
        'public': 'PUBLIC',
        'static': 'STATIC',
        'final':  'FINAL',
    }

    tokens = (
        # Literals (identifier, version constant name, number, string)
        'ID', 'VERSION_ID', 'NUMBER', 'STRING',

        # Anything else, one character at a time
        'PUNCT',
    ) + tuple(sorted(reserved.values()))

    # Completely ignored characters
    t_ignore = ' \t\x0c\r'

    t_PUNCT  = r'[^\w\s"]'

    # String literal
    t_STRING = r'\"([^\\\n]|(\\.))*?\"'

    def __init__(self, **kwargs):
        super(DeclarationLexer, self).__init__()
        self.lexer = ply.lex.lex(module=self, **kwargs)

    # Newlines
    def t_NEWLINE(self, t):
        r'\n+'
        t.lexer.lineno += len(t.value)

    # Comments
    def t_comment(self, t):
        r'/\*(.|\n)*?\*/|//[^\n]*'
        t.lexer.lineno += t.value.count('\n')

    # Version constants: V_5_0_0, but neither V_5_0_0_alpha1 nor V_5_0_0_ID
    def t_VERSION_ID(self, t):
        r'V_\d+_\d+_\d+(?![\w$])'
        t.value = tuple(int(part) for part in t.value[2:].split('_'))
        return t

    # Identifiers and reserved words
    def t_ID(self, t):
        r'[A-Za-z_$][\w$]*'
        t.type = self.reserved.get(t.value, 'ID')
        return t

    def t_NUMBER(self, t):
        r'\d+'
        t.value = int(t.value)
        return t

    def t_error(self, t):
        logger.debug("Illegal character %r at line %d",
                     t.value[0], t.lexer.lineno)
        t.lexer.skip(1)

    def tokenize(self, text):
        self.lexer.input(text)
        self.lexer.lineno = 1
        return list(iter(self.lexer.token, None))


if __name__ == "__main__":
    ply.lex.runmain(DeclarationLexer().lexer)
