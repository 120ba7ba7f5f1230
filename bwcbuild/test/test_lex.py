"""
Tests for the declaration lexer.
"""

import unittest
from unittest import TestCase

from bwcbuild.lex import DeclarationLexer


class DeclarationLexerTestCase(TestCase):

    def setUp(self):
        self.lexer = DeclarationLexer()

    def types(self, text):
        return [tok.type for tok in self.lexer.tokenize(text)]

    def test_declaration(self):
        toks = self.lexer.tokenize('    public static final Version V_5_0_0 '
                                   '= new Version(V_5_0_0_ID);')
        self.assertEqual([tok.type for tok in toks],
                         ['PUBLIC', 'STATIC', 'FINAL', 'ID', 'VERSION_ID',
                          'PUNCT', 'ID', 'ID', 'PUNCT', 'ID', 'PUNCT',
                          'PUNCT'])
        self.assertEqual(toks[4].value, (5, 0, 0))
        self.assertEqual(toks[9].value, 'V_5_0_0_ID')

    def test_prerelease_constant_is_an_identifier(self):
        toks = self.lexer.tokenize('V_6_0_0_alpha1 V_6_0_0_beta2 V_5_6_0')
        self.assertEqual([tok.type for tok in toks],
                         ['ID', 'ID', 'VERSION_ID'])

    def test_numbers(self):
        toks = self.lexer.tokenize('int V_5_0_0_ID = 5000099;')
        self.assertEqual(toks[3].type, 'NUMBER')
        self.assertEqual(toks[3].value, 5000099)

    def test_comments(self):
        self.assertEqual(self.types('// public static final Version V_1_0_0'),
                         [])
        self.assertEqual(self.types('/* V_1_0_0 */ final'), ['FINAL'])

    def test_strings(self):
        self.assertEqual(self.types('String s = "V_1_0_0 = \\"x\\"";'),
                         ['ID', 'ID', 'PUNCT', 'STRING', 'PUNCT'])

    def test_illegal_characters_are_skipped(self):
        self.assertEqual(self.types('final é static'),
                         ['FINAL', 'STATIC'])

    def test_lexer_is_reusable(self):
        self.assertEqual(self.types('public'), ['PUBLIC'])
        self.assertEqual(self.types('static'), ['STATIC'])


if __name__ == '__main__':
    unittest.main()
