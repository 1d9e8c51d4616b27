from stringsutil.lib.exceptions import ResourceReadError
from stringsutil.lib.tools import exception_to_string, terminalfit

from .. import TestBase


class TestTools(TestBase):

    def test_exception_to_string(self):
        self.assertEqual(exception_to_string(KeyError()), 'KeyError')
        self.assertEqual(exception_to_string(ValueError(' bad value ')), 'bad value')
        self.assertEqual(
            exception_to_string(ResourceReadError('a.jar', 'permission denied')),
            'Unable to read a.jar: permission denied')

    def test_terminalfit(self):
        text = 'alpha beta gamma delta\n\n    indented paragraph stays as it is'
        self.assertEqual(
            terminalfit(text, width=11),
            'alpha beta\ngamma delta\n\n    indented paragraph stays as it is')
