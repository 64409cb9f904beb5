
class MonkeyError(Exception):
    """ Base class for all Monkey host errors"""
    pass

class MonkeySyntaxError(MonkeyError):
    """ Raised when source text could not be parsed; carries the parser's errors"""

    def __init__(self, errors: list[str]):
        super().__init__("; ".join(errors))
        self.errors = list(errors)

class MonkeyTypeError(MonkeyError):
    """ Raised when a value is used where its type is not allowed"""

class MonkeyMacroError(MonkeyError):
    """ Raised when a macro cannot be expanded"""
