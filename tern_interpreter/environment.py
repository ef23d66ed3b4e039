from typing import Dict, Any, Optional, Set

from .tokens import Token
from .errors import unresolved_identifier, constant_reassignment

class Environment:
    """
    Manages variable scopes, storing and retrieving variable values.
    """
    def __init__(self, enclosing: Optional['Environment'] = None):
        self.values: Dict[str, Any] = {}
        self.constants: Set[str] = set()
        self.enclosing: Optional['Environment'] = enclosing

    def define(self, name: str, value: Any, constant: bool = False):
        """
        Defines a variable in the current scope, replacing any local binding
        with the same name. Enclosing bindings are shadowed, never touched.
        """
        self.values[name] = value
        if constant:
            self.constants.add(name)
        else:
            self.constants.discard(name)

    def get(self, name: Token) -> Any:
        """
        Retrieves the value of a variable.
        If not found in the current scope, it checks the enclosing scope.
        """
        if name.lexeme in self.values:
            return self.values[name.lexeme]

        if self.enclosing is not None:
            return self.enclosing.get(name)

        raise unresolved_identifier(name)

    def assign(self, name: Token, value: Any):
        """
        Assigns a new value to an existing variable.
        If not found in the current scope, it checks the enclosing scope.
        """
        if name.lexeme in self.values:
            if name.lexeme in self.constants:
                raise constant_reassignment(name)
            self.values[name.lexeme] = value
            return

        if self.enclosing is not None:
            self.enclosing.assign(name, value)
            return

        raise unresolved_identifier(name)

    def contains(self, name: Token, recursive: bool = True) -> bool:
        """
        Checks whether the name is bound here or, unless recursive is False,
        in any enclosing scope.
        """
        if name.lexeme in self.values:
            return True

        if recursive and self.enclosing is not None:
            return self.enclosing.contains(name)

        return False

    def __repr__(self) -> str:
        names = ", ".join(sorted(self.values))
        return f"<Environment {{{names}}}{' -> ...' if self.enclosing else ''}>"
