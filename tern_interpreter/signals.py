from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Optional


class Signal(Enum):
    NORMAL = auto()
    BREAK = auto()
    CONTINUE = auto()
    RETURN = auto()


@dataclass(frozen=True)
class Completion:
    """
    The result of executing one statement. Anything but NORMAL tells the
    enclosing statements to stop and hand the completion outward until a loop
    (BREAK, CONTINUE) or a function call (RETURN) consumes it.
    """
    signal: Signal
    value: Optional[Any] = None

    @property
    def is_normal(self) -> bool:
        return self.signal is Signal.NORMAL


NORMAL = Completion(Signal.NORMAL)
BREAK = Completion(Signal.BREAK)
CONTINUE = Completion(Signal.CONTINUE)


def returning(value: Any) -> Completion:
    return Completion(Signal.RETURN, value)
