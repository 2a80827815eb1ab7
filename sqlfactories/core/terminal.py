from enum import Enum

from rich.console import Console


class OutputColour(str, Enum):
    WARNING = "yellow"

    def __str__(self) -> str:
        return self.value


class Print(Console):
    """
    Writes coloured messages to the terminal through Rich.

    Used for messages meant for the person running the tests, such as
    factory definition warnings, rather than for the log.
    """

    def message(self, message: str, colour: str) -> str:
        return f"[{colour}]{message}[/{colour}]"

    def write_warning(self, message: str, colour: str = OutputColour.WARNING) -> None:
        self.print(self.message(message, colour))


__all__ = ["OutputColour", "Print"]
