from abc import ABC, abstractmethod

class LoggingPort(ABC):
    """What the core needs from a logger: leveled messages with %-style args."""

    @abstractmethod
    def info(self, msg: str, *args):
        pass

    @abstractmethod
    def warning(self, msg: str, *args):
        pass

    @abstractmethod
    def error(self, msg: str, *args):
        pass

    @abstractmethod
    def debug(self, msg: str, *args):
        pass
