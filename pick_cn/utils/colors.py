"""ANSI color codes for terminal output."""


class Colors:
    """ANSI styles used by the CLI, the console reporter and log formatting."""

    OKCYAN = '\033[96m'
    OKGREEN = '\033[92m'
    WARNING = '\033[93m'
    FAIL = '\033[91m'
    BOLD = '\033[1m'
    DIM = '\033[2m'
    ENDC = '\033[0m'

    @classmethod
    def _wrap(cls, style: str, text: str) -> str:
        return f"{style}{text}{cls.ENDC}"

    @classmethod
    def success(cls, text: str) -> str:
        """Green: written files, finished steps."""
        return cls._wrap(cls.OKGREEN, text)

    @classmethod
    def error(cls, text: str) -> str:
        return cls._wrap(cls.FAIL, text)

    @classmethod
    def warning(cls, text: str) -> str:
        """Yellow: placeholders, skipped files, missing credentials."""
        return cls._wrap(cls.WARNING, text)

    @classmethod
    def info(cls, text: str) -> str:
        return cls._wrap(cls.OKCYAN, text)

    @classmethod
    def bold(cls, text: str) -> str:
        return cls._wrap(cls.BOLD, text)

    @classmethod
    def dim(cls, text: str) -> str:
        """Secondary details such as timings."""
        return cls._wrap(cls.DIM, text)
