"""Domain errors."""


class InvalidArgument(ValueError):
    """Raised when a caller passes malformed input to the domain core.

    All problems found are collected in ``problems`` so a caller can report
    them at once instead of fixing one record at a time.
    """

    def __init__(self, problems: list[str] | str) -> None:
        if isinstance(problems, str):
            problems = [problems]
        self.problems = list(problems)
        super().__init__("; ".join(self.problems))


class CoupleError(Exception):
    """Raised when a couple cannot be found or joined."""
