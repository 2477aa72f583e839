# commands/errors.py
# -*- coding: utf-8 -*-
"""
User-facing error types raised by commands.
"""

from typing import Iterable, List, Union


class CommandError(Exception):
    """A failure that is reported to the user and ends the command."""


class StageError(CommandError):
    """
    A stage failure reported as ``"<prefix>: <cause>"``.

    The original exception, when there is one, is also chained as
    ``__cause__`` by the raiser.
    """

    def __init__(self, prefix: str, cause: Union[BaseException, str]):
        self.prefix = prefix
        self.cause = cause
        super().__init__(f"{prefix}: {cause}")


class CompoundError(CommandError):
    """Several failures from the same stage reported together."""

    def __init__(self, errors: Iterable[BaseException]):
        self.errors: List[BaseException] = list(errors)
        joined = ",\n".join(str(e) for e in self.errors)
        super().__init__(f"the following errors occurred:\n{joined}")


NO_DIRECTOR_WITH_EXISTING_DIRECTOR = (
    'Director already exists, you must re-create your environment to use "--no-director"'
)
