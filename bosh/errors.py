# bosh/errors.py
# -*- coding: utf-8 -*-

from typing import Union

from storage.state import State


class ManagerCreateError(Exception):
    """
    Raised when ``create-env`` for the director fails after recording progress.

    ``bbl_state`` holds the partially updated state (the create-env deployment
    state written so far) and must be persisted so a re-run can resume.
    """

    def __init__(self, bbl_state: State, cause: Union[BaseException, str]):
        self.bbl_state = bbl_state
        self.cause = cause
        super().__init__(str(cause))


class CreateEnvError(Exception):
    """Raised when ``create-env`` for the jumpbox fails."""
