# terraform/errors.py
# -*- coding: utf-8 -*-

from typing import Union

from storage.state import State


class ManagerError(Exception):
    """
    Raised when an apply fails part way through.

    ``bbl_state`` carries whatever progress was recorded before the failure
    (for example the partial terraform state) so the caller can persist it.
    The text of the error is the text of the underlying cause.
    """

    def __init__(self, bbl_state: State, cause: Union[BaseException, str]):
        self.bbl_state = bbl_state
        self.cause = cause
        super().__init__(str(cause))


class TemplateError(Exception):
    """Raised when no terraform templates exist for the environment's IaaS."""
