# storage/errors.py
# -*- coding: utf-8 -*-


class StateStoreError(Exception):
    """Raised when the state file cannot be read or written."""
