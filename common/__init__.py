# common/__init__.py
# -*- coding: utf-8 -*-
"""Shared configuration, logging and subprocess helpers."""
