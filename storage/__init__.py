# storage/__init__.py
# -*- coding: utf-8 -*-
"""Persistence of the environment state record."""
