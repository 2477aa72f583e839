# cloudconfig/__init__.py
# -*- coding: utf-8 -*-
"""Generation and publication of the director cloud config."""
