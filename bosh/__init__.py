# bosh/__init__.py
# -*- coding: utf-8 -*-
"""Jumpbox and director lifecycle through the bosh CLI."""
