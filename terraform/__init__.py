# terraform/__init__.py
# -*- coding: utf-8 -*-
"""Infrastructure provisioning through the terraform CLI."""
