# commands/__init__.py
# -*- coding: utf-8 -*-
"""
Commands that drive an environment: plan, up and the collaborators they share.
"""
