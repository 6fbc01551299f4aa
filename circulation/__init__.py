#!/usr/bin/env python

"""
    Circulation, loan lifecycle management for a small library

    :copyright: (c) 2025 by AUTHORS
    :license: see LICENSE for more details
"""

__version__ = '0.1.0'
