#
# src/testdeck/cli/__init__.py
#
"""
Command-line interface for testdeck.
"""
