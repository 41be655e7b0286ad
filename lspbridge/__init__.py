# lspbridge/__init__.py
"""
lspbridge - routes language-server results (diagnostics, code actions,
locations, show-document requests) into a live editor shell.
"""

__version__ = "0.1.0"
