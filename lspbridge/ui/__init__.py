# lspbridge/ui/__init__.py

from .executor import QtUiExecutor

__all__ = ["QtUiExecutor"]
