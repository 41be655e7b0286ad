# lspbridge/core/__init__.py

# Re-export core models and components for easier access
from .models import (
    FileKey,
    Position,
    Range,
    DiagnosticSeverity,
    DiagnosticItem,
    DiagnosticResult,
    DiagnosticGroup,
    OverlayRegion,
    VisibilitySignal,
    Command,
    TextEdit,
    FileChange,
    CodeActionItem,
    Location,
    MatchPreview,
    ShowDocumentParams,
    ShowDocumentResult,
)
from .errors import BridgeError, ClientStateError, DiagnosticConversionError, TextRangeError
from .interfaces import DocumentHandle, UiShell, ShellProvider, UiExecutor, run_immediately
from .text_content import TextContent, HeadlessDocument
from .locator import DocumentLocator
from .diagnostic_store import DiagnosticStore, to_overlay_regions
from .diagnostic_aggregator import DiagnosticAggregator, MAX_DIAGNOSTIC_FILES, MAX_DIAGNOSTIC_ITEMS_PER_FILE
from .diagnostic_lookup import DiagnosticLookup, binary_search_diagnostic
from .edit_router import EditRouter, CodeActionTask, edit_in_document
from .locations import LocationResultBuilder, LocationResultTask
from .client import LanguageClient

__all__ = [
    # Models
    "FileKey", "Position", "Range", "DiagnosticSeverity", "DiagnosticItem", "DiagnosticResult",
    "DiagnosticGroup", "OverlayRegion", "VisibilitySignal", "Command", "TextEdit", "FileChange",
    "CodeActionItem", "Location", "MatchPreview", "ShowDocumentParams", "ShowDocumentResult",
    # Errors
    "BridgeError", "ClientStateError", "DiagnosticConversionError", "TextRangeError",
    # Collaborator interfaces
    "DocumentHandle", "UiShell", "ShellProvider", "UiExecutor", "run_immediately",
    # Core Components
    "TextContent", "HeadlessDocument", "DocumentLocator", "DiagnosticStore", "to_overlay_regions",
    "DiagnosticAggregator", "MAX_DIAGNOSTIC_FILES", "MAX_DIAGNOSTIC_ITEMS_PER_FILE",
    "DiagnosticLookup", "binary_search_diagnostic",
    "EditRouter", "CodeActionTask", "edit_in_document",
    "LocationResultBuilder", "LocationResultTask",
    "LanguageClient",
]
