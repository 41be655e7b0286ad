# lspbridge/config/schema.py

from pydantic import BaseModel, Field
from typing import Dict, Optional, Literal

MAX_DIAGNOSTIC_FILES = 10
MAX_DIAGNOSTIC_ITEMS_PER_FILE = 20

class MessagesConfig(BaseModel):
    """User-facing strings shown by the client."""
    cannot_perform_fix: str = "Unable to perform code action"
    performing_actions: str = "Performing code actions..."

class BridgeConfig(BaseModel):
    # Display caps for the diagnostics panel. Rendering hundreds of items lags the UI.
    max_diagnostic_files: int = Field(default=MAX_DIAGNOSTIC_FILES, ge=1)
    max_diagnostic_items_per_file: int = Field(default=MAX_DIAGNOSTIC_ITEMS_PER_FILE, ge=1)
    # File suffix (lower-case, with dot) -> icon tag used by DiagnosticGroup
    diagnostic_icons: Dict[str, str] = Field(default_factory=lambda: {
        ".java": "ic_language_java",
        ".kt": "ic_language_kotlin",
        ".kts": "ic_language_kotlin",
        ".xml": "ic_language_xml",
        ".gradle": "ic_language_gradle",
        ".py": "ic_language_python",
    })
    default_diagnostic_icon: str = "ic_file"
    # None -> leave QThreadPool's default (ideal thread count)
    max_worker_threads: Optional[int] = Field(default=None, ge=1)
    log_level: Literal["TRACE", "DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    messages: MessagesConfig = Field(default_factory=MessagesConfig)

    def icon_for(self, file_name: str) -> str:
        """Returns the icon tag for a file name based on its suffix."""
        dot = file_name.rfind(".")
        if dot < 0:
            return self.default_diagnostic_icon
        return self.diagnostic_icons.get(file_name[dot:].lower(), self.default_diagnostic_icon)
