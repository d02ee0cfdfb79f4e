"""
Macro dispatch for storage-format markup.

- registry: MacroRegistry, ordered dispatch with a generic fallback
- handlers: one handler per recognized macro
- types: typed parameter records keyed by macro name
"""

from .handlers import (
    CalloutMacroHandler,
    CodeMacroHandler,
    ExpandMacroHandler,
    GenericMacroHandler,
    IssueReferenceMacroHandler,
    MacroContext,
    MacroHandler,
    PanelMacroHandler,
    StatusMacroHandler,
    TocMacroHandler,
    extract_parameters,
)
from .registry import MacroRegistry
from .types import (
    MACRO_PARAMETER_TYPES,
    CalloutParameters,
    CodeParameters,
    ExpandParameters,
    IssueReferenceParameters,
    MacroParameters,
    PanelParameters,
    RawParameters,
    StatusParameters,
    TocParameters,
    macro_parameters,
)

__all__ = [
    "MacroRegistry",
    "MacroHandler",
    "MacroContext",
    "CalloutMacroHandler",
    "CodeMacroHandler",
    "TocMacroHandler",
    "StatusMacroHandler",
    "ExpandMacroHandler",
    "PanelMacroHandler",
    "IssueReferenceMacroHandler",
    "GenericMacroHandler",
    "extract_parameters",
    "MACRO_PARAMETER_TYPES",
    "MacroParameters",
    "CalloutParameters",
    "CodeParameters",
    "TocParameters",
    "StatusParameters",
    "ExpandParameters",
    "PanelParameters",
    "IssueReferenceParameters",
    "RawParameters",
    "macro_parameters",
]
