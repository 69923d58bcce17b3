"""Parsing of library documents into the read-only library graph."""

from tunexport.parsing.diagnostics import Diagnostic, DiagnosticCode, Diagnostics, Severity
from tunexport.parsing.parser import LibraryParser
from tunexport.parsing.resolver import IgnorePolicy, PlaylistResolver, ResolutionResult

__all__ = [
    "Diagnostic",
    "DiagnosticCode",
    "Diagnostics",
    "IgnorePolicy",
    "LibraryParser",
    "PlaylistResolver",
    "ResolutionResult",
    "Severity",
]
