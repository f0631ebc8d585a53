"""データモデルパッケージ"""

from keiba_paste.models.config import ParserConfig
from keiba_paste.models.diagnostic import Diagnostic, ExtractionResult, bound_snippet
from keiba_paste.models.records import HorseRecord, OddsRecord, RaceInfo
from keiba_paste.models.types import (
    DIAGNOSTIC_KINDS,
    DiagnosticKind,
    Gender,
    PasteLayout,
    RaceClass,
    Severity,
    Surface,
    TrackCondition,
)

__all__ = [
    "DIAGNOSTIC_KINDS",
    "Diagnostic",
    "DiagnosticKind",
    "ExtractionResult",
    "Gender",
    "HorseRecord",
    "OddsRecord",
    "ParserConfig",
    "PasteLayout",
    "RaceClass",
    "RaceInfo",
    "Severity",
    "Surface",
    "TrackCondition",
    "bound_snippet",
]
