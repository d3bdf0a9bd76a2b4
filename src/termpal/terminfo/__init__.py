"""Terminfo lookups and the capability registry."""

from termpal.terminfo.capabilities import (
    CapabilityRegistry,
    CapabilitySet,
    KeyTable,
    build_key_table,
    resolve_capabilities,
)
from termpal.terminfo.database import (
    CursesDatabase,
    Evaluator,
    TerminfoDatabase,
    load_database,
    tparm,
)

__all__ = [
    "CapabilityRegistry",
    "CapabilitySet",
    "KeyTable",
    "build_key_table",
    "resolve_capabilities",
    "CursesDatabase",
    "Evaluator",
    "TerminfoDatabase",
    "load_database",
    "tparm",
]
