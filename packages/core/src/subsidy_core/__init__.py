"""Subsidy Core - Employment subsidy eligibility and amount estimation."""

__version__ = "0.1.0"

from .analyzer import SubsidyAnalyzer
from .calculator import SubsidyCalculator
from .clock import FixedClock, SystemClock
from .config import SubsidySettings, configure_logging
from .models import DocumentBundle, Program, SubsidyReport

__all__ = [
    "SubsidyAnalyzer",
    "SubsidyCalculator",
    "FixedClock",
    "SystemClock",
    "SubsidySettings",
    "configure_logging",
    "DocumentBundle",
    "Program",
    "SubsidyReport",
]
