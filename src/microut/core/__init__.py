"""Core models and signals exposed at the package level."""
from .models import CaseDescriptor, GlobalContext, ResultRecord, Severity
from .signals import AbortSignal, CaseAbort, FatalAbort, FrameworkUsageError, SignalKind

__all__ = [
    "AbortSignal",
    "CaseAbort",
    "CaseDescriptor",
    "FatalAbort",
    "FrameworkUsageError",
    "GlobalContext",
    "ResultRecord",
    "Severity",
    "SignalKind",
]
