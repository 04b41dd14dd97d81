"""Reconciliation pipeline orchestration."""

from .orchestrator import CutlistReconciler, ReconciliationReport, reconcile

__all__ = [
    "CutlistReconciler",
    "ReconciliationReport",
    "reconcile",
]
