"""
Cutlist Reconciliation v1.0

Converges messy furniture-panel cutlists (free text, OCR scans, spreadsheet
rows) into a canonical, reviewed part list.

Components:
- shortcodes: Encode operation sets as compact codes (EB:W:4S, GR:DADO:8x4@W1)
- corrections: Explain what the upstream parser swapped, normalized or inferred
- dedupe: Group physically identical panels and plan quantity-summing merges
- projects: Collapse multi-page submissions into one logical batch
- suggestions: Propose default operations from part names ("Fixed Shelf")
"""

__version__ = "1.0.0"


def __getattr__(name):
    """Lazy imports so ``import cutlist_reconcile`` stays cheap when only a
    single component such as shortcodes or dedupe is needed."""

    _model_names = {
        "Part", "PartStatus", "Size", "OperationSet", "Edgebanding",
        "GrooveEntry", "HoleEntry", "CncEntry",
    }
    _contract_names = {
        "Correction", "CorrectionType", "DuplicateGroup", "ProjectBatch",
        "ProjectGroup", "OperationSuggestion", "MergeContractError",
    }
    _component_names = {
        "encode": "shortcodes",
        "decode_sides": "shortcodes",
        "detect_diffs": "corrections",
        "detect_duplicates": "dedupe",
        "merge_parts": "dedupe",
        "MergePlan": "dedupe",
        "get_unmerged_projects": "projects",
        "merge_project_batches": "projects",
        "get_name_suggestions": "suggestions",
        "apply_suggestion_to_ops": "suggestions",
        "operations_match_suggestion": "suggestions",
    }
    _pipeline_names = {
        "CutlistReconciler", "ReconciliationReport", "reconcile",
    }

    if name in _model_names:
        from . import models
        return getattr(models, name)
    elif name in _contract_names:
        from . import contracts
        return getattr(contracts, name)
    elif name in _component_names:
        import importlib
        module = importlib.import_module(f".{_component_names[name]}", __name__)
        return getattr(module, name)
    elif name in _pipeline_names:
        from . import pipeline
        return getattr(pipeline, name)
    elif name in {"Config", "default_config"}:
        from . import config
        return getattr(config, name)

    raise AttributeError(f"module 'cutlist_reconcile' has no attribute {name!r}")
