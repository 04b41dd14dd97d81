"""Read-only operation-type catalog.

The external catalog service supplies, per organization, the display
metadata behind every operation code (``DADO`` -> "Dado", ``SYS32`` ->
"System 32"). The reconciliation layer only reads it: shortcodes use it to
resolve edgeband material codes and to render notes.

Catalog file layout (YAML or JSON)::

    edgeband:
      - code: WH08
        name: White 0.8mm
        id: 3f6c...           # optional edgeband library id
    groove:
      - code: DADO
        name: Dado
        defaults: {width_mm: 4, depth_mm: 8}
    hole:
      - {code: SYS32, name: System 32}
    cnc:
      - {code: POCKET1, name: Hinge pocket}
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterator, Mapping, Optional, Tuple, Union

import yaml

from .utils.io import load_json_robust

logger = logging.getLogger(__name__)

CATEGORIES = ("edgeband", "groove", "hole", "cnc")


@dataclass(frozen=True)
class OperationType:
    """Display metadata for one operation code."""
    category: str
    code: str
    name: str
    description: str = ""
    ref_id: Optional[str] = None
    defaults: Mapping[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        d = {
            "category": self.category,
            "code": self.code,
            "name": self.name,
            "description": self.description,
            "defaults": dict(self.defaults),
        }
        if self.ref_id:
            d["id"] = self.ref_id
        return d


class OperationTypeCatalog:
    """
    Lookup of operation types keyed by (category, code).

    Codes are matched case-insensitively. The catalog cannot be changed
    after construction.

    Usage:
        catalog = OperationTypeCatalog.from_file("catalog.yaml")
        catalog.name_for("groove", "DADO")   # "Dado"
        catalog.edgeband_code("3f6c...")     # "WH08"
    """

    def __init__(self, types=()):
        entries: Dict[Tuple[str, str], OperationType] = {}
        by_ref: Dict[str, OperationType] = {}
        for op_type in types:
            entries[(op_type.category, op_type.code.upper())] = op_type
            if op_type.ref_id:
                by_ref[op_type.ref_id] = op_type
        self._entries = MappingProxyType(entries)
        self._by_ref = MappingProxyType(by_ref)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[OperationType]:
        return iter(self._entries.values())

    def get(self, category: str, code: str) -> Optional[OperationType]:
        if not code:
            return None
        return self._entries.get((category, code.upper()))

    def name_for(self, category: str, code: str) -> str:
        """Display name for a code, falling back to the code itself."""
        op_type = self.get(category, code)
        return op_type.name if op_type else code

    def edgeband_code(self, edgeband_id: Optional[str]) -> Optional[str]:
        """Short material code for an edgeband library id, if catalogued."""
        if not edgeband_id:
            return None
        op_type = self._by_ref.get(edgeband_id) or self.get("edgeband", edgeband_id)
        return op_type.code if op_type else None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "OperationTypeCatalog":
        """Build from ``{category: [ {code, name, ...}, ... ]}``."""
        types = []
        for category, items in (data or {}).items():
            if category not in CATEGORIES:
                logger.warning("Skipping unknown catalog category '%s'", category)
                continue
            for item in items or []:
                code = str(item.get("code") or "").strip()
                if not code:
                    logger.warning("Skipping %s catalog entry without code: %r", category, item)
                    continue
                types.append(OperationType(
                    category=category,
                    code=code,
                    name=str(item.get("name") or code),
                    description=str(item.get("description") or ""),
                    ref_id=item.get("id"),
                    defaults=MappingProxyType(dict(item.get("defaults") or {})),
                ))
        logger.debug("Loaded %d operation types", len(types))
        return cls(types)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "OperationTypeCatalog":
        """
        Load a catalog from a YAML or JSON file.

        Raises:
            ValueError: if the file cannot be read or is not a mapping
        """
        path = Path(path)
        if path.suffix.lower() == ".json":
            data, error = load_json_robust(path)
            if error:
                raise ValueError(error)
        else:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ValueError(f"Catalog file {path} must contain a mapping")
        return cls.from_dict(data)


# Empty catalog used when the caller supplies none
EMPTY_CATALOG = OperationTypeCatalog()
