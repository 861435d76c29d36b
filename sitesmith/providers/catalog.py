"""Provider/model catalog loaded from catalog.yaml."""
from __future__ import annotations
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

CATALOG_PATH = Path(__file__).with_name("catalog.yaml")


@dataclass(frozen=True)
class ModelEntry:
    key: str
    name: str
    description: str = ""
    default: bool = False


@dataclass(frozen=True)
class ProviderEntry:
    key: str
    name: str
    description: str = ""
    models: List[ModelEntry] = field(default_factory=list)

    @property
    def default_model(self) -> Optional[str]:
        for model in self.models:
            if model.default:
                return model.key
        return self.models[0].key if self.models else None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "key": self.key,
            "name": self.name,
            "description": self.description,
            "defaultModel": self.default_model,
            "models": [
                {"key": m.key, "name": m.name, "description": m.description, "isDefault": m.default}
                for m in self.models
            ],
        }


def parse_catalog(raw: Dict[str, Any]) -> Dict[str, ProviderEntry]:
    providers: Dict[str, ProviderEntry] = {}
    for key, entry in (raw.get("providers") or {}).items():
        models = [
            ModelEntry(
                key=m["key"],
                name=m.get("name", m["key"]),
                description=m.get("description", ""),
                default=bool(m.get("default", False)),
            )
            for m in entry.get("models") or []
        ]
        providers[key] = ProviderEntry(
            key=key,
            name=entry.get("name", key),
            description=entry.get("description", ""),
            models=models,
        )
    return providers


@lru_cache(maxsize=1)
def load_catalog(path: Path = CATALOG_PATH) -> Dict[str, ProviderEntry]:
    with open(path, "r", encoding="utf-8") as f:
        return parse_catalog(yaml.safe_load(f) or {})
