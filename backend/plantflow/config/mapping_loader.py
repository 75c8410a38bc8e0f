"""
Utilities for loading the column header mapping configuration.
"""
from __future__ import annotations

import re
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List

import yaml

CONFIG_PATH = Path(__file__).resolve().parent / "header_aliases.yaml"

_WHITESPACE = re.compile(r"\s+")


def normalize_header(value: Any) -> str:
    """Lowercase, trim and collapse runs of whitespace to a single space."""
    return _WHITESPACE.sub(" ", str(value).strip().lower())


@lru_cache()
def load_mapping_config() -> Dict[str, Any]:
    if not CONFIG_PATH.exists():
        return {}
    with open(CONFIG_PATH, "r", encoding="utf-8") as fh:
        return yaml.safe_load(fh) or {}


@lru_cache()
def get_header_aliases() -> Dict[str, str]:
    """
    Flatten the alias table into normalized header -> canonical key.

    Aliases are normalized on load so the YAML file can be written in
    whatever case reads best.
    """
    lookup: Dict[str, str] = {}
    for canonical_key, aliases in (load_mapping_config().get("aliases") or {}).items():
        lookup[normalize_header(canonical_key)] = canonical_key
        for alias in aliases or []:
            lookup[normalize_header(alias)] = canonical_key
    return lookup


def get_required_keys() -> List[str]:
    return list(load_mapping_config().get("required") or [])


def get_template_headers() -> List[str]:
    return [str(h) for h in load_mapping_config().get("template") or []]
