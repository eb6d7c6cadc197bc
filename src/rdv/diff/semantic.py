"""Semantic YAML diff - compares Kubernetes documents field by field.

Documents are paired by identity (apiVersion, kind, namespace, name). A
document missing any of apiVersion, kind or name, or whose identity repeats
on its side, is paired by position instead (``document #N``). Mappings are
compared key by key regardless of order. Lists of mappings with unique
``name`` keys are paired by name, all other lists by index.
"""

from __future__ import annotations

import math
from collections.abc import Hashable
from typing import Any

import yaml

from rdv.core.errors import DiffEngineError
from rdv.core.logging import get_logger
from rdv.diff.models import ChangeKind, DocumentDiff, FieldChange, SemanticDiff

log = get_logger(__name__)

ROOT_PATH = "."


def load_documents(text: str, label: str) -> list[Any]:
    """Parse a YAML stream, dropping empty documents.

    Raises:
        DiffEngineError: If the stream is not valid YAML
    """
    try:
        return [doc for doc in yaml.safe_load_all(text) if doc is not None]
    except yaml.YAMLError as e:
        raise DiffEngineError.unparseable(label, str(e)) from e


def _identity(doc: Any) -> str | None:
    if not isinstance(doc, dict):
        return None
    metadata = doc.get("metadata")
    if not isinstance(metadata, dict):
        return None
    api_version = doc.get("apiVersion")
    kind = doc.get("kind")
    name = metadata.get("name")
    if not (api_version and kind and name):
        return None
    namespace = metadata.get("namespace")
    parts = [str(api_version), str(kind)]
    if namespace:
        parts.append(str(namespace))
    parts.append(str(name))
    return "/".join(parts)


def index_documents(docs: list[Any]) -> dict[str, Any]:
    """Key each document by identity, falling back to ``document #N``."""
    identities = [_identity(doc) for doc in docs]
    counts: dict[str, int] = {}
    for identity in identities:
        if identity is not None:
            counts[identity] = counts.get(identity, 0) + 1

    indexed: dict[str, Any] = {}
    for ordinal, (doc, identity) in enumerate(zip(docs, identities, strict=True), start=1):
        if identity is None or counts[identity] > 1:
            identity = f"document #{ordinal}"
        indexed[identity] = doc
    return indexed


# =============================================================================
# Field comparison
# =============================================================================


def _join(path: str, key: Any) -> str:
    return f"{path}.{key}" if path else str(key)


def _named_items(items: list[Any]) -> dict[Hashable, Any] | None:
    """Items keyed by ``name`` when every item is a mapping with a unique name."""
    by_name: dict[Hashable, Any] = {}
    for item in items:
        if not isinstance(item, dict) or "name" not in item:
            return None
        name = item["name"]
        if not isinstance(name, Hashable) or name in by_name:
            return None
        by_name[name] = item
    return by_name


def _same(old: Any, new: Any) -> bool:
    # bool is an int subclass; true and 1 are different YAML values
    if type(old) is not type(new):
        return False
    if isinstance(old, float) and math.isnan(old):
        return math.isnan(new)
    return old == new


def _key_order(key: Any) -> tuple[str, str]:
    # 1 and "1" print alike; the type name keeps their order stable
    return str(key), type(key).__name__


def compare_values(old: Any, new: Any, path: str = "") -> list[FieldChange]:
    """Field changes turning ``old`` into ``new``, keys sorted, in traversal order."""
    changes: list[FieldChange] = []
    _compare(old, new, path, changes)
    return changes


def _compare(old: Any, new: Any, path: str, out: list[FieldChange]) -> None:
    if isinstance(old, dict) and isinstance(new, dict):
        for key in sorted(old.keys() | new.keys(), key=_key_order):
            child = _join(path, key)
            if key not in new:
                out.append(FieldChange(ChangeKind.REMOVED, child, old=old[key]))
            elif key not in old:
                out.append(FieldChange(ChangeKind.ADDED, child, new=new[key]))
            else:
                _compare(old[key], new[key], child, out)
        return

    if isinstance(old, list) and isinstance(new, list):
        old_named = _named_items(old)
        new_named = _named_items(new)
        if old_named is not None and new_named is not None:
            names = list(old_named) + [n for n in new_named if n not in old_named]
            for name in names:
                child = f"{path}[{name}]"
                if name not in new_named:
                    out.append(FieldChange(ChangeKind.REMOVED, child, old=old_named[name]))
                elif name not in old_named:
                    out.append(FieldChange(ChangeKind.ADDED, child, new=new_named[name]))
                else:
                    _compare(old_named[name], new_named[name], child, out)
            return
        for i in range(max(len(old), len(new))):
            child = f"{path}[{i}]"
            if i >= len(new):
                out.append(FieldChange(ChangeKind.REMOVED, child, old=old[i]))
            elif i >= len(old):
                out.append(FieldChange(ChangeKind.ADDED, child, new=new[i]))
            else:
                _compare(old[i], new[i], child, out)
        return

    if not _same(old, new):
        out.append(FieldChange(ChangeKind.MODIFIED, path or ROOT_PATH, old=old, new=new))


# =============================================================================
# Entry point
# =============================================================================


def semantic_diff(old_text: str, new_text: str, from_label: str, to_label: str) -> SemanticDiff:
    """Diff ``old_text`` (target) against ``new_text`` (local) document by document.

    Output order: target documents in target order, then local-only
    documents in local order.

    Raises:
        DiffEngineError: If either side is not valid YAML
    """
    old_docs = index_documents(load_documents(old_text, from_label))
    new_docs = index_documents(load_documents(new_text, to_label))

    documents: list[DocumentDiff] = []
    for identity, old_doc in old_docs.items():
        if identity not in new_docs:
            documents.append(DocumentDiff(identity, ChangeKind.REMOVED, document=old_doc))
            continue
        changes = compare_values(old_doc, new_docs[identity])
        if changes:
            documents.append(DocumentDiff(identity, ChangeKind.MODIFIED, changes=tuple(changes)))
    for identity, new_doc in new_docs.items():
        if identity not in old_docs:
            documents.append(DocumentDiff(identity, ChangeKind.ADDED, document=new_doc))

    log.debug(
        "semantic_diff_computed",
        target_documents=len(old_docs),
        local_documents=len(new_docs),
        changed=len(documents),
    )
    return SemanticDiff(from_label=from_label, to_label=to_label, documents=tuple(documents))
