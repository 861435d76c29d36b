"""Helpers for the planned file tree (``{"public": {"type": "directory", "children": {...}}}``)."""
import logging
from typing import Any, Dict, List, Optional

from sitesmith.core.errors import MalformedResponseError

log = logging.getLogger(__name__)

ROOT_DIR = "public"
DEFAULT_DIRECTIVE = "Create a basic HTML page"


def normalize_file_structure(data: Any) -> Dict[str, Any]:
    """
    Validate a planned tree and reduce it to the flat layout.

    Only file leaves directly under the root directory are kept; nested
    directories are dropped. Each kept leaf carries a string ``prompt``
    (possibly empty, in which case generation falls back to a placeholder).

    Raises:
        MalformedResponseError: the root directory is missing or holds no files
    """
    if not isinstance(data, dict):
        raise MalformedResponseError("File structure must be a JSON object")
    root = data.get(ROOT_DIR)
    if not isinstance(root, dict) or root.get("type") != "directory" or not isinstance(root.get("children"), dict):
        raise MalformedResponseError(f"File structure must contain a '{ROOT_DIR}' directory with children")

    children: Dict[str, Dict[str, Any]] = {}
    for name, node in root["children"].items():
        if not isinstance(node, dict):
            continue
        if node.get("type") == "directory":
            log.warning("Dropping nested directory %s from file structure", name)
            continue
        prompt = node.get("prompt")
        children[name] = {"type": "file", "prompt": prompt if isinstance(prompt, str) else ""}

    if not children:
        raise MalformedResponseError("File structure does not contain any files")
    return {ROOT_DIR: {"type": "directory", "children": children}}


def planned_files(structure: Dict[str, Any]) -> List[str]:
    children = (structure.get(ROOT_DIR) or {}).get("children") or {}
    return [name for name, node in children.items() if isinstance(node, dict) and node.get("type") != "directory"]


def file_directive(structure: Optional[Dict[str, Any]], file_name: str) -> Optional[str]:
    if not structure:
        return None
    node = ((structure.get(ROOT_DIR) or {}).get("children") or {}).get(file_name)
    if isinstance(node, dict) and isinstance(node.get("prompt"), str) and node["prompt"].strip():
        return node["prompt"]
    return None
