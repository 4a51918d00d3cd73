"""
Import extraction for Solidity sources

Recognizes every import form Solidity allows::

    import "@openzeppelin/contracts/access/Ownable.sol";
    import "@openzeppelin/contracts/access/Ownable.sol" as Own;
    import {Ownable} from "@openzeppelin/contracts/access/Ownable.sol";
    import * as Own from "@openzeppelin/contracts/access/Ownable.sol";
"""

import posixpath
import re
from typing import List, Optional, Sequence

from ..nodes_config import config
from .library import parse_remappings

# The optional clause cannot cross a ';' or a quote, so an unterminated
# statement never swallows the next import.
IMPORT_PATTERN = re.compile(
    r"""\bimport\s+(?:[^;"']*?\bfrom\s+)?["']([^"'\r\n]+)["']"""
)

# String literals are matched first so a "//" inside a path is not a comment.
# An unterminated block comment runs to the end of the text.
COMMENT_PATTERN = re.compile(
    r"""("(?:\\.|[^"\\\r\n])*"|'(?:\\.|[^'\\\r\n])*')|//[^\r\n]*|/\*.*?(?:\*/|\Z)""",
    re.DOTALL,
)


def strip_comments(text: str) -> str:
    """Blank out comments, keeping string literals and line breaks in place"""
    def _blank(match):
        if match.group(1) is not None:
            return match.group(1)
        return re.sub(r"[^\r\n]", " ", match.group(0))

    return COMMENT_PATTERN.sub(_blank, text)


def default_namespaces() -> List[str]:
    """Import prefixes covered by the configured remappings"""
    return list(parse_remappings(list(config.LIBRARY_REMAPPINGS)))


def _normalize_relative(path: str, base_ref: str) -> str:
    return posixpath.normpath(posixpath.join(posixpath.dirname(base_ref), path))


def extract_imports(
    text: str,
    namespaces: Optional[Sequence[str]] = None,
    base_ref: Optional[str] = None,
) -> List[str]:
    """
    Extract library import paths from source text

    Args:
        text: Solidity source
        namespaces: Recognized library prefixes; defaults to the configured remappings
        base_ref: Import path of ``text`` itself. When given, relative imports
            are normalized against it and kept if they land in a namespace.

    Returns:
        Import paths in order of appearance, duplicates included. Imports
        inside comments are ignored.
    """
    if not text:
        return []
    if namespaces is None:
        namespaces = default_namespaces()
    prefixes = tuple(namespaces)
    if not prefixes:
        return []

    refs = []
    for match in IMPORT_PATTERN.finditer(strip_comments(text)):
        path = match.group(1).strip()
        if base_ref and path.startswith(("./", "../")):
            path = _normalize_relative(path, base_ref)
        if path.startswith(prefixes):
            refs.append(path)
    return refs
