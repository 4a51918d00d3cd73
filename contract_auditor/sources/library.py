"""
On-disk lookup of library imports

Imports such as ``@openzeppelin/contracts/access/Ownable.sol`` are mapped to
files through remappings in the Foundry/Hardhat ``prefix=target`` form, e.g.
``@openzeppelin/=node_modules/@openzeppelin/``.
"""

import os
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import aiofiles
from loguru import logger

from ..errors import LibraryLoadError
from ..nodes_config import config


def parse_remappings(remappings: List[str]) -> Dict[str, str]:
    """
    Parse ``prefix=target`` strings into a prefix -> target mapping

    Blank lines and entries without ``=`` are skipped; later entries win.
    Foundry context prefixes (``context:prefix=target``) are not supported.
    """
    parsed = {}
    for entry in remappings:
        entry = entry.strip()
        if not entry or "=" not in entry:
            continue
        prefix, target = entry.split("=", 1)
        prefix, target = prefix.strip(), target.strip()
        if prefix and target:
            parsed[prefix] = target
    return parsed


class LibraryLoader:
    """Loads library source files addressed by import paths"""

    def __init__(self, base_dir: Optional[str] = None, remappings: Optional[List[str]] = None):
        """
        Initialize the loader

        Args:
            base_dir: Directory relative remap targets are resolved against
            remappings: ``prefix=target`` strings
        """
        self.base_dir = Path(base_dir or config.LIBRARY_BASE_DIR).resolve()
        self.remappings = parse_remappings(
            remappings if remappings is not None else list(config.LIBRARY_REMAPPINGS)
        )

    @property
    def namespaces(self) -> List[str]:
        """Import prefixes this loader can resolve"""
        return list(self.remappings)

    def _match(self, ref: str) -> Optional[Tuple[str, str]]:
        # Longest prefix wins so nested remappings override broad ones
        for prefix in sorted(self.remappings, key=len, reverse=True):
            if ref.startswith(prefix):
                return prefix, self.remappings[prefix]
        return None

    def resolve_path(self, ref: str) -> Path:
        """
        Map an import path to a file path

        Raises:
            LibraryLoadError: If no remapping applies or the path escapes its target
        """
        match = self._match(ref)
        if match is None:
            raise LibraryLoadError(ref, f"no library remapping matches {ref}")

        prefix, target = match
        root = Path(target)
        if not root.is_absolute():
            root = self.base_dir / root
        root = Path(os.path.normpath(root))

        path = Path(os.path.normpath(root / ref[len(prefix):]))
        if path != root and root not in path.parents:
            raise LibraryLoadError(ref, f"import path {ref} escapes library directory")
        return path

    async def load(self, ref: str) -> str:
        """
        Read the library file for ``ref``

        Raises:
            LibraryLoadError: If the file is missing, unreadable or not UTF-8
        """
        path = self.resolve_path(ref)
        try:
            async with aiofiles.open(path, "r", encoding="utf-8") as f:
                text = await f.read()
        except FileNotFoundError:
            raise LibraryLoadError(ref, f"library file not found: {path}")
        except IsADirectoryError:
            raise LibraryLoadError(ref, f"library path is a directory: {path}")
        except PermissionError:
            raise LibraryLoadError(ref, f"library file is not readable: {path}")
        except UnicodeDecodeError:
            raise LibraryLoadError(ref, f"library file is not valid UTF-8: {path}")
        except OSError as e:
            raise LibraryLoadError(ref, f"could not read library file {path}: {e}")

        logger.debug(f"Loaded library {ref} from {path} ({len(text)} chars)")
        return text
