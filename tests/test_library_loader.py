"""
Tests for on-disk library lookup
"""

import pytest

from contract_auditor.errors import LibraryLoadError
from contract_auditor.sources.library import LibraryLoader, parse_remappings


def write(path, text):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def test_parse_remappings():
    parsed = parse_remappings([
        "@openzeppelin/=node_modules/@openzeppelin/",
        "",
        "not-a-remapping",
        "forge-std/ = lib/forge-std/src/",
    ])
    assert parsed == {
        "@openzeppelin/": "node_modules/@openzeppelin/",
        "forge-std/": "lib/forge-std/src/",
    }


def test_resolve_path_uses_longest_prefix(tmp_path):
    loader = LibraryLoader(base_dir=str(tmp_path), remappings=[
        "@openzeppelin/=node_modules/@openzeppelin/",
        "@openzeppelin/contracts-upgradeable/=lib/oz-upgradeable/contracts/",
    ])
    assert loader.resolve_path("@openzeppelin/contracts/access/Ownable.sol") == (
        tmp_path.resolve() / "node_modules/@openzeppelin/contracts/access/Ownable.sol"
    )
    assert loader.resolve_path("@openzeppelin/contracts-upgradeable/proxy/Initializable.sol") == (
        tmp_path.resolve() / "lib/oz-upgradeable/contracts/proxy/Initializable.sol"
    )


def test_resolve_path_refuses_escape(tmp_path):
    loader = LibraryLoader(base_dir=str(tmp_path), remappings=["@openzeppelin/=node_modules/@openzeppelin/"])
    with pytest.raises(LibraryLoadError, match="escapes"):
        loader.resolve_path("@openzeppelin/../../secrets.sol")


def test_unmapped_ref(tmp_path):
    loader = LibraryLoader(base_dir=str(tmp_path), remappings=["@openzeppelin/=node_modules/@openzeppelin/"])
    with pytest.raises(LibraryLoadError, match="no library remapping"):
        loader.resolve_path("solmate/tokens/ERC20.sol")


def test_namespaces(tmp_path):
    loader = LibraryLoader(base_dir=str(tmp_path), remappings=["@openzeppelin/=node_modules/@openzeppelin/"])
    assert loader.namespaces == ["@openzeppelin/"]


@pytest.mark.asyncio
async def test_load_existing_file(tmp_path):
    write(tmp_path / "node_modules/@openzeppelin/contracts/utils/Context.sol", "abstract contract Context {}")
    loader = LibraryLoader(base_dir=str(tmp_path), remappings=["@openzeppelin/=node_modules/@openzeppelin/"])

    text = await loader.load("@openzeppelin/contracts/utils/Context.sol")
    assert text == "abstract contract Context {}"


@pytest.mark.asyncio
async def test_load_missing_file(tmp_path):
    loader = LibraryLoader(base_dir=str(tmp_path), remappings=["@openzeppelin/=node_modules/@openzeppelin/"])

    with pytest.raises(LibraryLoadError, match="not found") as excinfo:
        await loader.load("@openzeppelin/contracts/Missing.sol")
    assert excinfo.value.ref == "@openzeppelin/contracts/Missing.sol"


@pytest.mark.asyncio
async def test_load_directory(tmp_path):
    (tmp_path / "node_modules/@openzeppelin/contracts/utils").mkdir(parents=True)
    loader = LibraryLoader(base_dir=str(tmp_path), remappings=["@openzeppelin/=node_modules/@openzeppelin/"])

    with pytest.raises(LibraryLoadError):
        await loader.load("@openzeppelin/contracts/utils")


@pytest.mark.asyncio
async def test_load_non_utf8(tmp_path):
    path = tmp_path / "node_modules/@openzeppelin/contracts/Binary.sol"
    path.parent.mkdir(parents=True)
    path.write_bytes(b"\xff\xfe\x00binary")
    loader = LibraryLoader(base_dir=str(tmp_path), remappings=["@openzeppelin/=node_modules/@openzeppelin/"])

    with pytest.raises(LibraryLoadError, match="UTF-8"):
        await loader.load("@openzeppelin/contracts/Binary.sol")
