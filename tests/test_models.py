"""
Tests for source and report models
"""

import pytest
from pydantic import ValidationError

from contract_auditor.models import AuditReport, AuditRequest, CompilationUnit, ResolvedBlock, SourceUnit


def test_source_unit_is_immutable():
    unit = SourceUnit(label="Vault.sol", text="contract Vault {}")
    with pytest.raises(ValidationError):
        unit.text = "changed"


def test_compilation_unit_text_order_and_markers():
    unit = CompilationUnit(
        sources=[
            SourceUnit(label="Vault.sol", text="contract Vault {}"),
            SourceUnit(label="Direct Code Input", text="contract Pasted {}"),
        ],
        blocks=[
            ResolvedBlock(ref="@openzeppelin/contracts/access/Ownable.sol", text="abstract contract Ownable {}"),
            ResolvedBlock(ref="@openzeppelin/contracts/Missing.sol", ok=False, error="library file not found"),
        ],
    )

    assert unit.text == "\n\n".join([
        "// File: Vault.sol\ncontract Vault {}",
        "// Direct Code Input:\ncontract Pasted {}",
        "// Library: @openzeppelin/contracts/access/Ownable.sol\nabstract contract Ownable {}",
        '// Library: @openzeppelin/contracts/Missing.sol\n'
        '// ERROR: unable to resolve import "@openzeppelin/contracts/Missing.sol": library file not found',
    ])
    assert unit.stats()["failed_libraries"] == ["@openzeppelin/contracts/Missing.sol"]


def test_request_source_units():
    request = AuditRequest(files=[SourceUnit(label="A.sol", text="contract A {}")], direct_code="contract B {}")
    assert [unit.label for unit in request.source_units()] == ["A.sol", "Direct Code Input"]
    assert AuditRequest().source_units() == []


@pytest.mark.asyncio
async def test_report_save(tmp_path):
    report = AuditReport(
        report="## Executive Summary\nNo critical issues.",
        findings={"gas_optimization": "1. [Low] Pack storage"},
        compilation_stats={"source_count": 1, "library_count": 2, "failed_libraries": ["@openzeppelin/x.sol"]},
    )

    path = await report.save(str(tmp_path / "out" / "report.md"))

    content = (tmp_path / "out" / "report.md").read_text(encoding="utf-8")
    assert path == str(tmp_path / "out" / "report.md")
    assert content.startswith("# Smart Contract Audit Report")
    assert "No critical issues." in content
    assert "Unresolved imports: @openzeppelin/x.sol" in content
    assert "### Gas Optimization" in content


@pytest.mark.asyncio
async def test_report_save_requires_path():
    with pytest.raises(ValueError):
        await AuditReport(report="x").save("")
