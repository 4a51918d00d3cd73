"""
Tests for the end-to-end audit service
"""

import pytest

from contract_auditor.errors import BackendError, ConfigurationError, NoInputError, UnsupportedInputError
from contract_auditor.models.sources import AuditRequest, SourceUnit
from contract_auditor.pipeline.audit import AuditService
from contract_auditor.pipeline.core import AuditContext, PipelineStageState
from contract_auditor.sources.assembler import SourceAssembler
from contract_auditor.sources.repository import RepositoryFetcher
from contract_auditor.sources.resolver import DependencyResolver

from conftest import FakeLibraryLoader, StubLLM

OZ = "@openzeppelin/contracts/"


class UnconfiguredLLM(StubLLM):
    def ensure_credentials(self):
        raise ConfigurationError("OPENAI_API_KEY is not configured")


class StubFetcher:
    def __init__(self, sources):
        self.sources = sources
        self.fetched = []

    async def fetch(self, repo_url, branch=None):
        self.fetched.append((repo_url, branch))
        return list(self.sources)


def make_service(llm, files=None, fetcher=None):
    loader = FakeLibraryLoader(files or {})
    return AuditService(
        llm=llm,
        assembler=SourceAssembler(DependencyResolver(loader)),
        fetcher=fetcher or RepositoryFetcher(enabled=False),
    ), loader


@pytest.mark.asyncio
async def test_end_to_end_report():
    llm = StubLLM(responses={"report_compiler": "## Executive Summary\nAll good"})
    service, _ = make_service(llm, {OZ + "access/Ownable.sol": "abstract contract Ownable {}"})
    request = AuditRequest(
        files=[SourceUnit(label="Vault.sol", text='import "@openzeppelin/contracts/access/Ownable.sol";\ncontract Vault {}')],
        direct_code="contract Extra {}",
    )
    context = AuditContext()

    report = await service.audit(request, context)

    assert report.report == "## Executive Summary\nAll good"
    assert report.compilation_stats["source_count"] == 2
    assert report.compilation_stats["library_count"] == 1
    assert report.metadata["request_id"] == context.request_id
    assert set(report.metadata["stage_timings"]) == {"collect_sources", "assemble", "analysis"}
    assert context.stage == PipelineStageState.REPORT_COMPILED
    assert report.metadata["stage"] == "REPORT_COMPILED"
    assert len(llm.calls) == 5


class RecordingContext(AuditContext):
    def __init__(self):
        super().__init__()
        self.stages = []

    def advance(self, stage):
        self.stages.append(stage)
        super().advance(stage)


@pytest.mark.asyncio
async def test_stages_advance_in_order():
    service, _ = make_service(StubLLM())
    context = RecordingContext()

    await service.audit(AuditRequest(direct_code="contract C {}"), context)

    assert context.stages == [
        PipelineStageState.SOURCES_COLLECTED,
        PipelineStageState.UNIT_ASSEMBLED,
        PipelineStageState.PASSES_COMPLETE,
        PipelineStageState.REPORT_COMPILED,
    ]


@pytest.mark.asyncio
async def test_failed_pass_never_reaches_passes_complete():
    service, _ = make_service(StubLLM(failures={"compilation": "backend exploded"}))
    context = RecordingContext()

    with pytest.raises(BackendError):
        await service.audit(AuditRequest(direct_code="contract C {}"), context)

    assert PipelineStageState.PASSES_COMPLETE not in context.stages
    assert context.stages[-1] == PipelineStageState.ERROR


@pytest.mark.asyncio
async def test_no_input_makes_no_backend_calls():
    llm = StubLLM()
    service, _ = make_service(llm)

    with pytest.raises(NoInputError):
        await service.audit(AuditRequest(files=[SourceUnit(label="Empty.sol", text="   ")], direct_code=""))

    assert llm.calls == []


@pytest.mark.asyncio
async def test_configuration_checked_before_processing():
    llm = UnconfiguredLLM()
    fetcher = StubFetcher([])
    service, loader = make_service(llm, fetcher=fetcher)
    request = AuditRequest(
        direct_code='import "@openzeppelin/contracts/A.sol";',
        repository_url="https://github.com/acme/vault",
    )

    with pytest.raises(ConfigurationError):
        await service.audit(request)

    assert fetcher.fetched == []
    assert loader.loads == []
    assert llm.calls == []


@pytest.mark.asyncio
async def test_missing_library_recorded_on_context():
    llm = StubLLM()
    service, _ = make_service(llm)
    context = AuditContext()

    report = await service.audit(
        AuditRequest(direct_code='import "@openzeppelin/contracts/Missing.sol";\ncontract C {}'),
        context,
    )

    assert report.compilation_stats["failed_libraries"] == [OZ + "Missing.sol"]
    assert context.errors[0]["stage"] == "assemble"
    assert report.metadata["errors"][0]["stage"] == "assemble"
    assert 'unable to resolve import "@openzeppelin/contracts/Missing.sol"' in llm.calls[0]["prompt"]


@pytest.mark.asyncio
async def test_repository_sources_are_appended():
    llm = StubLLM()
    fetcher = StubFetcher([SourceUnit(label="src/Vault.sol", text="contract Vault {}")])
    service, _ = make_service(llm, fetcher=fetcher)

    report = await service.audit(AuditRequest(
        direct_code="contract Pasted {}",
        repository_url="https://github.com/acme/vault",
        repository_branch="main",
    ))

    assert fetcher.fetched == [("https://github.com/acme/vault", "main")]
    assert report.compilation_stats["source_count"] == 2
    prompt = llm.calls[0]["prompt"]
    assert prompt.index("// Direct Code Input:") < prompt.index("// File: src/Vault.sol")


@pytest.mark.asyncio
async def test_repository_rejected_when_disabled():
    llm = StubLLM()
    service, _ = make_service(llm)
    context = AuditContext()

    with pytest.raises(UnsupportedInputError):
        await service.audit(
            AuditRequest(direct_code="contract C {}", repository_url="https://github.com/acme/vault"),
            context,
        )

    assert llm.calls == []
    assert context.stage == PipelineStageState.ERROR
