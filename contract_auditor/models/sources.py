"""
Source models: what the user submitted and what the resolver pulled in
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

DIRECT_CODE_LABEL = "Direct Code Input"


class SourceUnit(BaseModel):
    """One uploaded file, pasted block or fetched repository file"""

    model_config = ConfigDict(frozen=True)

    label: str = Field(..., description="Originating filename or synthetic tag")
    text: str = Field("", description="Source text as submitted")

    @property
    def is_blank(self) -> bool:
        return not self.text.strip()

    def render(self) -> str:
        if self.label == DIRECT_CODE_LABEL:
            return f"// {DIRECT_CODE_LABEL}:\n{self.text}"
        return f"// File: {self.label}\n{self.text}"


class ResolvedBlock(BaseModel):
    """Result of resolving one library import; failures are recorded, not raised"""

    model_config = ConfigDict(frozen=True)

    ref: str = Field(..., description="Library import path")
    text: str = Field("", description="Library source text")
    ok: bool = Field(True, description="Whether the library was loaded")
    error: Optional[str] = Field(None, description="Failure message when ok is False")

    def render(self) -> str:
        if self.ok:
            return f"// Library: {self.ref}\n{self.text}"
        return f'// Library: {self.ref}\n// ERROR: unable to resolve import "{self.ref}": {self.error}'


class CompilationUnit(BaseModel):
    """User sources followed by every resolved library, in resolution order"""

    sources: List[SourceUnit] = Field(default_factory=list)
    blocks: List[ResolvedBlock] = Field(default_factory=list)

    @property
    def text(self) -> str:
        parts = [source.render() for source in self.sources]
        parts.extend(block.render() for block in self.blocks)
        return "\n\n".join(parts)

    @property
    def refs(self) -> List[str]:
        return [block.ref for block in self.blocks]

    @property
    def failed_blocks(self) -> List[ResolvedBlock]:
        return [block for block in self.blocks if not block.ok]

    def stats(self) -> dict:
        return {
            "source_count": len(self.sources),
            "library_count": len(self.blocks),
            "failed_libraries": [block.ref for block in self.failed_blocks],
            "characters": len(self.text),
        }


class AuditRequest(BaseModel):
    """Everything one submission carries into the pipeline"""

    files: List[SourceUnit] = Field(default_factory=list, description="Uploaded files")
    direct_code: Optional[str] = Field(None, description="Pasted source text")
    repository_url: Optional[str] = Field(None, description="Remote repository to fetch")
    repository_branch: Optional[str] = Field(None, description="Branch to clone, default branch if empty")

    def source_units(self) -> List[SourceUnit]:
        """Uploaded files in submission order, then the pasted block"""
        units = list(self.files)
        if self.direct_code:
            units.append(SourceUnit(label=DIRECT_CODE_LABEL, text=self.direct_code))
        return units
