"""
Report models for the contract auditor
"""

import os
from datetime import datetime
from typing import Dict, Any

import aiofiles
from pydantic import BaseModel, Field


class AuditReport(BaseModel):
    """Final audit report: the compiled text plus the findings it was built from"""

    title: str = Field("Smart Contract Audit Report", description="Report title")
    report: str = Field(..., description="Report text produced by the report compiler")
    findings: Dict[str, str] = Field(default_factory=dict, description="Raw findings keyed by analysis pass")
    compilation_stats: Dict[str, Any] = Field(default_factory=dict, description="Compilation unit statistics")
    created_at: datetime = Field(default_factory=datetime.now, description="Report creation timestamp")
    metadata: Dict[str, Any] = Field(default_factory=dict, description="Additional metadata")

    async def save(self, file_path: str) -> str:
        """
        Save the report as markdown asynchronously

        Args:
            file_path: Path to save the report to

        Returns:
            Absolute path of the written file

        Raises:
            ValueError: If file_path is empty
        """
        if not file_path:
            raise ValueError("File path cannot be empty")

        file_path = os.path.abspath(file_path)
        directory = os.path.dirname(file_path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        async with aiofiles.open(file_path, "w", encoding="utf-8") as f:
            await f.write(self.to_markdown())

        return file_path

    def to_markdown(self) -> str:
        """
        Convert the report to markdown format

        Returns:
            Markdown content
        """
        parts = [f"# {self.title}", ""]
        parts.append(f"*Generated on: {self.created_at.strftime('%Y-%m-%d %H:%M:%S')}*")
        parts.append("")

        if self.compilation_stats:
            parts.append(f"- Source files: {self.compilation_stats.get('source_count', 0)}")
            parts.append(f"- Libraries inlined: {self.compilation_stats.get('library_count', 0)}")
            failed = self.compilation_stats.get("failed_libraries") or []
            if failed:
                parts.append(f"- Unresolved imports: {', '.join(failed)}")
            parts.append("")

        parts.append(self.report.strip())
        parts.append("")

        # Raw findings as an appendix
        if self.findings:
            parts.append("## Appendix: Raw Findings")
            parts.append("")
            for name, text in self.findings.items():
                parts.append(f"### {name.replace('_', ' ').title()}")
                parts.append("")
                parts.append(text.strip())
                parts.append("")

        return "\n".join(parts)
