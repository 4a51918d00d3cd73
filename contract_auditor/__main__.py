#!/usr/bin/env python3
"""
Command-line interface for the contract auditor
"""

import sys
import asyncio
import argparse
from datetime import datetime
from typing import List, Optional

import aiofiles
from loguru import logger
from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel

from .errors import AuditError, SourceReadError
from .llm.adapter import LLMAdapter
from .models.sources import AuditRequest, SourceUnit
from .nodes_config import config
from .pipeline.audit import AuditService
from .utils.logger import setup_logger

console = Console()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="contract-auditor",
        description="Contract Auditor - LLM-assisted smart contract audits",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Audit two contracts
  python -m contract_auditor analyze contracts/Vault.sol contracts/Token.sol

  # Audit pasted code from a file and save the report
  python -m contract_auditor analyze -c snippet.sol -o reports/report_<timestamp>.md

  # Start the web interface
  python -m contract_auditor web --port 8000
        """
    )
    parser.add_argument(
        "--log-level",
        default=config.LOG_LEVEL,
        help=f"Log level (default: {config.LOG_LEVEL})",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    analyze_parser = subparsers.add_parser("analyze", help="Audit smart contracts")
    analyze_parser.add_argument(
        "files",
        nargs="*",
        help="Solidity files to audit",
    )
    analyze_parser.add_argument(
        "-c", "--code-file",
        help="File whose contents are submitted as pasted code",
    )
    analyze_parser.add_argument(
        "--repo",
        help="GitHub repository URL to fetch and audit",
    )
    analyze_parser.add_argument(
        "--branch",
        help="Repository branch (default: the repository's default branch)",
    )
    analyze_parser.add_argument(
        "-m", "--model",
        default=None,
        help=f"LLM model to use (default: {config.AUDIT_MODEL})",
    )
    analyze_parser.add_argument(
        "-o", "--output",
        help="Write the report as markdown to this path (<timestamp> is substituted)",
    )

    web_parser = subparsers.add_parser("web", help="Start the web interface")
    web_parser.add_argument(
        "--host",
        default=config.WEB_HOST,
        help=f"Host to bind to (default: {config.WEB_HOST})",
    )
    web_parser.add_argument(
        "--port",
        type=int,
        default=config.WEB_PORT,
        help=f"Port to bind to (default: {config.WEB_PORT})",
    )
    web_parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload for development",
    )
    return parser


async def read_source(path: str) -> str:
    """Read a local source file"""
    try:
        async with aiofiles.open(path, "r", encoding="utf-8") as f:
            return await f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise SourceReadError(path, str(e))


def format_output_path(output: str) -> str:
    if "<timestamp>" in output:
        output = output.replace("<timestamp>", datetime.now().strftime("%Y%m%d_%H%M%S"))
    return output


async def run_analyze(args: argparse.Namespace, service: Optional[AuditService] = None) -> int:
    """Run the analyze command; returns the process exit code"""
    try:
        files: List[SourceUnit] = []
        for path in args.files or []:
            files.append(SourceUnit(label=path, text=await read_source(path)))
        direct_code = await read_source(args.code_file) if args.code_file else None

        request = AuditRequest(
            files=files,
            direct_code=direct_code,
            repository_url=args.repo,
            repository_branch=args.branch,
        )

        if service is None:
            service = AuditService(llm=LLMAdapter(model_name=args.model))

        console.print(Panel.fit(
            "\n".join(
                [f"Files: {len(files)}"]
                + [f"  - {unit.label}" for unit in files[:5]]
                + ([f"  - ... and {len(files) - 5} more"] if len(files) > 5 else [])
                + ([f"Pasted code: {args.code_file}"] if args.code_file else [])
                + ([f"Repository: {args.repo}"] if args.repo else [])
                + [f"Model: {service.llm.model_name}"]
            ),
            title="Contract Auditor",
        ))

        report = await service.audit(request)
    except AuditError as e:
        console.print(f"[bold red]Error ({e.category}):[/bold red] {e.message}")
        return 1
    except Exception:
        logger.exception("Unexpected error while auditing")
        console.print("[bold red]Error (internal_error):[/bold red] Analysis failed due to an internal error")
        return 1

    console.print(Markdown(report.report))

    if args.output:
        output = format_output_path(args.output)
        try:
            saved = await report.save(output)
        except OSError as e:
            logger.error(f"Failed to save report to {output}: {e}")
            console.print(f"[bold red]Error:[/bold red] could not save report to {output}: {e.strerror or e}")
            return 1
        console.print(f"[green]Report saved to {saved}[/green]")
    return 0


def run_web(args: argparse.Namespace) -> int:
    import uvicorn

    uvicorn.run(
        "contract_auditor.web.app:create_app",
        factory=True,
        host=args.host,
        port=args.port,
        reload=args.reload,
    )
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the command-line interface
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    setup_logger(
        level=args.log_level,
        log_file=config.LOG_FILE or None,
        llm_log_dir=config.LLM_LOG_DIR or None,
    )

    if args.command == "analyze":
        return asyncio.run(run_analyze(args))
    if args.command == "web":
        return run_web(args)

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
