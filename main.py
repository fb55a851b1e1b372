#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# main.py
import asyncio
import logging
from typing import List, Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.syntax import Syntax
from rich.table import Table
from typing_extensions import Annotated

from orchestrator.agent import Agent
from orchestrator.config import build_run_config, load_credentials
from orchestrator.constants import CONFIG_FILE, DEFAULT_MAX_STEPS, DEFAULT_MODEL, LOG_FORMAT
from orchestrator.errors import AgentError, ConfigError, ModelClientError, ToolError
from orchestrator.gemini_client import GeminiClient
from orchestrator.models import AgentRunConfig, RunResult, ToolCallPart, ToolResultPart
from orchestrator.tool_registry import dispatch, list_tools
from shared.prompt_manager import DEFAULT_SYSTEM_PROMPT, prompt_manager
from workspace_tools.diff_utils import summarize_diff

app = typer.Typer(help="Local AI coding agent powered by Gemini")
console = Console()

BANNER = r"""
  _   _                  _   _            _
 | \ | |                | | | |          (_)
 |  \| | _____   ____ _ | |_| | ___  _ __ _ _______  _ __
 | . ` |/ _ \ \ / / _` ||  _  |/ _ \| '__| |_  / _ \| '_ \
 | |\  | (_) \ V / (_| || | | | (_) | |  | |/ / (_) | | | |
 \_| \_/\___/ \_/ \__,_|\_| |_/\___/|_|  |_/___\___/|_| |_|

 Local AI Coding Agent"""

QUICK_START = """Quick Start Commands:
  nova-hrzn info                          # Show this information
  nova-hrzn run "your prompt"             # Run a single command
  nova-hrzn run                           # Enter interactive shell mode
  nova-hrzn run --allow-run "run tests"   # Allow script execution
  nova-hrzn tools                         # List the tools available to the model"""

# 출력이 길면 verbose 모드에서도 잘라서 보여줌
MAX_RESULT_PREVIEW = 2000


def _setup_logging(verbose: bool):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
        force=True,
    )


def _print_banner():
    console.print(f"[bold cyan]{BANNER}[/bold cyan]")
    console.print(f"\n{QUICK_START}")


def _resolve_system_prompt(names: Optional[List[str]]) -> str:
    """--gem 으로 지정한 프롬프트들을 이어 붙입니다. 실패한 항목은 경고 후 건너뜁니다."""
    contents = []
    for name in names or []:
        content = prompt_manager.load(name)
        if prompt_manager.is_error(content):
            console.print(f"[bold yellow]{content}[/bold yellow]")
        else:
            contents.append(content)
    return "\n\n".join(contents) if contents else DEFAULT_SYSTEM_PROMPT


def confirm_write(file_path: str, diff_text: str) -> bool:
    """쓰기 전에 diff 를 보여주고 사용자 승인을 받습니다."""
    if not diff_text:
        console.print(f"[dim]{file_path}: no changes[/dim]")
        return True
    added, removed = summarize_diff(diff_text)
    console.print(Panel(
        Syntax(diff_text, "diff", theme="monokai"),
        title=f"{file_path} (+{added} -{removed})",
    ))
    return Confirm.ask(f"Apply changes to {file_path}?", default=True)


def _make_agent(config: AgentRunConfig, api_key: str, system_prompt: str) -> Agent:
    client = GeminiClient(api_key, config.model, system_prompt=system_prompt)

    def on_step(step: int, max_steps: int):
        if config.verbose:
            console.print(f"[dim][Step {step}/{max_steps}][/dim]")

    def on_tool_call(call: ToolCallPart):
        if config.verbose:
            console.print(f" - Calling function: [bold]{call.name}[/bold]({call.arguments})")
        else:
            console.print(f" - Calling function: [bold]{call.name}[/bold]")

    def on_tool_result(result: ToolResultPart):
        if result.is_error:
            console.print(f"[red]Error executing {result.name}: {result.error}[/red]")
        elif config.verbose:
            preview = (result.output or "")[:MAX_RESULT_PREVIEW]
            console.print(Panel(preview, title=result.name, border_style="green"))

    return Agent(
        config,
        client,
        on_text=lambda text: console.print(text),
        on_tool_call=on_tool_call,
        on_tool_result=on_tool_result,
        on_step=on_step,
        confirm_write=confirm_write,
    )


def _report(result: RunResult, config: AgentRunConfig):
    if result.status == "repeated_call":
        console.print("[yellow]Model is looping on the same function call. Aborting.[/yellow]")
    elif result.status == "step_budget_exhausted":
        console.print(f"[yellow]Reached maximum steps ({config.max_steps})[/yellow]")


def run_agent(prompt: str, config: AgentRunConfig, api_key: str, system_prompt: str = DEFAULT_SYSTEM_PROMPT) -> RunResult:
    """프롬프트 하나를 끝까지 실행합니다. 설정/모델 오류는 그대로 전파됩니다."""
    agent = _make_agent(config, api_key, system_prompt)
    result = asyncio.run(agent.run(prompt))
    _report(result, config)
    return result


def run_shell(config: AgentRunConfig, api_key: str, system_prompt: str):
    """대화형 모드: 프롬프트를 하나씩 끝까지 처리한 뒤 다음 입력을 받습니다."""
    console.print("Entering interactive mode. Type 'exit' to quit.")
    while True:
        try:
            user_input = Prompt.ask("\n[bold cyan]nova-hrzn>[/bold cyan]").strip()
        except (EOFError, KeyboardInterrupt):
            console.print("\nGoodbye!")
            break

        if user_input in ("exit", "quit"):
            console.print("Goodbye!")
            break
        if not user_input:
            continue

        try:
            run_agent(user_input, config, api_key, system_prompt)
        except AgentError as e:
            console.print(f"[bold red]Error: {e}[/bold red]")


@app.command()
def run(
    prompt: Annotated[Optional[str], typer.Argument(help="에이전트에게 내릴 명령 (생략 시 대화형 모드)")] = None,
    work_dir: Annotated[Optional[str], typer.Option("--dir", "-d", help="작업 디렉토리 (기본값: 현재 디렉토리)")] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="자세한 출력")] = False,
    dry_run: Annotated[bool, typer.Option("--dry-run", help="파일을 쓰지 않고 무엇을 할지만 보여줌")] = False,
    model: Annotated[Optional[str], typer.Option("--model", help=f"사용할 모델 (기본값: {DEFAULT_MODEL})")] = None,
    max_steps: Annotated[int, typer.Option("--max-steps", help="최대 에이전트 루프 횟수")] = DEFAULT_MAX_STEPS,
    allow_run: Annotated[bool, typer.Option("--allow-run", help="스크립트 실행 허용")] = False,
    apply: Annotated[bool, typer.Option("--apply", help="확인 없이 파일 변경을 바로 적용")] = False,
    restrict_writes: Annotated[bool, typer.Option("--restrict-writes", help="허용된 확장자 파일만 쓰기")] = False,
    system_prompts: Annotated[Optional[List[str]], typer.Option("--gem", "-g", help="사용할 시스템 프롬프트 이름")] = None,
):
    """
    AI 에이전트를 실행합니다. 프롬프트가 없으면 대화형 모드로 들어갑니다.
    """
    _setup_logging(verbose)
    try:
        credentials = load_credentials(CONFIG_FILE, model=model)
        config = build_run_config(
            work_dir=work_dir,
            model=credentials.model,
            max_steps=max_steps,
            dry_run=dry_run,
            allow_run=allow_run,
            auto_apply=apply,
            verbose=verbose,
            restrict_writes=restrict_writes,
        )
    except ConfigError as e:
        console.print(f"[bold red]Error: {e}[/bold red]")
        raise typer.Exit(code=1)

    system_prompt = _resolve_system_prompt(system_prompts)

    if prompt is None:
        _print_banner()
        run_shell(config, credentials.api_key, system_prompt)
        return

    try:
        run_agent(prompt, config, credentials.api_key, system_prompt)
    except ModelClientError as e:
        console.print(f"[bold red]Error: {e}[/bold red]")
        raise typer.Exit(code=1)


@app.command()
def info():
    """nova-horizon 정보를 보여줍니다."""
    _print_banner()
    console.print(f"\nConfig file: {CONFIG_FILE}")


@app.command()
def tools():
    """모델에게 노출되는 도구 목록을 보여줍니다."""
    table = Table(title="[bold]Available Tools[/bold]")
    table.add_column("Name", style="cyan")
    table.add_column("Description")
    table.add_column("Required", style="magenta")
    for name, description, required in list_tools():
        table.add_row(name, description, ", ".join(required) or "-")
    console.print(table)


@app.command()
def tool(
    name: Annotated[str, typer.Argument(help="실행할 도구 이름 (예: get_files_info)")],
    args: Annotated[Optional[List[str]], typer.Argument(help="도구에 전달할 인자 (key=value 형태)")] = None,
    work_dir: Annotated[Optional[str], typer.Option("--dir", "-d", help="작업 디렉토리")] = None,
    dry_run: Annotated[bool, typer.Option("--dry-run")] = False,
    allow_run: Annotated[bool, typer.Option("--allow-run")] = False,
):
    """
    모델 없이 로컬에서 도구 하나를 직접 실행합니다.
    run_file 의 args 는 'args=a,b,c' 처럼 쉼표로 구분합니다.
    """
    kwargs = {}
    for arg in args or []:
        if "=" not in arg:
            console.print(f"[yellow]Warning: '{arg}' is not in key=value form, ignored.[/yellow]")
            continue
        k, v = arg.split("=", 1)
        kwargs[k] = v.split(",") if k == "args" and v else v

    try:
        config = build_run_config(work_dir=work_dir, dry_run=dry_run, allow_run=allow_run, auto_apply=True)
        result = dispatch(name, kwargs, config)
    except ConfigError as e:
        console.print(f"[bold red]Error: {e}[/bold red]")
        raise typer.Exit(code=1)
    except ToolError as e:
        console.print(f"[bold red]Error ({e.code}): {e}[/bold red]")
        raise typer.Exit(code=1)

    console.print(Panel(result, title=name, border_style="green"))


if __name__ == "__main__":
    app()
