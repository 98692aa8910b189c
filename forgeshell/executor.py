"""Command execution with safety checks, progress output and live streaming."""

from __future__ import annotations

import subprocess
import sys
import threading
import time
from dataclasses import dataclass
from typing import IO, Iterable, List, Optional, Sequence

from .safety import CommandRisk, RiskLevel, SafetyChecker
from .shell import CommandResult, Shell

try:
    import resource
except ImportError:  # not available on Windows
    resource = None  # type: ignore[assignment]

_COMMON_COMMANDS = (
    "ls", "cd", "pwd", "echo", "cat", "grep", "find", "ps", "top", "df", "du",
    "git", "cargo", "npm", "yarn", "python", "node", "java", "gcc", "make",
    "curl", "wget", "ssh", "scp", "rsync", "tar", "gzip", "unzip",
)
_MAX_SUGGESTIONS = 10
_BAR_WIDTH = 40


class ExecutionCancelled(Exception):
    """Raised when a command is refused by the safety check or by the user."""


@dataclass
class ExecutionOptions:
    """How a command is run; ``timeout`` is in seconds."""

    timeout: Optional[float] = None
    show_progress: bool = True
    capture_output: bool = True
    interactive: bool = False
    safety_check: bool = True
    working_directory: Optional[str] = None


def _progress_line(title: str, done: int, total: int, width: int = _BAR_WIDTH) -> str:
    fraction = done / total if total else 1.0
    filled = int(fraction * width)
    bar = "█" * filled + "░" * (width - filled)
    return f"{title} [{bar}] {done}/{total} ({fraction * 100:.0f}%)"


def _read_answer() -> str:
    return sys.stdin.readline().strip()


@dataclass
class PerformanceAnalysis:
    """Timing and resource use of one command run."""

    command: str
    duration: float
    memory_used: int
    cpu_usage: float

    def report(self) -> str:
        """Print the analysis and return the printed text."""
        text = "\n".join(
            [
                f"Performance Analysis for: {self.command}",
                f"  Duration: {self.duration:.3f}s",
                f"  Memory: {self.memory_used // 1024} KB",
                f"  CPU: {self.cpu_usage:.1f}%",
            ]
        )
        print(text)
        return text


def _child_usage() -> tuple:
    """Return (peak memory in bytes, cpu seconds) of finished child processes."""
    if resource is None:
        return 0, 0.0
    usage = resource.getrusage(resource.RUSAGE_CHILDREN)
    scale = 1 if sys.platform == "darwin" else 1024
    return usage.ru_maxrss * scale, usage.ru_utime + usage.ru_stime


class ProcessExecutor:
    """Runs commands through a :class:`Shell`, guarded by a :class:`SafetyChecker`."""

    def __init__(self, allowed_commands: Optional[Iterable[str]] = None) -> None:
        self.safety_checker = SafetyChecker(allowed_commands)
        self.shell = Shell()

    def execute(
        self, command: str, options: Optional[ExecutionOptions] = None
    ) -> CommandResult:
        options = options if options is not None else ExecutionOptions()
        if options.safety_check:
            self._perform_safety_check(command)
        if options.show_progress:
            return self._execute_with_progress(command)
        return self.shell.execute_command(command)

    def execute_batch(
        self, commands: Sequence[str], options: Optional[ExecutionOptions] = None
    ) -> List[CommandResult]:
        options = options if options is not None else ExecutionOptions()
        total = len(commands)
        results = []
        for done, command in enumerate(commands):
            if options.show_progress:
                print(f"\r{_progress_line('Batch Execution', done, total)}", flush=True)
            results.append(self.execute(command, options))
        if options.show_progress:
            print(f"\r{_progress_line('Batch Execution', total, total)}")
            print()
        return results

    def execute_pipeline(
        self, commands: Sequence[str], options: Optional[ExecutionOptions] = None
    ) -> CommandResult:
        options = options if options is not None else ExecutionOptions()
        if options.safety_check:
            for command in commands:
                self._perform_safety_check(command)
        if options.show_progress:
            print("Executing pipeline...")
        return self.shell.execute_pipeline(commands)

    def _print_risk(self, header: str, risk: CommandRisk, command: str, alternatives: bool) -> None:
        print(f"{header}: {risk.reason}")
        for suggestion in risk.suggestions:
            print(f"  💡 {suggestion}")
        if alternatives:
            safer = self.safety_checker.get_safe_alternatives(command)
            if safer:
                print("Safe alternatives:")
                for alt in safer:
                    print(f"  ✅ {alt}")

    def _perform_safety_check(self, command: str) -> None:
        risk = self.safety_checker.assess_command(command)
        level = risk.level
        if level is RiskLevel.SAFE:
            return
        if level is RiskLevel.LOW:
            self._print_risk("⚠️  Low risk", risk, command, alternatives=False)
            self._confirm("Proceed with execution? (y/N): ")
        elif level is RiskLevel.MEDIUM:
            self._print_risk("⚠️  Medium risk", risk, command, alternatives=True)
            self._confirm("Are you sure you want to proceed? (y/N): ")
        elif level is RiskLevel.HIGH:
            self._print_risk("🚨 High risk", risk, command, alternatives=True)
            self._confirm(
                "This is dangerous! Are you absolutely sure? (type 'YES' to confirm): "
            )
            if _read_answer() != "YES":
                raise ExecutionCancelled("Command execution cancelled for safety")
        else:
            print(f"🛑 CRITICAL DANGER: {risk.reason}")
            print("This command could cause irreversible damage!")
            self._print_risk("Details", risk, command, alternatives=True)
            raise ExecutionCancelled(
                "Critical command blocked for safety. Use --force-dangerous to override."
            )

    @staticmethod
    def _confirm(prompt: str) -> None:
        print(prompt, end="", flush=True)
        if _read_answer().lower() != "y":
            raise ExecutionCancelled("Command execution cancelled by user")

    def _execute_with_progress(self, command: str) -> CommandResult:
        start = time.perf_counter()
        print(f"⠋ Executing: {command}")
        result = self.shell.execute_command(command)
        elapsed = time.perf_counter() - start
        if result.success:
            print(f"✅ Command completed in {elapsed:.2f}s")
        else:
            print(f"❌ Command failed in {elapsed:.2f}s")
        return result

    def run_interactive_shell(self) -> None:
        print("Starting Forge Interactive Shell")
        print("Enhanced with safety checks and progress indicators")
        print("Type 'help' for commands, 'exit' to quit\n")
        self.shell.run_interactive()

    def get_command_suggestions(self, partial_command: str) -> List[str]:
        """Return up to ten sorted completions from common commands and history."""
        suggestions = [cmd for cmd in _COMMON_COMMANDS if cmd.startswith(partial_command)]
        for past in self.shell.history:
            if past.startswith(partial_command) and past not in suggestions:
                suggestions.append(past)
        return sorted(suggestions)[:_MAX_SUGGESTIONS]

    def analyze_performance(self, command: str) -> PerformanceAnalysis:
        """Run the command and measure wall time, child peak memory and CPU use."""
        start_memory, start_cpu = _child_usage()
        start = time.perf_counter()
        self.shell.execute_command(command)
        duration = time.perf_counter() - start
        end_memory, end_cpu = _child_usage()
        cpu = (end_cpu - start_cpu) / duration * 100 if duration > 0 else 0.0
        return PerformanceAnalysis(
            command=command,
            duration=duration,
            memory_used=max(end_memory - start_memory, 0),
            cpu_usage=cpu,
        )


def _pump(stream: IO[bytes], prefix: str) -> None:
    for raw in stream:
        line = raw.decode("utf-8", errors="replace").rstrip("\r\n")
        print(f"{prefix}{line}", flush=True)


class LongRunningExecutor:
    """Runs a program and prints its output line by line as it arrives."""

    def __init__(self) -> None:
        self.executor = ProcessExecutor()

    def execute_with_live_output(self, command: str) -> CommandResult:
        print(f"Starting: {command}")
        parts = command.split()
        if not parts:
            raise ValueError("Empty command")

        process = subprocess.Popen(parts, stdout=subprocess.PIPE, stderr=subprocess.PIPE)
        readers = [
            threading.Thread(target=_pump, args=(process.stdout, "OUT: "), daemon=True),
            threading.Thread(target=_pump, args=(process.stderr, "ERR: "), daemon=True),
        ]
        for reader in readers:
            reader.start()
        code = process.wait()
        for reader in readers:
            reader.join()
        process.stdout.close()
        process.stderr.close()

        result = CommandResult(success=code == 0, exit_code=code if code >= 0 else -1)
        if result.success:
            print("✅ Process completed successfully")
        else:
            print(f"❌ Process failed with exit code: {result.exit_code}")
        return result