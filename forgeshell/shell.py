"""A small command shell with variables, aliases, history and built-ins."""

from __future__ import annotations

import os
import subprocess
import sys
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence

_DEFAULT_ALIASES = {
    "ll": "ls -la",
    "la": "ls -a",
    "..": "cd ..",
    "...": "cd ../..",
}


@dataclass
class CommandResult:
    """Outcome of running one command."""

    success: bool
    exit_code: int
    stdout: str = ""
    stderr: str = ""
    is_exit: bool = False

    @classmethod
    def ok(cls, output: str) -> "CommandResult":
        return cls(True, 0, stdout=output)

    @classmethod
    def failure(cls, message: str) -> "CommandResult":
        return cls(False, 1, stderr=message)

    @classmethod
    def exit_request(cls) -> "CommandResult":
        return cls(True, 0, is_exit=True)

    @classmethod
    def empty(cls) -> "CommandResult":
        return cls(True, 0)


def _current_dir() -> str:
    try:
        return os.getcwd()
    except OSError:
        return "."


def _search_path() -> List[str]:
    return os.environ.get("PATH", "").split(os.pathsep)


@dataclass
class ShellEnvironment:
    """Variables and working directory of a shell session."""

    variables: Dict[str, str] = field(default_factory=lambda: dict(os.environ))
    working_directory: str = field(default_factory=_current_dir)
    path: List[str] = field(default_factory=_search_path)

    def set_variable(self, key: str, value: str) -> None:
        self.variables[key] = value

    def get_variable(self, key: str) -> Optional[str]:
        return self.variables.get(key)

    def expand_variables(self, text: str) -> str:
        """Replace ``$NAME`` and ``${NAME}`` with the values of known variables."""
        for key, value in self.variables.items():
            text = text.replace(f"${key}", value)
            text = text.replace(f"${{{key}}}", value)
        return text

    def change_directory(self, path: str) -> None:
        """Change the working directory; raises FileNotFoundError if it is not a directory."""
        expanded = self.expand_variables(path)
        target = (
            expanded
            if os.path.isabs(expanded)
            else os.path.join(self.working_directory, expanded)
        )
        if not os.path.isdir(target):
            raise FileNotFoundError(f"Directory does not exist: {expanded}")
        self.working_directory = target
        os.chdir(target)


class Shell:
    """Runs built-in and external commands with variable and alias expansion."""

    def __init__(self, environment: Optional[ShellEnvironment] = None) -> None:
        self.environment = environment if environment is not None else ShellEnvironment()
        self.history: List[str] = []
        self.aliases: Dict[str, str] = dict(_DEFAULT_ALIASES)

    def execute_command(self, command: str) -> CommandResult:
        command = command.strip()
        if not command:
            return CommandResult.empty()

        self.history.append(command)
        processed = self.resolve_aliases(self.environment.expand_variables(command))

        builtin = self._handle_builtin(processed)
        if builtin is not None:
            return builtin

        parts = self.parse_command_line(processed)
        if not parts:
            return CommandResult.empty()
        return self._execute_external(parts[0], parts[1:])

    def execute_with_progress(
        self, command: str, progress_callback: Callable[[str], object]
    ) -> CommandResult:
        """Run a command, reporting each phase to ``progress_callback``."""
        command = command.strip()
        if not command:
            return CommandResult.empty()

        progress_callback("Parsing command...")
        processed = self.resolve_aliases(self.environment.expand_variables(command))
        progress_callback("Executing command...")
        result = self.execute_command(processed)
        progress_callback("Command completed")
        return result

    def execute_pipeline(self, commands: Sequence[str]) -> CommandResult:
        """Run commands one after another, stopping at the first failure."""
        if not commands:
            return CommandResult.empty()
        if len(commands) == 1:
            return self.execute_command(commands[0])

        print(f"Executing pipeline: {' | '.join(commands)}")
        final = CommandResult.empty()
        for step, command in enumerate(commands, start=1):
            print(f"Step {step}: {command}")
            result = self.execute_command(command)
            if not result.success:
                print(f"Pipeline failed at step {step}")
                return result
            final = result
        print("Pipeline completed successfully")
        return final

    def _handle_builtin(self, command: str) -> Optional[CommandResult]:
        parts = command.split()
        if not parts:
            return None
        name, args = parts[0], parts[1:]

        if name == "cd":
            path = args[0] if args else "~"
            try:
                self.environment.change_directory(path)
            except OSError as exc:
                return CommandResult.failure(str(exc))
            return CommandResult.ok(f"Changed directory to {path}")
        if name == "pwd":
            return CommandResult.ok(self.environment.working_directory)
        if name == "echo":
            return CommandResult.ok(" ".join(args))
        if name == "set":
            if len(args) == 2:
                self.environment.set_variable(args[0], args[1])
                return CommandResult.ok(f"Set {args[0]}={args[1]}")
            if not args:
                return CommandResult.ok(
                    "".join(f"{k}={v}\n" for k, v in self.environment.variables.items())
                )
            return CommandResult.failure("Usage: set [VAR VALUE]")
        if name == "alias":
            if len(args) == 2:
                self.aliases[args[0]] = args[1]
                return CommandResult.ok(f"Alias set: {args[0]} -> {args[1]}")
            if not args:
                return CommandResult.ok(
                    "".join(f"{k}='{v}'\n" for k, v in self.aliases.items())
                )
            return CommandResult.failure("Usage: alias [NAME COMMAND]")
        if name == "history":
            return CommandResult.ok(
                "\n".join(f"{i}: {cmd}" for i, cmd in enumerate(self.history, start=1))
            )
        if name == "exit":
            return CommandResult.exit_request()
        return None

    def resolve_aliases(self, command: str) -> str:
        """Replace the first word with its alias, keeping the remaining words."""
        parts = command.split()
        if not parts or parts[0] not in self.aliases:
            return command
        value = self.aliases[parts[0]]
        if len(parts) > 1:
            return f"{value} {' '.join(parts[1:])}"
        return value

    def parse_command_line(self, command: str) -> List[str]:
        """Split on spaces, keeping double-quoted text together."""
        parts: List[str] = []
        current: List[str] = []
        in_quotes = False
        for ch in command:
            if ch == '"':
                in_quotes = not in_quotes
            elif ch == " " and not in_quotes:
                if current:
                    parts.append("".join(current))
                    current = []
            else:
                current.append(ch)
        if current:
            parts.append("".join(current))
        return parts

    def _execute_external(self, program: str, args: Sequence[str]) -> CommandResult:
        try:
            completed = subprocess.run(
                [program, *args],
                cwd=self.environment.working_directory,
                env=dict(self.environment.variables),
                capture_output=True,
            )
        except OSError as exc:
            return CommandResult.failure(f"Failed to execute '{program}': {exc}")
        code = completed.returncode
        return CommandResult(
            success=code == 0,
            exit_code=code if code >= 0 else -1,
            stdout=completed.stdout.decode("utf-8", errors="replace"),
            stderr=completed.stderr.decode("utf-8", errors="replace"),
        )

    def run_interactive(self) -> None:
        """Read and run commands from standard input until ``exit`` or end of input."""
        print("Forge Shell Interactive Mode")
        print("Type 'help' for available commands, 'exit' to quit")

        while True:
            print(f"forge-shell:{self.environment.working_directory}$ ", end="", flush=True)
            line = sys.stdin.readline()
            if not line:
                print()
                break
            entry = line.strip()
            if not entry:
                continue
            if entry == "help":
                self._show_help()
                continue

            try:
                result = self.execute_command(entry)
            except Exception as exc:  # keep the session alive on any command error
                print(f"Error: {exc}")
                continue

            if result.is_exit:
                print("Goodbye!")
                break
            if result.stdout:
                print(result.stdout, end="")
            if result.stderr:
                print(result.stderr, end="")
            if not result.success:
                print(f"Command failed with exit code: {result.exit_code}")

    def _show_help(self) -> None:
        print("Forge Shell Built-in Commands:")
        print("  cd <path>        - Change directory")
        print("  pwd              - Print working directory")
        print("  echo <text>      - Print text")
        print("  set [var value]  - Set/show environment variables")
        print("  alias [name cmd] - Set/show command aliases")
        print("  history          - Show command history")
        print("  exit             - Exit shell")
        print()
        print("Current aliases:")
        for alias, command in self.aliases.items():
            print(f"  {alias} -> {command}")