"""Risk assessment for shell commands and file-system paths."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence

_DANGEROUS_PATTERNS = (
    "rm -rf",
    "rm -r",
    "sudo rm",
    "del /s",
    "format c:",
    "fdisk /mbr",
    "mkfs.",
    "dd if=/dev/zero",
    "dd if=/dev/random",
    "> /dev/",
    "chmod 000",
    "chmod -R 000",
    "chown root",
    "chown -R root",
    "init 0",
    "init 6",
    "killall -9",
    "pkill -9",
    ":(){ :|:& };:",  # fork bomb
    "curl | sh",
    "wget | sh",
    "curl | bash",
    "wget | bash",
)

_DESTRUCTIVE_COMMANDS = frozenset(
    {
        "rm",
        "del",
        "format",
        "fdisk",
        "mkfs",
        "dd",
        "shutdown",
        "reboot",
        "halt",
        "poweroff",
        "systemctl",
    }
)

_SYSTEM_PATHS = (
    "/bin",
    "/sbin",
    "/usr/bin",
    "/usr/sbin",
    "/boot",
    "/dev",
    "/etc",
    "/proc",
    "/sys",
    "C:\\Windows",
    "C:\\Program Files",
    "C:\\System32",
)

_DANGEROUS_FS_PATHS = (
    "/",
    "/bin",
    "/sbin",
    "/boot",
    "/dev",
    "/etc",
    "/proc",
    "/sys",
    "/usr/bin",
    "/usr/sbin",
    "/var/log",
    "/var/lib",
    "C:\\",
    "C:\\Windows",
    "C:\\Program Files",
    "C:\\System32",
)


class RiskLevel(enum.Enum):
    SAFE = "safe"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


@dataclass
class CommandRisk:
    """How risky a command is, why, and what to keep in mind."""

    level: RiskLevel
    reason: str
    suggestions: List[str] = field(default_factory=list)


class SafetyChecker:
    """Classifies shell commands by the damage they could do."""

    def __init__(self, allowed_commands: Optional[Iterable[str]] = None) -> None:
        self.allowed_commands = (
            set(allowed_commands) if allowed_commands is not None else None
        )

    def with_allowed_commands(self, commands: Iterable[str]) -> "SafetyChecker":
        """Restrict commands to the given base names; returns ``self``."""
        self.allowed_commands = set(commands)
        return self

    def assess_command(self, command: str) -> CommandRisk:
        command_lower = command.lower()
        parts = command.split()
        if not parts:
            return CommandRisk(
                RiskLevel.SAFE, "Empty command", ["Specify a command to execute"]
            )

        base = parts[0]

        if self.allowed_commands is not None and base not in self.allowed_commands:
            return CommandRisk(
                RiskLevel.HIGH,
                f"Command '{base}' is not in the allowed list",
                [
                    "Only pre-approved commands are allowed in this environment",
                    "Allowed commands: " + ", ".join(sorted(self.allowed_commands)),
                ],
            )

        for pattern in _DANGEROUS_PATTERNS:
            if pattern in command_lower:
                return CommandRisk(
                    RiskLevel.CRITICAL,
                    f"Contains dangerous pattern: {pattern}",
                    [
                        "This command could cause irreversible system damage",
                        "Consider using safer alternatives or be extremely careful",
                        "Always have backups before running destructive commands",
                    ],
                )

        if base in _DESTRUCTIVE_COMMANDS:
            risk = self._assess_destructive(command, parts)
            if risk.level is not RiskLevel.SAFE:
                return risk

        for sys_path in _SYSTEM_PATHS:
            if sys_path.lower() in command_lower:
                return CommandRisk(
                    RiskLevel.HIGH,
                    f"Attempts to modify system path: {sys_path}",
                    [
                        "Modifying system paths can break your system",
                        "Use extreme caution when working with system directories",
                    ],
                )

        if self._has_network_risk(command):
            return CommandRisk(
                RiskLevel.MEDIUM,
                "Command downloads and executes content from the internet",
                [
                    "Review the source and content before executing",
                    "Consider downloading and inspecting the script first",
                ],
            )

        if "sudo " in command_lower:
            return CommandRisk(
                RiskLevel.MEDIUM,
                "Command requires elevated privileges",
                [
                    "Ensure you understand what the command does with elevated privileges",
                    "Consider running without sudo first if possible",
                ],
            )

        if " -r" in command_lower or " --recursive" in command_lower:
            return CommandRisk(
                RiskLevel.LOW,
                "Command performs recursive operations",
                [
                    "Be careful with recursive operations on large directory trees",
                    "Consider testing on a small subset first",
                ],
            )

        return CommandRisk(RiskLevel.SAFE, "Command appears safe")

    @staticmethod
    def _assess_destructive(command: str, parts: Sequence[str]) -> CommandRisk:
        base = parts[0]
        if base == "rm":
            if any(arg in ("-rf", "-r") for arg in parts):
                return CommandRisk(
                    RiskLevel.CRITICAL,
                    "Recursive file deletion",
                    [
                        "This will delete files and directories recursively",
                        "Make sure you have backups",
                        "Double-check the target path",
                    ],
                )
            if any(arg.startswith("/") and len(arg.encode()) < 4 for arg in parts):
                return CommandRisk(
                    RiskLevel.CRITICAL,
                    "Attempting to delete system root directories",
                    [
                        "This could destroy your entire system",
                        "Never delete root system directories",
                    ],
                )
            return CommandRisk(
                RiskLevel.LOW,
                "File deletion command",
                ["Ensure the target files are correct"],
            )
        if base == "dd":
            if "/dev/" in command:
                return CommandRisk(
                    RiskLevel.CRITICAL,
                    "Direct disk access with dd",
                    [
                        "This can overwrite disk data directly",
                        "Wrong usage can destroy all data on the disk",
                        "Verify the input/output devices carefully",
                    ],
                )
            return CommandRisk(
                RiskLevel.MEDIUM,
                "Data copying with dd",
                ["Verify source and destination paths"],
            )
        if base in ("shutdown", "reboot", "halt", "poweroff"):
            return CommandRisk(
                RiskLevel.MEDIUM,
                "System power control",
                [
                    "This will shut down or restart the system",
                    "Save your work before proceeding",
                ],
            )
        if base == "systemctl":
            if any(arg in ("stop", "disable", "mask") for arg in parts):
                return CommandRisk(
                    RiskLevel.HIGH,
                    "Stopping or disabling system services",
                    [
                        "This may affect system functionality",
                        "Make sure you understand the service's purpose",
                    ],
                )
            return CommandRisk(
                RiskLevel.LOW,
                "System service management",
                ["Review the service and action carefully"],
            )
        return CommandRisk(RiskLevel.SAFE, "Standard command usage")

    @staticmethod
    def _has_network_risk(command: str) -> bool:
        downloads = "curl" in command or "wget" in command
        pipes_to_shell = any(
            marker in command for marker in ("| sh", "| bash", "|sh", "|bash")
        )
        return downloads and pipes_to_shell

    def is_command_allowed(self, command: str) -> bool:
        """Return whether the command is at most low risk."""
        return self.assess_command(command).level in (RiskLevel.SAFE, RiskLevel.LOW)

    def get_safe_alternatives(self, command: str) -> List[str]:
        command_lower = command.lower()
        alternatives: List[str] = []
        if command_lower.startswith("rm -rf"):
            alternatives += [
                "Use 'rm -i' for interactive deletion",
                "Move files to trash instead of permanent deletion",
                "List files first with 'ls' to verify targets",
            ]
        if "curl" in command_lower and "| sh" in command_lower:
            alternatives += [
                "Download the script first: curl <url> -o script.sh",
                "Review the script: cat script.sh",
                "Then execute if safe: bash script.sh",
            ]
        if command_lower.startswith("sudo"):
            alternatives += [
                "Try running without sudo first if possible",
                "Use specific sudo commands instead of sudo su",
            ]
        return alternatives


def is_safe_path(path: str) -> bool:
    """Return False for system locations and for paths containing ``..``."""
    for dangerous in _DANGEROUS_FS_PATHS:
        if path == dangerous or path.startswith(dangerous + "/"):
            return False
    return ".." not in path


def suggest_safe_path(dangerous_path: str) -> Optional[str]:
    """Suggest a scratch location mirroring ``dangerous_path``, if one applies."""
    if dangerous_path.startswith("/") and not dangerous_path.startswith("/home"):
        return "/tmp" + dangerous_path
    if dangerous_path.startswith("C:\\") and not dangerous_path.startswith("C:\\Users"):
        return "C:\\temp" + dangerous_path[3:]
    return None