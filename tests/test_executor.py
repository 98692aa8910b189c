import io
import sys

import pytest

from forgeshell.executor import (
    ExecutionCancelled,
    ExecutionOptions,
    LongRunningExecutor,
    PerformanceAnalysis,
    ProcessExecutor,
)

QUIET = ExecutionOptions(show_progress=False)


def _stdin(monkeypatch, text):
    monkeypatch.setattr("sys.stdin", io.StringIO(text))


def test_execution_options_defaults_and_override():
    options = ExecutionOptions(timeout=30.0, show_progress=True)
    assert options.timeout == 30.0
    assert options.show_progress
    assert options.safety_check
    assert options.capture_output
    assert not options.interactive
    assert options.working_directory is None


def test_executor_with_allowlist_restricts_commands():
    executor = ProcessExecutor(["git", "cargo"])
    assert executor.safety_checker.allowed_commands == {"git", "cargo"}


def test_command_suggestions_contains_git():
    executor = ProcessExecutor()
    assert "git" in executor.get_command_suggestions("gi")


def test_command_suggestions_sorted_and_limited():
    suggestions = ProcessExecutor().get_command_suggestions("")
    assert len(suggestions) == 10
    assert suggestions == sorted(suggestions)


def test_command_suggestions_include_history():
    executor = ProcessExecutor()
    executor.shell.execute_command("echo gizmo")
    assert executor.get_command_suggestions("echo g") == ["echo gizmo"]


def test_execute_safe_command():
    result = ProcessExecutor().execute("echo hello", QUIET)
    assert result.success
    assert result.stdout == "hello"


def test_execute_with_progress_reports_completion(capsys):
    result = ProcessExecutor().execute("echo hi", ExecutionOptions())
    assert result.stdout == "hi"
    assert "Command completed in" in capsys.readouterr().out


def test_execute_with_progress_reports_failure(capsys):
    result = ProcessExecutor().execute("no-such-program-xyz", ExecutionOptions())
    assert not result.success
    assert "Command failed in" in capsys.readouterr().out


def test_critical_command_blocked():
    with pytest.raises(ExecutionCancelled, match="Critical command blocked"):
        ProcessExecutor().execute("rm -rf /", QUIET)


def test_low_risk_confirmed(monkeypatch):
    _stdin(monkeypatch, "y\n")
    result = ProcessExecutor().execute("echo --recursive", QUIET)
    assert result.stdout == "--recursive"


def test_low_risk_refused(monkeypatch):
    _stdin(monkeypatch, "n\n")
    with pytest.raises(ExecutionCancelled, match="cancelled by user"):
        ProcessExecutor().execute("echo --recursive", QUIET)


def test_medium_risk_refused(monkeypatch):
    _stdin(monkeypatch, "\n")
    with pytest.raises(ExecutionCancelled):
        ProcessExecutor().execute("sudo apt update", QUIET)


def test_high_risk_needs_yes(monkeypatch):
    _stdin(monkeypatch, "y\nYES\n")
    result = ProcessExecutor(["git"]).execute("echo hi", QUIET)
    assert result.stdout == "hi"


def test_high_risk_without_yes_cancelled(monkeypatch):
    _stdin(monkeypatch, "y\nno\n")
    with pytest.raises(ExecutionCancelled, match="cancelled for safety"):
        ProcessExecutor(["git"]).execute("echo hi", QUIET)


def test_skip_safety_check():
    options = ExecutionOptions(show_progress=False, safety_check=False)
    result = ProcessExecutor(["git"]).execute("echo free", options)
    assert result.stdout == "free"


def test_execute_batch_quiet():
    results = ProcessExecutor().execute_batch(["echo a", "echo b"], QUIET)
    assert [r.stdout for r in results] == ["a", "b"]


def test_execute_batch_with_progress(capsys):
    results = ProcessExecutor().execute_batch(["echo a"], ExecutionOptions())
    assert results[0].stdout == "a"
    assert "Batch Execution" in capsys.readouterr().out


def test_execute_pipeline_returns_last_result():
    result = ProcessExecutor().execute_pipeline(["echo a", "echo b"], QUIET)
    assert result.stdout == "b"


def test_execute_pipeline_checks_all_before_running():
    executor = ProcessExecutor()
    with pytest.raises(ExecutionCancelled):
        executor.execute_pipeline(["echo a", "rm -rf /"], QUIET)
    assert executor.shell.history == []


def test_analyze_performance(capsys):
    analysis = ProcessExecutor().analyze_performance("echo hi")
    assert analysis.command == "echo hi"
    assert analysis.duration >= 0
    assert analysis.memory_used >= 0
    analysis.report()
    assert "Performance Analysis for: echo hi" in capsys.readouterr().out


def test_performance_report_format(capsys):
    PerformanceAnalysis("ls", 1.5, 2048, 12.34).report()
    out = capsys.readouterr().out
    assert "  Duration: 1.500s" in out
    assert "  Memory: 2 KB" in out
    assert "  CPU: 12.3%" in out


def test_run_interactive_shell_exits(monkeypatch, capsys):
    _stdin(monkeypatch, "echo inside\nexit\n")
    executor = ProcessExecutor()
    executor.run_interactive_shell()
    out = capsys.readouterr().out
    assert "inside" in out
    assert "Goodbye!" in out


def test_live_output_success(capsys):
    result = LongRunningExecutor().execute_with_live_output(f"{sys.executable} -c print(1)")
    assert result.success
    assert result.exit_code == 0
    assert "OUT: 1" in capsys.readouterr().out


def test_live_output_failure_code():
    result = LongRunningExecutor().execute_with_live_output(f"{sys.executable} -c exit(3)")
    assert not result.success
    assert result.exit_code == 3


def test_live_output_empty_command():
    with pytest.raises(ValueError, match="Empty command"):
        LongRunningExecutor().execute_with_live_output("   ")