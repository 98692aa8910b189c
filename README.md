# forgeshell

A Python library for running shell commands behind a safety net, together
with the file utilities such a shell needs: glob matching, directory walking,
plain-text search, polling file watches and bulk file operations.

## Modules

| Module | Purpose |
| --- | --- |
| `forgeshell.safety` | Rates a command line by risk, suggests safer alternatives, flags system paths |
| `forgeshell.shell` | A small shell with variables, aliases, history and built-ins |
| `forgeshell.executor` | Runs commands behind the safety checks, singly, in batches or as a sequence |
| `forgeshell.workflow` | Named multi-step workflows with conditions, retries and failure policies |
| `forgeshell.globbing` | Glob matching with `*`, `**`, `?` and `[...]` character sets |
| `forgeshell.walker` | Depth-first directory walking and simple file finders |
| `forgeshell.search` | Plain-text search in strings and files |
| `forgeshell.watcher` | Polling watcher that reports created, modified and deleted paths |
| `forgeshell.operations` | File helpers and bulk copy, move, delete, rename and transform |

## Assessing a command

```python
from forgeshell.safety import RiskLevel, SafetyChecker, is_safe_path, suggest_safe_path

checker = SafetyChecker()
risk = checker.assess_command("rm -rf build")
print(risk.level, risk.reason)           # RiskLevel.CRITICAL ...
for hint in risk.suggestions:
    print(" -", hint)

checker.is_command_allowed("ls -la")     # True: only SAFE and LOW are allowed
checker.get_safe_alternatives("rm -rf build")

is_safe_path("/etc/passwd")              # False
is_safe_path("../../../etc/passwd")      # False
suggest_safe_path("/var/data")           # "/tmp/var/data"
```

Risk levels are `SAFE`, `LOW`, `MEDIUM`, `HIGH` and `CRITICAL`. A checker can
be limited to a fixed set of programs; any other program is rated `HIGH`:

```python
checker = SafetyChecker().with_allowed_commands(["git", "npm", "cargo"])
checker.assess_command("git status").level   # RiskLevel.SAFE
checker.assess_command("rm file.txt").level  # RiskLevel.HIGH
```

## Using the shell

```python
from forgeshell.shell import Shell

shell = Shell()
result = shell.execute_command("echo Hello World")
print(result.success, result.stdout)     # True Hello World

shell.resolve_aliases("ll /tmp")         # "ls -la /tmp" (default alias)
shell.parse_command_line('echo "hello world" test')
# ['echo', 'hello world', 'test']

shell.environment.set_variable("NAME", "demo")
shell.environment.expand_variables("hi $NAME and ${NAME}")  # "hi demo and demo"
```

Built-ins are `cd`, `pwd`, `echo`, `set [VAR VALUE]`, `alias [NAME COMMAND]`,
`history` and `exit`; built-in arguments are split on whitespace, so a `set`
value or an `alias` command is a single word. Anything else runs as an
external program with the shell's variables as its environment, and its
output is captured in a `CommandResult` (`success`, `exit_code`, `stdout`,
`stderr`, `is_exit`).

`Shell.execute_pipeline(commands)` runs the commands one after another and
stops at the first failure; output is not piped between them.
`Shell.run_interactive()` reads commands from standard input until `exit` or
end of input.

## Executing with safety checks

```python
from forgeshell.executor import ExecutionCancelled, ExecutionOptions, ProcessExecutor

executor = ProcessExecutor()
try:
    result = executor.execute("ls -la", ExecutionOptions(show_progress=False))
except ExecutionCancelled as exc:
    print("not run:", exc)

executor.get_command_suggestions("gi")   # includes "git"
```

`LOW` and `MEDIUM` risk commands ask for `y` on standard input, `HIGH` risk
commands additionally ask for `YES`, and `CRITICAL` commands are always
refused; a refusal raises `ExecutionCancelled`. `execute_batch` and
`execute_pipeline` apply the same checks to every command.
`ProcessExecutor(allowed_commands=[...])` restricts the programs that may run.

`analyze_performance(command)` runs the command and returns a
`PerformanceAnalysis` with wall time, child peak memory and CPU share (memory
and CPU are reported as zero where the `resource` module is missing);
`report()` prints it and returns the text.

`LongRunningExecutor().execute_with_live_output(command)` starts a program
directly (no shell) and prints its output lines prefixed `OUT: ` and `ERR: `
as they arrive.

## Workflows

```python
from forgeshell.workflow import (
    ConditionType, FailureAction, Workflow, WorkflowCondition, WorkflowRunner,
    WorkflowStep, git_workflow, rust_build_and_test,
)

runner = WorkflowRunner()
runner.add_workflow(rust_build_and_test())
runner.add_workflow(git_workflow())
runner.add_workflow(runner.create_simple_workflow("hello", ["echo hello", "echo world"]))

execution = runner.execute_workflow("hello")
print(execution.overall_success, [r.step_name for r in execution.step_results])
```

Steps may carry conditions (file or directory exists or not, an environment
variable is set, a named earlier step succeeded or failed), a retry count and
`continue_on_failure`. A workflow's `on_failure` is `STOP`, `CONTINUE` or
`ROLLBACK`; rollback only reports the steps that had succeeded. `${NAME}` in a
step's command is replaced from the workflow's `variables`. Running an
unknown workflow raises `KeyError`.

## Files

```python
from forgeshell.globbing import GlobMatcher, expand_globs, glob
from forgeshell.search import TextSearcher, search_multiple_files
from forgeshell.walker import find_files_by_extension, walk_directory

GlobMatcher("**/*.py").matches("pkg/sub/mod.py")   # True
GlobMatcher("test[0-9].rs").matches("test1.rs")    # True

sources = find_files_by_extension(".", "py")
hits = search_multiple_files(sources, "TODO")      # [(path, [FileMatch(line, column, length), ...])]

TextSearcher(case_sensitive=False, whole_word=True).search_in_text("Foo foobar", "foo")
# [TextMatch(start=0, length=3)]
```

`glob(pattern)` matches against full paths, searching from `/` for absolute
patterns and from the current directory otherwise; only patterns containing
`**` descend into subdirectories, so relative patterns are written as
`**/...`.

```python
from forgeshell.watcher import FileWatcher

watcher = FileWatcher(poll_interval=0.5)
watcher.watch("settings.toml")
for event in watcher.check_changes():
    print(event.kind, event.path)

events = watcher.start()   # queue.Queue of FileEvent, filled by a background thread
...
watcher.stop()
```

`forgeshell.operations` offers single-file helpers (`read_file`,
`write_file`, `copy_file`, `move_file`, `append_to_file`, `list_directory`
and more) and bulk operations (`bulk_copy`, `bulk_move`, `bulk_delete`,
`bulk_transform`, `bulk_search_replace`, `bulk_rename_prefix`,
`bulk_rename_suffix`, `bulk_count_lines`). The bulk operations do not stop at
the first error; they return a `BulkOpSummary` with per-path results and
`total`, `succeeded` and `failed` counts.

## What it does not do

- There is no command-line program; everything is used from Python.
- There is no AI assistant, model client or configuration file.
- Workflows are built in Python only; there is no workflow file format.
- `ExecutionOptions.timeout`, `capture_output`, `interactive` and
  `working_directory` are recorded but not applied when a command runs.

## Requirements

Python 3.10 or later. No third-party packages are needed at run time; the
tests use pytest (`pip install .[test]`).