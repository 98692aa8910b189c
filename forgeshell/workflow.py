"""Multi-step workflows with conditions, retries and failure policies."""

from __future__ import annotations

import enum
import os
import time
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from .executor import ExecutionOptions, ProcessExecutor

_BAR_WIDTH = 50
_DEFAULT_STEP_TIMEOUT = 300.0


class ConditionType(enum.Enum):
    FILE_EXISTS = "file_exists"
    FILE_NOT_EXISTS = "file_not_exists"
    DIRECTORY_EXISTS = "directory_exists"
    DIRECTORY_NOT_EXISTS = "directory_not_exists"
    ENVIRONMENT_VARIABLE = "environment_variable"
    PREVIOUS_STEP_SUCCESS = "previous_step_success"
    PREVIOUS_STEP_FAILURE = "previous_step_failure"


@dataclass
class WorkflowCondition:
    """A precondition a step needs before it runs."""

    condition_type: ConditionType
    value: str


@dataclass
class WorkflowStep:
    """One command of a workflow; ``timeout`` is in seconds."""

    name: str
    command: str
    description: Optional[str] = None
    continue_on_failure: bool = False
    timeout: Optional[float] = None
    retry_count: int = 0
    conditions: List[WorkflowCondition] = field(default_factory=list)


class FailureAction(enum.Enum):
    STOP = "stop"
    CONTINUE = "continue"
    ROLLBACK = "rollback"


@dataclass
class Workflow:
    """A named sequence of steps with shared ``${NAME}`` variables."""

    name: str
    steps: List[WorkflowStep] = field(default_factory=list)
    description: Optional[str] = None
    variables: Dict[str, str] = field(default_factory=dict)
    on_failure: FailureAction = FailureAction.STOP


@dataclass
class StepResult:
    """Outcome of one executed step; ``duration`` is in seconds."""

    step_name: str
    success: bool
    duration: float
    output: str = ""
    error: Optional[str] = None
    retry_attempts: int = 0


@dataclass
class WorkflowExecution:
    """Record of one run of a workflow."""

    workflow_name: str
    start_time: float
    end_time: Optional[float] = None
    step_results: List[StepResult] = field(default_factory=list)
    overall_success: bool = True

    @property
    def duration(self) -> Optional[float]:
        if self.end_time is None:
            return None
        return self.end_time - self.start_time

    def result_for(self, step_name: str) -> Optional[StepResult]:
        return next((r for r in self.step_results if r.step_name == step_name), None)


def _progress_line(title: str, done: int, total: int) -> str:
    fraction = done / total if total else 1.0
    filled = int(fraction * _BAR_WIDTH)
    bar = "█" * filled + "░" * (_BAR_WIDTH - filled)
    return f"{title} [{bar}] {done}/{total} ({fraction * 100:.0f}%)"


def _condition_met(condition: WorkflowCondition, execution: WorkflowExecution) -> bool:
    kind, value = condition.condition_type, condition.value
    if kind is ConditionType.FILE_EXISTS:
        return os.path.exists(value)
    if kind is ConditionType.FILE_NOT_EXISTS:
        return not os.path.exists(value)
    if kind is ConditionType.DIRECTORY_EXISTS:
        return os.path.isdir(value)
    if kind is ConditionType.DIRECTORY_NOT_EXISTS:
        return not os.path.isdir(value)
    if kind is ConditionType.ENVIRONMENT_VARIABLE:
        return value in os.environ
    previous = execution.result_for(value)
    if previous is None:
        return False
    if kind is ConditionType.PREVIOUS_STEP_SUCCESS:
        return previous.success
    return not previous.success


class WorkflowRunner:
    """Holds workflows by name and runs them through a :class:`ProcessExecutor`."""

    def __init__(
        self, executor: Optional[ProcessExecutor] = None, retry_delay: float = 1.0
    ) -> None:
        self.executor = executor if executor is not None else ProcessExecutor()
        self.retry_delay = retry_delay
        self.workflows: Dict[str, Workflow] = {}

    def add_workflow(self, workflow: Workflow) -> None:
        self.workflows[workflow.name] = workflow

    def list_workflows(self) -> List[str]:
        return list(self.workflows)

    def create_simple_workflow(self, name: str, commands: Iterable[str]) -> Workflow:
        """Build a stop-on-failure workflow with one step per command."""
        steps = [
            WorkflowStep(
                name=f"Step {index}",
                command=command,
                description=f"Execute: {command}",
                timeout=_DEFAULT_STEP_TIMEOUT,
            )
            for index, command in enumerate(commands, start=1)
        ]
        return Workflow(
            name=name,
            description="Auto-generated workflow",
            steps=steps,
        )

    def execute_workflow(self, workflow_name: str) -> WorkflowExecution:
        """Run a workflow; raises KeyError if no workflow has that name."""
        try:
            workflow = self.workflows[workflow_name]
        except KeyError:
            raise KeyError(f"Workflow '{workflow_name}' not found") from None

        print(f"🚀 Starting workflow: {workflow.name}")
        if workflow.description:
            print(f"Description: {workflow.description}")
        print()

        execution = WorkflowExecution(workflow.name, time.perf_counter())
        total = len(workflow.steps)

        for index, step in enumerate(workflow.steps):
            print(f"\r{_progress_line('Workflow Progress', index, total)}")
            print()
            print(f"📋 Step {index + 1}/{total}: {step.name}")
            if step.description:
                print(f"   {step.description}")

            if not all(_condition_met(c, execution) for c in step.conditions):
                print("⏭️  Skipping step due to unmet conditions")
                continue

            result = self._execute_step(step, workflow.variables)
            execution.step_results.append(result)
            if result.success:
                continue

            execution.overall_success = False
            if step.continue_on_failure:
                continue
            if workflow.on_failure is FailureAction.STOP:
                print("🛑 Workflow stopped due to step failure")
                break
            if workflow.on_failure is FailureAction.CONTINUE:
                print("⚠️  Continuing despite step failure")
                continue
            print("🔄 Attempting rollback...")
            self._rollback(execution)
            break

        print(f"\r{_progress_line('Workflow Progress', total, total)}")
        print()

        execution.end_time = time.perf_counter()
        elapsed = execution.duration or 0.0
        if execution.overall_success:
            print(f"✅ Workflow '{workflow.name}' completed successfully in {elapsed:.2f}s")
        else:
            print(f"❌ Workflow '{workflow.name}' failed after {elapsed:.2f}s")

        self._print_summary(execution)
        return execution

    def _execute_step(self, step: WorkflowStep, variables: Dict[str, str]) -> StepResult:
        start = time.perf_counter()
        command = step.command
        for name, value in variables.items():
            command = command.replace(f"${{{name}}}", value)

        attempts = 0
        last_error: Optional[str] = None
        while attempts <= step.retry_count:
            if attempts > 0:
                print(f"🔄 Retry attempt {attempts} of {step.retry_count}")
                time.sleep(self.retry_delay)

            options = ExecutionOptions(
                timeout=step.timeout,
                show_progress=False,
                capture_output=True,
                interactive=False,
                safety_check=True,
            )
            try:
                result = self.executor.execute(command, options)
            except Exception as exc:  # a refused or broken command fails the attempt
                last_error = str(exc)
                attempts += 1
                if attempts > step.retry_count:
                    print(f"❌ Step '{step.name}' failed: {exc}")
                continue

            if result.success:
                print(f"✅ Step '{step.name}' completed")
                return StepResult(
                    step_name=step.name,
                    success=True,
                    duration=time.perf_counter() - start,
                    output=result.stdout,
                    error=result.stderr or None,
                    retry_attempts=attempts,
                )

            last_error = f"Command failed: {result.stderr}"
            attempts += 1
            if attempts > step.retry_count:
                print(f"❌ Step '{step.name}' failed after {step.retry_count} retries")

        return StepResult(
            step_name=step.name,
            success=False,
            duration=time.perf_counter() - start,
            error=last_error,
            retry_attempts=attempts,
        )

    @staticmethod
    def _rollback(execution: WorkflowExecution) -> None:
        print("🔄 Starting workflow rollback...")
        for result in reversed(execution.step_results):
            if result.success:
                print(f"Rolling back: {result.step_name}")
        print("Rollback completed")

    @staticmethod
    def _print_summary(execution: WorkflowExecution) -> None:
        print("\n📊 Execution Summary:")
        print(f"Workflow: {execution.workflow_name}")
        if execution.duration is not None:
            print(f"Total Duration: {execution.duration:.2f}s")
        succeeded = sum(1 for r in execution.step_results if r.success)
        print(f"Steps: {succeeded}/{len(execution.step_results)} successful")
        print("\nStep Details:")
        for index, result in enumerate(execution.step_results, start=1):
            status = "✅" if result.success else "❌"
            print(f"  {index}: {status} {result.step_name} ({result.duration:.2f}s)")
            if result.retry_attempts > 0:
                print(f"     Retries: {result.retry_attempts}")
            if result.error:
                print(f"     Error: {result.error}")


def rust_build_and_test() -> Workflow:
    """Format check, build and test of a Rust project."""
    return Workflow(
        name="rust-build-test",
        description="Build and test Rust project",
        steps=[
            WorkflowStep(
                name="Format Check",
                command="cargo fmt -- --check",
                description="Check code formatting",
                continue_on_failure=True,
                timeout=60.0,
            ),
            WorkflowStep(
                name="Build",
                command="cargo build",
                description="Build the project",
                timeout=300.0,
                retry_count=1,
            ),
            WorkflowStep(
                name="Test",
                command="cargo test",
                description="Run tests",
                timeout=600.0,
                retry_count=1,
            ),
        ],
    )


def git_workflow() -> Workflow:
    """Stage, commit and push all changes."""
    return Workflow(
        name="git-commit-push",
        description="Add, commit, and push changes",
        variables={"COMMIT_MESSAGE": "Auto commit"},
        steps=[
            WorkflowStep(
                name="Status Check",
                command="git status --porcelain",
                description="Check for changes",
                timeout=30.0,
            ),
            WorkflowStep(
                name="Add Changes",
                command="git add .",
                description="Stage all changes",
                timeout=60.0,
            ),
            WorkflowStep(
                name="Commit",
                command='git commit -m "${COMMIT_MESSAGE}"',
                description="Commit changes",
                timeout=60.0,
            ),
            WorkflowStep(
                name="Push",
                command="git push",
                description="Push to remote",
                timeout=120.0,
                retry_count=2,
            ),
        ],
    )