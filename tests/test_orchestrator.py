import pytest

from conftest import FakeExecutor, ScriptedPrompter, make_action, quiet_console

from devinstaller.errors import DownloadError
from devinstaller.executor import CommandExecutor
from devinstaller.model import AbortedOnFailure, Completed, Privilege, PrivilegeMismatch
from devinstaller.orchestrator import INDEX_REFRESH_COMMAND, InstallOrchestrator
from devinstaller.prompts import Prompter


def orchestrate(executor, is_root=False, prompter=None, progress=None):
    return InstallOrchestrator(
        executor,
        prompter=prompter or Prompter(assume_yes=True),
        is_root=is_root,
        progress_callback=(progress.append_call if progress is not None else lambda *a: None),
        console=quiet_console(),
    )


class Progress(list):
    def append_call(self, message, completed, total):
        self.append((completed, total))


def test_runs_all_actions_in_order(fake_executor):
    actions = [make_action(i, f"a{i}") for i in range(1, 4)]
    progress = Progress()
    outcome = orchestrate(fake_executor, progress=progress).run(actions)
    assert outcome == Completed(3)
    assert fake_executor.commands == ["install a1", "install a2", "install a3"]
    assert progress == [(1, 3), (2, 3), (3, 3)]


@pytest.mark.parametrize("failing", [1, 2, 4])
def test_failure_aborts_remaining_actions(failing):
    executor = FakeExecutor(failures={f"install a{failing}": 7})
    actions = [make_action(i, f"a{i}") for i in range(1, 5)]
    orchestrator = orchestrate(executor)
    outcome = orchestrator.run(actions)

    assert isinstance(outcome, AbortedOnFailure)
    assert outcome.count == failing - 1
    assert outcome.action is actions[failing - 1]
    assert outcome.exit_code == 7
    assert outcome.command == f"install a{failing}"
    assert executor.commands == [f"install a{i}" for i in range(1, failing + 1)]
    assert orchestrator.last_run.failed
    with pytest.raises(RuntimeError):
        orchestrator.last_run.mark_completed()


def test_present_target_skips_install_but_counts(fake_executor):
    installed = []
    action = make_action(
        1, "git",
        install=lambda ctx: installed.append(True),
        probe=lambda ctx: True,
        needs_index=True,
    )
    outcome = orchestrate(fake_executor).run([action])
    assert outcome == Completed(1)
    assert installed == []
    assert INDEX_REFRESH_COMMAND not in fake_executor.commands


def test_index_refreshed_once_per_run(fake_executor):
    actions = [make_action(i, f"a{i}", needs_index=True) for i in range(1, 4)]
    orchestrator = orchestrate(fake_executor)
    orchestrator.run(actions)
    assert fake_executor.commands.count(INDEX_REFRESH_COMMAND) == 1
    assert fake_executor.commands[0] == INDEX_REFRESH_COMMAND
    assert orchestrator.last_run.index_refreshed


def test_forced_refresh_always_runs(fake_executor):
    def add_source(ctx):
        ctx.execute("add source")
        ctx.refresh_index(force=True)
        ctx.execute("install vendor")

    actions = [
        make_action(1, "a1", needs_index=True),
        make_action(2, "vendor", install=add_source, needs_index=True),
        make_action(3, "a3", needs_index=True),
    ]
    orchestrate(fake_executor).run(actions)
    assert fake_executor.commands == [
        INDEX_REFRESH_COMMAND,
        "install a1",
        "add source",
        INDEX_REFRESH_COMMAND,
        "install vendor",
        "install a3",
    ]


def test_mixed_tiers_rejected_before_any_command(fake_executor):
    actions = [make_action(1, "root-pkg", Privilege.ROOT), make_action(2, "user-pkg", Privilege.USER)]
    outcome = orchestrate(fake_executor, is_root=False).run(actions)
    assert outcome == PrivilegeMismatch(actions[0], False)
    assert outcome.exit_code == 1
    assert fake_executor.commands == []


def test_mismatch_later_in_selection_still_stops_everything(fake_executor):
    actions = [make_action(1, "user-pkg", Privilege.USER), make_action(2, "root-pkg", Privilege.ROOT)]
    outcome = orchestrate(fake_executor, is_root=False).run(actions)
    assert isinstance(outcome, PrivilegeMismatch)
    assert outcome.action is actions[1]
    assert fake_executor.commands == []


def test_root_session_runs_root_actions(fake_executor):
    actions = [make_action(1, "root-pkg", Privilege.ROOT)]
    assert orchestrate(fake_executor, is_root=True).run(actions) == Completed(1)


def test_declined_action_is_completed_without_commands(fake_executor):
    prompter = ScriptedPrompter(confirms=[False, True])
    actions = [make_action(1, "a1"), make_action(2, "a2")]
    outcome = orchestrate(fake_executor, prompter=prompter).run(actions)
    assert outcome == Completed(2)
    assert fake_executor.commands == ["install a2"]
    assert prompter.questions == ["Install a1?", "Install a2?"]


def test_download_error_aborts_with_exit_code_one(fake_executor):
    def broken(ctx):
        raise DownloadError("https://example.invalid/x", "timeout")

    actions = [make_action(1, "a1"), make_action(2, "a2", install=broken), make_action(3, "a3")]
    outcome = orchestrate(fake_executor).run(actions)
    assert isinstance(outcome, AbortedOnFailure)
    assert outcome.count == 1
    assert outcome.exit_code == 1
    assert outcome.command == "download https://example.invalid/x"
    assert "install a3" not in fake_executor.commands


def test_answers_remembered_across_actions(fake_executor):
    prompter = ScriptedPrompter(answers=["8.2"])
    seen = []

    def needs_version(ctx):
        seen.append(ctx.remembered("php_version", "PHP version?"))

    actions = [make_action(1, "a1", install=needs_version), make_action(2, "a2", install=needs_version)]
    orchestrator = orchestrate(fake_executor, prompter=prompter)
    orchestrator.run(actions)
    assert seen == ["8.2", "8.2"]
    assert prompter.questions.count("PHP version?") == 1
    assert orchestrator.last_run.answers == {"php_version": "8.2"}


def test_binary_noise_then_failure_aborts_cleanly():
    def noisy(ctx):
        ctx.execute("printf '\\377\\376 vendor banner'")
        ctx.execute("printf '\\377'; exit 9")

    actions = [make_action(1, "vendor", install=noisy), make_action(2, "after")]
    outcome = orchestrate(CommandExecutor()).run(actions)
    assert isinstance(outcome, AbortedOnFailure)
    assert outcome.count == 0
    assert outcome.exit_code == 9
