"""
Tests for installers and the installer registry.
"""

import pytest

from acfs.adapters.base import InstallContext, Installer
from acfs.adapters.mock import MockInstaller
from acfs.adapters.noop import NoopInstaller
from acfs.adapters.registry import InstallerRegistry
from acfs.adapters.shell import ShellInstaller
from acfs.core.models.action import Action, Receipt


def _action(module_id: str = "lang.bun", installer: str = "shell", commands=None) -> Action:
    return Action(
        id=f"op-test:{module_id}",
        module_id=module_id,
        installer=installer,
        commands=commands or [],
    )


class _ExplodingInstaller(Installer):
    @property
    def name(self) -> str:
        return "boom"

    def is_available(self) -> bool:
        raise RuntimeError("status check failed")

    def validate(self, context: InstallContext) -> tuple[bool, str]:
        return True, ""

    def execute(self, context: InstallContext) -> Receipt:
        raise RuntimeError("kaboom")


class TestMockInstaller:
    def test_records_calls(self):
        mock = MockInstaller()
        mock.execute(InstallContext(action=_action("a")))
        mock.execute(InstallContext(action=_action("b")))
        assert mock.call_count == 2
        assert mock.installed == ["a", "b"]

    def test_success_by_default(self):
        receipt = MockInstaller().execute(InstallContext(action=_action()))
        assert receipt.ok
        assert receipt.module_id == "lang.bun"
        assert receipt.metadata["mock"] is True

    def test_configured_failure(self):
        mock = MockInstaller()
        mock.set_failure("lang.bun", "network down")
        receipt = mock.execute(InstallContext(action=_action()))
        assert receipt.failed
        assert receipt.error == "network down"

        mock.clear_failure("lang.bun")
        assert mock.execute(InstallContext(action=_action())).ok

    def test_reset(self):
        mock = MockInstaller()
        mock.set_failure("lang.bun")
        mock.execute(InstallContext(action=_action()))
        mock.reset()
        assert mock.call_count == 0
        assert mock.execute(InstallContext(action=_action())).ok


class TestNoopInstaller:
    def test_always_succeeds(self):
        receipt = NoopInstaller().execute(InstallContext(action=_action(installer="noop")))
        assert receipt.ok
        assert receipt.output == "nothing to install"


class TestShellInstaller:
    def test_runs_commands_in_order(self):
        shell = ShellInstaller()
        ctx = InstallContext(action=_action(commands=["echo one", "echo two"]))
        receipt = shell.execute(ctx)
        assert receipt.ok
        assert receipt.output == "one\ntwo"
        assert receipt.metadata["commands"] == 2

    def test_stops_at_first_failure(self):
        shell = ShellInstaller()
        ctx = InstallContext(action=_action(commands=["echo before", "exit 3", "echo after"]))
        receipt = shell.execute(ctx)
        assert receipt.failed
        assert receipt.metadata["return_code"] == 3
        assert receipt.metadata["index"] == 1
        assert "after" not in receipt.output
        assert "exited with code 3" in receipt.error

    def test_stderr_used_as_error(self):
        ctx = InstallContext(action=_action(commands=["echo broken >&2; exit 1"]))
        receipt = ShellInstaller().execute(ctx)
        assert receipt.error == "broken"

    def test_timeout(self):
        ctx = InstallContext(action=_action(commands=["sleep 5"]), timeout=1)
        receipt = ShellInstaller().execute(ctx)
        assert receipt.failed
        assert "timed out" in receipt.error

    def test_commands_inherit_environment(self, monkeypatch):
        monkeypatch.setenv("ACFS_SHELL_MARKER", "from-parent")
        ctx = InstallContext(action=_action(commands=["echo $ACFS_SHELL_MARKER"]))
        receipt = ShellInstaller().execute(ctx)
        assert receipt.ok
        assert receipt.output == "from-parent"

    def test_commands_run_in_current_directory(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        receipt = ShellInstaller().execute(InstallContext(action=_action(commands=["pwd -P"])))
        assert receipt.output == str(tmp_path.resolve())

    def test_validate_requires_commands(self):
        ok, error = ShellInstaller().validate(InstallContext(action=_action()))
        assert not ok
        assert "no install commands" in error

    def test_validate_rejects_blank_command(self):
        ok, _ = ShellInstaller().validate(InstallContext(action=_action(commands=["  "])))
        assert not ok


class TestInstallerRegistry:
    def test_dispatch_by_installer_name(self):
        registry = InstallerRegistry()
        registry.register(ShellInstaller())
        registry.register(NoopInstaller())
        receipt = registry.execute_action(_action(installer="noop"))
        assert receipt.ok
        assert receipt.installer == "noop"

    def test_unknown_installer_fails(self):
        receipt = InstallerRegistry().execute_action(_action(installer="apt"))
        assert receipt.failed
        assert "No installer registered for 'apt'" in receipt.error

    def test_validation_failure(self):
        registry = InstallerRegistry()
        registry.register(ShellInstaller())
        receipt = registry.execute_action(_action())
        assert receipt.failed
        assert receipt.error.startswith("Validation failed:")

    def test_dry_run_skips_after_validation(self):
        registry = InstallerRegistry()
        registry.register(ShellInstaller())
        receipt = registry.execute_action(_action(commands=["exit 1"]), dry_run=True)
        assert receipt.skipped
        assert receipt.output == "[dry-run] would install lang.bun"
        assert receipt.metadata["dry_run"] is True

    def test_mock_mode_routes_everything_to_mock(self):
        registry = InstallerRegistry(mock_mode=True)
        receipt = registry.execute_action(_action(installer="apt"))
        assert receipt.ok
        assert receipt.installer == "mock"

    def test_custom_mock(self):
        mock = MockInstaller()
        registry = InstallerRegistry()
        registry.set_mock_mode(True, mock)
        registry.execute_action(_action("tools.atuin"))
        assert mock.installed == ["tools.atuin"]

    def test_installer_exception_becomes_failure(self):
        registry = InstallerRegistry()
        registry.register(_ExplodingInstaller())
        receipt = registry.execute_action(_action(installer="boom"))
        assert receipt.failed
        assert "kaboom" in receipt.error

    def test_status_survives_check_errors(self):
        registry = InstallerRegistry()
        registry.register(_ExplodingInstaller())
        registry.register(NoopInstaller())
        status = registry.installer_status()
        assert status["boom"]["available"] is False
        assert status["noop"]["available"] is True

    def test_register_and_unregister(self):
        registry = InstallerRegistry()
        registry.register(NoopInstaller())
        assert registry.list_installers() == ["noop"]
        registry.unregister("noop")
        assert registry.get("noop") is None

    @pytest.mark.parametrize("dry_run", [False, True])
    def test_receipt_carries_module_id(self, dry_run):
        registry = InstallerRegistry(mock_mode=True)
        receipt = registry.execute_action(_action("agents.claude"), dry_run=dry_run)
        assert receipt.module_id == "agents.claude"
