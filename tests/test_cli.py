import io
import os
import subprocess
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from rich.console import Console
from typer.testing import CliRunner

from cli.context import CommandContext
from cli.main import app
from core.config import (
    CONFIG_EDGE_DELIVERY,
    CONFIG_ENVIRONMENT,
    CONFIG_ENVIRONMENT_NAME,
    CONFIG_PROGRAM,
    DEFAULT_API_ENDPOINT_URL,
    AppSettings,
)
from core.config_store import ConfigStore


class CliTests(unittest.TestCase):
    def setUp(self) -> None:
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        base = Path(tmp.name)
        self.store = ConfigStore(base / "aio", base / ".aio")
        self.store.set(CONFIG_PROGRAM, "1")
        self.store.set(CONFIG_ENVIRONMENT, "2")
        self.runner = CliRunner()

        env = mock.patch.dict(os.environ, {"AEM_COMPUTE_TOKEN": "env-token"}, clear=True)
        env.start()
        self.addCleanup(env.stop)

    def _obj(self) -> CommandContext:
        return CommandContext(
            settings=AppSettings(_env_file=None),
            store=self.store,
            console=Console(file=io.StringIO(), width=200),
        )

    def test_help_lists_commands(self) -> None:
        result = self.runner.invoke(app, ["--help"])
        self.assertEqual(result.exit_code, 0, msg=result.output)
        for command in ("setup", "deploy", "build", "serve", "tail-logs", "info"):
            self.assertIn(command, result.output)

    def test_deploy_runs_fastly_with_resolved_token_and_endpoint(self) -> None:
        with mock.patch("adapters.fastly_cli.shutil.which", return_value="/opt/bin/fastly"), \
             mock.patch("adapters.fastly_cli.subprocess.run") as run:
            result = self.runner.invoke(app, ["deploy", "compute-p1-e2-svc"], obj=self._obj())

        self.assertEqual(result.exit_code, 0, msg=result.output)
        args, kwargs = run.call_args
        self.assertEqual(args[0][1:], ["compute", "deploy", "--service-id", "compute-p1-e2-svc"])
        self.assertEqual(kwargs["env"]["FASTLY_API_TOKEN"], "env-token")
        self.assertEqual(
            kwargs["env"]["FASTLY_API_ENDPOINT"],
            "https://publish-p1-e2.adobeaemcloud.com" + DEFAULT_API_ENDPOINT_URL,
        )

    def test_deploy_requires_service_id(self) -> None:
        result = self.runner.invoke(app, ["deploy"], obj=self._obj())
        self.assertNotEqual(result.exit_code, 0)

    def test_unsafe_service_id_exits_before_spawning(self) -> None:
        obj = self._obj()
        with mock.patch("adapters.fastly_cli.subprocess.run") as run:
            result = self.runner.invoke(app, ["tail-logs", "svc; rm -rf /"], obj=obj)

        self.assertEqual(result.exit_code, 1)
        run.assert_not_called()
        self.assertIn("Service ID must contain only", obj.console.file.getvalue())

    def test_fastly_exit_code_is_propagated(self) -> None:
        with mock.patch("adapters.fastly_cli.shutil.which", return_value="/opt/bin/fastly"), \
             mock.patch("adapters.fastly_cli.subprocess.run", side_effect=subprocess.CalledProcessError(7, ["fastly"])):
            result = self.runner.invoke(app, ["build"], obj=self._obj())

        self.assertEqual(result.exit_code, 7)

    def test_info_shows_edge_delivery_endpoint(self) -> None:
        self.store.set(CONFIG_EDGE_DELIVERY, True)
        self.store.set(CONFIG_ENVIRONMENT_NAME, "www.example.com")
        obj = self._obj()

        result = self.runner.invoke(app, ["info"], obj=obj)

        self.assertEqual(result.exit_code, 0, msg=result.output)
        out = obj.console.file.getvalue()
        self.assertIn("Edge Delivery site", out)
        self.assertIn("https://www.example.com" + DEFAULT_API_ENDPOINT_URL, out)

    def test_info_without_selection_shows_endpoint_not_set(self) -> None:
        store = ConfigStore(self.store.global_path.parent / "empty-aio", self.store.local_path.parent / "empty.aio")
        obj = CommandContext(
            settings=AppSettings(_env_file=None),
            store=store,
            console=Console(file=io.StringIO(), width=200),
        )

        result = self.runner.invoke(app, ["info"], obj=obj)

        self.assertEqual(result.exit_code, 0, msg=result.output)
        out = obj.console.file.getvalue()
        self.assertNotIn("None", out)
        self.assertNotIn("adobeaemcloud.com", out)
        self.assertRegex(out, r"API endpoint\s+.*not set")

    def test_deploy_without_selection_exits_before_spawning(self) -> None:
        self.store.set(CONFIG_PROGRAM, None)
        obj = self._obj()
        with mock.patch("adapters.fastly_cli.subprocess.run") as run:
            result = self.runner.invoke(app, ["deploy", "svc"], obj=obj)

        self.assertEqual(result.exit_code, 1)
        run.assert_not_called()
        self.assertIn("Please run the setup command first.", obj.console.file.getvalue())

    def test_context_option_is_applied(self) -> None:
        obj = self._obj()
        with mock.patch("adapters.fastly_cli.shutil.which", return_value="/opt/bin/fastly"), \
             mock.patch("adapters.fastly_cli.subprocess.run"):
            result = self.runner.invoke(app, ["--context", "mine", "serve"], obj=obj)

        self.assertEqual(result.exit_code, 0, msg=result.output)
        self.assertEqual(obj.context_name, "mine")


if __name__ == "__main__":
    unittest.main()
