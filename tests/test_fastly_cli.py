import os
import subprocess
import unittest
from unittest import mock

from adapters.fastly_cli import FastlyCli
from core.config import DEFAULT_FASTLY_API_ENDPOINT, AppSettings
from core.errors import ConfigurationError, FastlyCliNotFoundError, InvalidServiceIdError


def _settings(**kwargs) -> AppSettings:
    return AppSettings(_env_file=None, **kwargs)


class ServiceIdTests(unittest.TestCase):
    def test_safe_service_ids_pass(self) -> None:
        fastly = FastlyCli(settings=_settings())
        for service_id in ("compute-pXXXXX-eYYYYY-my-service", "abc", "A_b-9"):
            fastly.ensure_service_id_is_safe(service_id)

    def test_unsafe_service_ids_raise(self) -> None:
        fastly = FastlyCli(settings=_settings())
        for service_id in ("!xyz!", "a b", "; rm -rf", "", None, "svc\n", "svc;ls", "--help=x"):
            with self.subTest(service_id=service_id):
                with self.assertRaises(InvalidServiceIdError):
                    fastly.ensure_service_id_is_safe(service_id)


class TokenTests(unittest.TestCase):
    def test_missing_or_empty_token_raises(self) -> None:
        with mock.patch.dict(os.environ, {}, clear=True):
            for token in (None, ""):
                with self.subTest(token=token):
                    fastly = FastlyCli(token, "https://example.test", settings=_settings())
                    with self.assertRaises(ConfigurationError):
                        fastly.ensure_token_is_set()

    def test_token_falls_back_to_env(self) -> None:
        with mock.patch.dict(os.environ, {"AEM_COMPUTE_TOKEN": "env-token"}, clear=True):
            fastly = FastlyCli(settings=_settings())
        self.assertEqual(fastly.api_token, "env-token")
        fastly.ensure_token_is_set()

    def test_default_endpoint(self) -> None:
        with mock.patch.dict(os.environ, {}, clear=True):
            fastly = FastlyCli("tok", settings=_settings())
        self.assertEqual(fastly.api_endpoint, DEFAULT_FASTLY_API_ENDPOINT)


class RunTests(unittest.TestCase):
    def setUp(self) -> None:
        patcher = mock.patch.dict(os.environ, {"PATH": "/usr/bin"}, clear=True)
        patcher.start()
        self.addCleanup(patcher.stop)
        self.fastly = FastlyCli("tok", "https://endpoint.test/api", settings=_settings())

    def _run_with_binary(self):
        return (
            mock.patch("adapters.fastly_cli.shutil.which", return_value="/usr/bin/fastly"),
            mock.patch("adapters.fastly_cli.subprocess.run"),
        )

    def test_deploy_invokes_fastly_with_token_and_endpoint(self) -> None:
        which_patch, run_patch = self._run_with_binary()
        with which_patch, run_patch as run:
            self.fastly.deploy("compute-p1-e2-svc")

        run.assert_called_once()
        args, kwargs = run.call_args
        self.assertEqual(
            args[0],
            ["/usr/bin/fastly", "compute", "deploy", "--service-id", "compute-p1-e2-svc"],
        )
        self.assertEqual(kwargs["env"]["FASTLY_API_TOKEN"], "tok")
        self.assertEqual(kwargs["env"]["FASTLY_API_ENDPOINT"], "https://endpoint.test/api")
        self.assertEqual(kwargs["env"]["PATH"], "/usr/bin")
        self.assertTrue(kwargs["check"])

    def test_argument_vectors(self) -> None:
        which_patch, run_patch = self._run_with_binary()
        with which_patch, run_patch as run:
            self.fastly.build()
            self.fastly.serve()
            self.fastly.log_tail("svc")

        vectors = [c.args[0][1:] for c in run.call_args_list]
        self.assertEqual(
            vectors,
            [
                ["compute", "build", "--include-source"],
                ["compute", "serve"],
                ["log-tail", "--service-id", "svc"],
            ],
        )

    def test_binary_is_resolved_once(self) -> None:
        which_patch, run_patch = self._run_with_binary()
        with which_patch as which, run_patch:
            self.fastly.build()
            self.fastly.serve()
        which.assert_called_once_with("fastly")

    def test_unsafe_id_never_spawns(self) -> None:
        which_patch, run_patch = self._run_with_binary()
        with which_patch, run_patch as run:
            with self.assertRaises(InvalidServiceIdError):
                self.fastly.log_tail("a b")
        run.assert_not_called()

    def test_deploy_without_token_never_spawns(self) -> None:
        fastly = FastlyCli("", "https://endpoint.test", settings=_settings())
        which_patch, run_patch = self._run_with_binary()
        with which_patch, run_patch as run:
            with self.assertRaises(ConfigurationError):
                fastly.deploy("svc")
        run.assert_not_called()

    def test_non_zero_exit_propagates(self) -> None:
        which_patch, run_patch = self._run_with_binary()
        with which_patch, run_patch as run:
            run.side_effect = subprocess.CalledProcessError(3, ["fastly"])
            with self.assertRaises(subprocess.CalledProcessError):
                self.fastly.serve()

    def test_missing_binary(self) -> None:
        with mock.patch("adapters.fastly_cli.shutil.which", return_value=None):
            with self.assertRaises(FastlyCliNotFoundError):
                self.fastly.build()


if __name__ == "__main__":
    unittest.main()
