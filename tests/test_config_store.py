import json
import tempfile
import unittest
from pathlib import Path

from core.config import CONFIG_ORG, CONFIG_PROGRAM
from core.config_store import ConfigStore
from core.errors import ConfigStoreError


class ConfigStoreTests(unittest.TestCase):
    def setUp(self) -> None:
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        self.base = Path(tmp.name)
        self.store = ConfigStore(self.base / "global" / "aio", self.base / "project" / ".aio")

    def test_missing_files_read_as_none(self) -> None:
        self.assertIsNone(self.store.get(CONFIG_PROGRAM))

    def test_local_write_is_not_global(self) -> None:
        self.store.set(CONFIG_PROGRAM, "123", local=True)

        self.assertEqual(self.store.get(CONFIG_PROGRAM), "123")
        self.assertEqual(self.store.get(CONFIG_PROGRAM, source="local"), "123")
        self.assertIsNone(self.store.get(CONFIG_PROGRAM, source="global"))
        self.assertFalse(self.store.global_path.exists())

    def test_local_overrides_global(self) -> None:
        self.store.set(CONFIG_ORG, "global-org@AdobeOrg")
        self.store.set(CONFIG_ORG, "local-org@AdobeOrg", local=True)

        self.assertEqual(self.store.get(CONFIG_ORG), "local-org@AdobeOrg")
        self.assertEqual(self.store.get(CONFIG_ORG, source="global"), "global-org@AdobeOrg")

    def test_none_removes_key(self) -> None:
        self.store.set(CONFIG_PROGRAM, "123")
        self.store.set(CONFIG_PROGRAM, None)
        self.assertIsNone(self.store.get(CONFIG_PROGRAM))

    def test_dotted_keys_are_nested(self) -> None:
        self.store.set("console.org.code", "abc@AdobeOrg")
        self.store.set("console.org.name", "ACME")

        saved = json.loads(self.store.global_path.read_text(encoding="utf-8"))
        self.assertEqual(saved["console"]["org"], {"code": "abc@AdobeOrg", "name": "ACME"})
        self.assertEqual(self.store.get("console.org.code"), "abc@AdobeOrg")
        self.assertEqual(self.store.get("console.org"), {"code": "abc@AdobeOrg", "name": "ACME"})

    def test_existing_content_is_kept(self) -> None:
        self.store.global_path.parent.mkdir(parents=True)
        self.store.global_path.write_text('{"ims": {"config": {"current": "cli"}}}', encoding="utf-8")

        self.store.set(CONFIG_PROGRAM, "7")

        self.assertEqual(self.store.get("ims.config.current"), "cli")
        self.assertEqual(self.store.get(CONFIG_PROGRAM), "7")

    def test_invalid_json_raises(self) -> None:
        self.store.local_path.parent.mkdir(parents=True)
        self.store.local_path.write_text("{not json", encoding="utf-8")
        with self.assertRaises(ConfigStoreError):
            self.store.get(CONFIG_PROGRAM)


if __name__ == "__main__":
    unittest.main()
