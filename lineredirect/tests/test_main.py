import os
import shutil
import tempfile
import unittest
from unittest import mock

import yaml

import lineredirect.lib.config as cfg
from lineredirect import main as main_module


class MainTest(unittest.TestCase):

    def setUp(self):
        self.tmp_dir = tempfile.mkdtemp()
        self.logger = mock.MagicMock()
        patcher = mock.patch.object(main_module, "get_logger", return_value=self.logger)
        patcher.start()
        self.addCleanup(patcher.stop)

    def tearDown(self):
        shutil.rmtree(self.tmp_dir)

    def run_main(self, configs) -> int:
        path = os.path.join(self.tmp_dir, "config.yaml")
        with open(path, "w") as fh:
            yaml.dump(configs, fh)
        with mock.patch.dict(os.environ, {cfg.CONFIG_ENV_VAR_KEY: path}):
            return main_module.main()

    def test_successful_command(self):
        self.assertEqual(0, self.run_main({"command": "echo", "args": ["hi"], "encoding": "utf-8"}))
        bound = self.logger.bind.return_value
        bound.info.assert_any_call("hi")

    def test_failing_command(self):
        self.assertEqual(1, self.run_main({"command": "exit 2"}))

    def test_invalid_config(self):
        self.assertEqual(1, self.run_main({"args": ["no command"]}))
        self.logger.exception.assert_called_once()

    def test_missing_config_env_var(self):
        with mock.patch.dict(os.environ, {}, clear=True):
            self.assertEqual(1, main_module.main())
        self.logger.exception.assert_called_once()
