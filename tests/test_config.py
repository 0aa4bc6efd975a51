"""
Unit tests for gbulk.config module
"""
import json
import logging
import os
import shutil
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from gbulk.config import (
    apply_env_overrides,
    configure_logging,
    get_config_path,
    get_default_config,
    load_config,
    merge_configs,
)
from gbulk.exit_codes import CONFIG_ERROR, ConfigError


class TestConfigManagement(unittest.TestCase):
    """Test configuration loading"""

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.env = patch.dict(os.environ, {'HOME': self.temp_dir})
        self.env.start()
        for key in [k for k in os.environ if k.startswith('GBULK_')]:
            del os.environ[key]

    def tearDown(self):
        self.env.stop()
        shutil.rmtree(self.temp_dir)

    def write(self, name, content):
        path = Path(self.temp_dir) / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
        return path

    def test_get_default_config(self):
        config = get_default_config()

        self.assertEqual(config['pull']['fallback_branches'], ['develop', 'main', 'master'])
        self.assertEqual(config['pull']['remote'], 'origin')
        self.assertFalse(config['pull']['auto_confirm'])
        self.assertEqual(config['submodules']['default_branch'], 'main')
        self.assertEqual(config['discovery']['exclude_directories'], ['node_modules'])
        self.assertIn('logging', config)

    def test_defaults_without_file(self):
        self.assertEqual(load_config(), get_default_config())

    def test_default_path_in_home(self):
        self.assertEqual(get_config_path(), Path(self.temp_dir) / '.gbulk' / 'config.json')

    def test_yaml_file_in_home(self):
        self.write('.gbulk/config.yaml', "pull:\n  remote: upstream\n")

        config = load_config()

        self.assertEqual(config['pull']['remote'], 'upstream')
        # Untouched keys keep their defaults
        self.assertEqual(config['pull']['fallback_branches'], ['develop', 'main', 'master'])

    def test_toml_file_from_env(self):
        path = self.write('custom.toml', '[submodules]\ndefault_branch = "develop"\n')
        os.environ['GBULK_CONFIG'] = str(path)

        self.assertEqual(load_config()['submodules']['default_branch'], 'develop')

    def test_json_file_from_env(self):
        path = self.write('custom.json', json.dumps({'general': {'max_workers': 4}}))
        os.environ['GBULK_CONFIG'] = str(path)

        self.assertEqual(load_config()['general']['max_workers'], 4)

    def test_missing_explicit_file(self):
        os.environ['GBULK_CONFIG'] = str(Path(self.temp_dir) / 'missing.json')

        with self.assertRaises(ConfigError) as ctx:
            load_config()
        self.assertEqual(ctx.exception.exit_code, CONFIG_ERROR)
        self.assertIn('missing.json', str(ctx.exception))

    def test_unparseable_file(self):
        self.write('.gbulk/config.json', '{not json')

        with self.assertRaises(ConfigError):
            load_config()

    def test_non_mapping_file(self):
        self.write('.gbulk/config.yaml', "- just\n- a list\n")

        with self.assertRaises(ConfigError):
            load_config()

    def test_env_overrides(self):
        os.environ['GBULK_PULL_AUTO_CONFIRM'] = 'yes'
        os.environ['GBULK_GIT_TIMEOUT'] = '30'
        os.environ['GBULK_PULL_FALLBACK_BRANCHES'] = 'trunk, main'
        os.environ['GBULK_UNKNOWN_SETTING'] = 'ignored'

        config = load_config()

        self.assertIs(config['pull']['auto_confirm'], True)
        self.assertEqual(config['git']['timeout'], 30)
        self.assertEqual(config['pull']['fallback_branches'], ['trunk', 'main'])
        self.assertNotIn('unknown', config)

    def test_env_beats_file(self):
        self.write('.gbulk/config.json', json.dumps({'pull': {'remote': 'upstream'}}))
        os.environ['GBULK_PULL_REMOTE'] = 'mirror'

        self.assertEqual(load_config()['pull']['remote'], 'mirror')


class TestMergeConfigs(unittest.TestCase):

    def test_nested_merge(self):
        base = {'a': {'x': 1, 'y': 2}, 'b': 1}
        merged = merge_configs(base, {'a': {'y': 3}, 'c': 4})

        self.assertEqual(merged, {'a': {'x': 1, 'y': 3}, 'b': 1, 'c': 4})
        self.assertEqual(base['a']['y'], 2)

    def test_apply_env_overrides_ignores_config_path(self):
        config = {'config': 'unchanged'}
        with patch.dict(os.environ, {'GBULK_CONFIG': '/tmp/x.json'}):
            self.assertEqual(apply_env_overrides(config), {'config': 'unchanged'})


class TestConfigureLogging(unittest.TestCase):

    def tearDown(self):
        logging.basicConfig(level=logging.WARNING, force=True)

    def test_level_from_config(self):
        config = get_default_config()
        config['logging']['level'] = 'info'

        configure_logging(config)

        self.assertEqual(logging.getLogger().level, logging.INFO)

    def test_debug_flag_wins(self):
        configure_logging(get_default_config(), debug=True)

        self.assertEqual(logging.getLogger().level, logging.DEBUG)
