"""
Tests for configuration loading and logging setup.
"""

import json
import logging
import logging.handlers

import pytest

from dtsbridge.config import get_config, setup_logging
from dtsbridge.config_loader import ConfigLoader, ConverterConfig
from dtsbridge.exceptions import ConfigurationError


def test_defaults_without_config_file(tmp_path):
    config = ConfigLoader.load(tmp_path)

    assert config == ConverterConfig()
    assert config.output_extension == '.kt'
    assert config.fail_fast is False


def test_yaml_config(tmp_path):
    (tmp_path / '.dtsbridge.yaml').write_text(
        'package_name: lib\n'
        'external_types:\n'
        '  - Array\n'
        '  - String\n'
        'fail_fast: true\n'
    )

    config = ConfigLoader.load(tmp_path)

    assert config.package_name == 'lib'
    assert config.external_types == ['Array', 'String']
    assert config.fail_fast is True


def test_json_config_ignores_unknown_keys(tmp_path):
    (tmp_path / '.dtsbridge.json').write_text(json.dumps({
        'output_dir': 'out',
        'override_members': ['toString'],
        'colour': 'blue',
    }))

    config = ConfigLoader.load(tmp_path)

    assert config.output_dir == 'out'
    assert config.override_members == ['toString']
    assert 'colour' not in config.to_dict()


def test_yaml_takes_precedence_over_json(tmp_path):
    (tmp_path / '.dtsbridge.json').write_text('{"package_name": "from_json"}')
    (tmp_path / '.dtsbridge.yml').write_text('package_name: from_yaml\n')

    assert ConfigLoader.load(tmp_path).package_name == 'from_yaml'


def test_malformed_file_raises(tmp_path):
    path = tmp_path / 'broken.json'
    path.write_text('{not json')

    with pytest.raises(ConfigurationError) as excinfo:
        ConfigLoader.load_file(path)

    assert excinfo.value.details['config_file'] == str(path)


def test_missing_file_raises(tmp_path):
    with pytest.raises(ConfigurationError):
        ConfigLoader.load_file(tmp_path / 'absent.yaml')


def test_non_mapping_raises(tmp_path):
    path = tmp_path / 'list.yaml'
    path.write_text('- a\n- b\n')

    with pytest.raises(ConfigurationError):
        ConfigLoader.load_file(path)


def test_environment_config(monkeypatch):
    monkeypatch.setenv('DTSBRIDGE_LOG_LEVEL', 'DEBUG')
    monkeypatch.setenv('DTSBRIDGE_OUTPUT_DIR', 'generated')
    monkeypatch.delenv('DTSBRIDGE_LOG_FILE', raising=False)

    config = get_config()

    assert config['LOG_LEVEL'] == 'DEBUG'
    assert config['OUTPUT_DIR'] == 'generated'
    assert config['LOG_FILE'] is None


@pytest.fixture
def root_logger():
    root = logging.getLogger()
    saved = root.handlers[:], root.level
    yield root
    for handler in root.handlers[:]:
        if handler not in saved[0]:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(saved[1])


def test_setup_logging_with_file(tmp_path, root_logger):
    log_file = tmp_path / 'logs' / 'dtsbridge.log'

    logger = setup_logging('warning', str(log_file))

    assert logger.name == 'dtsbridge'
    assert root_logger.level == logging.WARNING
    assert log_file.parent.is_dir()
    assert any(isinstance(h, logging.handlers.RotatingFileHandler) for h in root_logger.handlers)


def test_setup_logging_replaces_only_its_own_handlers(root_logger):
    foreign = logging.NullHandler()
    root_logger.addHandler(foreign)

    setup_logging('info')
    count = len(root_logger.handlers)
    setup_logging('debug')

    assert foreign in root_logger.handlers
    assert len(root_logger.handlers) == count
    assert root_logger.level == logging.DEBUG
