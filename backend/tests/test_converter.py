"""
End-to-end tests: source text through parser, translator and emitter, plus
the batch driver and the command line.
"""

import pytest

from dtsbridge import cli
from dtsbridge.config_loader import ConverterConfig
from dtsbridge.main import DeclarationConverter


GOOD_SOURCE = '''
interface Shape {
    area: number;
}
declare var Shape: ShapeConstructor;
'''

BAD_SOURCE = 'declare var = ;\n'


@pytest.fixture
def converter():
    return DeclarationConverter(ConverterConfig(package_name='shapes'))


def test_interface_and_variable_merge_end_to_end(converter):
    assert converter.convert_source(GOOD_SOURCE) == (
        'package shapes\n'
        '\n'
        '@native\n'
        'interface Shape {\n'
        '    var area: Number\n'
        '    companion object : ShapeConstructor by noImpl\n'
        '}\n'
    )


def test_accessors_end_to_end(converter):
    text = converter.convert_source('''
        declare class Box {
            get size(): number;
            get label(): string;
            set label(v: string);
        }
    ''')

    assert 'val size: Number = noImpl' in text
    assert 'var label: String = noImpl' in text
    assert 'fun ' not in text


def test_overloads_end_to_end(converter):
    text = converter.convert_source('''
        declare function f(a: number): void;
        declare function f(a: string): void;
        declare function f(a: boolean): void;
    ''')

    assert text.count('fun f(') == 3


def test_external_types_become_extensions():
    converter = DeclarationConverter(ConverterConfig(external_types=['Array']))
    text = converter.convert_source('interface Array<T> { shuffle(): void; }')

    assert text == '@native\nfun <T> Array<T>.shuffle(): Unit = noImpl\n'


def test_override_members_from_config():
    converter = DeclarationConverter(ConverterConfig(override_members=['toString']))
    text = converter.convert_source('interface Named { toString(): string; }')

    assert '    override fun toString(): String\n' in text


def test_namespace_end_to_end(converter):
    text = converter.convert_source('declare namespace N.M { export var v: number; }')

    assert text == (
        'package shapes\n'
        '\n'
        '@module\n'
        'object N {\n'
        '    @module\n'
        '    object M {\n'
        '        var v: Number = noImpl\n'
        '    }\n'
        '}\n'
    )


def test_output_path(tmp_path):
    converter = DeclarationConverter(ConverterConfig(output_dir=str(tmp_path / 'out')))
    assert converter.output_path_for(tmp_path / 'lib.d.ts') == tmp_path / 'out' / 'lib.d.kt'

    in_place = DeclarationConverter()
    assert in_place.output_path_for(tmp_path / 'lib.d.ts') == tmp_path / 'lib.d.kt'


def write_sources(directory):
    directory.mkdir()
    (directory / 'bad.d.ts').write_text(BAD_SOURCE, encoding='utf-8')
    (directory / 'good.d.ts').write_text(GOOD_SOURCE, encoding='utf-8')
    (directory / 'notes.txt').write_text('not a declaration file', encoding='utf-8')


def test_batch_reports_failures_and_continues(tmp_path):
    write_sources(tmp_path / 'typings')
    out = tmp_path / 'out'
    converter = DeclarationConverter(ConverterConfig(output_dir=str(out)))

    report = converter.convert_paths([tmp_path / 'typings'])

    assert not report.succeeded
    assert [r.source.endswith('good.d.ts') for r in report.results] == [True]
    [failure] = report.failures
    assert failure.error_type == 'ParsingError'
    assert (out / 'good.d.kt').read_text(encoding='utf-8').startswith('@native\ninterface Shape')
    assert report.to_dict()['metadata'] == {'total_files': 2, 'converted_files': 1, 'failed_files': 1}


def test_batch_fail_fast(tmp_path):
    write_sources(tmp_path / 'typings')
    converter = DeclarationConverter(ConverterConfig(fail_fast=True))

    report = converter.convert_paths([tmp_path / 'typings'], write=False)

    assert report.results == []
    assert len(report.failures) == 1


def test_missing_file_is_reported(tmp_path):
    report = DeclarationConverter().convert_paths([tmp_path / 'absent.d.ts'], write=False)

    assert report.failures[0].error_type == 'FileNotFoundError'


class TestCommandLine:

    @pytest.fixture(autouse=True)
    def quiet_logging(self, monkeypatch, tmp_path):
        monkeypatch.setattr(cli, 'setup_logging', lambda *args, **kwargs: None)
        monkeypatch.delenv('DTSBRIDGE_OUTPUT_DIR', raising=False)
        monkeypatch.chdir(tmp_path)

    def test_success_exit_code(self, tmp_path):
        (tmp_path / 'lib.d.ts').write_text('declare var x: number;\n', encoding='utf-8')

        code = cli.main(['lib.d.ts', '-o', 'out', '--package', 'lib'])

        assert code == 0
        assert (tmp_path / 'out' / 'lib.d.kt').read_text(encoding='utf-8').startswith('package lib\n')

    def test_failure_exit_code(self, tmp_path, capsys):
        write_sources(tmp_path / 'typings')

        code = cli.main(['typings', '-o', 'out'])

        assert code == 1
        assert 'bad.d.ts: ParsingError' in capsys.readouterr().err

    def test_config_file_option(self, tmp_path):
        (tmp_path / 'custom.yaml').write_text('package_name: fromconfig\noutput_dir: generated\n')
        (tmp_path / 'lib.d.ts').write_text('declare var x: number;\n', encoding='utf-8')

        assert cli.main(['lib.d.ts', '--config', 'custom.yaml']) == 0
        assert (tmp_path / 'generated' / 'lib.d.kt').read_text(encoding='utf-8').startswith('package fromconfig')

    def test_bad_config_file(self, tmp_path):
        (tmp_path / 'broken.json').write_text('{')
        assert cli.main(['--config', 'broken.json']) == 2
