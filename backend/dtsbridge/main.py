"""
Main converter orchestrator.

Ties the parser, the translator and the emitter together for single sources,
files and batches of files.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from . import ts_ast
from .config_loader import ConverterConfig
from .emitter import KotlinEmitter
from .exceptions import TranslationError
from .models import PackagePart
from .parser import DeclarationParser
from .translator import ScopeConfig, translate
from .type_mapper import KotlinTypeMapper, TypeMapper

logger = logging.getLogger(__name__)

DECLARATION_SUFFIX = '.d.ts'


@dataclass
class ConversionResult:
    """One successfully converted file."""
    source: str
    output: Optional[str]
    declarations: int

    def to_dict(self) -> Dict[str, Any]:
        return {'source': self.source, 'output': self.output, 'declarations': self.declarations}


@dataclass
class ConversionFailure:
    """A file whose conversion raised a TranslationError."""
    source: str
    error_type: str
    message: str
    details: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_error(cls, source: str, error: TranslationError) -> 'ConversionFailure':
        report = error.to_dict()
        return cls(source, report['type'], report['message'], report['details'])

    def to_dict(self) -> Dict[str, Any]:
        return {
            'source': self.source,
            'type': self.error_type,
            'message': self.message,
            'details': self.details,
        }


@dataclass
class ConversionReport:
    """Outcome of a batch conversion."""
    results: List[ConversionResult] = field(default_factory=list)
    failures: List[ConversionFailure] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return not self.failures

    def to_dict(self) -> Dict[str, Any]:
        return {
            'converted': [r.to_dict() for r in self.results],
            'failed': [f.to_dict() for f in self.failures],
            'metadata': {
                'total_files': len(self.results) + len(self.failures),
                'converted_files': len(self.results),
                'failed_files': len(self.failures),
            }
        }


def _member_name(node) -> Optional[str]:
    name = getattr(node, 'name', None)
    return getattr(name, 'text', None)


class DeclarationConverter:
    """Converts TypeScript declaration files into Kotlin declarations."""

    def __init__(self, config: Optional[ConverterConfig] = None,
                 type_mapper: Optional[TypeMapper] = None):
        """Initialize the converter.

        Args:
            config: Converter settings; defaults apply when omitted
            type_mapper: Type mapper injected into every scope
        """
        self.config = config or ConverterConfig()
        self.type_mapper = type_mapper or KotlinTypeMapper()
        self.parser = DeclarationParser()
        self.scope_config = self._build_scope_config()

    def _build_scope_config(self) -> ScopeConfig:
        external_types = set(self.config.external_types)
        override_members = set(self.config.override_members)
        override_properties = set(self.config.override_properties)

        return ScopeConfig(
            type_mapper=self.type_mapper,
            is_own_declaration=lambda name: name.text not in external_types,
            is_override=lambda node: _member_name(node) in override_members,
            is_override_property=lambda node: _member_name(node) in override_properties,
        )

    def translate_statements(self, statements: List[ts_ast.Statement]) -> PackagePart:
        """Translate already parsed statements."""
        return translate(statements, self.scope_config, self.config.package_name)

    def convert_source(self, content: str, file_path: str = '<string>') -> str:
        """Convert declaration source text to Kotlin source text.

        Raises:
            TranslationError: if the source cannot be parsed or translated
        """
        statements = self.parser.parse(content, file_path)
        package_part = self.translate_statements(statements)
        return KotlinEmitter().emit(package_part)

    def output_path_for(self, source: Path) -> Path:
        """Place ``lib.d.ts`` as ``lib.d.kt`` in the output directory."""
        name = source.name
        if name.endswith('.ts'):
            name = name[:-len('.ts')]
        name += self.config.output_extension

        if self.config.output_dir:
            return Path(self.config.output_dir) / name
        return source.with_name(name)

    def convert_file(self, source: Union[str, Path], write: bool = True) -> ConversionResult:
        """Convert one file, writing the result next to it or into output_dir."""
        source = Path(source)
        logger.info(f"Converting {source}")

        statements = self.parser.parse_file(source)
        package_part = self.translate_statements(statements)
        text = KotlinEmitter().emit(package_part)

        output = None
        if write:
            output_path = self.output_path_for(source)
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_text(text, encoding='utf-8')
            output = str(output_path)
            logger.debug(f"Wrote {output}")

        return ConversionResult(str(source), output, len(package_part.members))

    def collect_sources(self, paths: Iterable[Union[str, Path]]) -> List[Path]:
        """Expand directories into the declaration files they contain."""
        sources = []
        for path in paths:
            path = Path(path)
            if path.is_dir():
                found = sorted(path.rglob(f"*{DECLARATION_SUFFIX}"))
                logger.debug(f"Found {len(found)} declaration files in {path}")
                sources.extend(found)
            else:
                sources.append(path)
        return sources

    def convert_paths(self, paths: Iterable[Union[str, Path]], write: bool = True) -> ConversionReport:
        """Convert files and directories; failures are reported, not raised."""
        report = ConversionReport()

        for source in self.collect_sources(paths):
            try:
                report.results.append(self.convert_file(source, write=write))
            except TranslationError as e:
                logger.error(f"Failed to convert {source}: {e.message}")
                report.failures.append(ConversionFailure.from_error(str(source), e))
                if self.config.fail_fast:
                    logger.info("Stopping at first failure (fail_fast)")
                    break
            except OSError as e:
                logger.error(f"Failed to read {source}: {e}")
                report.failures.append(ConversionFailure(str(source), type(e).__name__, str(e)))
                if self.config.fail_fast:
                    break

        logger.info(f"Converted {len(report.results)} files, {len(report.failures)} failed")
        return report
