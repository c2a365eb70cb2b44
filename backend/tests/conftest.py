"""
Shared pytest configuration for the dtsbridge tests.
"""

import sys
from pathlib import Path

import pytest

# Add backend directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from dtsbridge.parser import DeclarationParser


@pytest.fixture(scope='session')
def parser():
    """One tree-sitter backed parser for the whole session."""
    return DeclarationParser()


@pytest.fixture
def parse(parser):
    """Parse inline declaration source into ts_ast statements."""
    def _parse(source: str):
        return parser.parse(source, 'test.d.ts')
    return _parse
