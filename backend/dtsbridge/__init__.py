"""
dtsbridge

Translates TypeScript ambient declaration files into Kotlin declarations,
merging same-named TypeScript declarations along the way.
"""

from .models import (
    Annotation, Argument, ClassKind, Classifier, EnumEntry, Function, Member,
    PackagePart, TypeAlias, Variable,
)
from .translator import ScopeConfig, translate, translate_scope
from .parser import DeclarationParser
from .emitter import KotlinEmitter
from .config_loader import ConfigLoader, ConverterConfig
from .main import DeclarationConverter, ConversionReport

__all__ = [
    'Annotation', 'Argument', 'ClassKind', 'Classifier', 'EnumEntry', 'Function',
    'Member', 'PackagePart', 'TypeAlias', 'Variable',
    'ScopeConfig', 'translate', 'translate_scope',
    'DeclarationParser', 'KotlinEmitter', 'ConfigLoader', 'ConverterConfig',
    'DeclarationConverter', 'ConversionReport',
]
