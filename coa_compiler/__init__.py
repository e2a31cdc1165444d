"""
COA Compiler - Source Package

Compiles a complete, validated Chart of Accounts and the posting rules
that drive it from a business's industry, country and size.

DESIGN PRINCIPLES:
1. Declarative templates in → immutable artifact out
2. Higher layers win: country > industry > base
3. Validation annotates, it never aborts
4. Every compilation step is logged
5. The template store is injected, never global
"""

from coa_compiler.orchestrator import COACompiler, create_compiler
from coa_compiler.resolver import CompilerError, ConfigurationError

__version__ = "1.0.0"
__author__ = "COA Compiler Team"

__all__ = [
    "COACompiler",
    "CompilerError",
    "ConfigurationError",
    "create_compiler",
]
