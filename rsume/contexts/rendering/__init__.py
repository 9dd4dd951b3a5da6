"""
Rendering Context

Responsibilities:
- Compiles rendered LaTeX to PDF or DVI with an external engine
- Resolves relative includes against a configured filesystem root
- Parses engine logs into errors and warnings

Owns: LaTeX compilation, engine diagnostics
Never: Modifies template content
"""

from rsume.contexts.rendering.compiler import (
    CompilationResult,
    CompilerConfig,
    compile_latex,
)

__all__ = ["CompilationResult", "CompilerConfig", "compile_latex"]
