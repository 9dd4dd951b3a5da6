"""
rsume - structured resume data to typeset documents

Loads a resume data file (TOML or YAML), validates it against a typed data
model, renders it through a LaTeX template, and compiles the result to PDF.

Architecture:
- Schema Context: Resume data model, loading, validation and normalization
- Templating Context: Template context construction, LaTeX escaping, rendering
- Rendering Context: LaTeX compilation and output management
"""

__version__ = "0.1.0"
