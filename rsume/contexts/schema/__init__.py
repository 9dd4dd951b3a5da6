"""
Schema Context

Responsibilities:
- Defines the read-only resume data model (Author and nested entities)
- Loads TOML/YAML data files into raw documents
- Validates raw documents and normalizes dates, GPA and optional fields

Owns: Resume data model, data file loading, validation
Never: Knows about templates or LaTeX
"""

from rsume.contexts.schema.data_structures import (
    Author,
    Company,
    Education,
    Experience,
    GradePointAverage,
    Location,
    Project,
    Skill,
    Social,
)
from rsume.contexts.schema.loader import load_data_file
from rsume.contexts.schema.validator import canonical_date, validate_author

__all__ = [
    # Data structure classes
    "Author",
    "Company",
    "Education",
    "Experience",
    "GradePointAverage",
    "Location",
    "Project",
    "Skill",
    "Social",
    # Loading and validation
    "load_data_file",
    "validate_author",
    "canonical_date",
]
