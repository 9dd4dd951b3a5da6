"""
Template Context Builder

Maps the validated resume data model onto a plain tree of dicts, lists and
scalars for the template engine. One explicit function per entity keeps the
mapping exhaustive: every dataclass field becomes exactly one key with the same
name. Nothing is renamed, dropped or computed here.
"""

from typing import Any, Dict, Optional

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


def location_context(location: Location) -> Dict[str, Any]:
    return {
        "address": location.address,
        "postal_code": location.postal_code,
        "city": location.city,
        "country_code": location.country_code,
        "region": location.region,
    }


def social_context(social: Social) -> Dict[str, Any]:
    return {"username": social.username, "url": social.url}


def company_context(company: Company) -> Dict[str, Any]:
    return {"name": company.name, "location": company.location}


def experience_context(experience: Experience) -> Dict[str, Any]:
    return {
        "company": company_context(experience.company),
        "department": experience.department,
        "position": experience.position,
        "website": experience.website,
        "start_date": experience.start_date,
        "end_date": experience.end_date,
        "current": experience.current,
        "highlights": list(experience.highlights),
        "display": list(experience.display),
    }


def gpa_context(gpa: GradePointAverage) -> Dict[str, Optional[float]]:
    return {"overall": gpa.overall, "major": gpa.major}


def education_context(education: Education) -> Dict[str, Any]:
    return {
        "institution": education.institution,
        "website": education.website,
        "major": education.major,
        "minor": education.minor,
        "start_date": education.start_date,
        "end_date": education.end_date,
        "current": education.current,
        "gpa": gpa_context(education.gpa),
        "achievements": list(education.achievements),
        "location": education.location,
        "degree": education.degree,
        "latin_honors": education.latin_honors,
    }


def skill_context(skill: Skill) -> Dict[str, Any]:
    return {
        "name": skill.name,
        "level": skill.level,
        "keywords": skill.keywords,
        "category": skill.category,
    }


def project_context(project: Project) -> Dict[str, Any]:
    return {
        "name": project.name,
        "website": project.website,
        "source": project.source,
        "description": project.description,
    }


def author_context(author: Author) -> Dict[str, Any]:
    """Map an Author and everything nested under it to a plain dict tree."""
    return {
        "name": author.name,
        "email": author.email,
        "description": author.description,
        "picture": author.picture,
        "phone": author.phone,
        "website": author.website,
        "summary": author.summary,
        "location": location_context(author.location),
        "social": {network: social_context(profile) for network, profile in author.social.items()},
        "experiences": [experience_context(e) for e in author.experiences],
        "educations": [education_context(e) for e in author.educations],
        "skills": [skill_context(s) for s in author.skills],
        "projects": [project_context(p) for p in author.projects],
    }


def build_context(author: Author) -> Dict[str, Any]:
    """
    Build the template rendering context for a resume.

    Author fields are exposed at the top level so templates reference them
    directly (e.g. `<<< name | latex_escape >>>`, `<%% for e in experiences %%>`).

    Args:
        author: Validated resume data model (not modified)

    Returns:
        Fresh dict tree safe for the template engine to consume
    """
    return author_context(author)
