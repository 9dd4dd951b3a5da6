"""
Resume Data Structures

Defines the typed, read-only data model for a resume: the author and the
entities nested under it. Instances are produced by the validator and consumed
by the templating context; nothing mutates them after construction.

Dates are display strings, already canonicalized by the validator.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional, Tuple


@dataclass(frozen=True)
class Location:
    """Postal address of the author."""

    address: str
    postal_code: str
    city: str
    country_code: str
    region: str


@dataclass(frozen=True)
class Social:
    """
    Profile on a social network.

    Attributes:
        username: Handle on the network (e.g. "octocat")
        url: Canonical profile URL
    """

    username: str
    url: str


@dataclass(frozen=True)
class Company:
    name: str
    location: str


@dataclass(frozen=True)
class Experience:
    """
    Work experience entry.

    Attributes:
        company: Employer name and location
        department: Department or team
        position: Job title
        website: Employer website
        start_date: Canonical start date string
        end_date: Canonical end date string, None while ongoing
        current: Whether this is a current position
        highlights: Ordered accomplishment bullets
        display: Directives naming optional sub-fields the template should show
                 (e.g. "department", "website")
    """

    company: Company
    department: str
    position: str
    website: str
    start_date: str
    end_date: Optional[str]
    current: bool
    highlights: Tuple[str, ...] = ()
    display: Tuple[str, ...] = ()


@dataclass(frozen=True)
class GradePointAverage:
    """
    Grade point average.

    Attributes:
        overall: Cumulative GPA
        major: GPA within the major, when reported
    """

    overall: float
    major: Optional[float] = None


@dataclass(frozen=True)
class Education:
    """
    Education entry.

    Attributes:
        institution: School name
        website: School website
        major: Major field of study
        minor: Minor field of study
        start_date: Canonical start date string
        end_date: Canonical end date string, None while ongoing
        current: Whether the author is currently enrolled
        gpa: Grade point average
        achievements: Ordered list of awards and achievements
        location: School location
        degree: Degree earned (e.g. "Bachelor of Science")
        latin_honors: Latin honors (e.g. "magna cum laude"), None when not awarded
    """

    institution: str
    website: str
    major: str
    minor: str
    start_date: str
    end_date: Optional[str]
    current: bool
    gpa: GradePointAverage
    achievements: Tuple[str, ...]
    location: str
    degree: str
    latin_honors: Optional[str] = None


@dataclass(frozen=True)
class Skill:
    """
    Skill entry. Templates group skills by category.

    Attributes:
        name: Skill name
        level: Proficiency level (e.g. "Advanced")
        keywords: Free-text keywords
        category: Grouping key in the rendered document
    """

    name: str
    level: str
    keywords: str
    category: str


@dataclass(frozen=True)
class Project:
    name: str
    website: str
    source: str
    description: str


@dataclass(frozen=True)
class Author:
    """
    Root of the resume data model.

    Attributes:
        name: Full name
        email: Contact email
        description: Short professional description (e.g. "Software Engineer")
        picture: Path or URL of a portrait
        phone: Contact phone number
        website: Personal website
        summary: Free-text professional summary
        location: Postal address
        social: Read-only mapping of network name to profile (e.g. "github")
        experiences: Work experience in document order
        educations: Education in document order
        skills: Skills in document order
        projects: Projects in document order
    """

    name: str
    email: str
    description: str
    picture: str
    phone: str
    website: str
    summary: str
    location: Location
    social: Mapping[str, Social] = field(default_factory=lambda: MappingProxyType({}))
    experiences: Tuple[Experience, ...] = ()
    educations: Tuple[Education, ...] = ()
    skills: Tuple[Skill, ...] = ()
    projects: Tuple[Project, ...] = ()
