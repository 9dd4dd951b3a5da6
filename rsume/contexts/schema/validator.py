"""
Resume Validator

Converts a raw nested document (as loaded from TOML or YAML) into a read-only
Author instance. Guarantees structural correctness only: required fields are
present, types match, dates parse. Semantic oddities such as a current position
that also has an end date are logged, not rejected.

Field paths in errors use dotted/indexed notation, e.g. 'experiences[0].company.name'.
"""

import math
import re
from collections.abc import Mapping
from dataclasses import fields
from datetime import date, datetime, time
from types import MappingProxyType
from typing import Any, List, Optional, Tuple

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
from rsume.contexts.schema.logger import _log_debug, _log_info, _log_warning
from rsume.exceptions import (
    InvalidTypeError,
    InvalidValueError,
    MalformedDateError,
    MissingFieldError,
)

# Month-precision dates ("2021-03") are common in resumes and kept verbatim
YEAR_MONTH_PATTERN = re.compile(r"^\d{4}-(0[1-9]|1[0-2])$")

# Keys from older schema versions, accepted and dropped
LEGACY_FIELDS = {"course"}


def _join(path: str, key: str) -> str:
    return f"{path}.{key}" if path else key


def canonical_date(value: Any, field_path: str = "") -> str:
    """
    Convert a date-like input value into its canonical display string.

    This is the only place date formatting is decided. TOML yields native
    date/datetime/time objects; YAML (via OmegaConf) yields strings, which are
    parsed and re-serialized so both formats produce identical output.

    Args:
        value: date, datetime, time, or ISO 8601 string
        field_path: Location of the field, used in error messages

    Returns:
        ISO 8601 string (e.g. "2021-03-04", "2021-03-04T09:30:00"),
        or "YYYY-MM" for month-precision strings

    Raises:
        MalformedDateError: If a string cannot be parsed as a date
        InvalidTypeError: If the value is not date-like at all

    Example:
        >>> canonical_date(date(2021, 3, 4))
        '2021-03-04'
        >>> canonical_date("2021-03")
        '2021-03'
    """
    # datetime subclasses date, so it must be checked first
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, (date, time)):
        return value.isoformat()
    if isinstance(value, str):
        text = value.strip()
        if YEAR_MONTH_PATTERN.match(text):
            return text
        try:
            return date.fromisoformat(text).isoformat()
        except ValueError:
            pass
        try:
            return datetime.fromisoformat(text).isoformat()
        except ValueError:
            raise MalformedDateError(field_path, value) from None
    raise InvalidTypeError(field_path, "date", value)


def _require(data: Mapping, key: str, path: str) -> Any:
    value = data.get(key)
    if value is None:
        raise MissingFieldError(_join(path, key))
    return value


def _str(data: Mapping, key: str, path: str) -> str:
    value = _require(data, key, path)
    if not isinstance(value, str):
        raise InvalidTypeError(_join(path, key), "string", value)
    return value


def _optional_str(data: Mapping, key: str, path: str) -> Optional[str]:
    """Optional string field; blank strings normalize to None."""
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise InvalidTypeError(_join(path, key), "string", value)
    return value.strip() or None


def _bool(data: Mapping, key: str, path: str) -> bool:
    value = _require(data, key, path)
    if not isinstance(value, bool):
        raise InvalidTypeError(_join(path, key), "boolean", value)
    return value


def _number(value: Any, field_path: str) -> float:
    # bool is an int subclass but never a meaningful GPA
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidTypeError(field_path, "number", value)
    value = float(value)
    if not math.isfinite(value):
        raise InvalidValueError(field_path, "must be a finite number")
    if value < 0:
        raise InvalidValueError(field_path, "must not be negative")
    return value


def _date(data: Mapping, key: str, path: str) -> str:
    return canonical_date(_require(data, key, path), _join(path, key))


def _optional_date(data: Mapping, key: str, path: str) -> Optional[str]:
    """Optional date field; absent, null and empty values all mean 'no date'."""
    value = data.get(key)
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return canonical_date(value, _join(path, key))


def _str_list(data: Mapping, key: str, path: str, required: bool = True) -> Tuple[str, ...]:
    field_path = _join(path, key)
    if required:
        value = _require(data, key, path)
    else:
        value = data.get(key)
        if value is None:
            return ()
    if not isinstance(value, (list, tuple)):
        raise InvalidTypeError(field_path, "list of strings", value)
    for i, item in enumerate(value):
        if not isinstance(item, str):
            raise InvalidTypeError(f"{field_path}[{i}]", "string", item)
    return tuple(value)


def _table(data: Mapping, key: str, path: str) -> Mapping:
    value = _require(data, key, path)
    if not isinstance(value, Mapping):
        raise InvalidTypeError(_join(path, key), "table", value)
    return value


def _table_list(data: Mapping, key: str, path: str) -> List[Tuple[Mapping, str]]:
    """Optional list of tables, returned with each item's field path."""
    field_path = _join(path, key)
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, (list, tuple)):
        raise InvalidTypeError(field_path, "list of tables", value)
    items = []
    for i, item in enumerate(value):
        item_path = f"{field_path}[{i}]"
        if not isinstance(item, Mapping):
            raise InvalidTypeError(item_path, "table", item)
        items.append((item, item_path))
    return items


def _warn_unknown_fields(data: Mapping, entity: type, path: str) -> None:
    known = {f.name for f in fields(entity)}
    for key in data:
        if key in known:
            continue
        if key in LEGACY_FIELDS:
            _log_warning(f"{_join(path, str(key))}: legacy field ignored")
        else:
            _log_warning(f"{_join(path, str(key))}: unknown field ignored")


def _warn_inconsistent_dates(current: bool, end_date: Optional[str], path: str) -> None:
    if current and end_date is not None:
        _log_warning(f"{path}: marked current but has end_date {end_date}")
    elif not current and end_date is None:
        _log_warning(f"{path}: not marked current but has no end_date")


def parse_location(data: Mapping, path: str) -> Location:
    _warn_unknown_fields(data, Location, path)
    return Location(
        address=_str(data, "address", path),
        postal_code=_str(data, "postal_code", path),
        city=_str(data, "city", path),
        country_code=_str(data, "country_code", path),
        region=_str(data, "region", path),
    )


def parse_social(data: Mapping, path: str) -> Social:
    _warn_unknown_fields(data, Social, path)
    return Social(username=_str(data, "username", path), url=_str(data, "url", path))


def parse_company(data: Mapping, path: str) -> Company:
    _warn_unknown_fields(data, Company, path)
    return Company(name=_str(data, "name", path), location=_str(data, "location", path))


def parse_experience(data: Mapping, path: str) -> Experience:
    _warn_unknown_fields(data, Experience, path)
    current = _bool(data, "current", path)
    end_date = _optional_date(data, "end_date", path)
    _warn_inconsistent_dates(current, end_date, path)

    return Experience(
        company=parse_company(_table(data, "company", path), _join(path, "company")),
        department=_str(data, "department", path),
        position=_str(data, "position", path),
        website=_str(data, "website", path),
        start_date=_date(data, "start_date", path),
        end_date=end_date,
        current=current,
        highlights=_str_list(data, "highlights", path),
        display=_str_list(data, "display", path, required=False),
    )


def parse_gpa(value: Any, field_path: str) -> GradePointAverage:
    """
    Parse a GPA into the structured representation.

    Accepts a table with 'overall' (required) and 'major' (optional), or a bare
    number from the older flat schema, which becomes the overall GPA.
    """
    if isinstance(value, Mapping):
        _warn_unknown_fields(value, GradePointAverage, field_path)
        major = value.get("major")
        return GradePointAverage(
            overall=_number(_require(value, "overall", field_path), _join(field_path, "overall")),
            major=None if major is None else _number(major, _join(field_path, "major")),
        )

    _log_debug(f"{field_path}: scalar GPA migrated to overall GPA")
    return GradePointAverage(overall=_number(value, field_path))


def parse_education(data: Mapping, path: str) -> Education:
    _warn_unknown_fields(data, Education, path)
    current = _bool(data, "current", path)
    end_date = _optional_date(data, "end_date", path)
    _warn_inconsistent_dates(current, end_date, path)

    return Education(
        institution=_str(data, "institution", path),
        website=_str(data, "website", path),
        major=_str(data, "major", path),
        minor=_str(data, "minor", path),
        start_date=_date(data, "start_date", path),
        end_date=end_date,
        current=current,
        gpa=parse_gpa(_require(data, "gpa", path), _join(path, "gpa")),
        achievements=_str_list(data, "achievements", path),
        location=_str(data, "location", path),
        degree=_str(data, "degree", path),
        latin_honors=_optional_str(data, "latin_honors", path),
    )


def parse_skill(data: Mapping, path: str) -> Skill:
    _warn_unknown_fields(data, Skill, path)
    return Skill(
        name=_str(data, "name", path),
        level=_str(data, "level", path),
        keywords=_str(data, "keywords", path),
        category=_str(data, "category", path),
    )


def parse_project(data: Mapping, path: str) -> Project:
    _warn_unknown_fields(data, Project, path)
    return Project(
        name=_str(data, "name", path),
        website=_str(data, "website", path),
        source=_str(data, "source", path),
        description=_str(data, "description", path),
    )


def _parse_social_networks(data: Mapping) -> Mapping[str, Social]:
    value = data.get("social")
    if value is None:
        return MappingProxyType({})
    if not isinstance(value, Mapping):
        raise InvalidTypeError("social", "table", value)

    networks = {}
    for network, profile in value.items():
        field_path = f"social.{network}"
        if not isinstance(profile, Mapping):
            raise InvalidTypeError(field_path, "table", profile)
        networks[str(network)] = parse_social(profile, field_path)
    return MappingProxyType(networks)


def validate_author(raw: Any) -> Author:
    """
    Validate a raw resume document and build the Author data model.

    Args:
        raw: Nested mapping loaded from the data file

    Returns:
        Fully populated, read-only Author

    Raises:
        SchemaError: On any structural mismatch. Subclasses identify the cause:
            MissingFieldError, InvalidTypeError, MalformedDateError, InvalidValueError

    Example:
        >>> author = validate_author(tomllib.loads(path.read_text()))
        >>> author.experiences[0].start_date
        '2021-03-01'
    """
    if not isinstance(raw, Mapping):
        raise InvalidTypeError("", "table", raw)

    _warn_unknown_fields(raw, Author, "")

    author = Author(
        name=_str(raw, "name", ""),
        email=_str(raw, "email", ""),
        description=_str(raw, "description", ""),
        picture=_str(raw, "picture", ""),
        phone=_str(raw, "phone", ""),
        website=_str(raw, "website", ""),
        summary=_str(raw, "summary", ""),
        location=parse_location(_table(raw, "location", ""), "location"),
        social=_parse_social_networks(raw),
        experiences=tuple(parse_experience(item, p) for item, p in _table_list(raw, "experiences", "")),
        educations=tuple(parse_education(item, p) for item, p in _table_list(raw, "educations", "")),
        skills=tuple(parse_skill(item, p) for item, p in _table_list(raw, "skills", "")),
        projects=tuple(parse_project(item, p) for item, p in _table_list(raw, "projects", "")),
    )

    _log_info(
        f"Validated resume for {author.name}: {len(author.experiences)} experiences, "
        f"{len(author.educations)} educations, {len(author.skills)} skills, "
        f"{len(author.projects)} projects"
    )
    return author
