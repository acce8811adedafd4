from __future__ import annotations

import logging
import re

from django.conf import settings
from django.db import IntegrityError
from django.utils import timezone

from apps.core.colleges.models import (
    DEFAULT_STUDENT_ID_FORMAT,
    DEFAULT_STUDENT_ID_PREFIX,
    SEQUENCE_PLACEHOLDERS,
    College,
)

from .models import Student


logger = logging.getLogger(__name__)

UNIQUE_VIOLATION = '23505'
TRAILING_SEQUENCE_RE = re.compile(r'\d{4,5}$')
PLACEHOLDER_RE = re.compile(r'(\{prefix\}|\{year\}|\{sequence:D4\}|\{sequence:D5\})')


class StudentIdAllocationError(Exception):
    pass


class StudentIdNotConfigured(StudentIdAllocationError):
    pass


class StudentIdsExhausted(StudentIdAllocationError):
    pass


def render_student_id(id_format: str, *, prefix: str, year: int, sequence: int) -> str:
    return (
        id_format.replace('{prefix}', prefix)
        .replace('{year}', str(year))
        .replace('{sequence:D4}', str(sequence).zfill(4))
        .replace('{sequence:D5}', str(sequence).zfill(5))
    )


def _sequence_head(id_format: str) -> str:
    """Format text ahead of the first sequence placeholder."""
    positions = [id_format.find(token) for token in SEQUENCE_PLACEHOLDERS if token in id_format]
    return id_format[:min(positions)]


def _scope_prefix(id_format: str, *, prefix: str, year: int) -> str:
    """Rendered part of the format ahead of the sequence, e.g. ``STU2024``."""
    return render_student_id(_sequence_head(id_format), prefix=prefix, year=year, sequence=0)


def _format_pattern(id_format: str, *, prefix: str, year: int):
    parts = []
    has_sequence = False
    for token in PLACEHOLDER_RE.split(id_format):
        if token == '{prefix}':
            parts.append(re.escape(prefix))
        elif token == '{year}':
            parts.append(str(year))
        elif token in SEQUENCE_PLACEHOLDERS:
            width = 4 if token == '{sequence:D4}' else 5
            if has_sequence:
                parts.append(r'\d{%d,}' % width)
            else:
                parts.append(r'(?P<sequence>\d{%d,})' % width)
                has_sequence = True
        else:
            parts.append(re.escape(token))
    return re.compile(''.join(parts), re.IGNORECASE)


def extract_sequence(student_id: str, pattern=None, *, fallback: bool = True) -> int:
    """
    Sequence number embedded in an existing ID, 0 when none can be found.

    IDs matching the college's format are parsed exactly. Anything else falls
    back to the trailing 4 or 5 digit run unless ``fallback`` is off, which
    callers do when the year is not part of the scope prefix and a trailing
    run could be a year.
    """
    if pattern is not None:
        match = pattern.fullmatch(student_id)
        if match:
            return int(match.group('sequence'))
    if not fallback:
        return 0
    match = TRAILING_SEQUENCE_RE.search(student_id)
    return int(match.group(0)) if match else 0


def existing_student_ids(college: College, *, scope_prefix: str = '', limit: int | None = None) -> set:
    limit = limit or settings.STUDENT_ID_FETCH_LIMIT
    queryset = Student.objects.for_college(college).exclude(student_id='')
    if scope_prefix:
        queryset = queryset.filter(student_id__istartswith=scope_prefix)
    return set(queryset.order_by('-student_id').values_list('student_id', flat=True)[:limit])


def allocate_student_id(college: College | None, year: int | None = None, *, taken=(), max_attempts: int | None = None) -> str:
    """
    Next free student ID for a college within a calendar year.

    The check against already-issued IDs is local and best-effort: two
    concurrent callers can receive the same ID. The unique constraint on
    ``Student.student_id`` is authoritative, and callers re-allocate on
    collision, passing the IDs that collided as ``taken``.
    """
    if college is None:
        raise StudentIdNotConfigured('A college is required to generate a student ID.')

    prefix = college.student_id_prefix or DEFAULT_STUDENT_ID_PREFIX
    id_format = college.student_id_format or DEFAULT_STUDENT_ID_FORMAT
    if not any(token in id_format for token in SEQUENCE_PLACEHOLDERS):
        raise StudentIdNotConfigured(
            f'Student ID format "{id_format}" of {college} has no sequence placeholder.'
        )

    year = year or timezone.localdate().year
    max_attempts = max_attempts or settings.STUDENT_ID_MAX_ATTEMPTS

    existing_ids = existing_student_ids(
        college,
        scope_prefix=_scope_prefix(id_format, prefix=prefix, year=year),
    )
    pattern = _format_pattern(id_format, prefix=prefix, year=year)
    year_scoped = '{year}' in _sequence_head(id_format)
    sequences = [
        sequence
        for sequence in (
            extract_sequence(student_id, pattern, fallback=year_scoped) for student_id in existing_ids
        )
        if sequence > 0
    ]
    if sequences:
        sequence = max(sequences) + 1
    else:
        sequence = college.student_id_starting_number or 1

    unavailable = existing_ids | set(taken)
    for _ in range(max_attempts):
        candidate = render_student_id(id_format, prefix=prefix, year=year, sequence=sequence)
        if candidate not in unavailable:
            logger.debug('Allocated student ID %s for %s', candidate, college)
            return candidate
        sequence += 1

    raise StudentIdsExhausted(
        f'Unable to generate a unique student ID for {college} after {max_attempts} attempts.'
    )


def is_student_id_collision(exc: Exception) -> bool:
    """True for a uniqueness violation on the ``student_id`` column."""
    if not isinstance(exc, IntegrityError):
        return False

    cause = exc.__cause__
    code = getattr(cause, 'pgcode', None) or getattr(cause, 'sqlstate', None)
    message = str(exc)
    lowered = message.lower()
    unique_violation = code == UNIQUE_VIOLATION or 'unique' in lowered or 'duplicate' in lowered
    return unique_violation and 'student_id' in message
