from __future__ import annotations

import logging

from django.conf import settings
from django.db import DatabaseError, IntegrityError, transaction
from django.utils import timezone

from apps.core.finance.services import record_registration_fee_payment
from apps.core.students.models import Student
from apps.core.students.services import (
    StudentIdAllocationError,
    allocate_student_id,
    is_student_id_collision,
)
from apps.core.users.models import User
from apps.core.users.services import get_auth_provisioner

from .models import Application


logger = logging.getLogger(__name__)

DOMESTIC_NATIONALITIES = {'kuwait', 'الكويت'}


class ConversionError(Exception):
    pass


class MissingRequiredField(ConversionError):
    pass


class StudentIdAllocationFailed(ConversionError):
    pass


class StudentInsertExhausted(ConversionError):
    pass


class InsertOutcome:
    """Result of one student insert attempt: ``ok`` with the row, or ``collision``."""

    OK = 'ok'
    COLLISION = 'collision'

    def __init__(self, kind, student=None, error=None):
        self.kind = kind
        self.student = student
        self.error = error

    @classmethod
    def ok(cls, student):
        return cls(cls.OK, student=student)

    @classmethod
    def collision(cls, error):
        return cls(cls.COLLISION, error=error)

    @property
    def is_ok(self):
        return self.kind == self.OK


def join_name(*parts) -> str:
    return ' '.join(part.strip() for part in parts if part and part.strip())


def temporary_password(student_id: str, year: int | None = None) -> str:
    year = year or timezone.localdate().year
    return f"Temp{student_id}@{year}"


def _warning(code, message):
    return {'code': code, 'message': message}


def student_fields_from_application(application: Application, student_id: str) -> dict:
    name_en = join_name(application.first_name, application.middle_name, application.last_name)
    name_ar = join_name(application.first_name_ar, application.middle_name_ar, application.last_name_ar)
    nationality = (application.nationality or '').strip()

    return {
        'student_id': student_id,
        'college_id': application.college_id,
        'major_id': application.major_id,
        'first_name': application.first_name,
        'middle_name': application.middle_name,
        'last_name': application.last_name,
        'first_name_ar': application.first_name_ar,
        'middle_name_ar': application.middle_name_ar,
        'last_name_ar': application.last_name_ar,
        'name_en': name_en or f"{application.first_name} {application.last_name}".strip(),
        'name_ar': name_ar,
        'email': application.email,
        'phone': application.phone,
        'mobile_phone': application.phone,
        'date_of_birth': application.date_of_birth,
        'gender': application.gender,
        'nationality': nationality,
        'is_international': bool(nationality) and nationality.lower() not in DOMESTIC_NATIONALITIES,
        'address': application.street_address,
        'city': application.city,
        'state': application.state_province,
        'country': application.country,
        'postal_code': application.postal_code,
        'enrollment_date': application.enrollment_date or timezone.localdate(),
        'study_type': Student.STUDY_FULL_TIME,
        'study_load': Student.LOAD_NORMAL,
        'study_approach': Student.APPROACH_ON_CAMPUS,
        'emergency_contact_name': application.emergency_contact_name,
        'emergency_contact_relation': application.emergency_contact_relationship,
        'emergency_phone': application.emergency_contact_phone,
        'emergency_contact_email': application.emergency_contact_email,
        'high_school_name': application.high_school_name,
        'high_school_country': application.high_school_country,
        'graduation_year': application.graduation_year,
        'high_school_gpa': application.gpa,
        'has_scholarship': application.scholarship_request,
        'scholarship_percentage': application.scholarship_percentage,
        'status': Student.STATUS_ACTIVE,
        'notes': f"Created from application #{application.reference}",
    }


def find_converted_student(application: Application):
    return Student.objects.filter(email__iexact=application.email).first()


def _check_required_fields(application: Application):
    if not application.email:
        raise MissingRequiredField('Application must have an email.')
    if not application.college_id:
        raise MissingRequiredField('Application must have a college_id.')
    if not application.major_id:
        raise MissingRequiredField('Application must have a major_id.')


def _allocate(application: Application, taken=()) -> str:
    try:
        return allocate_student_id(application.college, taken=taken)
    except StudentIdAllocationError as exc:
        raise StudentIdAllocationFailed(f'Failed to generate student ID: {exc}') from exc


def _insert_student(fields: dict) -> InsertOutcome:
    try:
        with transaction.atomic():
            student = Student.objects.create(**fields)
    except IntegrityError as exc:
        if is_student_id_collision(exc):
            return InsertOutcome.collision(exc)
        raise
    return InsertOutcome.ok(student)


def _create_student(application: Application) -> Student:
    max_attempts = settings.STUDENT_INSERT_MAX_ATTEMPTS
    collided = set()
    student_id = _allocate(application)

    for attempt in range(1, max_attempts + 1):
        outcome = _insert_student(student_fields_from_application(application, student_id))
        if outcome.is_ok:
            return outcome.student

        collided.add(student_id)
        logger.warning(
            'Duplicate student_id %s detected (attempt %s of %s). Generating new ID.',
            student_id,
            attempt,
            max_attempts,
        )
        if attempt < max_attempts:
            student_id = _allocate(application, taken=collided)

    raise StudentInsertExhausted(
        'Failed to create student after multiple attempts due to duplicate student ID conflicts.'
    )


def _provision_login(student: Student, password: str, provisioner):
    try:
        with transaction.atomic():
            outcome = provisioner(
                email=student.email,
                password=password,
                role=User.ROLE_STUDENT,
                college_id=student.college_id,
                name=student.name_en,
            )
    except Exception as exc:
        logger.exception('Error creating auth account for student %s', student.student_id)
        return _warning('auth_provisioning_failed', str(exc) or exc.__class__.__name__)

    if not outcome or not outcome.get('success'):
        error = (outcome or {}).get('error') or 'Unknown error'
        logger.warning('Failed to create auth account for student %s: %s', student.student_id, error)
        return _warning('auth_provisioning_failed', error)

    logger.info('Student login account created for %s', student.student_id)
    return None


def _record_billing(student: Student, application: Application, recorder):
    try:
        recorder(student, application)
    except Exception as exc:
        logger.exception('Error creating registration fee invoice for student %s', student.student_id)
        return _warning('billing_record_failed', str(exc) or exc.__class__.__name__)
    return None


def convert_application(application: Application, password: str | None = None, *, auth_provisioner=None, billing_recorder=None) -> dict:
    """
    Turn an admissions application into a student.

    Re-running for an application whose email already belongs to a student
    returns ``already_exists`` without writing anything. Login provisioning
    and registration fee billing are best-effort: their failures end up in
    ``warnings`` and never undo the created student.

    Raises ``ConversionError`` for missing fields and exhausted ID allocation;
    database errors other than a student ID collision propagate unchanged.
    """
    if application.email:
        existing = find_converted_student(application)
        if existing:
            return {
                'success': False,
                'student': existing,
                'password': None,
                'error': 'Student already exists with this email',
                'already_exists': True,
                'warnings': [],
            }

    _check_required_fields(application)

    student = _create_student(application)
    logger.info('Created student %s from application #%s', student.student_id, application.reference)

    password = password or temporary_password(student.student_id)
    warnings = []

    provisioner = auth_provisioner or get_auth_provisioner()
    warning = _provision_login(student, password, provisioner)
    if warning:
        warnings.append(warning)

    if application.has_paid_registration_fee:
        warning = _record_billing(student, application, billing_recorder or record_registration_fee_payment)
        if warning:
            warnings.append(warning)

    return {
        'success': True,
        'student': student,
        'password': password,
        'error': None,
        'already_exists': False,
        'warnings': warnings,
    }


def create_student_from_application(application: Application, password: str | None = None, **kwargs) -> dict:
    try:
        return convert_application(application, password, **kwargs)
    except (ConversionError, DatabaseError) as exc:
        logger.error('Error creating student from application #%s: %s', application.reference, exc)
        return {
            'success': False,
            'student': None,
            'password': None,
            'error': str(exc) or 'Failed to create student from application',
            'already_exists': False,
            'warnings': [],
        }


def accept_application(application: Application, reviewed_by=None, notes: str = '', password: str | None = None, **kwargs) -> dict:
    application.status = Application.STATUS_ACCEPTED
    application.reviewed_by = reviewed_by
    application.reviewed_at = timezone.now()
    application.review_notes = notes or ''
    application.save(update_fields=['status', 'reviewed_by', 'reviewed_at', 'review_notes'])
    return create_student_from_application(application, password, **kwargs)
