from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from django.core.exceptions import ValidationError
from django.db import DatabaseError, IntegrityError, transaction
from django.utils import timezone

from apps.core.colleges.models import College
from apps.core.students.models import Student

from .models import Invoice, InvoiceItem, NumberSequence, Payment


logger = logging.getLogger(__name__)

DOCUMENT_PREFIXES = {
    NumberSequence.KIND_INVOICE: 'INV',
    NumberSequence.KIND_PAYMENT: 'PAY',
}
DEFAULT_PAYMENT_METHOD = 'online_payment'
REGISTRATION_FEE_NAME_EN = 'Registration Fee'
REGISTRATION_FEE_NAME_AR = 'رسوم التسجيل'


class BillingRecordError(Exception):
    pass


def _to_decimal(value) -> Decimal:
    return Decimal(str(value or '0'))


def _quantize(value) -> Decimal:
    return _to_decimal(value).quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)


def _locked_sequence(college: College, kind: str, year: int) -> NumberSequence:
    lookup = {'college': college, 'kind': kind, 'year': year}
    try:
        with transaction.atomic():
            NumberSequence.objects.get_or_create(**lookup)
    except IntegrityError:
        # Row inserted by a concurrent caller; lock theirs below.
        logger.debug('Number sequence %s/%s/%s created concurrently', college.pk, kind, year)
    return NumberSequence.objects.select_for_update().get(**lookup)


@transaction.atomic
def next_document_number(college: College, kind: str, year: int | None = None) -> str:
    year = year or timezone.localdate().year
    sequence = _locked_sequence(college, kind, year)
    sequence.last_value += 1
    sequence.save(update_fields=['last_value'])
    return f"{DOCUMENT_PREFIXES[kind]}-{college.pk}-{year}-{sequence.last_value:05d}"


def generate_invoice_number(college: College) -> str:
    return next_document_number(college, NumberSequence.KIND_INVOICE)


def generate_payment_number(college: College) -> str:
    return next_document_number(college, NumberSequence.KIND_PAYMENT)


def _fee_payment_timing(paid_at):
    if not paid_at:
        now = timezone.now()
        return timezone.localdate(now), now
    if timezone.is_naive(paid_at):
        paid_at = timezone.make_aware(paid_at)
    return timezone.localdate(paid_at), paid_at


def record_registration_fee_payment(student: Student, application) -> dict:
    """
    Create the paid invoice, its line item and the verified payment for a
    registration fee collected while the application was being processed.

    The three rows are written in one transaction; any failure is raised as
    ``BillingRecordError`` with nothing persisted.
    """
    reference = application.application_number or application.pk

    try:
        fee_amount = _quantize(application.registration_fee_amount)
    except InvalidOperation as exc:
        raise BillingRecordError(
            f'Invalid registration fee amount: {application.registration_fee_amount!r}'
        ) from exc
    if fee_amount <= 0:
        raise BillingRecordError('Registration fee amount must be greater than zero.')

    payment_date, verified_at = _fee_payment_timing(application.registration_fee_paid_at)
    payment_method = application.registration_fee_payment_method or DEFAULT_PAYMENT_METHOD

    try:
        with transaction.atomic():
            invoice_number = generate_invoice_number(student.college)
            payment_number = generate_payment_number(student.college)

            invoice = Invoice.objects.create(
                invoice_number=invoice_number,
                college=student.college,
                student=student,
                invoice_date=payment_date,
                invoice_type=Invoice.TYPE_ADMISSION,
                status=Invoice.STATUS_PAID,
                subtotal=fee_amount,
                discount_amount=Decimal('0.00'),
                scholarship_amount=Decimal('0.00'),
                tax_amount=Decimal('0.00'),
                total_amount=fee_amount,
                paid_amount=fee_amount,
                pending_amount=Decimal('0.00'),
                payment_method=payment_method,
                notes=f'Registration fee paid during application process (Application #{reference})',
            )
            item = InvoiceItem.objects.create(
                invoice=invoice,
                item_type=InvoiceItem.TYPE_REGISTRATION_FEE,
                item_name_en=REGISTRATION_FEE_NAME_EN,
                item_name_ar=REGISTRATION_FEE_NAME_AR,
                description='Registration fee paid during application process',
                quantity=1,
                unit_price=fee_amount,
                total_amount=fee_amount,
                reference_id=str(application.pk),
                reference_type='application',
            )
            payment = Payment.objects.create(
                payment_number=payment_number,
                invoice=invoice,
                college=student.college,
                student=student,
                payment_date=payment_date,
                payment_method=payment_method,
                amount=fee_amount,
                status=Payment.STATUS_VERIFIED,
                verified_at=verified_at,
                notes=f'Registration fee payment from application #{reference}',
            )
    except (DatabaseError, ValidationError) as exc:
        raise BillingRecordError(
            f'Could not record registration fee for student {student.student_id}: {exc}'
        ) from exc

    logger.info(
        'Created registration fee invoice %s for student %s',
        invoice.invoice_number,
        student.student_id,
    )
    return {
        'invoice': invoice,
        'item': item,
        'payment': payment,
    }
