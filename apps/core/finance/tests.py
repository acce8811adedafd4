from datetime import datetime, timezone as dt_timezone
from decimal import Decimal
from unittest import mock

from django.core.exceptions import ValidationError
from django.db import DatabaseError, IntegrityError
from django.test import TestCase
from django.utils import timezone

from apps.core.admissions.models import Application
from apps.core.colleges.models import College, Major
from apps.core.students.models import Student

from .models import Invoice, InvoiceItem, NumberSequence, Payment
from .services import (
    BillingRecordError,
    generate_invoice_number,
    generate_payment_number,
    record_registration_fee_payment,
)


class FinanceBaseTestCase(TestCase):
    def setUp(self):
        self.year = timezone.localdate().year
        self.college = College.objects.create(name='Finance College', code='finance_college')
        self.major = Major.objects.create(college=self.college, name_en='Accounting', code='ACC')
        self.student = Student.objects.create(
            college=self.college,
            major=self.major,
            student_id='STU20260001',
            first_name='Omar',
            last_name='Saleh',
            name_en='Omar Saleh',
            email='omar@example.com',
        )
        self.paid_at = datetime(2026, 3, 14, 9, 30, tzinfo=dt_timezone.utc)
        self.application = Application.objects.create(
            application_number='APP-1001',
            college=self.college,
            major=self.major,
            first_name='Omar',
            last_name='Saleh',
            email='omar@example.com',
            registration_fee_amount=Decimal('75.50'),
            registration_fee_paid_at=self.paid_at,
            registration_fee_payment_method='credit_card',
        )


class DocumentNumberingTests(FinanceBaseTestCase):
    def test_invoice_numbers_are_sequential_per_college(self):
        first = generate_invoice_number(self.college)
        second = generate_invoice_number(self.college)

        self.assertEqual(first, f'INV-{self.college.pk}-{self.year}-00001')
        self.assertEqual(second, f'INV-{self.college.pk}-{self.year}-00002')

    def test_payment_numbers_have_their_own_counter(self):
        generate_invoice_number(self.college)
        self.assertEqual(generate_payment_number(self.college), f'PAY-{self.college.pk}-{self.year}-00001')

    def test_counter_created_concurrently_is_reused(self):
        NumberSequence.objects.create(
            college=self.college,
            kind=NumberSequence.KIND_INVOICE,
            year=self.year,
            last_value=4,
        )
        error = IntegrityError('UNIQUE constraint failed: finance_numbersequence.college_id')
        with mock.patch.object(NumberSequence.objects, 'get_or_create', side_effect=error):
            number = generate_invoice_number(self.college)

        self.assertEqual(number, f'INV-{self.college.pk}-{self.year}-00005')
        self.assertEqual(NumberSequence.objects.get(kind=NumberSequence.KIND_INVOICE).last_value, 5)

    def test_colleges_do_not_share_counters(self):
        other = College.objects.create(name='Other Finance College', code='other_finance')
        generate_invoice_number(self.college)

        self.assertEqual(generate_invoice_number(other), f'INV-{other.pk}-{self.year}-00001')


class RegistrationFeeRecordTests(FinanceBaseTestCase):
    def test_creates_paid_invoice_item_and_verified_payment(self):
        records = record_registration_fee_payment(self.student, self.application)

        invoice = records['invoice']
        self.assertEqual(invoice.invoice_type, Invoice.TYPE_ADMISSION)
        self.assertEqual(invoice.status, Invoice.STATUS_PAID)
        self.assertEqual(invoice.subtotal, Decimal('75.50'))
        self.assertEqual(invoice.total_amount, Decimal('75.50'))
        self.assertEqual(invoice.paid_amount, Decimal('75.50'))
        self.assertEqual(invoice.pending_amount, Decimal('0'))
        self.assertEqual(invoice.discount_amount, Decimal('0'))
        self.assertEqual(invoice.invoice_date, self.paid_at.date())
        self.assertEqual(invoice.payment_method, 'credit_card')
        self.assertIn('APP-1001', invoice.notes)
        invoice.full_clean()

        item = InvoiceItem.objects.get(invoice=invoice)
        self.assertEqual(item.item_type, InvoiceItem.TYPE_REGISTRATION_FEE)
        self.assertEqual(item.item_name_en, 'Registration Fee')
        self.assertEqual(item.item_name_ar, 'رسوم التسجيل')
        self.assertEqual(item.quantity, 1)
        self.assertEqual(item.unit_price, Decimal('75.50'))
        self.assertEqual(item.total_amount, Decimal('75.50'))
        self.assertEqual(item.reference_id, str(self.application.pk))
        self.assertEqual(item.reference_type, 'application')

        payment = Payment.objects.get(invoice=invoice)
        self.assertEqual(payment.status, Payment.STATUS_VERIFIED)
        self.assertEqual(payment.verified_at, self.paid_at)
        self.assertEqual(payment.payment_date, self.paid_at.date())
        self.assertEqual(payment.amount, Decimal('75.50'))
        self.assertEqual(payment.student, self.student)
        self.assertTrue(payment.payment_number.startswith(f'PAY-{self.college.pk}-'))

    def test_missing_paid_timestamp_uses_now(self):
        self.application.registration_fee_paid_at = None
        self.application.registration_fee_payment_method = ''

        records = record_registration_fee_payment(self.student, self.application)

        self.assertEqual(records['payment'].payment_date, timezone.localdate())
        self.assertIsNotNone(records['payment'].verified_at)
        self.assertEqual(records['invoice'].payment_method, 'online_payment')

    def test_non_positive_fee_is_rejected(self):
        self.application.registration_fee_amount = Decimal('0')

        with self.assertRaises(BillingRecordError):
            record_registration_fee_payment(self.student, self.application)
        self.assertFalse(Invoice.objects.exists())

    def test_failed_payment_insert_leaves_no_partial_records(self):
        with mock.patch.object(Payment.objects, 'create', side_effect=DatabaseError('payments table unavailable')):
            with self.assertRaises(BillingRecordError) as ctx:
                record_registration_fee_payment(self.student, self.application)

        self.assertIsInstance(ctx.exception.__cause__, DatabaseError)
        self.assertFalse(Invoice.objects.exists())
        self.assertFalse(InvoiceItem.objects.exists())
        self.assertFalse(Payment.objects.exists())


class FinancialRecordModelTests(FinanceBaseTestCase):
    def test_invoices_cannot_be_deleted(self):
        invoice = record_registration_fee_payment(self.student, self.application)['invoice']

        with self.assertRaises(ValidationError):
            invoice.delete()

    def test_paid_invoice_with_pending_amount_is_invalid(self):
        invoice = Invoice(
            invoice_number='INV-MANUAL-1',
            college=self.college,
            student=self.student,
            status=Invoice.STATUS_PAID,
            subtotal=Decimal('100.00'),
            total_amount=Decimal('100.00'),
            paid_amount=Decimal('60.00'),
            pending_amount=Decimal('40.00'),
        )
        with self.assertRaises(ValidationError):
            invoice.full_clean()
