from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone

from apps.core.colleges.models import College
from apps.core.students.models import Student
from apps.core.utils.managers import CollegeManager


PAYMENT_METHOD_CHOICES = (
    ('cash', 'Cash'),
    ('bank_transfer', 'Bank Transfer'),
    ('credit_card', 'Credit Card'),
    ('online_payment', 'Online Payment'),
    ('cheque', 'Cheque'),
)


class FinancialRecordModel(models.Model):
    class Meta:
        abstract = True

    def delete(self, *args, **kwargs):
        raise ValidationError('Financial records cannot be deleted. Cancel or reverse them instead.')


class NumberSequence(models.Model):
    KIND_INVOICE = 'invoice'
    KIND_PAYMENT = 'payment'
    KIND_CHOICES = (
        (KIND_INVOICE, 'Invoice'),
        (KIND_PAYMENT, 'Payment'),
    )

    college = models.ForeignKey(
        College,
        on_delete=models.CASCADE,
        related_name='number_sequences',
    )
    kind = models.CharField(max_length=20, choices=KIND_CHOICES)
    year = models.PositiveIntegerField()
    last_value = models.PositiveIntegerField(default=0)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=['college', 'kind', 'year'],
                name='unique_number_sequence_per_college_year',
            ),
        ]

    def __str__(self):
        return f"{self.kind} {self.college_id}/{self.year}: {self.last_value}"


class Invoice(FinancialRecordModel):
    TYPE_TUITION = 'tuition_fee'
    TYPE_ADMISSION = 'admission_fee'
    TYPE_OTHER = 'other'
    INVOICE_TYPE_CHOICES = (
        (TYPE_TUITION, 'Tuition Fee'),
        (TYPE_ADMISSION, 'Admission Fee'),
        (TYPE_OTHER, 'Other'),
    )

    STATUS_DRAFT = 'draft'
    STATUS_ISSUED = 'issued'
    STATUS_PARTIALLY_PAID = 'partially_paid'
    STATUS_PAID = 'paid'
    STATUS_CANCELLED = 'cancelled'
    STATUS_CHOICES = (
        (STATUS_DRAFT, 'Draft'),
        (STATUS_ISSUED, 'Issued'),
        (STATUS_PARTIALLY_PAID, 'Partially Paid'),
        (STATUS_PAID, 'Paid'),
        (STATUS_CANCELLED, 'Cancelled'),
    )

    invoice_number = models.CharField(max_length=50, unique=True)
    college = models.ForeignKey(College, on_delete=models.CASCADE, related_name='invoices')
    student = models.ForeignKey(Student, on_delete=models.CASCADE, related_name='invoices')
    objects = CollegeManager()

    invoice_date = models.DateField(default=timezone.localdate)
    invoice_type = models.CharField(max_length=20, choices=INVOICE_TYPE_CHOICES, default=TYPE_TUITION)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_DRAFT)
    subtotal = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    discount_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    scholarship_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    tax_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    total_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    paid_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    pending_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    payment_method = models.CharField(max_length=20, choices=PAYMENT_METHOD_CHOICES, blank=True)
    notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-invoice_date', '-id']
        indexes = [
            models.Index(fields=['college', 'student', 'invoice_date'], name='finance_inv_college_2d84a1_idx'),
            models.Index(fields=['college', 'status'], name='finance_inv_college_6f0c3e_idx'),
        ]

    def clean(self):
        super().clean()

        if self.student_id and self.student.college_id != self.college_id:
            raise ValidationError({'student': 'Student must belong to selected college.'})

        expected_total = self.subtotal - self.discount_amount - self.scholarship_amount + self.tax_amount
        if self.total_amount != expected_total:
            raise ValidationError({'total_amount': 'Total must equal subtotal less discounts plus tax.'})

        if self.pending_amount != self.total_amount - self.paid_amount:
            raise ValidationError({'pending_amount': 'Pending amount must equal total less paid amount.'})

        if self.status == self.STATUS_PAID and self.pending_amount != 0:
            raise ValidationError({'status': 'A paid invoice cannot have a pending amount.'})

    def __str__(self):
        return self.invoice_number


class InvoiceItem(FinancialRecordModel):
    TYPE_TUITION = 'tuition'
    TYPE_REGISTRATION_FEE = 'registration_fee'
    TYPE_OTHER = 'other'
    ITEM_TYPE_CHOICES = (
        (TYPE_TUITION, 'Tuition'),
        (TYPE_REGISTRATION_FEE, 'Registration Fee'),
        (TYPE_OTHER, 'Other'),
    )

    invoice = models.ForeignKey(Invoice, on_delete=models.CASCADE, related_name='items')
    item_type = models.CharField(max_length=30, choices=ITEM_TYPE_CHOICES, default=TYPE_OTHER)
    item_name_en = models.CharField(max_length=255)
    item_name_ar = models.CharField(max_length=255, blank=True)
    description = models.TextField(blank=True)
    quantity = models.PositiveIntegerField(default=1)
    unit_price = models.DecimalField(max_digits=12, decimal_places=2)
    discount_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    scholarship_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    total_amount = models.DecimalField(max_digits=12, decimal_places=2)
    reference_id = models.CharField(max_length=64, blank=True)
    reference_type = models.CharField(max_length=50, blank=True)

    class Meta:
        ordering = ['invoice_id', 'id']

    def __str__(self):
        return f"{self.invoice.invoice_number} - {self.item_name_en}"


class Payment(FinancialRecordModel):
    STATUS_PENDING = 'pending'
    STATUS_VERIFIED = 'verified'
    STATUS_REJECTED = 'rejected'
    STATUS_CHOICES = (
        (STATUS_PENDING, 'Pending'),
        (STATUS_VERIFIED, 'Verified'),
        (STATUS_REJECTED, 'Rejected'),
    )

    payment_number = models.CharField(max_length=50, unique=True)
    invoice = models.ForeignKey(Invoice, on_delete=models.PROTECT, related_name='payments')
    college = models.ForeignKey(College, on_delete=models.CASCADE, related_name='payments')
    student = models.ForeignKey(Student, on_delete=models.CASCADE, related_name='payments')
    objects = CollegeManager()

    payment_date = models.DateField(default=timezone.localdate)
    payment_method = models.CharField(max_length=20, choices=PAYMENT_METHOD_CHOICES, default='cash')
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_PENDING)
    verified_at = models.DateTimeField(null=True, blank=True)
    notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-payment_date', '-id']
        indexes = [
            models.Index(fields=['college', 'student', 'payment_date'], name='finance_pay_college_9a51b7_idx'),
            models.Index(fields=['college', 'status'], name='finance_pay_college_c4e2f8_idx'),
        ]

    def clean(self):
        super().clean()

        if self.amount is None or self.amount <= 0:
            raise ValidationError({'amount': 'Payment amount must be greater than zero.'})

        if self.invoice_id and self.invoice.student_id != self.student_id:
            raise ValidationError({'invoice': 'Invoice must belong to the paying student.'})

        if self.status == self.STATUS_VERIFIED and not self.verified_at:
            raise ValidationError({'verified_at': 'Verification timestamp is required for verified payment.'})

    def __str__(self):
        return self.payment_number
