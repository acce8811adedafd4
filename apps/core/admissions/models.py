from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models

from apps.core.colleges.models import College, Major
from apps.core.utils.managers import CollegeManager


class Application(models.Model):
    STATUS_PENDING = 'pending'
    STATUS_UNDER_REVIEW = 'under_review'
    STATUS_ACCEPTED = 'accepted'
    STATUS_REJECTED = 'rejected'
    STATUS_CHOICES = (
        (STATUS_PENDING, 'Pending'),
        (STATUS_UNDER_REVIEW, 'Under Review'),
        (STATUS_ACCEPTED, 'Accepted'),
        (STATUS_REJECTED, 'Rejected'),
    )

    GENDER_CHOICES = (
        ('male', 'Male'),
        ('female', 'Female'),
    )

    application_number = models.CharField(max_length=50, unique=True, null=True, blank=True)
    college = models.ForeignKey(
        College,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='applications',
    )
    major = models.ForeignKey(
        Major,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='applications',
    )
    objects = CollegeManager()

    first_name = models.CharField(max_length=100)
    middle_name = models.CharField(max_length=100, blank=True)
    last_name = models.CharField(max_length=100, blank=True)
    first_name_ar = models.CharField(max_length=100, blank=True)
    middle_name_ar = models.CharField(max_length=100, blank=True)
    last_name_ar = models.CharField(max_length=100, blank=True)

    email = models.EmailField()
    phone = models.CharField(max_length=30, blank=True)
    date_of_birth = models.DateField(null=True, blank=True)
    gender = models.CharField(max_length=10, choices=GENDER_CHOICES, blank=True)
    nationality = models.CharField(max_length=100, blank=True)
    religion = models.CharField(max_length=50, blank=True)

    street_address = models.TextField(blank=True)
    city = models.CharField(max_length=100, blank=True)
    state_province = models.CharField(max_length=100, blank=True)
    country = models.CharField(max_length=100, blank=True)
    postal_code = models.CharField(max_length=20, blank=True)

    emergency_contact_name = models.CharField(max_length=255, blank=True)
    emergency_contact_relationship = models.CharField(max_length=100, blank=True)
    emergency_contact_phone = models.CharField(max_length=30, blank=True)
    emergency_contact_email = models.EmailField(blank=True)

    high_school_name = models.CharField(max_length=255, blank=True)
    high_school_country = models.CharField(max_length=100, blank=True)
    graduation_year = models.PositiveIntegerField(null=True, blank=True)
    gpa = models.DecimalField(max_digits=5, decimal_places=2, null=True, blank=True)
    scholarship_request = models.BooleanField(default=False)
    scholarship_percentage = models.DecimalField(max_digits=5, decimal_places=2, null=True, blank=True)

    enrollment_date = models.DateField(null=True, blank=True)

    registration_fee_amount = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    registration_fee_paid_at = models.DateTimeField(null=True, blank=True)
    registration_fee_payment_method = models.CharField(max_length=20, blank=True)

    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_PENDING)
    reviewed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='reviewed_applications',
    )
    reviewed_at = models.DateTimeField(null=True, blank=True)
    review_notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['college', 'status'], name='admissions__college_3e9d1a_idx'),
            models.Index(fields=['email'], name='admissions__email_8b7f42_idx'),
        ]

    def clean(self):
        super().clean()
        if self.major_id and self.college_id and self.major.college_id != self.college_id:
            raise ValidationError({'major': 'Major must belong to selected college.'})
        if self.registration_fee_amount is not None and self.registration_fee_amount < 0:
            raise ValidationError({'registration_fee_amount': 'Registration fee cannot be negative.'})

    @property
    def has_paid_registration_fee(self):
        return bool(self.registration_fee_amount and self.registration_fee_paid_at)

    @property
    def reference(self):
        return self.application_number or self.pk

    def __str__(self):
        full_name = ' '.join(part for part in [self.first_name, self.last_name] if part)
        return f"Application #{self.reference} - {full_name}"
