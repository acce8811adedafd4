from django.db import models
from django.utils import timezone

from apps.core.colleges.models import College, Major
from apps.core.utils.managers import CollegeManager


class Student(models.Model):
    STUDY_FULL_TIME = 'full_time'
    STUDY_PART_TIME = 'part_time'
    STUDY_TYPE_CHOICES = (
        (STUDY_FULL_TIME, 'Full Time'),
        (STUDY_PART_TIME, 'Part Time'),
    )

    LOAD_NORMAL = 'normal'
    LOAD_REDUCED = 'reduced'
    LOAD_OVERLOAD = 'overload'
    STUDY_LOAD_CHOICES = (
        (LOAD_NORMAL, 'Normal'),
        (LOAD_REDUCED, 'Reduced'),
        (LOAD_OVERLOAD, 'Overload'),
    )

    APPROACH_ON_CAMPUS = 'on_campus'
    APPROACH_ONLINE = 'online'
    APPROACH_HYBRID = 'hybrid'
    STUDY_APPROACH_CHOICES = (
        (APPROACH_ON_CAMPUS, 'On Campus'),
        (APPROACH_ONLINE, 'Online'),
        (APPROACH_HYBRID, 'Hybrid'),
    )

    STATUS_ACTIVE = 'active'
    STATUS_SUSPENDED = 'suspended'
    STATUS_GRADUATED = 'graduated'
    STATUS_WITHDRAWN = 'withdrawn'
    STATUS_CHOICES = (
        (STATUS_ACTIVE, 'Active'),
        (STATUS_SUSPENDED, 'Suspended'),
        (STATUS_GRADUATED, 'Graduated'),
        (STATUS_WITHDRAWN, 'Withdrawn'),
    )

    GENDER_CHOICES = (
        ('male', 'Male'),
        ('female', 'Female'),
    )

    college = models.ForeignKey(College, on_delete=models.PROTECT, related_name='students')
    major = models.ForeignKey(Major, on_delete=models.PROTECT, related_name='students')
    objects = CollegeManager()

    student_id = models.CharField(max_length=50, unique=True)

    first_name = models.CharField(max_length=100)
    middle_name = models.CharField(max_length=100, blank=True)
    last_name = models.CharField(max_length=100, blank=True)
    first_name_ar = models.CharField(max_length=100, blank=True)
    middle_name_ar = models.CharField(max_length=100, blank=True)
    last_name_ar = models.CharField(max_length=100, blank=True)
    name_en = models.CharField(max_length=255)
    name_ar = models.CharField(max_length=255, blank=True)

    email = models.EmailField()
    phone = models.CharField(max_length=30, blank=True)
    mobile_phone = models.CharField(max_length=30, blank=True)
    date_of_birth = models.DateField(null=True, blank=True)
    gender = models.CharField(max_length=10, choices=GENDER_CHOICES, blank=True)
    nationality = models.CharField(max_length=100, blank=True)
    is_international = models.BooleanField(default=False)

    address = models.TextField(blank=True)
    city = models.CharField(max_length=100, blank=True)
    state = models.CharField(max_length=100, blank=True)
    country = models.CharField(max_length=100, blank=True)
    postal_code = models.CharField(max_length=20, blank=True)

    enrollment_date = models.DateField(default=timezone.localdate)
    study_type = models.CharField(max_length=20, choices=STUDY_TYPE_CHOICES, default=STUDY_FULL_TIME)
    study_load = models.CharField(max_length=20, choices=STUDY_LOAD_CHOICES, default=LOAD_NORMAL)
    study_approach = models.CharField(max_length=20, choices=STUDY_APPROACH_CHOICES, default=APPROACH_ON_CAMPUS)

    emergency_contact_name = models.CharField(max_length=255, blank=True)
    emergency_contact_relation = models.CharField(max_length=100, blank=True)
    emergency_phone = models.CharField(max_length=30, blank=True)
    emergency_contact_email = models.EmailField(blank=True)

    high_school_name = models.CharField(max_length=255, blank=True)
    high_school_country = models.CharField(max_length=100, blank=True)
    graduation_year = models.PositiveIntegerField(null=True, blank=True)
    high_school_gpa = models.DecimalField(max_digits=5, decimal_places=2, null=True, blank=True)
    has_scholarship = models.BooleanField(default=False)
    scholarship_percentage = models.DecimalField(max_digits=5, decimal_places=2, null=True, blank=True)

    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_ACTIVE)
    notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['student_id']
        indexes = [
            models.Index(fields=['college', 'student_id'], name='students_st_college_1f0a6d_idx'),
            models.Index(fields=['email'], name='students_st_email_7c2b93_idx'),
            models.Index(fields=['college', 'status'], name='students_st_college_b5e412_idx'),
        ]

    def __str__(self):
        return f"{self.student_id} - {self.name_en}"
