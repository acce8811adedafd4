from django.contrib.auth.models import AbstractUser, UserManager as DjangoUserManager
from django.db import models

from apps.core.colleges.models import College


class UserManager(DjangoUserManager):
    def create_superuser(self, username, email=None, password=None, **extra_fields):
        extra_fields.setdefault('role', 'superadmin')
        extra_fields['college'] = None
        return super().create_superuser(username, email=email, password=password, **extra_fields)


class User(AbstractUser):
    ROLE_SUPERADMIN = 'superadmin'
    ROLE_COLLEGEADMIN = 'collegeadmin'
    ROLE_ADMISSIONS = 'admissions_officer'
    ROLE_ACCOUNTANT = 'accountant'
    ROLE_INSTRUCTOR = 'instructor'
    ROLE_STUDENT = 'student'

    ROLE_CHOICES = (
        (ROLE_SUPERADMIN, 'Super Admin'),
        (ROLE_COLLEGEADMIN, 'College Admin'),
        (ROLE_ADMISSIONS, 'Admissions Officer'),
        (ROLE_ACCOUNTANT, 'Accountant'),
        (ROLE_INSTRUCTOR, 'Instructor'),
        (ROLE_STUDENT, 'Student'),
    )

    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default=ROLE_STUDENT)
    college = models.ForeignKey(
        College,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='users',
    )

    objects = UserManager()

    class Meta:
        indexes = [
            models.Index(fields=['role'], name='users_user_role_5a1c07_idx'),
            models.Index(fields=['college', 'role'], name='users_user_college_e83b20_idx'),
        ]

    def save(self, *args, **kwargs):
        if self.is_superuser and self.role != self.ROLE_SUPERADMIN:
            self.role = self.ROLE_SUPERADMIN

        if self.role == self.ROLE_SUPERADMIN:
            self.college = None
        elif not self.college_id:
            raise ValueError("Non-superadmin users must be assigned to a college.")

        super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.username} ({self.role})"
