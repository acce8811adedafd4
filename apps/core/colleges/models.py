from django.core.exceptions import ValidationError
from django.db import models
from django.utils.text import slugify


DEFAULT_STUDENT_ID_PREFIX = 'STU'
DEFAULT_STUDENT_ID_FORMAT = '{prefix}{year}{sequence:D4}'
SEQUENCE_PLACEHOLDERS = ('{sequence:D4}', '{sequence:D5}')


class College(models.Model):
    name = models.CharField(max_length=255)
    name_ar = models.CharField(max_length=255, blank=True)
    code = models.CharField(max_length=40, unique=True, null=True, blank=True)
    email = models.EmailField(blank=True)
    phone = models.CharField(max_length=20, blank=True)
    is_active = models.BooleanField(default=True)

    student_id_prefix = models.CharField(max_length=20, default=DEFAULT_STUDENT_ID_PREFIX, blank=True)
    student_id_format = models.CharField(max_length=100, default=DEFAULT_STUDENT_ID_FORMAT, blank=True)
    student_id_starting_number = models.PositiveIntegerField(default=1)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['name']
        indexes = [
            models.Index(fields=['code'], name='colleges_co_code_4b1f2e_idx'),
            models.Index(fields=['is_active'], name='colleges_co_is_acti_9d3c51_idx'),
        ]

    def clean(self):
        super().clean()
        id_format = self.student_id_format or DEFAULT_STUDENT_ID_FORMAT
        if not any(placeholder in id_format for placeholder in SEQUENCE_PLACEHOLDERS):
            raise ValidationError(
                {'student_id_format': 'Format must contain {sequence:D4} or {sequence:D5}.'}
            )
        if self.student_id_starting_number is not None and self.student_id_starting_number < 1:
            raise ValidationError(
                {'student_id_starting_number': 'Starting number must be at least 1.'}
            )

    def save(self, *args, **kwargs):
        if not self.code:
            base_code = slugify(self.name).replace('-', '_')[:30] or 'college'
            candidate = base_code
            sequence = 1
            while College.objects.exclude(pk=self.pk).filter(code=candidate).exists():
                suffix = f'_{sequence}'
                candidate = f'{base_code[:30 - len(suffix)]}{suffix}'
                sequence += 1
            self.code = candidate

        super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.name} ({self.code})"


class Major(models.Model):
    college = models.ForeignKey(
        College,
        on_delete=models.CASCADE,
        related_name='majors',
    )
    name_en = models.CharField(max_length=255)
    name_ar = models.CharField(max_length=255, blank=True)
    code = models.CharField(max_length=40)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['college__name', 'name_en']
        constraints = [
            models.UniqueConstraint(
                fields=['college', 'code'],
                name='unique_major_code_per_college',
            )
        ]

    def __str__(self):
        return f"{self.name_en} ({self.code})"
