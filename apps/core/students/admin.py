from django.contrib import admin

from .models import Student


@admin.register(Student)
class StudentAdmin(admin.ModelAdmin):
    list_display = (
        'student_id',
        'name_en',
        'email',
        'college',
        'major',
        'enrollment_date',
        'study_type',
        'status',
    )
    list_filter = ('college', 'status', 'study_type', 'study_approach')
    search_fields = ('student_id', 'name_en', 'name_ar', 'email')
    readonly_fields = ('student_id', 'created_at')
