from django.contrib import admin

from .models import College, Major


@admin.register(College)
class CollegeAdmin(admin.ModelAdmin):
    list_display = (
        'name',
        'code',
        'student_id_prefix',
        'student_id_format',
        'student_id_starting_number',
        'is_active',
    )
    list_filter = ('is_active',)
    search_fields = ('name', 'name_ar', 'code')


@admin.register(Major)
class MajorAdmin(admin.ModelAdmin):
    list_display = ('name_en', 'code', 'college', 'is_active')
    list_filter = ('college', 'is_active')
    search_fields = ('name_en', 'name_ar', 'code')
