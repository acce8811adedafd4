from django.contrib import admin, messages

from .models import Application
from .services import accept_application


@admin.register(Application)
class ApplicationAdmin(admin.ModelAdmin):
    list_display = (
        'application_number',
        'first_name',
        'last_name',
        'email',
        'college',
        'major',
        'status',
        'registration_fee_amount',
        'created_at',
    )
    list_filter = ('college', 'status')
    search_fields = ('application_number', 'first_name', 'last_name', 'email')
    readonly_fields = ('reviewed_by', 'reviewed_at', 'created_at')
    actions = ['accept_and_create_students']

    @admin.action(description='Accept and create student')
    def accept_and_create_students(self, request, queryset):
        for application in queryset.select_related('college', 'major'):
            result = accept_application(application, reviewed_by=request.user)
            if result['success']:
                student = result['student']
                self.message_user(
                    request,
                    f"{application}: created student {student.student_id} "
                    f"with temporary password {result['password']}",
                    messages.SUCCESS,
                )
                for warning in result['warnings']:
                    self.message_user(request, f"{application}: {warning['message']}", messages.WARNING)
            elif result['already_exists']:
                self.message_user(
                    request,
                    f"{application}: student {result['student'].student_id} already exists.",
                    messages.INFO,
                )
            else:
                self.message_user(request, f"{application}: {result['error']}", messages.ERROR)
