from django.contrib import admin

from .models import User


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ('username', 'email', 'role', 'college', 'is_staff')
    list_filter = ('role', 'college')
    search_fields = ('username', 'email', 'first_name', 'last_name')
