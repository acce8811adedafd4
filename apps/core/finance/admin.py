from django.contrib import admin

from .models import Invoice, InvoiceItem, NumberSequence, Payment


class InvoiceItemInline(admin.TabularInline):
    model = InvoiceItem
    extra = 0
    can_delete = False


@admin.register(Invoice)
class InvoiceAdmin(admin.ModelAdmin):
    list_display = (
        'invoice_number',
        'student',
        'college',
        'invoice_type',
        'status',
        'total_amount',
        'paid_amount',
        'pending_amount',
        'invoice_date',
    )
    list_filter = ('college', 'invoice_type', 'status')
    search_fields = ('invoice_number', 'student__student_id', 'student__name_en')
    inlines = [InvoiceItemInline]


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = ('payment_number', 'invoice', 'student', 'amount', 'status', 'payment_date', 'verified_at')
    list_filter = ('college', 'status', 'payment_method')
    search_fields = ('payment_number', 'invoice__invoice_number', 'student__student_id')


@admin.register(NumberSequence)
class NumberSequenceAdmin(admin.ModelAdmin):
    list_display = ('college', 'kind', 'year', 'last_value')
    list_filter = ('kind', 'year')
