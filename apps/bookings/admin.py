from django.contrib import admin  # type: ignore

from .models import Booking


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = ("id", "spot", "user", "start_date", "end_date", "created_at")
    list_filter = ("start_date",)
    search_fields = ("spot__name", "user__username", "user__email")
    raw_id_fields = ("spot", "user")
    date_hierarchy = "start_date"
