from django.contrib import admin  # type: ignore

from .models import Spot, SpotImage


class SpotImageInline(admin.TabularInline):
    model = SpotImage
    extra = 0


@admin.register(Spot)
class SpotAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "owner", "city", "country", "price", "created_at")
    list_filter = ("country", "state")
    search_fields = ("name", "city", "address", "owner__username")
    raw_id_fields = ("owner",)
    inlines = [SpotImageInline]


@admin.register(SpotImage)
class SpotImageAdmin(admin.ModelAdmin):
    list_display = ("id", "spot", "url", "preview")
    list_filter = ("preview",)
