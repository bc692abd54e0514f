from django.contrib import admin  # type: ignore

from .models import Review, ReviewImage


class ReviewImageInline(admin.TabularInline):
    model = ReviewImage
    extra = 0


@admin.register(Review)
class ReviewAdmin(admin.ModelAdmin):
    list_display = ("id", "spot", "user", "stars", "created_at")
    list_filter = ("stars",)
    search_fields = ("review", "spot__name", "user__username")
    raw_id_fields = ("spot", "user")
    inlines = [ReviewImageInline]
