from django.contrib import admin

from core.admin import CompanySafeAdmin
from .models import Pet, PetPhoto


class PetPhotoInline(admin.TabularInline):
    model = PetPhoto
    extra = 0
    fields = ("photo_url", "caption", "is_profile_photo")


@admin.register(Pet)
class PetAdmin(CompanySafeAdmin):
    list_display = ("name", "species", "breed", "client", "company", "is_active")
    list_filter = ("species", "size", "is_active")
    search_fields = ("name", "breed", "client__name")
    inlines = [PetPhotoInline]

    def save_formset(self, request, form, formset, change):
        for photo in formset.save(commit=False):
            photo.company = form.instance.company
            photo.save()
        for obj in formset.deleted_objects:
            obj.delete()
