from django.contrib import admin

from core.admin import CompanySafeAdmin
from .models import PackageItem, Service, ServicePackage, ServicePhoto


class ServicePhotoInline(admin.TabularInline):
    model = ServicePhoto
    extra = 0
    fields = ("photo_url", "caption", "is_primary")


@admin.register(Service)
class ServiceAdmin(CompanySafeAdmin):
    list_display = ("name", "category", "price", "duration_minutes", "company", "is_active")
    list_filter = ("category", "is_active")
    search_fields = ("name", "description")
    inlines = [ServicePhotoInline]

    def save_formset(self, request, form, formset, change):
        for photo in formset.save(commit=False):
            photo.company = form.instance.company
            photo.save()
        for obj in formset.deleted_objects:
            obj.delete()


class PackageItemInline(admin.TabularInline):
    model = PackageItem
    extra = 0


@admin.register(ServicePackage)
class ServicePackageAdmin(CompanySafeAdmin):
    list_display = ("name", "discount_type", "discount_value", "total_price", "final_price", "company", "is_active")
    list_filter = ("discount_type", "is_active")
    inlines = [PackageItemInline]
    readonly_fields = ("total_price", "final_price")

    def save_related(self, request, form, formsets, change):
        super().save_related(request, form, formsets, change)
        package = form.instance
        package.recalculate()
        package.save(update_fields=["total_price", "final_price", "updated_at"])
