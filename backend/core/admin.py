from django.contrib import admin


class CompanySafeAdmin(admin.ModelAdmin):
    """
    Admin for company-scoped models.

    Superusers see every shop and can filter by company. Staff of a shop see
    only its rows, pick related records (clients, pets, services, accounts)
    from that shop only, and never choose the company themselves: it is
    taken from their account on save.
    """

    def _staff_company(self, request):
        if request.user.is_superuser:
            return None
        return getattr(request.user, "company", None)

    def get_queryset(self, request):
        qs = super().get_queryset(request)
        if request.user.is_superuser:
            return qs

        company = self._staff_company(request)
        return qs.filter(company=company) if company else qs.none()

    def get_list_filter(self, request):
        list_filter = tuple(super().get_list_filter(request))
        if request.user.is_superuser:
            return ("company",) + list_filter
        return list_filter

    def get_exclude(self, request, obj=None):
        exclude = tuple(super().get_exclude(request, obj) or ())
        if not request.user.is_superuser:
            exclude += ("company",)
        return exclude

    def formfield_for_foreignkey(self, db_field, request, **kwargs):
        company = self._staff_company(request)
        related = db_field.related_model
        if company is not None and any(f.name == "company" for f in related._meta.get_fields()):
            kwargs["queryset"] = related._default_manager.filter(company=company)
        return super().formfield_for_foreignkey(db_field, request, **kwargs)

    def save_model(self, request, obj, form, change):
        company = self._staff_company(request)
        if company is not None:
            obj.company = company
        super().save_model(request, obj, form, change)
