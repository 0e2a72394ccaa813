from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from .models import (
    AgeGroup, Bed, Department, Disease, Inventory, Medicine, PrescribedMedicine, Staff, Subcategory, User,
)


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    fieldsets = BaseUserAdmin.fieldsets + (('Dashboard', {'fields': ('role',)}),)
    list_display = ('username', 'role', 'is_active', 'is_staff')
    list_filter = ('role', 'is_active')


@admin.register(Department)
class DepartmentAdmin(admin.ModelAdmin):
    list_display = ('id', 'name')
    search_fields = ('name',)


@admin.register(Staff)
class StaffAdmin(admin.ModelAdmin):
    list_display = ('id', 'name', 'specialization', 'department', 'is_available')
    list_filter = ('is_available', 'department')
    search_fields = ('name', 'specialization')


@admin.register(Bed)
class BedAdmin(admin.ModelAdmin):
    list_display = ('id', 'type', 'status', 'department')
    list_filter = ('status', 'department')


@admin.register(Medicine)
class MedicineAdmin(admin.ModelAdmin):
    list_display = ('id', 'name', 'form', 'strength', 'unit')
    search_fields = ('name',)


@admin.register(Inventory)
class InventoryAdmin(admin.ModelAdmin):
    list_display = ('id', 'medicine', 'available_qty', 'batch_number', 'expiry_date', 'updated_at')
    search_fields = ('batch_number', 'medicine__name')


class PrescribedMedicineInline(admin.TabularInline):
    model = PrescribedMedicine
    extra = 0


@admin.register(AgeGroup)
class AgeGroupAdmin(admin.ModelAdmin):
    list_display = ('id', 'subcategory', 'group', 'age_range')
    inlines = [PrescribedMedicineInline]


class SubcategoryInline(admin.TabularInline):
    model = Subcategory
    extra = 0


@admin.register(Disease)
class DiseaseAdmin(admin.ModelAdmin):
    list_display = ('id', 'name')
    search_fields = ('name',)
    inlines = [SubcategoryInline]
