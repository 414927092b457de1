"""
Pointman admin.

Read-only audit views: balances only change through the Ledger, and
entries are write-once.
"""

from django.contrib import admin
from django.utils.html import format_html

from pointman.models import AccrualRecord, LedgerEntry, LoyaltyAccount


class LedgerEntryInline(admin.TabularInline):
    model = LedgerEntry
    extra = 0
    readonly_fields = ["entry_type", "points", "balance_after", "description", "reference", "created_at"]
    ordering = ["-created_at"]

    def has_add_permission(self, request, obj=None):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(LoyaltyAccount)
class LoyaltyAccountAdmin(admin.ModelAdmin):
    list_display = ["account_ref", "points_balance", "is_active", "enrolled_at"]
    list_filter = ["is_active"]
    search_fields = ["account_ref"]
    readonly_fields = ["points_balance", "updated_at"]
    inlines = [LedgerEntryInline]


@admin.register(LedgerEntry)
class LedgerEntryAdmin(admin.ModelAdmin):
    list_display = [
        "created_at",
        "account_ref",
        "entry_type",
        "points_display",
        "balance_after",
        "description",
    ]
    list_filter = ["entry_type"]
    search_fields = ["account__account_ref", "description", "reference"]
    readonly_fields = [
        "account",
        "entry_type",
        "points",
        "balance_after",
        "description",
        "reference",
        "created_at",
        "created_by",
    ]
    date_hierarchy = "created_at"

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False

    @admin.display(description="Account")
    def account_ref(self, obj):
        return obj.account.account_ref

    @admin.display(description="Points")
    def points_display(self, obj):
        if obj.points > 0:
            return format_html('<span style="color:green">+{}</span>', obj.points)
        return format_html('<span style="color:red">{}</span>', obj.points)


@admin.register(AccrualRecord)
class AccrualRecordAdmin(admin.ModelAdmin):
    list_display = ["order_ref", "account", "points", "processed_at"]
    search_fields = ["order_ref", "account__account_ref"]
    readonly_fields = ["order_ref", "account", "points", "entry", "order_created_at", "processed_at"]

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
