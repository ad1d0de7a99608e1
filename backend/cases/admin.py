from django.contrib import admin

from .models import Attachment, Case


class AttachmentInline(admin.TabularInline):
    model = Attachment
    extra = 0
    readonly_fields = ("file_name", "file_url", "file_type", "file_size",
                       "storage_path", "created_at")


@admin.register(Case)
class CaseAdmin(admin.ModelAdmin):
    list_display = ("id", "case_title", "main_category", "status",
                    "is_public", "user", "view_count", "created_at")
    list_filter = ("status", "main_category", "is_public")
    search_fields = ("case_title", "case_description", "name", "phone_number")
    raw_id_fields = ("user", "reviewed_by")
    # Status changes go through the lifecycle service only.
    readonly_fields = ("status", "is_public", "reviewed_at", "reviewed_by",
                       "resolved_at", "view_count")
    inlines = [AttachmentInline]


@admin.register(Attachment)
class AttachmentAdmin(admin.ModelAdmin):
    list_display = ("file_name", "case", "file_type", "file_size", "created_at")
    search_fields = ("file_name",)
