"""
Django admin configuration for chat models.

Provides admin interfaces for:
- Chat management
- Membership viewing (including leaved members)
- Message moderation
"""

from django.contrib import admin

from chat.models import Chat, ChatUser, Message


class ChatUserInline(admin.TabularInline):
    """Inline display of memberships in chat admin."""

    model = ChatUser
    extra = 0
    readonly_fields = ["status", "last_seen", "created_at", "deleted_at"]
    raw_id_fields = ["user"]


@admin.register(Chat)
class ChatAdmin(admin.ModelAdmin):
    """Admin interface for Chat model."""

    list_display = ["id", "title", "created_by", "is_deleted", "created_at"]
    list_filter = ["is_deleted", "created_at"]
    search_fields = ["title", "id"]
    readonly_fields = ["created_at", "updated_at", "deleted_at"]
    raw_id_fields = ["created_by"]
    inlines = [ChatUserInline]
    ordering = ["-created_at"]

    def get_queryset(self, request):
        return Chat.all_objects.all()


@admin.register(ChatUser)
class ChatUserAdmin(admin.ModelAdmin):
    """Admin interface for ChatUser model."""

    list_display = [
        "id",
        "chat",
        "user",
        "status",
        "last_seen",
        "is_deleted",
        "created_at",
    ]
    list_filter = ["status", "is_deleted", "created_at"]
    search_fields = ["user__email", "chat__title"]
    readonly_fields = ["created_at", "updated_at", "deleted_at"]
    raw_id_fields = ["chat", "user"]
    ordering = ["-created_at"]

    def get_queryset(self, request):
        # Leaved memberships are soft-deleted and hidden by the default manager.
        return ChatUser.all_objects.select_related("chat", "user")


@admin.register(Message)
class MessageAdmin(admin.ModelAdmin):
    """Admin interface for Message model."""

    list_display = ["id", "chat", "sender", "content_preview", "created_at"]
    list_filter = ["created_at"]
    search_fields = ["content", "sender__email"]
    readonly_fields = ["created_at", "updated_at"]
    raw_id_fields = ["chat", "sender"]
    ordering = ["-created_at"]

    @admin.display(description="Content Preview")
    def content_preview(self, obj: Message) -> str:
        """Return truncated content for list display."""
        max_length = 50
        if len(obj.content) > max_length:
            return obj.content[:max_length] + "..."
        return obj.content
