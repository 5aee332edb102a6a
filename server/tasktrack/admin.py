from django import forms
from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from tasktrack.models import Passkey, User
from tasktrack.stores import normalize_email


class PasswordlessUserCreationForm(forms.ModelForm):
    """Admin add form: email + display name, no password fields."""

    class Meta:
        model = User
        fields = ("email", "display_name")

    def clean_email(self):
        return normalize_email(self.cleaned_data.get("email"))

    def save(self, commit=True):
        user = super().save(commit=False)
        user.username = user.email
        if commit:
            user.save()
        return user


class PasskeyInline(admin.TabularInline):
    model = Passkey
    extra = 0
    fields = ["name", "sign_count", "created_at", "last_used_at"]
    readonly_fields = fields
    can_delete = True


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """Admin for custom User model."""

    list_display = [
        "email",
        "display_name",
        "has_pending_challenge",
        "is_active",
        "created_at",
    ]
    list_filter = ["is_active", "is_staff", "created_at"]
    search_fields = ["email", "display_name"]
    readonly_fields = [
        "current_challenge",
        "current_challenge_expires_at",
        "created_at",
        "updated_at",
    ]
    inlines = [PasskeyInline]

    fieldsets = (
        (None, {"fields": ("email", "display_name")}),
        (
            "Pending Challenge",
            {"fields": ("current_challenge", "current_challenge_expires_at")},
        ),
        (
            "Permissions",
            {
                "fields": (
                    "is_active",
                    "is_staff",
                    "is_superuser",
                    "groups",
                    "user_permissions",
                )
            },
        ),
        ("Important Dates", {"fields": ("last_login", "created_at", "updated_at")}),
    )

    add_form = PasswordlessUserCreationForm
    add_fieldsets = (
        (None, {"classes": ("wide",), "fields": ("email", "display_name")}),
    )

    ordering = ["-created_at"]

    @admin.display(boolean=True, description="Pending challenge")
    def has_pending_challenge(self, obj):
        return bool(obj.current_challenge)


@admin.register(Passkey)
class PasskeyAdmin(admin.ModelAdmin):
    """Admin for Passkey model."""

    list_display = ["name", "user", "sign_count", "created_at", "last_used_at"]
    list_filter = ["created_at", "last_used_at"]
    search_fields = ["name", "user__email", "credential_id"]
    readonly_fields = ["credential_id", "public_key", "sign_count", "transports", "created_at", "last_used_at"]

    fieldsets = (
        (None, {"fields": ("user", "name")}),
        ("Credential Data", {"fields": ("credential_id", "public_key", "sign_count", "transports")}),
        ("Timestamps", {"fields": ("created_at", "last_used_at")}),
    )
