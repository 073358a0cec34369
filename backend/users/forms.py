from django import forms
from django.contrib.auth.forms import ReadOnlyPasswordHashField
from django.utils.translation import gettext_lazy as _

from .models import User


class UserAdminCreationForm(forms.ModelForm):
    """
    Creates restaurant staff from the admin.

    Platform superusers come from ``createsuperuser``; anything created here
    works for a restaurant and therefore needs one.
    """

    password1 = forms.CharField(label=_("Password"), widget=forms.PasswordInput)
    password2 = forms.CharField(
        label=_("Password confirmation"), widget=forms.PasswordInput
    )

    class Meta:
        model = User
        fields = ("email", "tenant", "role")

    def clean_email(self):
        return User.objects.normalize_email(self.cleaned_data["email"])

    def clean_tenant(self):
        tenant = self.cleaned_data.get("tenant")
        if tenant is None:
            raise forms.ValidationError(_("Staff users must belong to a restaurant."))
        return tenant

    def clean_password2(self):
        first = self.cleaned_data.get("password1")
        second = self.cleaned_data.get("password2")
        if first and second and first != second:
            raise forms.ValidationError(_("Passwords don't match."))
        return second

    def save(self, commit=True):
        user = super().save(commit=False)
        user.set_password(self.cleaned_data["password1"])
        if commit:
            user.save()
        return user


class UserAdminChangeForm(forms.ModelForm):
    password = ReadOnlyPasswordHashField(
        label=_("Password"),
        help_text=_(
            "Passwords are stored hashed. Use "
            '<a href="../password/">this form</a> to set a new one.'
        ),
    )

    class Meta:
        model = User
        fields = (
            "email", "password", "first_name", "last_name", "tenant", "role",
            "is_active", "is_staff", "is_superuser", "groups", "user_permissions",
        )

    def clean(self):
        cleaned = super().clean()
        if not cleaned.get("is_superuser") and cleaned.get("tenant") is None:
            self.add_error("tenant", _("Only platform superusers may have no restaurant."))
        return cleaned
