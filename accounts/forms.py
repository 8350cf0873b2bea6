from django import forms
from django.contrib.auth import password_validation
from django.contrib.auth.forms import AuthenticationForm
from django.core.exceptions import ValidationError
from django.utils.translation import gettext_lazy as _

from .models import EMAIL_TAKEN_MESSAGE, RoleType, User

BAD_CREDENTIALS_MESSAGE = _("Bad credentials.")


class LoginForm(AuthenticationForm):
    """
    Login with username or email.
    Every failure gives the same message so account existence isn't leaked.
    """

    error_messages = {
        'invalid_login': BAD_CREDENTIALS_MESSAGE,
        'inactive': BAD_CREDENTIALS_MESSAGE,
    }

    def __init__(self, request=None, *args, **kwargs):
        super().__init__(request, *args, **kwargs)
        self.fields['username'].label = _("Username or email")


class UserForm(forms.ModelForm):
    """
    Registration and profile edit form.
    Username is fixed once registered; a blank password on edit keeps the
    current one.
    """

    password1 = forms.CharField(
        label=_("Password"),
        strip=False,
        required=False,
        widget=forms.PasswordInput(attrs={'autocomplete': 'new-password'})
    )
    password2 = forms.CharField(
        label=_("Confirm password"),
        strip=False,
        required=False,
        widget=forms.PasswordInput(attrs={'autocomplete': 'new-password'})
    )

    class Meta:
        model = User
        fields = ['username', 'first_name', 'last_name', 'display_name', 'email']
        labels = {
            'username': _("Username"),
            'first_name': _("First name"),
            'last_name': _("Last name"),
            'display_name': _("Display name"),
            'email': _("Email address"),
        }

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)

        for name in ('first_name', 'last_name', 'display_name', 'email'):
            self.fields[name].required = True

        if self.is_registered:
            self.fields['username'].disabled = True
            self.fields['password1'].label = _("New password")
            self.fields['password2'].label = _("Confirm new password")
        else:
            self.fields['password1'].required = True
            self.fields['password2'].required = True

    @property
    def is_registered(self) -> bool:
        return not self.instance._state.adding

    def clean_email(self):
        email = User.objects.normalize_email(self.cleaned_data.get('email')) or None

        # Login resolves emails case-insensitively
        if email and User.objects.filter(email__iexact=email).exclude(pk=self.instance.pk).exists():
            raise ValidationError(EMAIL_TAKEN_MESSAGE, code='unique')

        return email

    def clean(self):
        cleaned_data = super().clean()
        password1 = cleaned_data.get('password1')
        password2 = cleaned_data.get('password2')

        if (password1 or password2) and password1 != password2:
            self.add_error('password2', _("The password fields must match."))

        return cleaned_data

    def _post_clean(self):
        super()._post_clean()
        # Instance is populated by now
        password = self.cleaned_data.get('password1')
        if password and 'password2' not in self.errors:
            try:
                password_validation.validate_password(password, self.instance)
            except ValidationError as error:
                self.add_error('password1', error)

    def save(self, commit=True):
        user = super().save(commit=False)

        password = self.cleaned_data.get('password1')
        if password:
            user.set_password(password)

        if not self.is_registered and not user.get_roles():
            user.add_role(RoleType.USER)

        if commit:
            user.save()
        return user
