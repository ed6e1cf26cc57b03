import re

from django.core.exceptions import ValidationError


class PasswordComplexityValidator:
    """
    Requires at least one uppercase letter, one lowercase letter,
    one digit and one special character.
    """
    rules = [
        (r'[A-Z]', 'one uppercase letter'),
        (r'[a-z]', 'one lowercase letter'),
        (r'\d', 'one number'),
        (r'[^A-Za-z0-9]', 'one special character'),
    ]

    def validate(self, password, user=None):
        missing = [label for pattern, label in self.rules if not re.search(pattern, password)]
        if missing:
            raise ValidationError(
                f"Password must contain at least {', '.join(missing)}.",
                code='password_too_simple',
            )

    def get_help_text(self):
        return (
            'Your password must contain an uppercase letter, a lowercase letter, '
            'a number and a special character.'
        )
