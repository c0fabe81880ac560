"""PhoneNumber value object for campus contact numbers."""

import re

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import String

from canteen.domain import canteen

_TEN_DIGITS = re.compile(r"^\d{10}$")


@canteen.value_object
class PhoneNumber:
    """A ten-digit phone number, digits only."""

    number: String(required=True, max_length=10)

    @invariant.post
    def must_be_ten_digits(self):
        if not _TEN_DIGITS.match(self.number or ""):
            raise ValidationError({"phone": ["Phone number must be 10 digits"]})
