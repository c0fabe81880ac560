"""Student aggregate: a campus account that places orders."""

import re
from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Integer, String, ValueObject

from canteen.domain import CAMPUS_EMAIL_DOMAIN, canteen
from canteen.shared.email import EmailAddress
from canteen.shared.phone import PhoneNumber

_ROLL_NUMBER = re.compile(r"^\d{9}$")

# Sentinel for distinguishing "not provided" from None in partial updates
_UNSET = object()


class Hostel(Enum):
    A = "A"
    B = "B"
    C = "C"
    D = "D"
    E = "E"
    F = "F"
    G = "G"
    H = "H"
    I = "I"  # noqa: E741
    J = "J"
    K = "K"
    L = "L"
    M = "M"
    N = "N"
    O = "O"  # noqa: E741
    PG = "PG"
    Q = "Q"


@canteen.aggregate
class Student:
    """A registered student, identified on campus by a nine-digit roll number.

    The email must sit on the campus domain; roll number and email are fixed
    at registration, the rest of the profile is self-editable.
    """

    name: String(required=True, max_length=100)
    email: ValueObject(EmailAddress, required=True)
    roll_number: String(required=True, max_length=9, unique=True)
    hostel: String(required=True, choices=Hostel)
    phone: ValueObject(PhoneNumber, required=True)
    year: Integer(required=True, min_value=1, max_value=4)
    registered_at: DateTime()
    updated_at: DateTime()

    @invariant.post
    def roll_number_must_be_nine_digits(self):
        if not _ROLL_NUMBER.match(self.roll_number or ""):
            raise ValidationError({"roll_number": ["Roll number must be 9 digits"]})

    @invariant.post
    def email_must_be_on_campus_domain(self):
        if self.email and not self.email.belongs_to(CAMPUS_EMAIL_DOMAIN):
            raise ValidationError({"email": [f"Please use your campus email address (@{CAMPUS_EMAIL_DOMAIN})"]})

    @classmethod
    def register(cls, name, email, roll_number, hostel, phone, year):
        from canteen.student.events import StudentRegistered

        now = datetime.now(UTC)
        student = cls(
            name=name.strip(),
            email=EmailAddress(address=email.strip().lower()),
            roll_number=roll_number,
            hostel=hostel,
            phone=PhoneNumber(number=phone),
            year=year,
            registered_at=now,
            updated_at=now,
        )
        student.raise_(
            StudentRegistered(
                student_id=str(student.id),
                email=student.email.address,
                roll_number=roll_number,
                registered_at=now,
            )
        )
        return student

    def update_profile(self, name=_UNSET, hostel=_UNSET, phone=_UNSET, year=_UNSET):
        from canteen.student.events import StudentProfileUpdated

        if name is not _UNSET and name is not None:
            self.name = name.strip()
        if hostel is not _UNSET and hostel is not None:
            self.hostel = hostel
        if phone is not _UNSET and phone is not None:
            self.phone = PhoneNumber(number=phone)
        if year is not _UNSET and year is not None:
            self.year = year
        self.updated_at = datetime.now(UTC)

        self.raise_(
            StudentProfileUpdated(
                student_id=str(self.id),
                name=self.name,
                hostel=self.hostel,
                phone=self.phone.number,
                year=self.year,
            )
        )
