"""Domain events for the Student aggregate."""

from protean.fields import DateTime, Identifier, Integer, String

from canteen.domain import canteen


@canteen.event(part_of="Student")
class StudentRegistered:
    """A student created an account with a campus email."""

    __version__ = 1

    student_id: Identifier(required=True)
    email: String(required=True)
    roll_number: String(required=True)
    registered_at: DateTime(required=True)


@canteen.event(part_of="Student")
class StudentProfileUpdated:
    __version__ = 1

    student_id: Identifier(required=True)
    name: String(required=True)
    hostel: String(required=True)
    phone: String(required=True)
    year: Integer(required=True)
