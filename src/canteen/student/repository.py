"""Repository for the Student aggregate."""

from canteen.domain import canteen
from canteen.student.student import Student


@canteen.repository(part_of=Student)
class StudentRepository:
    def find_by_email(self, email: str) -> Student | None:
        # Value object attributes are stored as flattened shadow fields
        return self._dao.query.filter(email_address=email).all().first

    def find_by_roll_number(self, roll_number: str) -> Student | None:
        return self._dao.query.filter(roll_number=roll_number).all().first

    def find_by_id(self, student_id) -> Student | None:
        return self._dao.query.filter(id=str(student_id)).all().first
