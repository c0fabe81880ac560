"""Student registration: command and handler."""

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Integer, String
from protean.utils.globals import current_domain

from canteen.domain import canteen
from canteen.student.student import Student

logger = structlog.get_logger(__name__)


@canteen.command(part_of="Student")
class RegisterStudent:
    """Create a student account."""

    name: String(required=True, max_length=100)
    email: String(required=True, max_length=254)
    roll_number: String(required=True, max_length=9)
    hostel: String(required=True, max_length=2)
    phone: String(required=True, max_length=10)
    year: Integer(required=True)


@canteen.command_handler(part_of=Student)
class RegisterStudentHandler:
    @handle(RegisterStudent)
    def register_student(self, command):
        repo = current_domain.repository_for(Student)
        email = command.email.strip().lower()

        if repo.find_by_email(email):
            raise ValidationError({"email": ["Student with this email already exists"]})
        if repo.find_by_roll_number(command.roll_number):
            raise ValidationError({"roll_number": ["Student with this roll number already exists"]})

        student = Student.register(
            name=command.name,
            email=email,
            roll_number=command.roll_number,
            hostel=command.hostel,
            phone=command.phone,
            year=command.year,
        )
        repo.add(student)

        logger.info("Student registered", student_id=str(student.id), roll_number=student.roll_number)
        return str(student.id)
