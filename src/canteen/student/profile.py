"""Student profile management: command and handler."""

from protean import handle
from protean.fields import Identifier, Integer, String
from protean.utils.globals import current_domain

from canteen.domain import canteen
from canteen.student.student import Student


@canteen.command(part_of="Student")
class UpdateStudentProfile:
    student_id: Identifier(required=True)
    name: String(max_length=100)
    hostel: String(max_length=2)
    phone: String(max_length=10)
    year: Integer()


@canteen.command_handler(part_of=Student)
class ManageStudentProfileHandler:
    @handle(UpdateStudentProfile)
    def update_profile(self, command):
        repo = current_domain.repository_for(Student)
        student = repo.get(command.student_id)
        student.update_profile(
            name=command.name,
            hostel=command.hostel,
            phone=command.phone,
            year=command.year,
        )
        repo.add(student)
