from .student import Student
from .attendance import Attendance
from .user import User

__all__ = ["Student", "Attendance", "User"]
