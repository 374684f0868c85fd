from .student import Student
from .teacher import Teacher
from .class_model import SchoolClass
from .announcement import Announcement
__all__ = ["Student", "Teacher", "SchoolClass", "Announcement"]
