from models import SchoolClass, Student, Teacher, Announcement
from services.record_service import delete_record, get_record, is_duplicate


def test_duplicate_check_is_case_insensitive(make_student):
    make_student("a100")

    assert is_duplicate(Student, "roll", "A100")
    assert is_duplicate(Student, "roll", "a100")


def test_duplicate_check_is_exact_not_substring(make_student):
    make_student("A100")

    assert not is_duplicate(Student, "roll", "A10")
    assert not is_duplicate(Student, "roll", "A1000")


def test_duplicate_check_excludes_own_record(make_student):
    student = make_student("A100")

    assert not is_duplicate(Student, "roll", "A100", exclude_id=student.student_id)


def test_duplicate_check_still_sees_other_records_when_excluding(make_student):
    make_student("A100")
    other = make_student("B200")

    assert is_duplicate(Student, "roll", "a100", exclude_id=other.student_id)


def test_duplicate_check_covers_every_identifying_field(make_teacher, make_class, make_announcement):
    make_teacher("EMP-7")
    make_class("6A")
    make_announcement("Sports Day")

    assert is_duplicate(Teacher, "employee_id", "emp-7")
    assert is_duplicate(SchoolClass, "class_name", "6a")
    assert is_duplicate(Announcement, "title", "SPORTS DAY")


def test_get_record_handles_unknown_and_malformed_ids(make_student):
    student = make_student("A100")

    assert get_record(Student, student.student_id).roll == "A100"
    assert get_record(Student, str(student.student_id)).roll == "A100"
    assert get_record(Student, "999") is None
    assert get_record(Student, "not-an-id") is None
    assert get_record(Student, None) is None


def test_delete_record(make_teacher):
    teacher = make_teacher("EMP-1")
    teacher_id = teacher.teacher_id

    assert delete_record(Teacher, teacher_id) is True
    assert get_record(Teacher, teacher_id) is None
    assert delete_record(Teacher, teacher_id) is False
