from datetime import date

import pytest

from sqlmodel import select

from requalify import models, schemas
from requalify.results import Ok, ReferenceNotFound, ResourceNotFound, ValidationFailed
from requalify.services import CourseService, EducationService, PWD_CTX, SkillService, UserService


def _user_request(**overrides):
    fields = dict(
        name="Ana",
        email="a@x.com",
        password="pw",
        phone="11999999999",
        birth_date=date(1990, 1, 1),
        current_role="Developer",
        interest_area="Data",
    )
    fields.update(overrides)
    return schemas.CreateUserRequest(**fields)


def _skill_request(user_id=1, **overrides):
    fields = dict(name="C#", level="Advanced", category="Backend", proficiency_percentage=90,
                  description="C# skill", user_id=user_id)
    fields.update(overrides)
    return schemas.CreateSkillRequest(**fields)


def test_create_user_hashes_password_and_trims_email(session):
    result = UserService(session).create(_user_request(email="  a@x.com "))
    assert isinstance(result, Ok)
    user = result.value
    assert user.id > 0
    assert user.email == "a@x.com"
    assert user.password_hash != "pw"
    assert PWD_CTX.verify("pw", user.password_hash)


def test_create_user_rejects_email_in_use_after_trimming(session):
    svc = UserService(session)
    assert isinstance(svc.create(_user_request(email="a@x.com")), Ok)
    result = svc.create(_user_request(email=" a@x.com "))
    assert isinstance(result, ValidationFailed)
    assert result.field == "email"
    assert result.message == "The email provided is already in use."
    assert len(session.exec(select(models.User)).all()) == 1


def test_email_comparison_is_case_sensitive(session):
    svc = UserService(session)
    assert isinstance(svc.create(_user_request(email="a@x.com")), Ok)
    assert isinstance(svc.create(_user_request(email="A@x.com")), Ok)


@pytest.mark.parametrize("overrides, field", [
    (dict(name="  "), "name"),
    (dict(name=None, email=None), "name"),
    (dict(email=""), "email"),
    (dict(password=None, phone=None), "password"),
    (dict(phone="\t"), "phone"),
    (dict(birth_date=None, current_role=None), "birth_date"),
    (dict(birth_date=date.min), "birth_date"),
    (dict(current_role="", interest_area=""), "current_role"),
    (dict(interest_area=None), "interest_area"),
])
def test_create_user_reports_first_missing_field(session, overrides, field):
    result = UserService(session).create(_user_request(**overrides))
    assert isinstance(result, ValidationFailed)
    assert result.field == field
    assert result.message.endswith("is required.")


def test_email_in_use_is_reported_before_missing_password(session, seed_user):
    seed_user(email="a@x.com")
    result = UserService(session).create(_user_request(password=None))
    assert result.field == "email"


def test_get_all_users_on_empty_store_is_not_found(session):
    result = UserService(session).get_all()
    assert isinstance(result, ResourceNotFound)
    assert result.message == "No users found."


def test_get_user_loads_sub_resources(session, seed_user):
    user = seed_user()
    SkillService(session).create(_skill_request(user.id))
    EducationService(session).create(schemas.CreateEducationRequest(degree="BSc", institution="FIAP", user_id=user.id))
    user_id = user.id
    session.expunge_all()

    result = UserService(session).get_by_id(user_id)
    assert isinstance(result, Ok)
    assert [s.name for s in result.value.skills] == ["C#"]
    assert [e.degree for e in result.value.educations] == ["BSc"]
    assert result.value.courses == []


def test_get_by_email(session, seed_user):
    user = seed_user(email="find@me.com")
    svc = UserService(session)
    assert svc.get_by_email(" find@me.com ").value.id == user.id
    assert isinstance(svc.get_by_email("other@me.com"), ResourceNotFound)
    missing = svc.get_by_email("  ")
    assert isinstance(missing, ValidationFailed)
    assert missing.field == "email"


def test_update_user_keeps_password(session, seed_user):
    user = seed_user()
    original_hash = user.password_hash
    request = schemas.UpdateUserRequest(name="New Name", email="new@x.com", phone="1", birth_date=date(1991, 2, 3),
                                        current_role="Lead", interest_area="Cloud")
    result = UserService(session).update(user.id, request)
    assert isinstance(result, Ok)
    assert result.value.name == "New Name"
    assert result.value.current_role == "Lead"
    assert result.value.password_hash == original_hash


def test_update_user_validates_and_reports_missing_user(session, seed_user):
    user = seed_user()
    svc = UserService(session)
    assert isinstance(svc.update(999, schemas.UpdateUserRequest(name="x")), ResourceNotFound)
    failure = svc.update(user.id, schemas.UpdateUserRequest(name="x", email="y@z.com"))
    assert isinstance(failure, ValidationFailed)
    assert failure.field == "phone"
    session.refresh(user)
    assert user.name == "Test User"


@pytest.mark.parametrize("p", [-1, 101, 1000, -50])
def test_skill_proficiency_out_of_range_is_rejected(session, seed_user, p):
    user = seed_user()
    result = SkillService(session).create(_skill_request(user.id, proficiency_percentage=p))
    assert isinstance(result, ValidationFailed)
    assert result.message == "Proficiency must be between 0 and 100."
    assert session.exec(select(models.Skill)).all() == []


@pytest.mark.parametrize("p", [0, 1, 50, 99, 100])
def test_skill_proficiency_in_range_is_stored_exactly(session, seed_user, p):
    user = seed_user()
    result = SkillService(session).create(_skill_request(user.id, proficiency_percentage=p))
    assert isinstance(result, Ok)
    assert result.value.proficiency_percentage == p
    assert result.value.user_id == user.id


def test_skill_checks_field_order(session, seed_user):
    user = seed_user()
    svc = SkillService(session)
    assert svc.create(_skill_request(user.id, name="", level="")).field == "name"
    assert svc.create(_skill_request(user.id, level=" ", category=None)).field == "level"
    assert svc.create(_skill_request(user.id, category=None, proficiency_percentage=200)).field == "category"


def test_create_skill_for_missing_user(session):
    result = SkillService(session).create(_skill_request(user_id=999))
    assert isinstance(result, ReferenceNotFound)
    assert result.entity == "User"
    assert result.entity_id == 999
    assert "999" in result.message
    assert session.exec(select(models.Skill)).all() == []


def test_field_errors_win_over_missing_user(session):
    result = SkillService(session).create(_skill_request(user_id=999, name=""))
    assert isinstance(result, ValidationFailed)


def test_get_all_skills_on_empty_store_is_not_found(session):
    result = SkillService(session).get_all()
    assert isinstance(result, ResourceNotFound)
    assert result.message == "No skills records found."


def test_get_skills_by_user(session, seed_user):
    first = seed_user(email="one@x.com")
    second = seed_user(email="two@x.com")
    svc = SkillService(session)
    svc.create(_skill_request(first.id, name="SQL"))
    svc.create(_skill_request(first.id, name="Python"))
    assert [s.name for s in svc.get_by_user_id(first.id).value] == ["SQL", "Python"]
    none = svc.get_by_user_id(second.id)
    assert isinstance(none, ResourceNotFound)
    assert none.message == "No skills found for this user."


def test_update_and_delete_skill(session, seed_user):
    user = seed_user()
    svc = SkillService(session)
    skill_id = svc.create(_skill_request(user.id)).value.id
    update = schemas.UpdateSkillRequest(name="C#", level="Expert", category="Backend", proficiency_percentage=100)
    assert svc.update(skill_id, update).value.level == "Expert"
    bad = svc.update(skill_id, schemas.UpdateSkillRequest(name="C#", level="x", category="y", proficiency_percentage=-1))
    assert isinstance(bad, ValidationFailed)
    assert isinstance(svc.delete(skill_id), Ok)
    assert isinstance(svc.get_by_id(skill_id), ResourceNotFound)
    assert isinstance(svc.delete(skill_id), ResourceNotFound)


def test_course_create_get_and_cascade_on_user_delete(session, seed_user):
    user = seed_user()
    assert user.id == 1
    courses = CourseService(session)
    created = courses.create(schemas.CreateCourseRequest(
        title="C# Basics", description="Intro", category="Programming", difficulty="Easy",
        url="https://x", user_id=1,
    ))
    assert isinstance(created, Ok)
    course = created.value
    course_id = course.id
    assert course.user_id == 1
    assert course.id > 0
    assert course.created_at is not None
    assert course.updated_at is not None

    assert courses.get_by_id(course.id).value.title == "C# Basics"

    assert isinstance(UserService(session).delete(1), Ok)
    assert isinstance(courses.get_by_id(course_id), ResourceNotFound)
    assert isinstance(UserService(session).get_by_id(1), ResourceNotFound)


def test_user_delete_removes_every_owned_record(session, seed_user):
    user = seed_user()
    other = seed_user(email="other@x.com")
    SkillService(session).create(_skill_request(user.id))
    SkillService(session).create(_skill_request(other.id))
    EducationService(session).create(schemas.CreateEducationRequest(degree="MBA", institution="USP", user_id=user.id))
    CourseService(session).create(schemas.CreateCourseRequest(title="t", description="d", category="c",
                                                              difficulty="Easy", user_id=user.id))

    UserService(session).delete(user.id)

    assert [s.user_id for s in SkillService(session).get_all().value] == [other.id]
    assert isinstance(EducationService(session).get_all(), ResourceNotFound)
    assert isinstance(CourseService(session).get_all(), ResourceNotFound)


def test_delete_missing_user_is_not_found(session):
    result = UserService(session).delete(42)
    assert isinstance(result, ResourceNotFound)
    assert result.message == "User not found."


def test_course_validation_order_and_update_timestamp(session, seed_user):
    user = seed_user()
    svc = CourseService(session)
    missing = svc.create(schemas.CreateCourseRequest(title="t", description=" ", category=None, difficulty="Easy",
                                                     user_id=user.id))
    assert missing.field == "description"
    assert svc.create(schemas.CreateCourseRequest(title="t", description="d", category="c", user_id=user.id)).field == "difficulty"

    course = svc.create(schemas.CreateCourseRequest(title="t", description="d", category="c", difficulty="Easy",
                                                    user_id=user.id)).value
    created_at = course.created_at
    first_update = course.updated_at
    updated = svc.update(course.id, schemas.UpdateCourseRequest(title="t2", description="d", category="c",
                                                                difficulty="Hard")).value
    assert updated.title == "t2"
    assert updated.url is None
    assert updated.created_at == created_at
    assert updated.updated_at >= first_update


def test_education_validation_and_reference(session, seed_user):
    svc = EducationService(session)
    assert svc.create(schemas.CreateEducationRequest(degree="", institution="", user_id=1)).field == "degree"
    assert svc.create(schemas.CreateEducationRequest(degree="BSc", user_id=1)).field == "institution"
    assert isinstance(svc.create(schemas.CreateEducationRequest(degree="BSc", institution="FIAP", user_id=1)),
                      ReferenceNotFound)
    assert isinstance(svc.create(schemas.CreateEducationRequest(degree="BSc", institution="FIAP")), ReferenceNotFound)

    user = seed_user()
    record = svc.create(schemas.CreateEducationRequest(degree="BSc", institution="FIAP", certificate="cert-1",
                                                       completion_date=date(2020, 12, 1), user_id=user.id)).value
    assert record.completion_date == date(2020, 12, 1)
    changed = svc.update(record.id, schemas.UpdateEducationRequest(degree="MSc", institution="USP")).value
    assert changed.degree == "MSc"
    assert changed.certificate is None
    assert svc.get_by_user_id(user.id).value[0].id == record.id
    assert svc.get_by_id(999).message == "Education record not found."
