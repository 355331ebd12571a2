import pytest

from edura.extensions import db
from edura.models import Course, CourseModule, User


def _login(client, user):
    response = client.post("/login", json={"email": user.email, "password": "password123"})
    assert response.status_code == 200


def _course(owner, *, title="Algebra", published=True, modules=4, **fields):
    course = Course(
        owner_id=owner.id,
        title=title,
        description=fields.pop("description", "Equations and more"),
        total_modules=modules,
        published=published,
        tags=[],
        **fields,
    )
    db.session.add(course)
    db.session.commit()
    for number in range(1, modules + 1):
        db.session.add(CourseModule(course_id=course.id, module_number=number, title=f"Module {number}"))
    db.session.commit()
    return course


@pytest.fixture
def author(app_instance):
    author = User(email="author@example.com", display_name="Author")
    author.set_password("password123")
    db.session.add(author)
    db.session.commit()
    return author


def test_library_lists_published_courses_with_filters(client, user, author):
    _course(author, title="Algebra", level="beginner", category="math")
    _course(author, title="Calculus", level="advanced", category="math")
    _course(author, title="Draft", published=False)
    _login(client, user)

    titles = [course["title"] for course in client.get("/courses").get_json()["courses"]]
    assert sorted(titles) == ["Algebra", "Calculus"]

    advanced = client.get("/courses?level=advanced").get_json()["courses"]
    assert [course["title"] for course in advanced] == ["Calculus"]

    searched = client.get("/courses?search=calc").get_json()["courses"]
    assert [course["title"] for course in searched] == ["Calculus"]


def test_unpublished_courses_are_only_visible_to_their_owner(client, user, author):
    draft = _course(author, title="Draft", published=False)
    _login(client, user)

    assert client.get(f"/courses/{draft.id}").status_code == 404
    assert client.get("/courses/999").status_code == 404


def test_course_detail_includes_ordered_modules(client, user, author):
    course = _course(author, modules=3)
    _login(client, user)

    body = client.get(f"/courses/{course.id}").get_json()["course"]

    assert [module["moduleNumber"] for module in body["modules"]] == [1, 2, 3]


def test_completing_modules_awards_xp_once(client, user, author):
    course = _course(author, modules=4)
    _login(client, user)

    first = client.post(f"/courses/{course.id}/modules/2/complete").get_json()
    assert first["progress"]["completedModules"] == 2
    assert first["progress"]["progressPercentage"] == 50
    assert first["xp"] == 100

    repeat = client.post(f"/courses/{course.id}/modules/1/complete").get_json()
    assert repeat["progress"]["completedModules"] == 2
    assert repeat["xp"] == 100

    final = client.post(f"/courses/{course.id}/modules/4/complete").get_json()
    assert final["progress"]["progressPercentage"] == 100
    assert final["xp"] == 200
    assert db.session.get(User, user.id).xp == 200


def test_module_number_outside_course_is_rejected(client, user, author):
    course = _course(author, modules=2)
    _login(client, user)

    response = client.post(f"/courses/{course.id}/modules/3/complete")

    assert response.status_code == 400


def test_quiz_scores_are_recorded_per_module(client, user, author):
    course = _course(author, modules=2)
    _login(client, user)

    response = client.post(
        f"/courses/{course.id}/quiz-scores",
        json={"module_number": 1, "score": 3, "total_questions": 5},
    )

    body = response.get_json()
    assert response.status_code == 200
    assert body["progress"]["quizScores"] == {"module_1": 3}
    assert body["xp"] == 30

    progress = client.get(f"/courses/{course.id}/progress").get_json()["progress"]
    assert progress["xpEarned"] == 30


def test_quiz_score_above_question_count_is_rejected(client, user, author):
    course = _course(author, modules=2)
    _login(client, user)

    response = client.post(
        f"/courses/{course.id}/quiz-scores",
        json={"module_number": 1, "score": 6, "total_questions": 5},
    )

    assert response.status_code == 400


def test_my_courses_lists_owned_courses_including_drafts(client, author):
    _course(author, title="Draft", published=False)
    _login(client, author)

    titles = [course["title"] for course in client.get("/courses/mine").get_json()["courses"]]

    assert titles == ["Draft"]
