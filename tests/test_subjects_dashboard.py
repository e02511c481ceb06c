from app.infrastructure.db.models import QuestionModel, UserAchievement, UserProgress


# ---------------------------
# Subjects
# ---------------------------

def test_subjects_ordered_by_name(client, make_subject):
    make_subject(name="Physics", name_ar="الفيزياء")
    make_subject(name="Chemistry", name_ar="الكيمياء")

    response = client.get("/subjects")

    assert response.status_code == 200
    assert [s["name"] for s in response.json()["subjects"]] == ["Chemistry", "Physics"]


def test_get_subject(client, make_subject):
    subject = make_subject()
    assert client.get(f"/subjects/{subject.id}").json()["name_ar"] == "الكيمياء"
    assert client.get("/subjects/999").status_code == 404


def test_staff_creates_subject_once(client, auth, make_user):
    admin = make_user(role="admin")
    payload = {"name": "Mathematics", "name_ar": "الرياضيات", "icon": "calculator"}

    created = client.post("/subjects", json=payload, headers=auth(admin))
    duplicate = client.post("/subjects", json=payload, headers=auth(admin))

    assert created.status_code == 201
    assert created.json()["icon"] == "calculator"
    assert duplicate.status_code == 400


def test_students_cannot_create_subjects(client, auth, make_user):
    student = make_user()
    response = client.post("/subjects", json={"name": "Art", "name_ar": "الفن"}, headers=auth(student))
    assert response.status_code == 403


# ---------------------------
# Dashboard
# ---------------------------

def test_dashboard_for_new_user(client, auth, make_user):
    user = make_user(points=12)

    body = client.get("/dashboard", headers=auth(user)).json()

    assert body["profile"]["points"] == 12
    assert body["profile"]["level"] == 1
    assert body["recent_lessons"] == []
    assert body["stats"] == {
        "total_lessons": 0,
        "completed_lessons": 0,
        "total_time_spent": 0,
        "average_score": 0.0,
    }


def test_dashboard_summarizes_progress(client, auth, db, make_user, make_subject, make_lesson):
    user = make_user()
    subject = make_subject()
    lessons = [make_lesson(subject.id, title=f"Lesson {i}") for i in range(8)]
    make_lesson(subject.id, title="Draft", published=False)
    db.add_all([
        UserProgress(user_id=user.id, lesson_id=lessons[0].id, score=100, time_spent=60,
                     completed_at=lessons[0].created_at),
        UserProgress(user_id=user.id, lesson_id=lessons[1].id, score=50, time_spent=30),
        UserAchievement(user_id=user.id, achievement_type="first_lesson", achievement_data={"lesson_id": lessons[0].id}),
    ])
    db.commit()

    body = client.get("/dashboard", headers=auth(user)).json()

    assert len(body["recent_lessons"]) == 6
    assert "Draft" not in [lesson["title"] for lesson in body["recent_lessons"]]
    assert len(body["subjects"]) == 1
    assert len(body["progress"]) == 2
    assert body["achievements"][0]["achievement_type"] == "first_lesson"
    assert body["stats"] == {
        "total_lessons": 6,
        "completed_lessons": 1,
        "total_time_spent": 90,
        "average_score": 75.0,
    }


def test_dashboard_requires_user(client):
    assert client.get("/dashboard").status_code == 401


# ---------------------------
# Admin stats
# ---------------------------

def test_admin_stats(client, auth, db, make_user, make_subject, make_lesson, make_db_question):
    teacher = make_user(role="teacher")
    make_user()
    make_user()
    subject = make_subject()
    make_lesson(subject.id)
    make_lesson(subject.id, published=False)
    make_db_question(subject.id)

    response = client.get("/admin/stats", headers=auth(teacher))

    assert response.status_code == 200
    assert response.json() == {
        "total_lessons": 2,
        "published_lessons": 1,
        "total_students": 2,
        "total_questions": db.query(QuestionModel).count(),
    }


def test_admin_stats_forbidden_for_students(client, auth, make_user):
    student = make_user()
    assert client.get("/admin/stats", headers=auth(student)).status_code == 403
