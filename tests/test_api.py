from conftest import ADMIN_ID, OTHER_USER_ID, USER_ID, auth_headers, stored_feedback


def _feedback_payload(session_id: str = "session-1") -> dict:
    return {
        "sessionData": {"id": session_id},
        "metadata": {"jobRole": "Backend Engineer", "company": "Acme", "language": "python"},
        "questions": [
            {"id": 1, "text": "Explain closures.", "type": "technical", "difficulty": "medium"},
            {"id": 2, "text": "Tell me about a conflict.", "type": "behavioral", "difficulty": "easy"},
            {"id": 3, "text": "Reverse a string.", "type": "technical", "difficulty": "hard", "coding": True},
        ],
        "answers": [
            {"questionId": 1, "transcription": {"transcript": "A closure keeps its scope", "confidence": 0.92}},
            {"questionId": 2, "skipped": True},
            {"questionId": 3, "code": "def rev(s):\n    return s[::-1]"},
        ],
    }


# ============================================================================
# PUBLIC ENDPOINTS
# ============================================================================

def test_root_banner(client):
    response = client.get("/")
    assert response.status_code == 200
    assert "generateFeedback" in response.json()["endpoints"]


def test_health(client):
    response = client.get("/api/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "OK"
    assert body["gemini"] == "configured"


def test_generate_questions(client):
    response = client.post(
        "/api/generate-questions",
        data={
            "role": "Frontend Engineer",
            "jobDescription": "React and TypeScript",
            "duration": "short",
            "includeCoding": "true",
        },
    )

    assert response.status_code == 200
    body = response.json()
    assert len(body["questions"]) == 5
    assert body["metadata"]["totalQuestions"] == 5
    assert body["metadata"]["includeCoding"] is True
    assert body["metadata"]["company"] == "General Company"
    assert body["metadata"]["resumeProcessed"] is False


def test_generate_questions_requires_role_and_description(client):
    response = client.post("/api/generate-questions", data={"role": "Frontend Engineer"})

    assert response.status_code == 400
    assert response.json()["error"] == "Missing required fields: role and jobDescription are required"


def test_save_session_anonymous(client, fake_db):
    response = client.post(
        "/api/save-session",
        json={"sessionData": {"id": "abc", "questions": [{}]}, "answers": []},
    )

    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "message": "Interview session saved successfully",
        "sessionId": "abc",
    }
    assert fake_db["sessions"].documents[0]["userId"] is None


def test_analyze_resume(client):
    response = client.post(
        "/api/analyze-resume",
        data={"jobDescription": "Python developer"},
        files={"resume": ("cv.txt", b"Seven years of Python", "text/plain")},
    )

    assert response.status_code == 200
    assert response.json()["feedback"]["resumeLength"] == len("Seven years of Python")


def test_analyze_resume_requires_job_description(client):
    response = client.post(
        "/api/analyze-resume",
        files={"resume": ("cv.txt", b"Seven years of Python", "text/plain")},
    )

    assert response.status_code == 400
    assert response.json()["error"] == "Job description is required"


# ============================================================================
# AUTHENTICATION
# ============================================================================

def test_generate_feedback_requires_token(client):
    response = client.post("/api/generate-feedback", json=_feedback_payload())

    assert response.status_code == 401
    assert response.json()["error"] == "Not authorized, no token"


def test_invalid_token_is_rejected(client):
    response = client.post(
        "/api/generate-feedback",
        json=_feedback_payload(),
        headers={"Authorization": "Bearer not-a-jwt"},
    )

    assert response.status_code == 401
    assert response.json()["error"] == "Not authorized, token failed"


def test_unknown_user_is_rejected(client):
    response = client.post(
        "/api/generate-feedback",
        json=_feedback_payload(),
        headers=auth_headers("64b7f0c2a1b2c3d4e5f6ffff"),
    )

    assert response.status_code == 401
    assert response.json()["error"] == "Not authorized, user not found"


# ============================================================================
# FEEDBACK GENERATION
# ============================================================================

def test_generate_feedback(client, fake_db):
    response = client.post("/api/generate-feedback", json=_feedback_payload(), headers=auth_headers())

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True

    feedback = body["feedback"]
    assert feedback["sessionId"] == "session-1"
    assert feedback["userId"] == USER_ID
    assert feedback["answeredQuestions"] == 2
    assert feedback["skippedQuestions"] == 1
    assert feedback["overallScore"] == 53
    assert feedback["overallGrade"] == "C-"
    assert feedback["completionRate"] == 67
    assert feedback["questionFeedbacks"][1]["score"] == 0
    assert feedback["questionFeedbacks"][1]["wasAnswered"] is False
    assert feedback["questionFeedbacks"][0]["transcription"]["confidence"] == 0.92
    assert feedback["role"] == "Backend Engineer"

    assert len(fake_db["feedbacks"].documents) == 1
    assert fake_db["sessions"].documents[0]["_id"] == "session-1"
    assert len(fake_db["questions"].documents) == 3


def test_generate_feedback_requires_answers_and_questions(client):
    response = client.post(
        "/api/generate-feedback",
        json={"sessionData": {"id": "s"}, "answers": [], "questions": []},
        headers=auth_headers(),
    )

    assert response.status_code == 400
    assert response.json()["error"] == "Missing required fields: answers and questions are required"


def test_generate_feedback_rejects_malformed_body(client):
    response = client.post(
        "/api/generate-feedback",
        json={"answers": "not-a-list", "questions": []},
        headers=auth_headers(),
    )

    assert response.status_code == 400
    assert "answers" in response.json()["error"]


def test_resubmission_keeps_one_record(client, fake_ai, fake_db):
    client.post("/api/generate-feedback", json=_feedback_payload(), headers=auth_headers())
    fake_ai.score = 95
    response = client.post("/api/generate-feedback", json=_feedback_payload(), headers=auth_headers())

    assert response.status_code == 200
    documents = fake_db["feedbacks"].documents
    assert len(documents) == 1
    assert documents[0]["overallScore"] == 63


def test_foreign_session_is_rejected(client, fake_db):
    fake_db["sessions"].documents.append({"_id": "theirs", "userId": OTHER_USER_ID})

    response = client.post(
        "/api/generate-feedback",
        json=_feedback_payload("theirs"),
        headers=auth_headers(),
    )

    assert response.status_code == 403
    assert response.json()["error"] == "Unauthorized access to session"
    assert fake_db["feedbacks"].documents == []


def test_storage_failure_still_returns_feedback(client, fake_db):
    from pymongo.errors import PyMongoError

    async def broken_update(*args, **kwargs):
        raise PyMongoError("disk full")

    fake_db["feedbacks"].update_one = broken_update

    response = client.post("/api/generate-feedback", json=_feedback_payload(), headers=auth_headers())

    assert response.status_code == 200
    assert response.json()["feedback"]["overallScore"] == 53


# ============================================================================
# FEEDBACK RETRIEVAL
# ============================================================================

def test_get_feedback_by_session(client):
    client.post("/api/generate-feedback", json=_feedback_payload(), headers=auth_headers())

    response = client.get("/api/feedback/session/session-1", headers=auth_headers())

    assert response.status_code == 200
    feedback = response.json()["feedback"]
    assert feedback["id"]
    assert feedback["user"] == {"id": USER_ID, "name": "Ada Lovelace", "email": "ada@example.com"}
    assert feedback["interviewMetadata"]["jobRole"] == "Backend Engineer"
    assert feedback["scoreDistribution"] == feedback["categoryPerformance"]


def test_get_feedback_by_session_permissions(client):
    client.post("/api/generate-feedback", json=_feedback_payload(), headers=auth_headers())

    other = client.get("/api/feedback/session/session-1", headers=auth_headers(OTHER_USER_ID))
    admin = client.get("/api/feedback/session/session-1", headers=auth_headers(ADMIN_ID))
    missing = client.get("/api/feedback/session/nope", headers=auth_headers())

    assert other.status_code == 403
    assert other.json()["error"] == "Unauthorized access to this feedback"
    assert admin.status_code == 200
    assert missing.status_code == 404
    assert missing.json()["error"] == "Feedback not found for this session"


def test_get_legacy_feedback_by_session(client, fake_db):
    fake_db["feedbacks"].documents.append({
        **stored_feedback("old", 62),
        "feedbackVersion": "v1",
        "strengths": ["Good communication"],
        "detailedFeedback": [{"questionId": "1", "userAnswer": "Question was skipped", "score": 30}],
    })

    response = client.get("/api/feedback/session/old", headers=auth_headers())

    assert response.status_code == 200
    feedback = response.json()["feedback"]
    assert feedback["feedbackVersion"] == "v1"
    assert feedback["overallGrade"] == "C+"
    assert feedback["overallStrengths"] == ["Good communication"]
    assert feedback["questionFeedbacks"][0]["score"] == 0


def test_feedback_history_pagination(client, fake_db):
    fake_db["feedbacks"].documents.extend(
        stored_feedback(f"s{i}", 60 + i, days_ago=i) for i in range(3)
    )

    response = client.get(f"/api/feedback/user/{USER_ID}?page=1&limit=2", headers=auth_headers())

    assert response.status_code == 200
    body = response.json()
    assert [f["sessionId"] for f in body["feedback"]] == ["s0", "s1"]
    assert body["feedback"][0]["strengths"] == ["Clear structure"]
    assert body["pagination"] == {
        "currentPage": 1,
        "totalPages": 2,
        "totalCount": 3,
        "hasNext": True,
        "hasPrev": False,
    }


def test_feedback_history_empty(client):
    response = client.get(f"/api/feedback/user/{USER_ID}", headers=auth_headers())

    body = response.json()
    assert body["feedback"] == []
    assert body["message"] == "No feedback found for this user"
    assert body["pagination"]["totalPages"] == 0


def test_feedback_history_of_another_user(client):
    response = client.get(f"/api/feedback/user/{OTHER_USER_ID}", headers=auth_headers())

    assert response.status_code == 403
    assert response.json()["error"] == "Unauthorized access to user feedback"


def test_user_analytics(client, fake_db):
    fake_db["feedbacks"].documents.extend([
        stored_feedback("a", 60, days_ago=3, overallGrade="C+"),
        stored_feedback("b", 80, days_ago=2, overallGrade="A-"),
        stored_feedback("c", 100, days_ago=1, overallGrade="A+"),
        stored_feedback("d", 40, days_ago=0, overallGrade="D"),
    ])

    response = client.get(f"/api/feedback/user/{USER_ID}/analytics", headers=auth_headers())

    assert response.status_code == 200
    analytics = response.json()["analytics"]
    assert analytics["totalInterviews"] == 4
    assert analytics["avgScore"] == 70
    assert [p["rollingAvg"] for p in analytics["rollingAvgTrend"]] == [60, 70, 80, 73]
    assert analytics["gradeDistribution"] == {"C+": 1, "A-": 1, "A+": 1, "D": 1}


def test_user_analytics_of_another_user(client):
    response = client.get(f"/api/feedback/user/{OTHER_USER_ID}/analytics", headers=auth_headers())

    assert response.status_code == 403
    assert response.json()["error"] == "Unauthorized access to analytics"


def test_user_analytics_counts_missing_grades(client, fake_db):
    legacy = {**stored_feedback("old", 55, days_ago=1), "feedbackVersion": "v1"}
    del legacy["questionFeedbacks"]
    fake_db["feedbacks"].documents.extend([legacy, stored_feedback("new", 72, days_ago=0)])

    response = client.get(f"/api/feedback/user/{USER_ID}/analytics", headers=auth_headers())

    assert response.status_code == 200
    analytics = response.json()["analytics"]
    assert analytics["gradeDistribution"] == {"N/A": 2}
    assert analytics["lastInterview"]["grade"] == "N/A"


def test_get_legacy_feedback_with_partial_entries(client, fake_db):
    fake_db["feedbacks"].documents.append({
        **stored_feedback("s-old", 70),
        "feedbackVersion": "v1",
        "detailedFeedback": [
            {"questionText": "Q", "userAnswer": "I would use a hash map", "score": 70},
            {"questionId": "2", "userAnswer": None},
        ],
    })

    response = client.get("/api/feedback/session/s-old", headers=auth_headers())

    assert response.status_code == 200
    feedback = response.json()["feedback"]
    assert feedback["overallGrade"] == "B"
    assert [q["questionId"] for q in feedback["questionFeedbacks"]] == ["", "2"]
    assert feedback["questionFeedbacks"][1]["wasAnswered"] is False
