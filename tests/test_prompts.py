import pytest

from mockprep.models.question import Answer, Question
from mockprep.prompts import EvaluatorPrompts, InterviewerPrompts, ResumePrompts
from mockprep.prompts.interviewer import coding_question_count, question_count_for_duration


@pytest.mark.parametrize("duration,count", [
    ("short", 5),
    ("medium", 10),
    ("long", 15),
    ("LONG", 15),
    ("marathon", 10),
    (None, 10),
])
def test_question_count_for_duration(duration, count):
    assert question_count_for_duration(duration) == count


def test_coding_question_count():
    assert coding_question_count(10, True) == 3
    assert coding_question_count(5, True) == 2
    assert coding_question_count(15, False) == 0


def test_questions_prompt_includes_resume_only_when_substantial():
    prompts = InterviewerPrompts()
    resume = "Senior engineer with ten years of distributed systems experience. " * 3

    with_resume = prompts.generate_questions_prompt(
        role="Backend Engineer",
        job_description="Build APIs",
        question_count=5,
        resume_text=resume,
    )
    short_resume = prompts.generate_questions_prompt(
        role="Backend Engineer",
        job_description="Build APIs",
        question_count=5,
        resume_text="too short",
    )

    assert "CANDIDATE RESUME CONTEXT" in with_resume
    assert "No resume provided" in short_resume
    assert "General Company" in short_resume


def test_questions_prompt_truncates_resume():
    prompt = InterviewerPrompts().generate_questions_prompt(
        role="Analyst",
        job_description="SQL",
        question_count=5,
        resume_text="x" * 5000,
        max_resume_chars=100,
    )
    assert "x" * 100 in prompt
    assert "x" * 101 not in prompt


def test_questions_prompt_coding_rule():
    prompt = InterviewerPrompts().generate_questions_prompt(
        role="Backend Engineer",
        job_description="Build APIs",
        question_count=10,
        include_coding=True,
        language="go",
    )
    assert "Include exactly 3 coding questions in go" in prompt


def test_feedback_prompt_for_code_answer():
    question = Question(id="1", text="Reverse a string.", coding=True)
    answer = Answer(question_id="1", code="def rev(s): return s[::-1]")

    prompt = EvaluatorPrompts().generate_feedback_prompt(question, answer, {"jobRole": "SRE", "language": "python"})

    assert "CANDIDATE'S CODE (python)" in prompt
    assert "def rev(s): return s[::-1]" in prompt
    assert "Role: SRE" in prompt


def test_feedback_prompt_for_skipped_answer():
    question = Question(id="1", text="Explain closures.")
    prompt = EvaluatorPrompts().generate_feedback_prompt(question, Answer(question_id="1", skipped=True))
    assert "(question skipped)" in prompt


def test_resume_prompt():
    prompt = ResumePrompts().generate_analysis_prompt("my resume", "the job")
    assert "my resume" in prompt
    assert "the job" in prompt
    assert '"missing_keywords"' in prompt
