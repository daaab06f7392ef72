import pytest

from conftest import FakeAIReasoning, make_questions
from mockprep.core.evaluation_engine import EvaluationEngine
from mockprep.core.report_generator import (
    CODING_RECOMMENDATION,
    DEFAULT_IMPROVEMENTS,
    DEFAULT_STRENGTHS,
    ReportGenerator,
    dedupe,
)
from mockprep.models.feedback import LegacyAnswerEntry, QuestionFeedback, ScoredAnswer
from mockprep.models.question import Answer


def _entry(question_id: str, score: int, **overrides) -> QuestionFeedback:
    data = {
        "question_id": question_id,
        "question_type": "technical",
        "score": score,
        "was_answered": score > 0,
    }
    data.update(overrides)
    return QuestionFeedback(**data)


def _scored(*entries: QuestionFeedback) -> list[ScoredAnswer]:
    return [
        ScoredAnswer(feedback=e, legacy=LegacyAnswerEntry(question_id=e.question_id, score=e.score))
        for e in entries
    ]


def test_dedupe_caps_and_keeps_order():
    items = ["a", "b", "a", "c", "d", "b", "e", "f", "g"]
    result = dedupe(items)
    assert result == ["a", "b", "c", "d", "e"]
    assert len(set(result)) == len(result)


@pytest.mark.asyncio
async def test_report_with_skipped_answer():
    questions = make_questions()
    answers = [
        Answer(question_id="1", transcription="closures capture variables"),
        Answer(question_id="2", skipped=True),
        Answer(question_id="3", code="def rev(s): return s[::-1]"),
    ]
    scored = await EvaluationEngine(FakeAIReasoning(score=80), delay_seconds=0).score_answers(answers, questions)

    report = ReportGenerator().generate(
        scored,
        questions,
        session_id="s1",
        user_id="u1",
        metadata={"jobRole": "Backend Engineer", "company": "Acme", "totalInterviewTime": "1200"},
    )

    assert report.answered_questions == 2
    assert report.skipped_questions == 1
    assert report.overall_score == 53
    assert report.overall_grade == "C-"
    assert report.completion_rate == 67
    assert report.coding_questions == 1
    assert report.role == "Backend Engineer"
    assert report.total_interview_time == 1200
    assert report.question_feedbacks[1].score == 0
    assert not report.question_feedbacks[1].was_answered
    assert set(report.category_performance) == {"technical", "behavioral"}
    assert report.strong_areas == ["technical"]
    assert report.weak_areas == ["behavioral"]
    assert report.interview_metadata["company"] == "Acme"
    assert report.feedback_version == "v2"


def test_all_skipped_scores_zero():
    entries = [_entry(str(i), 0, was_answered=False) for i in range(1, 4)]
    questions = make_questions()

    report = ReportGenerator().generate(_scored(*entries), questions, session_id="s1")

    assert report.overall_score == 0
    assert report.completion_rate == 0
    assert report.overall_grade == "D"
    assert report.overall_strengths == DEFAULT_STRENGTHS
    assert report.metrics.average_communication_score == 0
    assert report.metrics.average_technical_score is None
    assert report.communication_analysis is None


def test_strength_and_improvement_pools():
    entries = [
        _entry("1", 90, strengths=["Clear", "Concise"], improvements=["ignored"]),
        _entry("2", 85, strengths=["Clear", "Deep"]),
        _entry("3", 70, strengths=["middle band"], improvements=["middle band"]),
        _entry("4", 40, improvements=["Add examples", "Structure"]),
    ]

    report = ReportGenerator().generate(_scored(*entries), make_questions(), session_id="s1")

    assert report.overall_strengths == ["Clear", "Concise", "Deep"]
    assert report.overall_improvements == ["Add examples", "Structure"]


def test_default_improvements_when_nothing_weak():
    report = ReportGenerator().generate(_scored(_entry("1", 90)), make_questions(), session_id="s1")
    assert report.overall_improvements == DEFAULT_IMPROVEMENTS


def test_completion_rate_is_capped():
    entries = [_entry(str(i), 70) for i in range(1, 6)]
    report = ReportGenerator().generate(_scored(*entries), make_questions(), session_id="s1")
    assert report.completion_rate == 100


def test_category_performance():
    entries = [
        _entry("1", 80, has_transcript=True, transcript_word_count=40),
        _entry("2", 0, was_answered=False),
        _entry("3", 60, question_type="coding", coding=True, has_code=True, code_length=120),
    ]

    categories = ReportGenerator().calculate_category_performance(entries)

    technical = categories["technical"]
    assert technical.total_questions == 2
    assert technical.questions_answered == 1
    assert technical.average_score == 80
    assert technical.completion_rate == 50
    assert technical.average_words_spoken == 40

    coding = categories["coding"]
    assert coding.code_submissions == 1
    assert coding.average_code_length == 120


def test_recommendations_tiers():
    generator = ReportGenerator()

    low = generator.generate_recommendations([], 45)
    high = generator.generate_recommendations([], 92)

    assert low[0].startswith("Focus on understanding fundamental concepts")
    assert high[0] == "Maintain your strong performance with continued practice"
    assert len(low) == 3


def test_weak_coding_adds_recommendation():
    entries = [_entry("1", 50, coding=True), _entry("2", 60, coding=True)]

    recommendations = ReportGenerator().generate_recommendations(entries, 55)

    assert recommendations[-1] == CODING_RECOMMENDATION
    assert len(recommendations) <= 5


def test_next_steps():
    generator = ReportGenerator()

    assert generator.generate_next_steps(50)[-1] == "Study fundamental concepts in your field"
    assert generator.generate_next_steps(85)[-1] == "Practice advanced interview scenarios"
    assert len(generator.generate_next_steps(85)) == 4


def test_communication_analysis_brevity():
    entries = [
        _entry("1", 80, has_transcript=True, transcript_word_count=200),
        _entry("2", 80, has_transcript=True, transcript_word_count=160),
    ]

    report = ReportGenerator().generate(_scored(*entries), make_questions(), session_id="s1")

    assert report.communication_analysis.average_words_per_response == 180
    assert report.communication_analysis.communication_patterns["brevity"] == "detailed"
    assert report.metrics.questions_with_transcripts == 2
