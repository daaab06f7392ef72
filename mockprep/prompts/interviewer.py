"""
AI Interviewer Prompt Templates

Contains the prompt used to generate a full set of interview questions
for a role, optionally tailored to the candidate's resume.
"""

import math

QUESTION_COUNTS = {"short": 5, "medium": 10, "long": 15}
DEFAULT_QUESTION_COUNT = 10
CODING_QUESTION_PERCENT = 30
MIN_RESUME_CHARS = 50


def question_count_for_duration(duration: str | None) -> int:
    """Map an interview length onto the number of questions to ask."""
    return QUESTION_COUNTS.get((duration or "").lower(), DEFAULT_QUESTION_COUNT)


def coding_question_count(question_count: int, include_coding: bool) -> int:
    """Number of questions that should be flagged ``coding: true``."""
    if not include_coding:
        return 0
    # multiply first: 10 * 0.3 evaluates to 3.0000000000000004
    return math.ceil(question_count * CODING_QUESTION_PERCENT / 100)


class InterviewerPrompts:
    """
    Prompt templates for the AI interviewer.

    Key principles:
    - Questions grounded in the job description
    - Resume context when one was uploaded
    - Strict JSON output so the response can be parsed
    """

    SYSTEM_CONTEXT = """You are an expert technical interviewer preparing a realistic mock interview.

Guidelines:
- Ask one clear, focused question per item
- Mix technical concepts, problem-solving, experience-based and behavioral questions
- Prefer practical, scenario-based questions over trivia
- Never include answers or hints in the question text
"""

    def generate_questions_prompt(
        self,
        role: str,
        job_description: str,
        question_count: int,
        company: str | None = None,
        resume_text: str | None = None,
        type: str = "technical",
        difficulty: str = "medium",
        duration: str = "medium",
        include_coding: bool = False,
        language: str = "javascript",
        max_resume_chars: int = 2000,
    ) -> str:
        """Generate prompt for creating ``question_count`` interview questions."""

        company = company or "General Company"
        coding_count = coding_question_count(question_count, include_coding)

        if resume_text and len(resume_text) > MIN_RESUME_CHARS:
            resume_section = f"CANDIDATE RESUME CONTEXT:\n{resume_text[:max_resume_chars]}"
        else:
            resume_section = "No resume provided - generate general questions for the role."

        if include_coding:
            coding_rule = (
                f"Include exactly {coding_count} coding questions in {language}; "
                f"set \"coding\": true and expectedDuration between 900 and 2700 seconds"
            )
        else:
            coding_rule = "Do not include coding questions; every question has \"coding\": false"

        prompt = f"""{self.SYSTEM_CONTEXT}
You are creating {question_count} interview questions for a {role} position at {company}.

=== CONTEXT ===
- Role: {role}
- Company: {company}
- Interview Type: {type}
- Difficulty: {difficulty}
- Duration: {duration} ({question_count} questions)
- Include Coding: {str(include_coding).lower()}
- Programming Language: {language}

=== JOB DESCRIPTION ===
{job_description}

=== RESUME ===
{resume_section}

=== RULES ===
1. Generate exactly {question_count} questions relevant to the {role} role and job description
2. {coding_rule}
3. For non-coding questions: set "coding": false, expectedDuration between 120 and 180 seconds
4. Difficulty should match: {difficulty}
5. Return ONLY a valid JSON array, no additional text

Required JSON format:
[
  {{
    "id": 1,
    "text": "Question text here",
    "type": "{type}",
    "coding": false,
    "difficulty": "{difficulty}",
    "expectedDuration": 120
  }}
]

Generate the questions now:"""

        return prompt
