"""
Resume Analysis Prompts

Contains the ATS-style prompt used to review a resume against a job
description.
"""


class ResumePrompts:
    """
    Prompt templates for resume review.

    Used to produce:
    - Role fit and missing keywords
    - Structural and formatting review
    - A 0-100 resume score
    """

    SYSTEM_CONTEXT = """You are an experienced recruiter and ATS (Applicant Tracking System) resume analyzer.

Your role:
- Evaluate the resume strictly against the job description
- Be specific about missing skills and keywords
- Give practical, prioritized improvement suggestions
"""

    def generate_analysis_prompt(self, resume_text: str, job_description: str) -> str:
        """Generate prompt for analyzing a resume against a job description."""

        prompt = f"""{self.SYSTEM_CONTEXT}

=== RESUME ===
{resume_text}

=== JOB DESCRIPTION ===
{job_description}

=== YOUR TASK ===
Return a valid JSON object only (strict JSON, no extra text, no code block):

{{
  "ats_friendly": "Yes/No with explanation",
  "fit_for_role": "Strong / Moderate / Weak (with reasoning)",
  "missing_keywords": ["list", "of", "missing", "skills"],
  "improvements": ["list of suggestions for resume improvement"],
  "clarity": "Readable / Needs better formatting / Poor",
  "achievements": "Yes/No (with explanation)",
  "sections": {{
    "summary": true,
    "skills": true,
    "experience": true,
    "education": true,
    "projects": false
  }},
  "red_flags": ["list of issues in the resume"],
  "formatting": "Good / Inconsistent / Overloaded",
  "resume_length": "1 page / 2 pages / Too long",
  "soft_skills": ["list of soft skills found"],
  "score": 0
}}"""

        return prompt
