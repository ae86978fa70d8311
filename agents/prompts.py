"""Prompt builders for the generative-language oracle."""
from __future__ import annotations

from textwrap import dedent
from typing import Sequence

from agents.types import QuestionContext

DIFFICULTY_CONTEXT = {
    "junior": "entry-level, focusing on basic concepts and fundamentals",
    "mid": "intermediate-level, covering practical experience and problem-solving",
    "senior": "advanced-level, including architecture, leadership, and complex scenarios",
}

TYPE_CONTEXT = {
    "technical": "focusing on programming skills, algorithms, system design, and technical knowledge",
    "behavioral": "focusing on soft skills, teamwork, problem-solving approaches, and past experiences",
    "mixed": "combining both technical skills and behavioral aspects",
}

LEVEL_CONTEXT = {
    "easy": "an easy warm-up question",
    "medium": "a medium-difficulty core competency question",
    "hard": "a hard, scenario-based question",
}


def build_question_prompt(ctx: QuestionContext) -> str:
    previous = "; ".join(ctx.previous_questions) if ctx.previous_questions else "None asked yet"
    level = ""
    if ctx.level in LEVEL_CONTEXT:
        level = f"\n        - Target: {LEVEL_CONTEXT[ctx.level]}"
    return dedent(
        f"""
        You are an expert technical interviewer conducting a {ctx.difficulty}-level {ctx.interview_type} interview. This is question #{ctx.question_number}.

        CONTEXT:
        - Resume: {{resume}}
        - Job Description: {{job}}
        - Interview Type: {ctx.interview_type} ({TYPE_CONTEXT[ctx.interview_type]})
        - Difficulty: {ctx.difficulty} ({DIFFICULTY_CONTEXT[ctx.difficulty]})
        - Previous Questions: {previous}{level}

        REQUIREMENTS:
        1. Relevant to the job description and the candidate's background.
        2. Different from previously asked questions.
        3. Questions 1-2 are warm-ups, 3-4 core competency, 5+ challenging scenarios.
        4. Encourages a detailed, thoughtful response.

        Generate ONE interview question. Return only the question, no additional text.
        """
    ).strip().replace("{resume}", ctx.resume_text or "Not provided").replace(
        "{job}", ctx.job_description or "General software development role"
    )


def build_evaluation_prompt(question: str, answer: str, question_number: int) -> str:
    return dedent(
        f"""
        You are an expert technical interviewer. Evaluate the following answer strictly and provide a JSON response.

        QUESTION: {{question}}
        CANDIDATE'S ANSWER: {{answer}}
        QUESTION NUMBER: {question_number}

        Provide a JSON response with this exact structure:
        {{"score": <number 0-100>, "feedback": "<brief overall feedback>", "strengths": ["..."], "suggestions": ["..."]}}

        STRICT SCORING GUIDELINES:
        - 90-100: Excellent, comprehensive answer with deep understanding
        - 70-89: Good answer, solid understanding with minor gaps
        - 50-69: Acceptable answer, basic understanding but lacks depth
        - 30-49: Weak answer, significant gaps or inaccuracies
        - 10-29: Poor answer, mostly incorrect or irrelevant
        - 0-9: Completely wrong, gibberish, or no meaningful content

        Respond ONLY with valid JSON, no additional text.
        """
    ).strip().replace("{question}", question).replace("{answer}", answer)


def build_summary_prompt(
    candidate_name: str,
    interview_type: str,
    difficulty: str,
    questions: Sequence[str],
    answers: Sequence[str],
    scores: Sequence[int],
) -> str:
    pairs = "\n\n".join(
        f"Q{i + 1}: {q}\nA{i + 1}: {answers[i] if i < len(answers) and answers[i] else 'No answer provided'}"
        for i, q in enumerate(questions)
    )
    score_line = ", ".join(str(s) for s in scores) or "No scores available"
    return dedent(
        f"""
        Generate a final interview summary for {candidate_name}.

        INTERVIEW DETAILS:
        - Type: {interview_type}
        - Difficulty: {difficulty}
        - Questions Asked: {len(questions)}
        - Individual Scores: {score_line}

        QUESTIONS AND ANSWERS:
        {{pairs}}

        Format as:
        Overall Score: [number 1-100]
        Summary: [3-4 sentences]
        Strengths:
        - [strength]
        Improvements:
        - [improvement]
        Recommendation: [Hire/Consider/Pass with a brief reason]
        """
    ).strip().replace("{pairs}", pairs)


def build_resume_prompt(resume_text: str) -> str:
    return dedent(
        f"""
        You are a resume parser. Extract the following information from this resume text and return ONLY a valid JSON object with these exact keys:
        {{"name": "", "age": "", "gender": "", "phone": "", "email": "", "summary": ""}}

        Rules:
        - Return ONLY the JSON object, no other text.
        - Use an empty string for any field that is not found.
        - Include the country code in phone numbers when available.
        - Estimate age from graduation dates or experience when not stated.
        - Keep the summary to two or three professional lines.

        Resume text:
        \"\"\"
        {{resume}}
        \"\"\"
        """
    ).strip().replace("{resume}", resume_text)


__all__ = [
    "DIFFICULTY_CONTEXT",
    "TYPE_CONTEXT",
    "build_evaluation_prompt",
    "build_question_prompt",
    "build_resume_prompt",
    "build_summary_prompt",
]
