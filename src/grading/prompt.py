# src/grading/prompt.py — v1
"""Grading prompt and response schema for vision models."""

from __future__ import annotations

from typing import Any

from examgrader.core.models import RubricConfig

_STRICTNESS_GUIDANCE = {
    "lenient": "Be lenient: reward partial understanding and ignore minor mistakes.",
    "moderate": "Be balanced: award partial credit where the reasoning is sound.",
    "strict": "Be strict: award credit only for answers that fully meet the rubric.",
}


def target_language(rubric: RubricConfig) -> str:
    """Human-readable output language instruction."""
    if rubric.language == "auto":
        return "the language detected in the student's work"
    return rubric.language


def build_grading_prompt(rubric: RubricConfig) -> str:
    """Build the grading instructions sent after the attached images.

    Student pages are attached first; the reference document, when
    present, is the last attachment.
    """
    has_reference = rubric.reference is not None
    attachments = [
        "1. The first file(s) are the STUDENT'S WORK (possibly several pages "
        "of a single exam).",
    ]
    if has_reference:
        attachments.append(
            "2. The LAST file is the OFFICIAL RUBRIC or ANSWER KEY."
        )

    if has_reference:
        rubric_intro = (
            "Strictly use the attached rubric/answer key to evaluate the answer. "
            "Additional notes:"
        )
    else:
        rubric_intro = "Use the following description:"

    language = target_language(rubric)
    lines = [
        "You are an expert primary school teacher. Your goal is to grade a "
        "student's handwritten exam or assignment.",
        "",
        "ATTACHED FILES:",
        *attachments,
        "",
        "CONTEXT:",
        "- The student's images contain handwritten text and form a single submission.",
        "- Handwriting may be messy, misspelled or hard to read.",
        "",
        "RUBRIC AND SOLUTION:",
        rubric_intro,
        rubric.description.strip() or "(none)",
        "",
        "GRADING PARAMETERS:",
        f"- Maximum score: {rubric.max_score:g}",
        f"- Strictness: {rubric.strictness}. {_STRICTNESS_GUIDANCE[rubric.strictness]}",
        f"- Target language: {language}",
        "",
        "INSTRUCTIONS:",
        "1. Transcription: read the student's handwriting and transcribe exactly "
        "what is written, including spelling mistakes.",
        "2. Identify the student: look for a name on the student's sheet. "
        "Use 'Unknown' if there is none.",
        "3. Grading: compare the transcribed answer against the rubric.",
        "4. Feedback: write constructive feedback and a short list of areas "
        "for improvement.",
        f"5. Language: write the feedback in {language}.",
    ]
    return "\n".join(lines)


def grading_response_schema() -> dict[str, Any]:
    """JSON schema the model must answer with (Gemini schema dialect)."""
    return {
        "type": "OBJECT",
        "properties": {
            "studentName": {
                "type": "STRING",
                "description": "Student name found on the paper, or 'Unknown'.",
            },
            "transcription": {
                "type": "STRING",
                "description": "Literal transcription of the handwritten answer.",
            },
            "score": {
                "type": "NUMBER",
                "description": "Numeric score assigned according to the rubric.",
            },
            "maxScore": {
                "type": "NUMBER",
                "description": "Maximum possible score for this task.",
            },
            "feedback": {
                "type": "STRING",
                "description": "Constructive feedback for the student.",
            },
            "areasForImprovement": {
                "type": "ARRAY",
                "items": {"type": "STRING"},
                "description": "Short bullet points on what could be improved.",
            },
        },
        "required": [
            "studentName", "transcription", "score", "feedback", "areasForImprovement",
        ],
    }
