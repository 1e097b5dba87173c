from datetime import datetime, timezone

from flask import current_app
from groq import Groq

CONTENT_TYPES = ("explanation", "example", "practice", "simplify", "elaborate", "question")

BOOK_CONTEXT = "Based on the context of 'Data Analysis from Scratch with Python'"


class ExplanationUnavailable(Exception):
    """No LLM backend is configured."""


def _build_prompt(concept_name, content_type, context=None, question=None):
    if content_type == "explanation":
        prompt = (f'Explain the concept of "{concept_name}" for a beginner data analyst, '
                  f'{BOOK_CONTEXT}. Keep it concise and focus on the key points that are '
                  f'most relevant for data analysis.')
    elif content_type == "example":
        prompt = (f'Provide a simple, clear Python code example demonstrating "{concept_name}". '
                  f'Add brief comments to explain each step. {BOOK_CONTEXT}, ensure the '
                  f'example is practical for data analysis tasks.')
    elif content_type == "practice":
        prompt = (f'Suggest a very simple practice exercise idea (not the code) for '
                  f'"{concept_name}" that would be appropriate for a beginner learning data '
                  f'analysis with Python. {BOOK_CONTEXT}, focus on a task that reinforces '
                  f'the core concept.')
    elif content_type == "simplify":
        prompt = (f'Provide a simplified explanation of "{concept_name}" for someone who is '
                  f'completely new to programming and data analysis. Use analogies and avoid '
                  f'technical jargon where possible. {BOOK_CONTEXT}.')
    elif content_type == "elaborate":
        prompt = (f'Provide a more detailed explanation of "{concept_name}" with additional '
                  f'context and nuance. {BOOK_CONTEXT}, include information about how this '
                  f'concept is used in real-world data analysis scenarios.')
    elif content_type == "question":
        if not question:
            raise ValueError("A question is required for the 'question' content type")
        prompt = (f'The user is learning about "{concept_name}" in the context of data analysis '
                  f'with Python and has the following question: "{question}". Please provide '
                  f'a clear, accurate answer. {BOOK_CONTEXT}.')
    else:
        raise ValueError(f"Unsupported content type: {content_type}")

    if context:
        prompt += f"\n\nAdditional context:\n{context}"
    return prompt


def generate_dynamic_content(concept_name, content_type, context=None, question=None):
    """
    Ask Groq for learner-facing text about one concept.
    Raises ValueError on a bad request, ExplanationUnavailable without an API key.
    Groq client errors propagate.
    """
    prompt = _build_prompt(concept_name, content_type, context, question)

    api_key = current_app.config.get("GROQ_API_KEY")
    if not api_key:
        raise ExplanationUnavailable("GROQ_API_KEY not configured")

    client = Groq(api_key=api_key)
    resp = client.chat.completions.create(
        model=current_app.config.get("GROQ_MODEL", "llama-3.3-70b-versatile"),
        messages=[
            {"role": "system", "content": "You are a patient tutor for beginner data analysts. Answer in Markdown."},
            {"role": "user",   "content": prompt},
        ],
        temperature=0.7,
        max_tokens=2048,
    )

    return {
        "content":   resp.choices[0].message.content.strip(),
        "source":    "groq",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
