"""Prompt construction for cover letter generation.

Two interchangeable strategies share the PromptBuilder interface. The
strategy is chosen once per generator from configuration.
"""

import json
from typing import Dict, List, Optional, Sequence, Type

from .config import FEW_SHOT_STRATEGY, STRUCTURED_STRATEGY
from .context import GenerationContext
from .examples import CoverLetterExample
from .llm_client import HistoryItem

COVER_LETTER_SYSTEM_PROMPT = """You are an assistant that writes high-impact, personalized cover letters for job seekers.

CONTENT REQUIREMENTS:
- Write specific content that matches the role and the company
- Reference concrete, quantified achievements and the job's stated requirements
- Use natural language in the active voice
- Avoid generic, clichéd or template-sounding phrases

STRUCTURE:
- One opening paragraph with a direct value proposition that names the role and company
- One or two body paragraphs covering achievements, fit and relevant skills
- One closing paragraph that is forward-looking and states a clear next step
- 3 to 5 paragraphs in total, short enough for a single page

FORMATTING RULES:
- Include exactly one greeting and exactly one closing
- Never include bracketed placeholders such as [Company Name]; omit unknown details instead
- Do not focus on perks or benefits; focus on what the candidate brings to the company
- Output only the letter, with no explanations or notes"""

COVER_LETTER_JSON_INSTRUCTION = """Return your answer as JSON in the form {"content": "<cover letter text>"}.
Use \\n\\n between paragraphs. Do not wrap the JSON in code fences or add any other text."""

IMPROVEMENT_FOCUS_ITEMS = (
    "Use proper business letter format: one greeting, 3-5 body paragraphs and one closing",
    "Include specific quantified achievements with numbers or percentages",
    "Integrate the company name, job title and achievements naturally throughout",
)

MODEL_ACKNOWLEDGEMENT = (
    "I have analyzed the candidate's {materials} and the job description. "
    "I'm ready to help create a personalized cover letter for this position."
)


def format_example(example: CoverLetterExample, index: int) -> str:
    """Render one example for inclusion in a prompt."""
    return "\n".join([
        f"EXAMPLE {index}:",
        f"Input Context: {example.description}",
        f"Input Summary: {example.input_summary}",
        f"Cover Letter Body:\n{example.output_text}",
        f"Quality Score: {example.quality_score * 100:.1f}%",
    ])


def format_examples(examples: Sequence[CoverLetterExample]) -> str:
    return "\n---\n".join(format_example(example, i) for i, example in enumerate(examples, 1))


def build_improvement_focus(improvements: Sequence[str] = ()) -> str:
    """Build the block appended to prompts on retry attempts.

    Args:
        improvements: Suggestions from the previous attempt's validation

    Returns:
        IMPROVEMENT FOCUS block
    """
    items = list(IMPROVEMENT_FOCUS_ITEMS)
    for improvement in improvements:
        if improvement not in items:
            items.append(improvement)
    lines = "\n".join(f"- {item}" for item in items)
    return f"IMPROVEMENT FOCUS FOR THIS ATTEMPT:\n{lines}"


class PromptBuilder:
    """Base prompt builder.

    Subclasses supply the context section; the rules, examples, retry
    escalation and response-format instruction are shared.
    """

    name = ""

    def build_prompt(
        self,
        examples: Sequence[CoverLetterExample],
        context: GenerationContext,
        attempt_number: int,
        improvements: Sequence[str] = (),
    ) -> str:
        """Build the prompt for one generation attempt.

        Args:
            examples: Examples selected for this attempt
            context: Generation context
            attempt_number: 1-based attempt counter
            improvements: Suggestions from the previous attempt, used when retrying

        Returns:
            Prompt text
        """
        sections = [
            COVER_LETTER_SYSTEM_PROMPT,
            self._format_requirements(context),
            f"EXAMPLES OF EXCELLENT COVER LETTERS:\n{format_examples(examples)}",
            self._format_context(context),
        ]
        if attempt_number > 1:
            sections.append(build_improvement_focus(improvements))
        sections.append(COVER_LETTER_JSON_INSTRUCTION)
        return "\n\n".join(section for section in sections if section)

    def _format_requirements(self, context: GenerationContext) -> str:
        return "\n".join([
            "CRITICAL FORMAT REQUIREMENTS:",
            f"- Maintain a {context.tone.value} tone throughout",
            "- Follow an introduction, skills and achievements, closing structure",
            "- Integrate 2-3 achievements naturally (no bullet lists)",
        ])

    def _format_context(self, context: GenerationContext) -> str:
        raise NotImplementedError


class StructuredPromptBuilder(PromptBuilder):
    """Prompt with the extracted facts as a compact key-value context."""

    name = STRUCTURED_STRATEGY

    def _format_context(self, context: GenerationContext) -> str:
        compact = json.dumps({
            "company": context.company,
            "position": context.position,
            "requirements": list(context.requirements),
            "achievements": list(context.achievements),
            "tone": context.tone.value,
            "contact": {
                "fullName": context.contact.full_name,
                "location": context.contact.location,
            },
        }, ensure_ascii=False)
        return "\n".join([
            "STRUCTURED CONTEXT (JSON):",
            compact,
            "",
            "INSTRUCTIONS:",
            "- Use EXACTLY the company, position and achievements from the STRUCTURED CONTEXT; never invent or guess facts",
            "- Do not restate the JSON; write a clean letter body only",
            "- Keep paragraphs concise and avoid templates and clichés",
        ])


class FewShotPromptBuilder(PromptBuilder):
    """Prompt with the raw contact block, leaving extraction to the model."""

    name = FEW_SHOT_STRATEGY

    def _format_context(self, context: GenerationContext) -> str:
        contact = context.contact
        return "\n".join([
            "CONTACT INFORMATION:",
            f"- Name: {contact.full_name}",
            f"- Email: {contact.email}",
            f"- Phone: {contact.phone or 'Not provided'}",
            f"- Location: {contact.location}",
            f"- Professional Title: {contact.professional_title or 'Not provided'}",
            f"- LinkedIn: {contact.linkedin or 'Not provided'}",
            f"- Portfolio: {contact.portfolio or 'Not provided'}",
            "",
            "INSTRUCTIONS:",
            f"- Write for the {context.position} position at {context.company}",
            "- Use only the company, position and achievements supplied in the CV and job description; never invent facts",
            "- Include specific achievements with quantified results from the CV",
            "- Follow the format and quality standards shown in the examples",
        ])


PROMPT_BUILDERS: Dict[str, Type[PromptBuilder]] = {
    STRUCTURED_STRATEGY: StructuredPromptBuilder,
    FEW_SHOT_STRATEGY: FewShotPromptBuilder,
}


def get_prompt_builder(name: Optional[str] = None) -> PromptBuilder:
    """Create the prompt builder for a strategy name.

    Args:
        name: "structured" (default) or "few_shot"

    Returns:
        PromptBuilder instance

    Raises:
        ValueError: If the strategy name is unknown
    """
    key = (name or STRUCTURED_STRATEGY).strip().lower().replace("-", "_")
    builder_class = PROMPT_BUILDERS.get(key)
    if builder_class is None:
        valid = ", ".join(PROMPT_BUILDERS)
        raise ValueError(f"Unknown prompt strategy '{name}'. Expected one of: {valid}")
    return builder_class()


def build_initial_history(
    resume: str,
    job_description: str,
    profile: Optional[str] = None,
) -> List[HistoryItem]:
    """Build the conversation seed sent before every attempt's prompt.

    Args:
        resume: Résumé text
        job_description: Job description text
        profile: Optional free-text candidate profile

    Returns:
        User context message followed by the model's acknowledgement
    """
    sections = [COVER_LETTER_SYSTEM_PROMPT]
    if profile:
        sections.append(f"CANDIDATE PROFILE:\n{profile}")
    sections.append(f"CV CONTENT:\n{resume}")
    sections.append(f"JOB DESCRIPTION:\n{job_description}")
    materials = "profile, CV" if profile else "CV"
    sections.append(
        f"You now have the candidate's {materials} and the job description. "
        "You can help create a personalized cover letter."
    )
    return [
        HistoryItem(role="user", text="\n\n".join(sections)),
        HistoryItem(role="model", text=MODEL_ACKNOWLEDGEMENT.format(materials=materials)),
    ]
