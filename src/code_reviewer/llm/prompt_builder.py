"""
Prompt builder for code review requests.

Responsible for:
- Rendering the fixed reviewer instruction (role + 9-section output schema)
- Fencing the submitted code with its declared language
- Constructing the ModelInvocationParams sent to the retry engine
"""

from jinja2 import Environment, StrictUndefined
import structlog

from code_reviewer.models.llm_models import ModelInvocationParams
from code_reviewer.models.review_models import ReviewRequest


logger = structlog.get_logger(__name__)


SYSTEM_INSTRUCTION_TEMPLATE = """
You are a senior software engineer and professional code reviewer.
When given a code snippet, produce a concise, accurate, and well-structured review that a developer can use immediately.
Follow this output schema exactly:

{% for section in sections %}{{ loop.index }}. {{ section }}
{% endfor %}
Use Markdown, code fences, and idiomatic language-specific best practices.
"""

USER_PROMPT_TEMPLATE = """
User code ({{ language }}):
{{ fence }}{{ language }}
{{ code }}
{{ fence }}

Please produce the review following the schema above.
"""

REVIEW_SECTIONS = (
    "One-line summary.",
    "Key issues (title, severity, short impact).",
    "Reproduction & assumptions.",
    "Corrected code (complete, runnable snippet).",
    "Minimal patch/diff.",
    "Explanation of changes.",
    "Tests & validation example.",
    "Edge cases & further improvements.",
    "Final verdict and recommended next steps.",
)


class PromptBuilder:
    """
    Build review prompts from ReviewRequest objects.

    The system instruction never changes between requests, so it is
    rendered once at construction time.
    """

    def __init__(self, model: str):
        """
        Args:
            model: Model identifier written into every ModelInvocationParams
        """
        self.model = model
        env = Environment(undefined=StrictUndefined, keep_trailing_newline=False, autoescape=False)
        self.system_instruction = env.from_string(SYSTEM_INSTRUCTION_TEMPLATE).render(
            sections=REVIEW_SECTIONS
        ).strip()
        self.user_template = env.from_string(USER_PROMPT_TEMPLATE)

    def build_prompt(self, code: str, language: str) -> str:
        """
        Concatenate the system instruction with the fenced user code.

        A code snippet that itself contains ``` gets a longer fence so the
        block is not closed early.
        """
        fence = "```"
        while fence in code:
            fence += "`"

        user_section = self.user_template.render(
            language=language,
            code=code,
            fence=fence,
        ).strip()
        return f"{self.system_instruction}\n\n{user_section}\n"

    def build_params(self, request: ReviewRequest) -> ModelInvocationParams:
        """Build the immutable invocation params for one review."""
        prompt = self.build_prompt(request.code, request.language)
        logger.debug(
            "Review prompt built",
            language=request.language,
            code_length=len(request.code),
            prompt_length=len(prompt),
        )
        return ModelInvocationParams(model=self.model, prompt=prompt)
