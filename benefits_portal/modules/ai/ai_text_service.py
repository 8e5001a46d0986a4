import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence

import httpx

from benefits_portal.core.config import settings
from benefits_portal.core.exceptions import ProviderError
from benefits_portal.models.document_model import has_usable_content
from benefits_portal.modules.ai.conversation_cache import ConversationCache, build_conversation_cache
from benefits_portal.modules.ai.structured_output import (
    Extractor,
    QUESTION_EXTRACTORS,
    extract_with,
    parse_json_payload,
)
from benefits_portal.schemas.website_schema import BenefitDetail

logger = logging.getLogger(__name__)

TRUNCATION_MARKER = "\n\n[Content truncated due to length]"
EMPTY_SUMMARY = (
    "# Document Summary\n\n"
    "No readable text was found in this document, so no summary could be produced."
)
CHAT_APOLOGY = (
    "I'm sorry, I couldn't process your question right now. "
    "Please try again in a moment or contact your HR team."
)

BENEFIT_TITLES = {
    "medical": "Medical Benefits",
    "dental": "Dental Coverage",
    "vision": "Vision Care",
    "retirement": "Retirement & Financial Planning",
    "additional": "Additional Benefits",
    "wellness": "Wellness Programs",
}

BENEFIT_IMAGES = {
    "medical": [
        "https://img.freepik.com/free-photo/medical-banner-with-doctor-wearing-stethoscope_23-2149611240.jpg",
        "https://img.freepik.com/free-photo/medical-workers-checking-patient-health_23-2149353294.jpg",
        "https://img.freepik.com/free-photo/doctor-with-stethoscope-hands-hospital-background_1423-1.jpg",
    ],
    "dental": [
        "https://img.freepik.com/free-photo/close-up-dentist-s-tools_144627-8499.jpg",
        "https://img.freepik.com/free-photo/dentist-examining-patient-teeth_1098-469.jpg",
        "https://img.freepik.com/free-photo/dentist-looking-patient-s-teeth_1098-456.jpg",
    ],
    "vision": [
        "https://img.freepik.com/free-photo/woman-having-her-eyes-examined_23-2148932678.jpg",
        "https://img.freepik.com/free-photo/side-view-eye-doctor-using-equipment-examining-female-patient_23-2148856105.jpg",
        "https://img.freepik.com/free-photo/optometrist-checking-patient-eyesight-giving-her-glasses_1098-559.jpg",
    ],
    "retirement": [
        "https://img.freepik.com/free-photo/elderly-couple-meeting-with-financial-advisor_1170-2211.jpg",
        "https://img.freepik.com/free-photo/elderly-couple-having-retirement-budget-consultation-with-financial-advisor_637285-2449.jpg",
        "https://img.freepik.com/free-photo/happy-senior-couple-planning-retirement-home_1170-2208.jpg",
    ],
    "additional": [
        "https://img.freepik.com/free-photo/medium-shot-women-working-together_23-2150060036.jpg",
        "https://img.freepik.com/free-photo/medium-shot-happy-colleagues-work_23-2149295535.jpg",
        "https://img.freepik.com/free-photo/happy-business-partners-handshaking_1262-2133.jpg",
    ],
    "wellness": [
        "https://img.freepik.com/free-photo/young-woman-doing-fitness-exercises-home_144627-16404.jpg",
        "https://img.freepik.com/free-photo/diverse-people-having-meditation-session_53876-138597.jpg",
        "https://img.freepik.com/free-photo/group-people-working-out-gym_23-2147666156.jpg",
    ],
}

DEFAULT_WEBSITE_PROMPT = (
    "Describe a competitive employee benefits package covering medical, dental, vision, "
    "retirement, additional benefits and wellness programs."
)


def clip_text(text: str, limit: int) -> str:
    """Cuts text to the limit and marks that it was cut."""
    if len(text) <= limit:
        return text
    return text[:limit] + TRUNCATION_MARKER


def wrap_html(content: Any) -> str:
    text = content if isinstance(content, str) else ""
    if "<" not in text:
        return f"<p>{text}</p>"
    return text


class AITextService:
    """
    Single gateway to the OpenAI-compatible chat completion endpoint.
    Read paths (summaries, chat, marketing copy) degrade to text; structured
    generation raises so write workflows can fail cleanly.
    """

    def __init__(self, conversation_cache: Optional[ConversationCache] = None):
        self.api_key = settings.LLM_API_KEY
        self.model = settings.LLM_MODEL
        self.base_url = settings.LLM_BASE_URL
        self.timeout = settings.LLM_TIMEOUT_SECONDS
        self.context_limit = settings.AI_CONTEXT_CHAR_LIMIT
        self.conversation_cache = conversation_cache or build_conversation_cache()

    async def _complete(
        self,
        messages: List[Dict[str, str]],
        max_tokens: int = 1000,
        temperature: float = 0.3,
        json_mode: bool = False,
    ) -> str:
        if not self.api_key:
            raise ProviderError("AI provider API key is not configured")

        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        payload: Dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        if json_mode:
            payload["response_format"] = {"type": "json_object"}

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(self.base_url, headers=headers, json=payload)
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as e:
            raise ProviderError(f"AI provider returned HTTP {e.response.status_code}") from e
        except (httpx.HTTPError, ValueError) as e:
            raise ProviderError(f"AI provider request failed: {e}") from e

        choices = data.get("choices") or []
        if not choices:
            raise ProviderError("AI provider returned no choices")
        content = (choices[0].get("message") or {}).get("content")
        if content is None:
            raise ProviderError("AI provider returned an empty message")
        return content

    async def summarize(self, raw_text: Optional[str], raise_errors: bool = False) -> str:
        """
        Markdown summary of a benefits document.

        Provider failures come back as an error string in place of the summary, unless
        raise_errors is set, in which case the ProviderError propagates. Background
        extraction uses the latter so a failed call never overwrites the placeholder.
        """
        if not raw_text or not raw_text.strip():
            return EMPTY_SUMMARY

        content = clip_text(raw_text.strip(), self.context_limit)
        messages = [
            {
                "role": "system",
                "content": (
                    "You summarize employee benefits documents for HR teams. "
                    "Write a concise markdown summary with a short introduction, "
                    "the key points as bullet points, and any deadlines, costs or eligibility rules."
                ),
            },
            {"role": "user", "content": f"Summarize this document:\n\n{content}"},
        ]
        try:
            return await self._complete(messages, max_tokens=1000, temperature=0.3)
        except ProviderError as e:
            if raise_errors:
                raise
            logger.error(f"Error summarizing document: {e.detail}")
            return f"Error processing document: {e.detail}"

    def build_context(self, documents: Iterable[Optional[str]]) -> str:
        """Concatenates usable document text up to the context limit."""
        usable = [content.strip() for content in documents if has_usable_content(content)]
        return clip_text("\n\n---\n\n".join(usable), self.context_limit)

    async def chat_answer(
        self,
        documents: Iterable[Optional[str]],
        user_message: str,
        company_id: int,
        user_id: int,
        company_name: Optional[str] = None,
        assistant_name: Optional[str] = None,
    ) -> Dict[str, str]:
        """
        Answers a question grounded in the company's documents, keeping a rolling window
        of the conversation per (company, user). Returns an apology when the provider fails.
        """
        context = self.build_context(documents)
        system_prompt = (
            f"You are {assistant_name or 'the benefits assistant'}, helping employees of "
            f"{company_name or 'the company'} understand their benefits.\n"
            "Answer only from the documents provided below. If the answer is not in the documents, "
            "say that you don't have that information and suggest contacting the HR team. "
            "Keep answers clear and friendly.\n\n"
            f"---BEGIN DOCUMENTS---\n{context or 'No benefits documents are available yet.'}\n---END DOCUMENTS---"
        )

        history = await self.conversation_cache.get_window(company_id, user_id)
        user_entry = {"role": "user", "content": user_message}
        messages = [{"role": "system", "content": system_prompt}] + history + [user_entry]

        try:
            reply = await self._complete(messages, max_tokens=800, temperature=0.2)
        except ProviderError as e:
            logger.error(f"Chat completion failed for company {company_id} user {user_id}: {e.detail}")
            return {"role": "assistant", "content": CHAT_APOLOGY}

        assistant_entry = {"role": "assistant", "content": reply}
        await self.conversation_cache.append(company_id, user_id, user_entry, assistant_entry)
        return assistant_entry

    async def generate_structured(
        self,
        prompt: str,
        source_text: Optional[str],
        extractors: Sequence[Extractor] = QUESTION_EXTRACTORS,
        max_tokens: int = 2500,
    ) -> List[dict]:
        """
        Asks for JSON and returns the first list the extractors find in it.
        Raises ProviderError or GenerationError.
        """
        source = clip_text(source_text.strip(), self.context_limit) if has_usable_content(source_text) else ""
        user_content = prompt
        if source:
            user_content = f"{prompt}\n\nBase the content on this document:\n\n{source}"

        messages = [
            {
                "role": "system",
                "content": (
                    "You create employee benefits surveys. Respond with a single JSON object only. "
                    'Use the shape {"questions": [{"questionText": str, "questionType": '
                    '"text|textarea|number|date|radio|checkbox|select|multichoice|scale", '
                    '"options": [str], "required": bool}]}.'
                ),
            },
            {"role": "user", "content": user_content},
        ]
        raw = await self._complete(messages, max_tokens=max_tokens, temperature=0.4, json_mode=True)
        return extract_with(parse_json_payload(raw), extractors)

    async def generate_website_content(self, website_prompt: Optional[str], company_name: str) -> Dict[str, Any]:
        """Benefits website sections as JSON, or a minimal static structure on failure."""
        prompt = (
            f"You are an expert benefits content writer for {company_name}.\n"
            f"Use the following instructions to generate benefits website content:\n\n"
            f"{website_prompt or DEFAULT_WEBSITE_PROMPT}\n\n"
            "Create sections for: Benefits Overview, Medical Plans, Dental Coverage, Vision Plans, "
            "Retirement Options, Additional Benefits and Wellness Programs. For each section give a title, "
            "a brief description and 2-3 plans with a name, a description and 3-5 highlights.\n"
            'Respond with JSON shaped as {"overview": {"title": str, "description": str}, '
            '"sections": [{"id": str, "title": str, "description": str, '
            '"plans": [{"name": str, "description": str, "highlights": [str]}]}]}.'
        )
        try:
            raw = await self._complete([{"role": "user", "content": prompt}], max_tokens=2500, json_mode=True)
            parsed = parse_json_payload(raw)
            if not isinstance(parsed, dict) or "sections" not in parsed:
                raise ValueError("missing 'sections'")
            return parsed
        except Exception as e:
            logger.error(f"Error generating website content for {company_name}: {e}")
            return {
                "overview": {
                    "title": f"{company_name} Benefits Overview",
                    "description": (
                        "We offer a comprehensive package of benefits designed to support your health, "
                        "wellness, and financial security."
                    ),
                },
                "sections": [
                    {
                        "id": "medical",
                        "title": "Medical Plans",
                        "description": "Comprehensive healthcare coverage options for you and your family.",
                        "plans": [
                            {
                                "name": "Premium PPO Plan",
                                "description": "Our best coverage option with low deductibles and comprehensive benefits.",
                                "highlights": ["Low deductible", "Extensive network", "Comprehensive prescription coverage"],
                            }
                        ],
                    }
                ],
            }

    async def generate_benefit_detail(self, benefit_type: str, company_name: str, company_prompt: Optional[str]) -> Dict[str, Any]:
        """Detail page copy for one benefit type. Falls back to static copy on failure."""
        title = BENEFIT_TITLES.get(benefit_type, "Employee Benefits")
        images = BENEFIT_IMAGES.get(benefit_type, [])
        prompt = (
            f"You are an expert benefits content writer for {company_name}.\n"
            f"Use the following company information to write the {title} page:\n\n"
            f"{company_prompt or DEFAULT_WEBSITE_PROMPT}\n\n"
            "Include a title and subtitle, a short description, an HTML overview, HTML eligibility rules, "
            "HTML enrollment steps, 3-4 FAQ entries, key contacts and additional resources. "
            "Use <p>, <h3>, <ul>/<li> and <strong> in the HTML fields. Use realistic but fictional names.\n"
            f'Respond with JSON shaped as {{"id": "{benefit_type}", "title": str, "subtitle": str, '
            '"description": str, "overview": str, "eligibility": str, "howToEnroll": str, '
            '"faq": [{"question": str, "answer": str}], '
            '"keyContacts": [{"name": str, "role": str, "contact": str}], '
            '"additionalResources": [{"title": str, "description": str, "url": str}]}.'
        )
        try:
            raw = await self._complete([{"role": "user", "content": prompt}], max_tokens=2500, json_mode=True)
            parsed = parse_json_payload(raw)
            if not isinstance(parsed, dict):
                raise ValueError("benefit detail is not a JSON object")
            parsed.update(
                id=benefit_type,
                overview=wrap_html(parsed.get("overview")),
                eligibility=wrap_html(parsed.get("eligibility")),
                howToEnroll=wrap_html(parsed.get("howToEnroll")),
                images=images,
            )
            parsed.setdefault("title", title)
            return BenefitDetail.model_validate(parsed).model_dump(by_alias=True)
        except Exception as e:
            logger.error(f"Error generating {benefit_type} content for {company_name}: {e}")
            label = benefit_type.capitalize()
            return {
                "id": benefit_type,
                "title": f"{label} Benefits",
                "subtitle": f"Your {company_name} {benefit_type} benefits information",
                "description": f"Learn about your {benefit_type} benefits options and how to make the most of them.",
                "overview": (
                    f"<p>{company_name} offers comprehensive {benefit_type} benefits to support "
                    "our employees' health and wellbeing.</p>"
                ),
                "eligibility": "<p>All full-time employees are eligible for benefits after completing 30 days of employment.</p>",
                "howToEnroll": "<p>Enroll through the HR portal during open enrollment or within 30 days of a qualifying life event.</p>",
                "faq": [
                    {"question": "When can I enroll?", "answer": "During open enrollment or after a qualifying life event."},
                    {"question": "Where can I find more information?", "answer": "Contact the HR Benefits Team or visit the benefits portal."},
                ],
                "keyContacts": [
                    {"name": "HR Benefits Team", "role": "Benefits Administrators", "contact": "benefits@example.com"},
                ],
                "additionalResources": [
                    {"title": "Benefits Guide", "description": "Download the complete benefits guide", "url": "#"},
                ],
                "images": images,
            }


ai_text_service = AITextService()
