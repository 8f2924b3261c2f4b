"""Website generation through the Anthropic Messages API."""

from __future__ import annotations

import json
import logging
import re

import requests

from flowvce.models import GeneratedSite, SiteMetadata

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "claude-3-5-sonnet-20241022"
DEFAULT_MAX_TOKENS = 8000

SYSTEM_PROMPT = """You are an expert web developer creating modern, responsive websites for Walrus Sites (decentralized hosting on Sui blockchain).

Generate a complete, production-ready website based on the user's prompt. The website should be:
- Modern and visually stunning
- Fully responsive (mobile, tablet, desktop)
- Use modern CSS (flexbox, grid, animations)
- Include interactive JavaScript features
- Be optimized for performance
- Use semantic HTML
- Have proper meta tags and SEO

Return the response in the following JSON format:
{
  "html": "complete HTML document",
  "css": "complete CSS styles",
  "js": "complete JavaScript code",
  "assets": {},
  "metadata": {
    "title": "site title",
    "description": "site description",
    "theme": "light/dark",
    "responsive": true
  }
}

Focus on creating magical, interactive experiences with smooth animations and modern design patterns."""

REFINE_SYSTEM_PROMPT = """You are refining an existing website. The user will provide the current website code and a refinement request.

Modify the website according to the user's request while maintaining the overall structure and ensuring it remains production-ready.

Return the updated website in the same JSON format as before: an object with "html", "css", "js", "assets" and "metadata" ("title", "description", "theme", "responsive")."""

_FENCE_RE = re.compile(r"^```(?:json)?\s*\n(.*)\n```\s*$", re.DOTALL | re.IGNORECASE)

_STOP_WORDS = frozenset({"the", "and", "for", "with"})

# Extra milliseconds per keyword found in the prompt
_COMPLEXITY_FACTORS: dict[str, int] = {
    "animation": 2000,
    "3d": 3000,
    "interactive": 2000,
    "dashboard": 3000,
    "ecommerce": 4000,
}
_BASE_GENERATION_MS = 5000


class GenerationError(Exception):
    """Raised when the generation provider fails."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class ParseError(GenerationError):
    """Raised when a successful reply is not a valid site document."""


class SiteGenerator:
    """Client that turns prompts into :class:`GeneratedSite` bundles."""

    API_URL = "https://api.anthropic.com/v1/messages"
    API_VERSION = "2023-06-01"

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODEL,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        session: requests.Session | None = None,
    ):
        self.api_key = api_key
        self.model = model
        self.max_tokens = max_tokens
        self.session = session or requests.Session()
        self.session.headers["Content-Type"] = "application/json"
        self.session.headers["anthropic-version"] = self.API_VERSION
        self.session.headers["User-Agent"] = "FlowVCE/1.0"
        if api_key:
            self.session.headers["x-api-key"] = api_key

    def generate_site(self, prompt: str) -> GeneratedSite:
        """Generate a new site from a free-text description."""
        if not prompt or not prompt.strip() or not self.api_key:
            raise GenerationError("Missing prompt or API key")
        return self._complete(SYSTEM_PROMPT, f"Create a website: {prompt}")

    def refine_site(self, site: GeneratedSite, refinement_prompt: str) -> GeneratedSite:
        """Apply a follow-up instruction to an existing site."""
        if not refinement_prompt or not refinement_prompt.strip() or not self.api_key:
            raise GenerationError("Missing refinement prompt or API key")
        message = (
            "Current website:\n"
            f"HTML: {site.html}\n"
            f"CSS: {site.css}\n"
            f"JS: {site.js}\n\n"
            f"Refinement request: {refinement_prompt}\n\n"
            "Please update the website according to this request."
        )
        return self._complete(REFINE_SYSTEM_PROMPT, message)

    def _complete(self, system: str, user_message: str) -> GeneratedSite:
        payload = {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "system": system,
            "messages": [{"role": "user", "content": user_message}],
        }
        try:
            resp = self.session.post(self.API_URL, json=payload, timeout=120)
        except requests.RequestException as exc:
            logger.error("Generation request failed: %s", exc)
            raise GenerationError(f"Request failed: {exc}") from exc

        if not resp.ok:
            logger.error("Generation API error: %s %s", resp.status_code, resp.text)
            raise GenerationError(
                f"API error: {resp.status_code}", status_code=resp.status_code
            )

        try:
            text = resp.json()["content"][0]["text"]
        except (ValueError, KeyError, IndexError, TypeError) as exc:
            logger.error("Unexpected generation reply: %s", exc)
            raise ParseError(
                "Invalid response format from the generation API",
                status_code=resp.status_code,
            ) from exc

        return parse_site_text(text)


def parse_site_text(text: str) -> GeneratedSite:
    """Parse the model's reply text, tolerating a surrounding code fence."""
    stripped = text.strip()
    match = _FENCE_RE.match(stripped)
    if match:
        stripped = match.group(1)
    try:
        data = json.loads(stripped)
    except json.JSONDecodeError as exc:
        logger.error("Failed to parse generated site: %s", exc)
        raise ParseError("Generated site is not valid JSON") from exc
    return parse_site(data)


def parse_site(data: object) -> GeneratedSite:
    """Validate a decoded site document and build a :class:`GeneratedSite`."""
    if not isinstance(data, dict):
        raise ParseError("Generated site must be a JSON object")

    for key in ("html", "css", "js"):
        if not isinstance(data.get(key), str):
            raise ParseError(f"Generated site field '{key}' must be a string")

    meta = data.get("metadata")
    if not isinstance(meta, dict):
        raise ParseError("Generated site field 'metadata' must be an object")
    for key in ("title", "description", "theme"):
        if not isinstance(meta.get(key), str):
            raise ParseError(f"Metadata field '{key}' must be a string")
    if not isinstance(meta.get("responsive"), bool):
        raise ParseError("Metadata field 'responsive' must be a boolean")

    assets = data.get("assets")
    if assets is None:
        assets = {}
    if not isinstance(assets, dict) or not all(
        isinstance(k, str) and isinstance(v, str) for k, v in assets.items()
    ):
        raise ParseError("Generated site field 'assets' must map names to strings")

    return GeneratedSite(
        html=data["html"],
        css=data["css"],
        js=data["js"],
        assets=dict(assets),
        metadata=SiteMetadata(
            title=meta["title"],
            description=meta["description"],
            theme=meta["theme"],
            responsive=meta["responsive"],
        ),
    )


def validate_api_key(key: str) -> bool:
    """Basic shape check for an Anthropic API key."""
    return key.startswith("sk-ant-api") and len(key) > 20


def generate_site_name(prompt: str) -> str:
    """Derive a URL-safe site name from the first meaningful prompt words."""
    words = [
        w for w in prompt.lower().split()
        if len(w) > 2 and w not in _STOP_WORDS
    ]
    name = re.sub(r"[^a-z0-9-]", "", "-".join(words[:3]))
    return name or "my-site"


def estimate_generation_time(prompt: str) -> int:
    """Rough generation time in milliseconds."""
    lowered = prompt.lower()
    extra = sum(ms for keyword, ms in _COMPLEXITY_FACTORS.items() if keyword in lowered)
    return _BASE_GENERATION_MS + extra
