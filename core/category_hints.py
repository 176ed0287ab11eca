"""Keyword and topic hints that help users write prompts for a category.

Updates:
  v0.1.0 - 2026-09-14 - Category hint tables for writing, marketing, development, and design.
"""

from __future__ import annotations

from models.category_model import KeywordSuggestion, PromptCategory, TopicSuggestion

__all__ = ["keyword_suggestions", "topic_suggestions"]

_WRITING_KEYWORDS = (
    KeywordSuggestion("engaging", 0.9),
    KeywordSuggestion("compelling", 0.85),
    KeywordSuggestion("narrative", 0.8),
    KeywordSuggestion("concise", 0.75),
    KeywordSuggestion("persuasive", 0.7),
    KeywordSuggestion("informative", 0.65),
    KeywordSuggestion("descriptive", 0.6),
    KeywordSuggestion("structured", 0.55),
)
_MARKETING_KEYWORDS = (
    KeywordSuggestion("conversion", 0.9),
    KeywordSuggestion("audience", 0.85),
    KeywordSuggestion("persuasive", 0.8),
    KeywordSuggestion("benefits", 0.75),
    KeywordSuggestion("call-to-action", 0.7),
    KeywordSuggestion("value proposition", 0.65),
    KeywordSuggestion("engagement", 0.6),
    KeywordSuggestion("brand voice", 0.55),
)
_DEVELOPMENT_KEYWORDS = (
    KeywordSuggestion("efficient", 0.9),
    KeywordSuggestion("scalable", 0.85),
    KeywordSuggestion("maintainable", 0.8),
    KeywordSuggestion("optimized", 0.75),
    KeywordSuggestion("secure", 0.7),
    KeywordSuggestion("documented", 0.65),
    KeywordSuggestion("tested", 0.6),
    KeywordSuggestion("modular", 0.55),
)
_DESIGN_KEYWORDS = (
    KeywordSuggestion("intuitive", 0.9),
    KeywordSuggestion("accessible", 0.85),
    KeywordSuggestion("consistent", 0.8),
    KeywordSuggestion("responsive", 0.75),
    KeywordSuggestion("minimalist", 0.7),
    KeywordSuggestion("user-centered", 0.65),
    KeywordSuggestion("aesthetic", 0.6),
    KeywordSuggestion("interactive", 0.55),
)

_WRITING_TOPICS = (
    TopicSuggestion("Character Development", "Creating memorable characters with depth"),
    TopicSuggestion("Plot Structure", "Crafting engaging narratives with proper pacing"),
    TopicSuggestion("World Building", "Creating immersive settings for your stories"),
    TopicSuggestion("Dialogue Writing", "Writing realistic and purposeful conversations"),
)
_MARKETING_TOPICS = (
    TopicSuggestion("Content Marketing Strategy", "Planning content that drives business results"),
    TopicSuggestion("Social Media Campaigns", "Creating engaging social media content"),
    TopicSuggestion("Email Marketing Sequences", "Designing effective email funnels"),
    TopicSuggestion("Brand Storytelling", "Connecting with audiences through narrative"),
)
_DEVELOPMENT_TOPICS = (
    TopicSuggestion("API Design", "Creating intuitive and efficient APIs"),
    TopicSuggestion("Performance Optimization", "Improving application speed and efficiency"),
    TopicSuggestion("Security Best Practices", "Protecting applications from vulnerabilities"),
    TopicSuggestion("Code Architecture", "Designing maintainable software structures"),
)
_DESIGN_TOPICS = (
    TopicSuggestion("User Interface Patterns", "Common UI solutions for usability problems"),
    TopicSuggestion("Color Theory", "Using color effectively in design"),
    TopicSuggestion("Typography", "Selecting and using fonts for readability and style"),
    TopicSuggestion("Design Systems", "Creating consistent design languages"),
)


def keyword_suggestions(category: PromptCategory) -> tuple[KeywordSuggestion, ...]:
    """Return keywords for *category*, most relevant first."""
    match category:
        case PromptCategory.WRITING:
            return _WRITING_KEYWORDS
        case PromptCategory.MARKETING:
            return _MARKETING_KEYWORDS
        case PromptCategory.DEVELOPMENT:
            return _DEVELOPMENT_KEYWORDS
        case PromptCategory.DESIGN:
            return _DESIGN_KEYWORDS
        case PromptCategory.BUSINESS | PromptCategory.EDUCATION | PromptCategory.PERSONAL:
            return ()


def topic_suggestions(category: PromptCategory) -> tuple[TopicSuggestion, ...]:
    """Return topic ideas for *category*."""
    match category:
        case PromptCategory.WRITING:
            return _WRITING_TOPICS
        case PromptCategory.MARKETING:
            return _MARKETING_TOPICS
        case PromptCategory.DEVELOPMENT:
            return _DEVELOPMENT_TOPICS
        case PromptCategory.DESIGN:
            return _DESIGN_TOPICS
        case PromptCategory.BUSINESS | PromptCategory.EDUCATION | PromptCategory.PERSONAL:
            return ()
