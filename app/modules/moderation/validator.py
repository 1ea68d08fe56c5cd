# app/modules/moderation/validator.py

from typing import Optional

from app.core.config import settings
from app.modules.moderation.profanity import ProfanityMatcher, default_matcher
from app.modules.moderation.schemas import MessageValidation, ValidationResult


class ContentValidator:
    """
    Length and profanity rules for user-submitted free text.

    Validation never touches user state; escalation is a separate, explicit
    call made by whoever decides a violation deserves a warning.
    """

    def __init__(
        self,
        matcher: Optional[ProfanityMatcher] = None,
        title_min: Optional[int] = None,
        title_max: Optional[int] = None,
        description_min: Optional[int] = None,
        description_max: Optional[int] = None,
        message_max: Optional[int] = None,
    ):
        self.matcher = matcher or default_matcher
        self.title_min = settings.LISTING_TITLE_MIN_LENGTH if title_min is None else title_min
        self.title_max = settings.LISTING_TITLE_MAX_LENGTH if title_max is None else title_max
        self.description_min = settings.LISTING_DESCRIPTION_MIN_LENGTH if description_min is None else description_min
        self.description_max = settings.LISTING_DESCRIPTION_MAX_LENGTH if description_max is None else description_max
        self.message_max = settings.MESSAGE_MAX_LENGTH if message_max is None else message_max

    def validate_listing(self, title: str, description: str) -> ValidationResult:
        """
        Check a listing's title and description.

        Every rule runs; errors come back in rule order, title before
        description and length before content.
        """
        title = title or ""
        description = description or ""
        errors: list[str] = []

        if len(title) < self.title_min:
            errors.append(f"Title must be at least {self.title_min} characters long")
        if len(title) > self.title_max:
            errors.append(f"Title must be less than {self.title_max} characters")
        if self.matcher.scan(title).detected:
            errors.append("Title contains inappropriate content")

        if len(description) < self.description_min:
            errors.append(f"Description must be at least {self.description_min} characters long")
        if len(description) > self.description_max:
            errors.append(f"Description must be less than {self.description_max} characters")
        if self.matcher.scan(description).detected:
            errors.append("Description contains inappropriate content")

        return ValidationResult(valid=not errors, errors=errors)

    def validate_message(self, content: str) -> MessageValidation:
        """Check a chat message; only the first failing rule is reported."""
        content = content or ""

        if not content.strip():
            return MessageValidation(valid=False, error="Message cannot be empty")
        if len(content) > self.message_max:
            return MessageValidation(
                valid=False, error=f"Message must be less than {self.message_max} characters"
            )
        if self.matcher.scan(content).detected:
            return MessageValidation(valid=False, error="Message contains inappropriate content")

        return MessageValidation(valid=True)


content_validator = ContentValidator()
