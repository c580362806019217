"""
SOP Service Module

In-memory registry of response policies (SOPs). Tone and rule policies are
sent to the reply generator; template policies are filled in locally.
"""

import re
from typing import Optional, List, Iterable, Dict

from config import settings
from data.models import Mention, ResponsePolicy
from utils.helpers import generate_id
from utils.logger import get_logger

logger = get_logger(__name__)

_AUTHOR_PLACEHOLDER = re.compile(r'\{(?:name|user|author)\}', re.IGNORECASE)
_BRAND_PLACEHOLDER = re.compile(r'\{brand\}', re.IGNORECASE)


class SOPService:
    """Holds the user's response policies for the lifetime of the process."""

    def __init__(self, defaults: Optional[Iterable[Dict[str, str]]] = None):
        """
        Args:
            defaults: Initial policies as dicts with title/content/type;
                settings.DEFAULT_SOPS when omitted
        """
        self._policies: List[ResponsePolicy] = []
        for item in (settings.DEFAULT_SOPS if defaults is None else defaults):
            self.add_policy(item['title'], item['content'], item.get('type', 'tone'))

    @property
    def policies(self) -> List[ResponsePolicy]:
        return list(self._policies)

    def add_policy(self, title: str, content: str, policy_type: str = 'tone') -> Optional[ResponsePolicy]:
        """
        Add a new active policy.

        Args:
            title: Short name
            content: Guideline or template text
            policy_type: 'tone', 'rule' or 'template'

        Returns:
            Optional[ResponsePolicy]: The new policy, or None if title or content is blank

        Raises:
            ValueError: If policy_type is not a known type
        """
        if policy_type not in settings.SOP_TYPES:
            raise ValueError(f"Unknown SOP type '{policy_type}', expected one of {settings.SOP_TYPES}")

        if not (title or "").strip() or not (content or "").strip():
            logger.warning("Ignoring SOP with empty title or content")
            return None

        policy = ResponsePolicy(
            id=generate_id(),
            title=title.strip(),
            content=content.strip(),
            type=policy_type,
            is_active=True,
        )
        self._policies.append(policy)
        logger.info(f"Added {policy_type} SOP: {policy.title}")
        return policy

    def get_policy(self, policy_id: str) -> Optional[ResponsePolicy]:
        return next((p for p in self._policies if p.id == policy_id), None)

    def toggle_policy(self, policy_id: str) -> Optional[ResponsePolicy]:
        """Flip a policy's active flag. Returns None for an unknown id."""
        policy = self.get_policy(policy_id)
        if policy is None:
            logger.warning(f"Cannot toggle unknown SOP {policy_id}")
            return None
        policy.is_active = not policy.is_active
        return policy

    def delete_policy(self, policy_id: str) -> bool:
        before = len(self._policies)
        self._policies = [p for p in self._policies if p.id != policy_id]
        return len(self._policies) < before

    def active_policies(self) -> List[ResponsePolicy]:
        return [p for p in self._policies if p.is_active]

    def templates(self) -> List[ResponsePolicy]:
        """Active template policies, offered as quick replies."""
        return [p for p in self._policies if p.is_active and p.type == 'template']

    @staticmethod
    def apply_template(content: str, mention: Mention, brand: Optional[str] = None) -> str:
        """
        Fill a reply template for a given mention.

        {name}, {user} and {author} become "@<author>"; {brand} becomes the
        brand name, or "our team" when none is known.

        Args:
            content: Template text
            mention: Mention being replied to
            brand: Monitored brand, if any

        Returns:
            str: The filled-in reply
        """
        author_tag = f"@{mention.author}"
        processed = _AUTHOR_PLACEHOLDER.sub(lambda _: author_tag, content)
        return _BRAND_PLACEHOLDER.sub(lambda _: brand or settings.TEMPLATE_BRAND_FALLBACK, processed)
