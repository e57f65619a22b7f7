"""
Lenient-parsing policies.

The archive format mixes hard failures with silent defaults. Each silent
default is a named policy object here so that tightening one is a single
flag change with its own test, instead of fallback logic buried in a
scanner.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Callable, Dict, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TitlePolicy:
    """A missing ``# Title`` line falls back to ``default_title``."""
    default_title: str = "Untitled Archive"
    
    def resolve(self, title: Optional[str]) -> str:
        if title:
            return title
        logger.debug(f"No title heading found, using '{self.default_title}'")
        return self.default_title


@dataclass(frozen=True)
class ConversationDatePolicy:
    """
    A missing ``**Date:**`` line falls back to today's date.
    
    With ``default_to_today`` off the date stays absent and the schema
    validator reports it as a required field.
    """
    default_to_today: bool = True
    today: Callable[[], date] = field(default=date.today, compare=False, repr=False)
    
    def resolve(self, found: Optional[str]) -> Optional[str]:
        if found:
            return found
        if self.default_to_today:
            # TODO: surface this as a warning on ParseResult once callers can display non-fatal notes
            logger.debug("No **Date:** line found, defaulting conversation date to today")
            return self.today().isoformat()
        return None


@dataclass(frozen=True)
class TagFormatPolicy:
    """
    Only ``**Tags:** [a, b, c]`` yields tags by default.
    
    The unbracketed ``**Tags:** a, b, c`` form yields no tags unless
    ``accept_unbracketed`` is switched on.
    """
    accept_unbracketed: bool = False


@dataclass(frozen=True)
class CountPolicy:
    """
    How declared counts are compared with parsed lists.
    
    A positive declared count with nothing parsed is always an error. With
    ``require_exact`` on, any other difference is an error too.
    """
    require_exact: bool = True


@dataclass(frozen=True)
class ParsePolicies:
    """Bundle of every lenient-parsing rule applied by the pipeline."""
    title: TitlePolicy = field(default_factory=TitlePolicy)
    conversation_date: ConversationDatePolicy = field(default_factory=ConversationDatePolicy)
    tags: TagFormatPolicy = field(default_factory=TagFormatPolicy)
    counts: CountPolicy = field(default_factory=CountPolicy)
    
    @classmethod
    def from_config(cls, policies: Dict[str, Any]) -> "ParsePolicies":
        """Build policies from the ``policies`` block of the configuration."""
        return cls(
            title=TitlePolicy(
                default_title=policies.get("default_title", TitlePolicy.default_title)
            ),
            conversation_date=ConversationDatePolicy(
                default_to_today=policies.get("conversation_date_default_today", True)
            ),
            tags=TagFormatPolicy(
                accept_unbracketed=policies.get("accept_unbracketed_tags", False)
            ),
            counts=CountPolicy(
                require_exact=policies.get("require_exact_counts", True)
            ),
        )
