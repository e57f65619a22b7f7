"""
Whole-document code fence removal.

Archives are often copied out of a chat window's code block, which wraps the
whole text in a ```` ``` ```` or ```` ```markdown ```` fence. Only a complete
wrapper is removed: an opening fence without a matching closing fence is left
in place as part of the body.
"""

import logging
import re

logger = logging.getLogger(__name__)


class FenceStripper:
    """Removes an optional code fence wrapped around the whole document."""
    
    def __init__(self) -> None:
        self.opening_pattern = re.compile(r"^(`{3,})[ \t]*[\w+-]*[ \t]*\n")
    
    def strip(self, content: str) -> str:
        """
        Return the text inside a complete fence wrapper, or ``content`` unchanged.
        
        Args:
            content: Raw archive text
            
        Returns:
            Unwrapped text when the trimmed content starts with a fence line and
            ends with a closing fence of at least the same length
        """
        if not content or not content.strip():
            return content
        
        trimmed = content.strip()
        opening = self.opening_pattern.match(trimmed)
        if not opening:
            return content
        
        fence_length = len(opening.group(1))
        closing = re.search(r"\n`{%d,}[ \t]*$" % fence_length, trimmed)
        if not closing or closing.start() < opening.end() - 1:
            logger.debug("Opening code fence found but no matching closing fence, leaving content as-is")
            return content
        
        logger.debug("Stripped code fence wrapper from archive content")
        return trimmed[opening.end():closing.start()]
