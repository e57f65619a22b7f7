"""
Document assembly.

Combines the outputs of the independent extraction passes into the generic
tree that the schema validator checks. Nothing here validates; missing values
simply stay out of the tree.
"""

import logging
from typing import Any, Dict, List

from .metadata.header import BodyHeader

logger = logging.getLogger(__name__)


class DocumentAssembler:
    """Builds the unvalidated document tree."""
    
    def assemble(
        self,
        frontmatter_fields: Dict[str, Any],
        header: BodyHeader,
        summary: Dict[str, Any],
        artifacts: List[Dict[str, Any]],
        attachments: List[Dict[str, Any]],
        workarounds: List[Dict[str, Any]],
    ) -> Dict[str, Any]:
        metadata = dict(frontmatter_fields)
        metadata["title"] = header.title
        if header.conversation_date is not None:
            metadata["conversation_date"] = header.conversation_date
        metadata["tags"] = list(header.tags)
        
        tree = {
            "metadata": metadata,
            "summary": summary,
            "artifacts": artifacts,
            "attachments": attachments,
            "workarounds": workarounds,
        }
        logger.debug(
            f"Assembled '{header.title}': {len(artifacts)} artifacts, "
            f"{len(attachments)} attachments, {len(workarounds)} workarounds"
        )
        return tree
