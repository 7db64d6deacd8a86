from typing import Any, Dict, List, Sequence
from src.domain.models import DisplayRecord, OwnerLink

class GitHubTranslator:
    """
    Anti-corruption layer that translates raw GitHub search items into DisplayRecord instances.
    """

    @staticmethod
    def to_domain(raw_item: Dict[str, Any], rank: int) -> DisplayRecord:
        """
        Transforms a raw GitHub search item into a DisplayRecord.

        Args:
            raw_item (Dict[str, Any]): One element of the search response's ``items``.
            rank (int): 1-based position of the item in the response.

        Returns:
            DisplayRecord: The flattened row for the table.
        """

        # Extract nested fields with safe defaults. Items are not validated:
        # whatever GitHub sent is passed through as-is.
        owner_data = raw_item.get('owner')
        if not isinstance(owner_data, dict):
            owner_data = {}

        return DisplayRecord.model_construct(
            id=raw_item.get('id', ''),
            rank=rank,
            name=raw_item.get('name') or '',
            url=raw_item.get('html_url') or '',
            owner=OwnerLink.model_construct(
                avatar_url=owner_data.get('avatar_url') or '',
                url=owner_data.get('html_url') or '',
            ),
            stars=raw_item.get('stargazers_count') or 0,
            forks=raw_item.get('forks') or 0,
            description=raw_item.get('description'),
            language=raw_item.get('language'),
        )

    @staticmethod
    def normalize(raw_items: Sequence[Dict[str, Any]]) -> List[DisplayRecord]:
        """Ranks follow the API's order, no local sorting or filtering happens here."""
        return [
            GitHubTranslator.to_domain(raw_item, rank)
            for rank, raw_item in enumerate(raw_items, start=1)
        ]
