from typing import Iterator, List

from .models import Asset


class AssetHistory:
    """In-memory record of generated assets, newest first. Not persisted."""

    def __init__(self):
        self._items: List[Asset] = []

    def add(self, asset: Asset) -> Asset:
        self._items.insert(0, asset)
        return asset

    def get(self, asset_id: str) -> Asset:
        for asset in self._items:
            if asset.id == asset_id:
                return asset
        raise KeyError(asset_id)

    def list(self) -> List[Asset]:
        return list(self._items)

    def __iter__(self) -> Iterator[Asset]:
        return iter(list(self._items))

    def __len__(self) -> int:
        return len(self._items)
