from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class Item:
    """
    Fungible unit of stock.

    Extent is used only to compute stacking offsets; items carry no identity.
    """
    width: float = 1.0
    height: float = 1.0
    depth: float = 1.0

    @property
    def extent(self) -> Tuple[float, float, float]:
        return (self.width, self.height, self.depth)
