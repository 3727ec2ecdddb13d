from dataclasses import dataclass


@dataclass
class Region:
    """One 8-connected component. Bounding box is inclusive on both ends."""
    label: int
    area: int
    min_x: int
    max_x: int
    min_y: int
    max_y: int

    @property
    def width(self) -> int:
        return self.max_x - self.min_x + 1

    @property
    def height(self) -> int:
        return self.max_y - self.min_y + 1
