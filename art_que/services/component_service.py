from typing import List, Optional, Tuple
import numpy as np

from ..models.region import Region

# 8-connectivity, including diagonals
_NEIGHBOURS = (
    (-1, -1), (0, -1), (1, -1),
    (-1, 0),           (1, 0),
    (-1, 1),  (0, 1),  (1, 1),
)


class ComponentService:
    """
    Connected-component labelling of a visibility mask.

    Labels are handed out in row-major discovery order, so label 1 is the
    component owning the first visible pixel of the top row scan.
    """

    @staticmethod
    def label_components(mask: np.ndarray) -> Tuple[np.ndarray, List[Region]]:
        """
        Flood-fill every 8-connected region with an explicit stack.

        Args:
            mask (np.ndarray): (H, W) array, non-zero = visible.

        Returns:
            labels (np.ndarray): (H, W) int32, 0 = background, 1..N = component id.
            regions (List[Region]): regions[i] describes label i + 1.
        """
        height, width = mask.shape
        visible = (mask.ravel() != 0).tolist()
        labels = [0] * (width * height)
        regions: List[Region] = []

        current = 0
        stack: List[int] = []
        for start in np.flatnonzero(mask.ravel()).tolist():
            if labels[start]:
                continue

            current += 1
            start_y, start_x = divmod(start, width)
            min_x = max_x = start_x
            min_y = max_y = start_y
            area = 0

            labels[start] = current
            stack.append(start)
            while stack:
                idx = stack.pop()
                cy, cx = divmod(idx, width)
                area += 1
                for dx, dy in _NEIGHBOURS:
                    nx = cx + dx
                    ny = cy + dy
                    if nx < 0 or ny < 0 or nx >= width or ny >= height:
                        continue
                    n_idx = ny * width + nx
                    if visible[n_idx] and not labels[n_idx]:
                        labels[n_idx] = current
                        stack.append(n_idx)
                        if nx < min_x:
                            min_x = nx
                        elif nx > max_x:
                            max_x = nx
                        if ny < min_y:
                            min_y = ny
                        elif ny > max_y:
                            max_y = ny

            regions.append(Region(label=current, area=area,
                                  min_x=min_x, max_x=max_x, min_y=min_y, max_y=max_y))

        label_map = np.array(labels, dtype=np.int32).reshape(height, width)
        return label_map, regions

    @staticmethod
    def largest_region(regions: List[Region]) -> Optional[Region]:
        """Biggest area wins; on a tie the lower label (found first) is kept."""
        largest = None
        for region in regions:
            if largest is None or region.area > largest.area:
                largest = region
        return largest
