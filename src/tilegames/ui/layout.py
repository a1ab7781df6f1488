from typing import Optional, Tuple

from tilegames.constants import BOARD_MAX_HEIGHT_PCT, BOARD_MAX_WIDTH_PCT, BOTTOM_MARGIN, HUD_HEIGHT

Geometry = Tuple[int, float, float]


def compute_board_geometry(window_width: int, window_height: int, rows: int, cols: int) -> Geometry:
    """Return (tile_size, start_x, start_y) for a board centred horizontally.

    Shared by RenderSystem and InputSystem so clicks land on the drawn cells.
    """
    max_board_w = window_width * BOARD_MAX_WIDTH_PCT
    max_board_h = (window_height - BOTTOM_MARGIN - HUD_HEIGHT) * BOARD_MAX_HEIGHT_PCT
    tile_by_w = max_board_w / cols
    tile_by_h = max_board_h / rows
    tile_size = int(min(tile_by_w, tile_by_h))
    if tile_size < 20:
        tile_size = 20
    total_width = cols * tile_size
    start_x = (window_width - total_width) / 2
    start_y = BOTTOM_MARGIN
    return tile_size, start_x, start_y


def cell_at_point(x: float, y: float, geometry: Geometry, rows: int, cols: int) -> Optional[Tuple[int, int]]:
    """Map window coordinates (origin bottom-left) to a (row, col) with row 0 on top."""
    tile_size, start_x, start_y = geometry
    if x < start_x or x >= start_x + cols * tile_size:
        return None
    if y < start_y or y >= start_y + rows * tile_size:
        return None
    col = int((x - start_x) // tile_size)
    row_from_bottom = int((y - start_y) // tile_size)
    return rows - 1 - row_from_bottom, col


def cell_center(row: int, col: int, geometry: Geometry, rows: int) -> Tuple[float, float]:
    tile_size, start_x, start_y = geometry
    x = start_x + col * tile_size + tile_size / 2
    y = start_y + (rows - 1 - row) * tile_size + tile_size / 2
    return x, y


def drag_direction(dx: float, dy: float, threshold: float) -> Optional[Tuple[int, int]]:
    """Resolve a drag vector to a cardinal (d_row, d_col) step, or None below threshold.

    Screen y grows upward while board rows grow downward.
    """
    if max(abs(dx), abs(dy)) < threshold:
        return None
    if abs(dx) >= abs(dy):
        return (0, 1) if dx > 0 else (0, -1)
    return (-1, 0) if dy > 0 else (1, 0)
