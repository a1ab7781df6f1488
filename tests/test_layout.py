from tilegames.ui.layout import cell_at_point, cell_center, compute_board_geometry, drag_direction


def test_cell_center_maps_back_to_same_cell():
    geometry = compute_board_geometry(800, 640, 8, 8)
    for row, col in [(0, 0), (7, 7), (3, 5)]:
        x, y = cell_center(row, col, geometry, 8)
        assert cell_at_point(x, y, geometry, 8, 8) == (row, col)


def test_row_zero_is_drawn_on_top():
    geometry = compute_board_geometry(800, 640, 8, 8)
    _, top_y = cell_center(0, 0, geometry, 8)
    _, bottom_y = cell_center(7, 0, geometry, 8)
    assert top_y > bottom_y


def test_points_outside_board_are_none():
    geometry = compute_board_geometry(800, 640, 8, 8)
    tile_size, start_x, start_y = geometry
    assert cell_at_point(start_x - 1, start_y + 1, geometry, 8, 8) is None
    assert cell_at_point(start_x + 1, start_y + 8 * tile_size + 1, geometry, 8, 8) is None


def test_drag_direction_picks_dominant_axis():
    assert drag_direction(3, 2, 12) is None
    assert drag_direction(20, 5, 12) == (0, 1)
    assert drag_direction(-20, 5, 12) == (0, -1)
    # Screen up is board row - 1
    assert drag_direction(2, 30, 12) == (-1, 0)
    assert drag_direction(2, -30, 12) == (1, 0)
