from tilegames.components.board import Board
from tilegames.components.tile import SpecialType, Tile


def test_get_and_set_respect_bounds():
    board = Board(rows=3, cols=4)
    assert board.get(0, 0) is None
    assert board.set(2, 3, Tile(1)) is True
    assert board.get(2, 3) == Tile(1)
    # Out-of-range reads return empty, writes are ignored
    assert board.get(-1, 0) is None
    assert board.get(3, 0) is None
    assert board.set(0, 4, Tile(2)) is False
    assert len(board.empty_positions()) == 11


def test_adjacency_is_orthogonal_only():
    assert Board.is_adjacent((1, 1), (0, 1))
    assert Board.is_adjacent((1, 1), (1, 2))
    assert not Board.is_adjacent((1, 1), (2, 2))
    assert not Board.is_adjacent((1, 1), (1, 3))
    assert not Board.is_adjacent((1, 1), (1, 1))


def test_swap_twice_restores_grid():
    board = Board.from_kinds([[0, 1, 2], [3, 4, 5]])
    before = board.snapshot()
    assert board.swap((0, 0), (0, 1))
    assert board.kinds()[0] == [1, 0, 2]
    board.swap((0, 0), (0, 1))
    assert board.snapshot() == before


def test_snapshot_is_independent_of_later_mutation():
    board = Board.from_kinds([[0, 1], [2, 3]])
    snap = board.snapshot()
    board.set(0, 0, Tile(3, SpecialType.BOMB))
    board.restore(snap)
    assert board.get(0, 0) == Tile(0)


def test_tile_special_helpers():
    tile = Tile(2)
    assert not tile.is_special
    bomb = Tile(2, SpecialType.BOMB)
    assert bomb.is_special and bomb.kind == 2
    primed = bomb.primed_copy()
    assert primed.primed and primed.special is SpecialType.BOMB
    assert not bomb.primed
