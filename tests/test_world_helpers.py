"""Tests for the text rendering helpers."""

from geocoin.world import Board, LatLng, get_visible_cells, render_ascii_window


def test_render_ascii_window_draws_player_and_caches():
    board = Board(tile_degrees=1e-4, visibility_radius=1)
    center = board.cell_center(board.canonical_cell(0, 0))
    caches = {
        board.canonical_cell(1, 1): 3,   # north-east, has coins
        board.canonical_cell(-1, -1): 0,  # south-west, emptied
    }

    text = render_ascii_window(board, center, caches)

    assert text.splitlines() == [
        ". . $",
        ". @ .",
        "o . .",
    ]


def test_render_ascii_window_player_on_cache_and_custom_symbols():
    board = Board(tile_degrees=1e-4, visibility_radius=3)
    center = LatLng(lat=0.00005, lng=0.00005)
    caches = {board.canonical_cell(0, 0): 2}

    text = render_ascii_window(board, center, caches, radius=0, symbols={"player_on_cache": "P"})

    assert text == "P"


def test_get_visible_cells_returns_centres():
    board = Board(tile_degrees=1.0, visibility_radius=1)

    visible = get_visible_cells(board, LatLng(lat=0.5, lng=0.5))

    assert len(visible) == 9
    assert visible[board.canonical_cell(1, -1)] == LatLng(lat=1.5, lng=-0.5)
