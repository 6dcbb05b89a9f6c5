from ecs.components.grid import Grid
from ecs.components.tile_types import TileTypes
from ecs.systems.match import find_matches, find_runs, has_matches, tally_matches


def test_run_of_three_matches_but_run_of_two_does_not():
    grid = Grid.from_type_rows([['A', 'A', 'A', 'B', 'B']])
    assert find_matches(grid) == ((0, 0), (1, 0), (2, 0))


def test_vertical_run_is_detected():
    grid = Grid.from_type_rows([
        ['x', 'B'],
        ['A', 'B'],
        ['A', 'C'],
        ['A', 'B'],
    ])
    assert set(find_matches(grid)) == {(0, 0), (0, 1), (0, 2)}


def test_long_run_is_a_single_run():
    grid = Grid.from_type_rows([['A', 'A', 'A', 'A', 'A', 'B']])
    runs = find_runs(grid)
    assert runs == [[(0, 0), (1, 0), (2, 0), (3, 0), (4, 0)]]


def test_l_shaped_overlap_lists_shared_corner_once():
    grid = Grid.from_type_rows([
        ['A', 'B', 'C'],
        ['A', 'C', 'B'],
        ['A', 'A', 'A'],
    ])
    matches = find_matches(grid)
    assert len(matches) == 5
    assert matches.count((0, 0)) == 1
    assert set(matches) == {(0, 0), (1, 0), (2, 0), (0, 1), (0, 2)}


def test_horizontal_runs_are_listed_before_vertical_runs():
    grid = Grid.from_type_rows([
        ['A', 'B', 'C'],
        ['A', 'C', 'B'],
        ['A', 'A', 'A'],
    ])
    assert find_matches(grid)[:3] == ((0, 0), (1, 0), (2, 0))


def test_matches_never_wrap_around_edges():
    grid = Grid.from_type_rows([['A', 'B', 'A', 'A']])
    assert find_matches(grid) == ()
    grid = Grid.from_type_rows([['A'], ['B'], ['A'], ['A']])
    assert find_matches(grid) == ()


def test_diagonals_do_not_match():
    grid = Grid.from_type_rows([
        ['A', 'B', 'C'],
        ['B', 'A', 'B'],
        ['C', 'B', 'A'],
    ])
    assert not has_matches(grid)


def test_empty_cells_break_runs():
    grid = Grid.from_type_rows([['A', 'A', None, 'A', 'A']])
    assert find_matches(grid) == ()


def test_neutral_types_never_match():
    catalog = TileTypes(types=['A', 'rock'], neutral={'rock'})
    grid = Grid.from_type_rows([['rock', 'rock', 'rock', 'A']])
    assert find_matches(grid, catalog) == ()
    assert find_matches(grid) == ((0, 0), (1, 0), (2, 0)), 'Without a catalog every type is matchable'


def test_longer_minimum_run_length():
    grid = Grid.from_type_rows([['A', 'A', 'A', 'B', 'B', 'B', 'B']])
    assert find_matches(grid, min_run_length=4) == ((3, 0), (4, 0), (5, 0), (6, 0))


def test_tally_counts_matched_tiles_by_type():
    grid = Grid.from_type_rows([
        ['B', 'x', 'y', 'z'],
        ['B', 'y', 'x', 'w'],
        ['B', 'A', 'A', 'A'],
    ])
    matches = find_matches(grid)
    assert tally_matches(grid, matches) == {'A': 3, 'B': 3}
