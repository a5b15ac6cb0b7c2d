"""Shared test fixtures for coveycheckers."""

import pytest

from coveycheckers.engine import Board, create_board


@pytest.fixture
def tmp_output(tmp_path):
    """Provide a temporary output directory for game logs."""
    return tmp_path / "output"


@pytest.fixture
def board():
    """A fresh board in the standard starting position."""
    return create_board()


@pytest.fixture
def empty_board():
    """Correctly shaded board with no pieces."""
    return Board.empty()
