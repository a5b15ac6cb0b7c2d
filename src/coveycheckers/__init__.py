"""coveycheckers: checkers rules engine and game-session layer."""

__version__ = "0.1.0"
