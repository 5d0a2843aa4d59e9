"""Core building blocks shared by the devtoolz commands."""
