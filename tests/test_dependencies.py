"""Tests to verify required dependencies are available."""


def test_click_import():
    """Test that click can be imported."""
    import click
    assert click is not None
