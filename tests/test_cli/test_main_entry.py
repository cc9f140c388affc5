"""Tests for __main__.py entry point."""

from __future__ import annotations

from unittest.mock import MagicMock, patch


class TestMainEntryPoint:
    """Tests for the __main__.py entry point."""

    @patch("mongo_sanitizer.cli.main.app")
    def test_main_calls_app(self, mock_app: MagicMock) -> None:
        """Test main() calls the typer app."""
        from mongo_sanitizer.__main__ import main

        main()

        mock_app.assert_called_once()

    def test_module_runnable(self) -> None:
        """Test module can be imported."""
        import mongo_sanitizer.__main__

        assert hasattr(mongo_sanitizer.__main__, "main")

    def test_main_is_callable(self) -> None:
        """Test main function is callable."""
        from mongo_sanitizer.__main__ import main

        assert callable(main)
