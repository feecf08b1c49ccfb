"""Terminal UI for wuwaconf (prompt_toolkit)."""
