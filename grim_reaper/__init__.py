"""PR Grim Reaper: warn about and close inactive pull requests."""

__version__ = "0.1.0"
