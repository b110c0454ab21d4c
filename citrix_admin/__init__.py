"""Administrative scripts for the Citrix / Windows estate: drive mapping, secrets and profile cleanup."""

__version__ = "1.0.0"
