"""awsu - AWS CLI shortcuts and developer tool bootstrap.

Replaces the ``dev.ubuntu.sh`` shell function collection with a
structured Python package: a declarative catalog of AWS CLI operations,
one generic option parser and dispatcher, and installers for the tools
that sit next to the AWS CLI on a workstation.
"""

try:
    from importlib.metadata import version

    __version__ = version("awsu")
except Exception:
    __version__ = "0.0.0.dev0"

__all__ = ["__version__"]
