"""
Dev Janitor Guard

Validation and policy enforcement between the untrusted renderer and the
privileged process that runs developer tooling commands.
"""

__version__ = "1.0.0"
