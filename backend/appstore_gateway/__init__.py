"""App Store Gateway — API-key protected JSON proxy over an app store data source.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""

__version__ = "1.0.0"
