"""InstallCMX: a multiplatform installer for CumulusMX.

The installer keeps its settings in ``InstallCMX.ini``:
- Section-keyed ``key=value`` text file, first occurrence wins on load
- Cached in memory, typed at the accessor boundary
- Missing keys are created with their defaults on first read
- Written back once, at shutdown, only when something changed
"""

__version__ = "1.0.0"

__all__ = []
