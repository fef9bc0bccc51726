"""
Test suites package.

Kept importable so shared helpers (e.g. `testsuites.unit.fakes`) resolve
from any rootdir and IDE navigation works across suites.
"""
